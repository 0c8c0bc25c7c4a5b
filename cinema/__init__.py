"""Cinema ticket booking service."""
