"""Dashboard schemas."""

from datetime import datetime

from cinema.schemas.common import BaseSchema


class DashboardStats(BaseSchema):
    """Totals shown on the admin dashboard."""

    total_movies: int
    total_halls: int
    total_reservations: int


class ActivityEntry(BaseSchema):
    """One line of recent booking activity."""

    booking_id: str
    action: str
    movie_title: str
    user: str
    created_at: datetime
