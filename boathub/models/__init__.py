"""SQLAlchemy ORM models — one file per table."""

from boathub.models.boat import Boat, BoatType
from boathub.models.user import User

__all__ = [
    "Boat",
    "BoatType",
    "User",
]
