"""boats table."""

import enum
import uuid
from typing import Optional

from sqlalchemy import Enum, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from boathub.core.database import Base, TimestampMixin

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class BoatType(enum.Enum):
    """Closed set of boat classifications.

    Stored by member name; each value is the human-readable display name.
    """

    SAILBOAT = "Sailboat"
    MOTORBOAT = "Motorboat"
    YACHT = "Yacht"
    SPEEDBOAT = "Speedboat"
    FISHING_BOAT = "Fishing Boat"
    OTHER = "Other"


class Boat(TimestampMixin, Base):
    __tablename__ = "boats"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(DESCRIPTION_MAX_LENGTH))
    boat_type: Mapped[BoatType] = mapped_column(
        Enum(BoatType, name="boat_type", native_enum=False, length=20),
        nullable=False,
    )
