"""Booking status enums and mapping between booking records and calendar intervals."""

from enum import Enum
from typing import Optional

from structlog import get_logger

logger = get_logger(__name__)


class BookingStatus(str, Enum):
    """Status of an occupied span on a property's calendar.

    - confirmed: accepted reservation, blocks selection
    - pending: booking request awaiting the host, does not block selection
    - blocked: dates closed manually by the host, blocks selection
    """
    CONFIRMED = "confirmed"
    PENDING = "pending"
    BLOCKED = "blocked"


# Statuses that make a date unavailable. Pending requests are not commitments.
BLOCKING_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.BLOCKED})


class DateAvailability(str, Enum):
    """Derived availability of a single calendar date."""
    UNAVAILABLE = "unavailable"
    SOFT_HELD = "soft-held"
    AVAILABLE = "available"


class BookingRecordStatus(str, Enum):
    """Lifecycle status of a booking record in the booking store.

    Parsing is case-insensitive and accepts the "cancelled" spelling.
    """
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"
    COMPLETED = "completed"
    BLOCKED = "blocked"  # Host blocks come through the same list

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        if key == "cancelled":
            return cls.CANCELED
        for member in cls:
            if member.value == key:
                return member
        return None


class BookingStatusMapper:
    """Maps booking-store record statuses to calendar interval statuses."""

    @staticmethod
    def to_interval_status(record_status: str) -> Optional[BookingStatus]:
        """Map a booking record status to the interval status it occupies with.

        Mapping:
        - CONFIRMED → CONFIRMED
        - COMPLETED → CONFIRMED (the stay happened, nights stay occupied)
        - PENDING → PENDING
        - BLOCKED → BLOCKED
        - CANCELED → None (occupies nothing)

        Unknown statuses map to CONFIRMED so that an unexpected value never
        opens dates up for double booking.

        Args:
            record_status: Status string (or BookingRecordStatus) from the booking store

        Returns:
            Interval status, or None when the record should be dropped
        """
        status_mapping = {
            BookingRecordStatus.CONFIRMED: BookingStatus.CONFIRMED,
            BookingRecordStatus.COMPLETED: BookingStatus.CONFIRMED,
            BookingRecordStatus.PENDING: BookingStatus.PENDING,
            BookingRecordStatus.BLOCKED: BookingStatus.BLOCKED,
            BookingRecordStatus.CANCELED: None,
        }

        try:
            status = BookingRecordStatus(record_status)
        except ValueError:
            logger.warning(
                "Unknown booking status, treating as confirmed",
                record_status=record_status,
            )
            return BookingStatus.CONFIRMED

        return status_mapping[status]
