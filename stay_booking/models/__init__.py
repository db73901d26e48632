"""Booking engine data models."""

from stay_booking.models.booking import (
    Booking,
    BookingInterval,
    BookingRequest,
    BookingsResponse,
    Pagination,
)
from stay_booking.models.booking_status import (
    BLOCKING_STATUSES,
    BookingRecordStatus,
    BookingStatus,
    BookingStatusMapper,
    DateAvailability,
)
from stay_booking.models.calendar import CalendarDay
from stay_booking.models.property import Property, PropertyPricing
from stay_booking.models.quote import PriceQuote

__all__ = [
    "Booking",
    "BookingInterval",
    "BookingRequest",
    "BookingsResponse",
    "Pagination",
    "BLOCKING_STATUSES",
    "BookingRecordStatus",
    "BookingStatus",
    "BookingStatusMapper",
    "DateAvailability",
    "Property",
    "PropertyPricing",
    "PriceQuote",
    "CalendarDay",
]
