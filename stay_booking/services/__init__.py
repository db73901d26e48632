"""Booking engine services."""

from stay_booking.services.availability import AvailabilityResolver
from stay_booking.services.booking_session import (
    BookingSession,
    BookingSessionError,
    InvalidStayError,
    SelectionIncompleteError,
)
from stay_booking.services.pricing import PricingCalculator
from stay_booking.services.stay_selection import SelectionState, StaySelection

__all__ = [
    "AvailabilityResolver",
    "BookingSession",
    "BookingSessionError",
    "InvalidStayError",
    "SelectionIncompleteError",
    "PricingCalculator",
    "SelectionState",
    "StaySelection",
]
