"""API clients package."""

from stay_booking.clients.booking_api_client import (
    BookingAPIAuthenticationError,
    BookingAPIClient,
    BookingAPIClientError,
    BookingAPIConflictError,
    BookingAPINotFoundError,
    BookingAPIServerError,
)

__all__ = [
    "BookingAPIClient",
    "BookingAPIClientError",
    "BookingAPIAuthenticationError",
    "BookingAPINotFoundError",
    "BookingAPIConflictError",
    "BookingAPIServerError",
]
