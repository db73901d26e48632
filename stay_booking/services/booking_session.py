"""Booking session: one guest's date picking, quoting and request hand-off for a property."""

from collections.abc import Iterable
from datetime import date
from typing import Optional

from structlog import get_logger

from stay_booking.clients.booking_api_client import BookingAPIClient
from stay_booking.models.booking import Booking, BookingInterval, BookingRequest
from stay_booking.models.property import Property, PropertyPricing
from stay_booking.models.quote import PriceQuote
from stay_booking.services.availability import AvailabilityResolver
from stay_booking.services.pricing import PricingCalculator
from stay_booking.services.stay_selection import StaySelection

logger = get_logger(__name__)


class BookingSessionError(Exception):
    """Base exception for booking session errors. Always recoverable."""

    pass


class SelectionIncompleteError(BookingSessionError):
    """Raised when a request is built before both dates are chosen."""

    pass


class InvalidStayError(BookingSessionError):
    """Raised when the chosen range is too short or overlaps a booking."""

    pass


class BookingSession:
    """Context for a single picker session on one property.

    Holds the property's pricing constants and booking intervals (read-only
    for the session), the selectable window and the guest's in-progress
    StaySelection. Nothing here is shared between sessions.
    """

    def __init__(
        self,
        property_id: str,
        pricing: PropertyPricing,
        intervals: Iterable[BookingInterval] = (),
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
        calculator: Optional[PricingCalculator] = None,
    ):
        """Initialize the session.

        Args:
            property_id: Property being booked
            pricing: Property pricing constants
            intervals: Existing booking intervals of the property
            min_date: Earliest selectable date, open if None
            max_date: Latest selectable date, open if None
            calculator: Pricing calculator, default rates if None
        """
        self.property_id = property_id
        self.pricing = pricing
        self.intervals: tuple[BookingInterval, ...] = tuple(intervals)
        self.min_date = min_date
        self.max_date = max_date
        self.calculator = calculator or PricingCalculator()
        self.selection = StaySelection()
        self.guests = 1
        self.special_requests = ""
        self.last_booking: Optional[Booking] = None
        self.logger = logger.bind(property_id=property_id)

    @classmethod
    def for_property(
        cls,
        prop: Property,
        intervals: Iterable[BookingInterval],
        today: Optional[date] = None,
    ) -> "BookingSession":
        """Create a session bounded by the configured calendar window."""
        min_date, max_date = AvailabilityResolver.default_bounds(today)
        return cls(
            prop.id,
            prop.pricing(),
            intervals,
            min_date=min_date,
            max_date=max_date,
        )

    @classmethod
    def open(
        cls,
        client: BookingAPIClient,
        property_id: str,
        today: Optional[date] = None,
    ) -> "BookingSession":
        """Fetch a property and its bookings and start a session for it.

        Raises:
            BookingAPIClientError: If the property cannot be fetched
        """
        prop, bookings = client.get_property(property_id)
        intervals = client.bookings_to_intervals(property_id, bookings)
        return cls.for_property(prop, intervals, today=today)

    def is_selectable(self, day: date) -> bool:
        """Whether ``day`` may be offered to the picker."""
        return AvailabilityResolver.is_selectable(
            day, self.intervals, self.min_date, self.max_date
        )

    def pick(self, day: date) -> bool:
        """Offer a clicked date to the selection.

        Unavailable and out-of-window dates are ignored, matching a disabled
        calendar cell.

        Returns:
            True if the click was applied
        """
        if not self.is_selectable(day):
            self.logger.debug("Ignored pick of disabled date", day=day.isoformat())
            return False
        self.selection.select(day)
        return True

    def clear(self) -> None:
        """Discard the current selection."""
        self.selection.clear()

    def set_guests(self, guests: int) -> int:
        """Set the guest count, clamped to 1..max_guests."""
        self.guests = max(1, min(self.pricing.max_guests, guests))
        return self.guests

    def quote(self) -> Optional[PriceQuote]:
        """Quote the current selection, None until a range of one night or more exists."""
        if not self.selection.is_complete:
            return None
        return self.calculator.quote_for_property(
            self.selection.check_in, self.selection.check_out, self.pricing
        )

    def is_bookable(self) -> bool:
        return self.selection.is_bookable(self.intervals)

    def build_request(self) -> BookingRequest:
        """Build the booking-request payload for the current selection.

        Raises:
            SelectionIncompleteError: If check-in or check-out is missing
            InvalidStayError: If the stay is shorter than one night or overlaps a booking
        """
        if not self.selection.is_complete:
            raise SelectionIncompleteError("Please select check-in and check-out dates")
        if self.selection.nights < 1:
            raise InvalidStayError("Stay must be at least 1 night")
        if not self.is_bookable():
            raise InvalidStayError("Selected dates are no longer available")

        return BookingRequest(
            property_id=self.property_id,
            check_in_date=self.selection.check_in,
            check_out_date=self.selection.check_out,
            number_of_guests=self.guests,
            special_requests=self.special_requests,
        )

    def submit(self, client: BookingAPIClient) -> Booking:
        """Hand the finalized request to the booking store.

        The selection is left as it is whether or not the store accepts the
        request, so a rejected guest can pick new dates straight away.

        Raises:
            BookingSessionError: If the selection cannot be booked
            BookingAPIClientError: If the store rejects or fails the request
        """
        request = self.build_request()
        try:
            booking = client.create_booking(request)
        except Exception as e:
            self.logger.warning(
                "Booking submission failed, selection kept editable",
                check_in=request.check_in_date.isoformat(),
                check_out=request.check_out_date.isoformat(),
                error=str(e),
            )
            raise

        self.last_booking = booking
        self.logger.info("Booking submitted", booking_id=booking.id, status=booking.status)
        return booking

    def refresh_intervals(self, intervals: Iterable[BookingInterval]) -> None:
        """Replace the property's intervals and drop a selection they invalidate."""
        self.intervals = tuple(intervals)

        check_in = self.selection.check_in
        if check_in is None:
            return
        stale = AvailabilityResolver.is_occupied(check_in, self.intervals)
        if self.selection.nights >= 1:
            stale = stale or not self.is_bookable()
        if stale:
            self.logger.info(
                "Selection no longer available, cleared",
                check_in=check_in.isoformat(),
                check_out=self.selection.check_out.isoformat() if self.selection.check_out else None,
            )
            self.selection.clear()
