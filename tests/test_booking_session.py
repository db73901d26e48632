"""Tests for the booking session hand-off flow."""

import json
from datetime import date
from unittest.mock import Mock, patch

import httpx
import pytest

from stay_booking.clients import BookingAPIClient, BookingAPIClientError, BookingAPIConflictError
from stay_booking.models.booking import Booking, BookingInterval
from stay_booking.models.booking_status import BookingStatus
from stay_booking.models.property import Property
from stay_booking.services.booking_session import (
    BookingSession,
    InvalidStayError,
    SelectionIncompleteError,
)
from stay_booking.services.stay_selection import SelectionState


@pytest.fixture
def session(pricing, mixed_intervals):
    """Session on a property with January 2025 bookings, no date window."""
    return BookingSession("prop-101", pricing, mixed_intervals)


@pytest.fixture
def created_booking():
    return Booking(
        id="bk-99",
        property_id="prop-101",
        check_in_date=date(2025, 1, 5),
        check_out_date=date(2025, 1, 8),
        status="pending",
    )


class TestPicking:
    """Tests for date picking through the session."""

    def test_pick_disabled_date_ignored(self, session):
        assert not session.pick(date(2025, 1, 2))
        assert session.selection.state is SelectionState.EMPTY

    def test_pick_back_to_back_range(self, session):
        assert session.pick(date(2025, 1, 5))
        assert session.pick(date(2025, 1, 8))

        assert session.selection.state is SelectionState.RANGE_COMPLETE
        assert session.is_bookable()

    def test_pick_outside_window_ignored(self, pricing):
        session = BookingSession(
            "prop-101", pricing, [], min_date=date(2025, 1, 10), max_date=date(2025, 3, 31)
        )

        assert not session.pick(date(2025, 1, 9))
        assert not session.pick(date(2025, 4, 1))
        assert session.pick(date(2025, 1, 10))

    def test_pending_dates_can_be_picked(self, session):
        assert session.pick(date(2025, 1, 10))
        assert session.pick(date(2025, 1, 12))
        assert session.is_bookable()

    def test_for_property_uses_calendar_window(self, property_response):
        prop = Property.model_validate(property_response["data"]["property"])

        session = BookingSession.for_property(prop, [], today=date(2025, 1, 15))

        assert session.min_date == date(2025, 1, 15)
        assert session.max_date == date(2026, 1, 15)
        assert not session.is_selectable(date(2025, 1, 14))

    def test_guest_count_clamped(self, session):
        assert session.set_guests(0) == 1
        assert session.set_guests(10) == 4
        assert session.set_guests(3) == 3


class TestQuoteAndRequest:
    """Tests for quoting and building the booking request."""

    def test_no_quote_until_complete(self, session):
        assert session.quote() is None
        session.pick(date(2025, 1, 5))
        assert session.quote() is None

    def test_quote_for_selection(self, session):
        session.pick(date(2025, 1, 5))
        session.pick(date(2025, 1, 8))

        quote = session.quote()

        assert quote.nights == 3
        assert quote.total == 340

    def test_build_request_needs_both_dates(self, session):
        with pytest.raises(SelectionIncompleteError):
            session.build_request()

        session.pick(date(2025, 1, 5))
        with pytest.raises(SelectionIncompleteError):
            session.build_request()

    def test_build_request_rejects_zero_nights(self, session):
        session.pick(date(2025, 1, 5))
        session.pick(date(2025, 1, 5))

        with pytest.raises(InvalidStayError, match="at least 1 night"):
            session.build_request()
        assert session.selection.state is SelectionState.RANGE_COMPLETE

    def test_build_request_rejects_range_over_blocked_dates(self, session):
        session.pick(date(2025, 1, 15))
        session.pick(date(2025, 1, 25))

        with pytest.raises(InvalidStayError):
            session.build_request()

    def test_build_request(self, session):
        session.pick(date(2025, 1, 5))
        session.pick(date(2025, 1, 8))
        session.set_guests(2)
        session.special_requests = "Late arrival"

        payload = session.build_request().to_payload()

        assert payload == {
            "propertyId": "prop-101",
            "checkInDate": "2025-01-05",
            "checkOutDate": "2025-01-08",
            "numberOfGuests": 2,
            "specialRequests": "Late arrival",
        }


class TestSubmit:
    """Tests for handing the request to the booking store."""

    def test_submit_success(self, session, created_booking):
        client = Mock()
        client.create_booking = Mock(return_value=created_booking)
        session.pick(date(2025, 1, 5))
        session.pick(date(2025, 1, 8))

        booking = session.submit(client)

        assert booking.id == "bk-99"
        assert session.last_booking is created_booking
        request = client.create_booking.call_args.args[0]
        assert request.check_in_date == date(2025, 1, 5)
        assert request.check_out_date == date(2025, 1, 8)

    def test_rejected_submission_keeps_selection_editable(self, session):
        client = Mock()
        client.create_booking = Mock(side_effect=BookingAPIConflictError("Dates already booked", 409))
        session.pick(date(2025, 1, 5))
        session.pick(date(2025, 1, 8))

        with pytest.raises(BookingAPIConflictError):
            session.submit(client)

        assert session.last_booking is None
        assert session.selection.check_in == date(2025, 1, 5)
        assert session.selection.check_out == date(2025, 1, 8)

        # Guest picks new dates without starting over
        session.pick(date(2025, 1, 22))
        session.pick(date(2025, 1, 25))
        assert session.is_bookable()

    def test_incomplete_selection_never_reaches_store(self, session):
        client = Mock()

        with pytest.raises(SelectionIncompleteError):
            session.submit(client)

        client.create_booking.assert_not_called()

    def test_refresh_drops_claimed_selection(self, session, mixed_intervals):
        session.pick(date(2025, 1, 5))
        session.pick(date(2025, 1, 8))
        claimed = BookingInterval(
            check_in=date(2025, 1, 6), check_out=date(2025, 1, 9), status=BookingStatus.CONFIRMED
        )

        session.refresh_intervals(mixed_intervals + [claimed])

        assert session.selection.state is SelectionState.EMPTY

    def test_refresh_keeps_selection_still_free(self, session, mixed_intervals):
        session.pick(date(2025, 1, 5))
        session.pick(date(2025, 1, 8))

        session.refresh_intervals(mixed_intervals)

        assert session.selection.state is SelectionState.RANGE_COMPLETE


class TestOpen:
    """Tests for opening a session from the booking API."""

    def test_open_fetches_property_and_bookings(self, property_response):
        prop = Property.model_validate(property_response["data"]["property"])
        bookings = [Booking.model_validate(b) for b in property_response["data"]["bookings"]]

        with patch(
            "stay_booking.clients.booking_api_client.BookingAPIClient.get_property",
            return_value=(prop, bookings),
        ):
            session = BookingSession.open(BookingAPIClient(auth_token="t"), "prop-101", today=date(2024, 12, 30))

        assert session.property_id == "prop-101"
        assert session.pricing.price_per_night == 100
        # Cancelled and zero-night records are dropped
        assert [i.status for i in session.intervals] == [BookingStatus.CONFIRMED, BookingStatus.PENDING]
        assert not session.is_selectable(date(2025, 1, 2))

    def test_open_reports_bad_listing_as_client_error(self, property_response):
        payload = json.loads(json.dumps(property_response))
        payload["data"]["property"]["maxGuests"] = 0
        client = BookingAPIClient(
            auth_token="t",
            base_url="http://bookings.test/api",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=payload)),
        )

        with pytest.raises(BookingAPIClientError):
            BookingSession.open(client, "prop-101", today=date(2024, 12, 30))
