"""Unit tests for booking models and status mapping."""

from datetime import date

import pytest
from pydantic import ValidationError

from stay_booking.models.booking import Booking, BookingInterval, BookingRequest
from stay_booking.models.booking_status import (
    BookingRecordStatus,
    BookingStatus,
    BookingStatusMapper,
)
from stay_booking.models.property import Property


class TestBookingInterval:
    """Tests for BookingInterval parsing and validation."""

    def test_parse_from_wire(self):
        interval = BookingInterval.model_validate(
            {"checkIn": "2025-01-01", "checkOut": "2025-01-05", "status": "confirmed"}
        )

        assert interval.check_in == date(2025, 1, 1)
        assert interval.check_out == date(2025, 1, 5)
        assert interval.status is BookingStatus.CONFIRMED
        assert interval.nights == 4

    def test_parse_booking_record_spelling_and_timestamps(self):
        interval = BookingInterval.model_validate(
            {
                "checkInDate": "2025-01-01T00:00:00.000Z",
                "checkOutDate": "2025-01-05T00:00:00.000Z",
                "status": "blocked",
            }
        )

        assert interval.check_in == date(2025, 1, 1)
        assert interval.check_out == date(2025, 1, 5)

    @pytest.mark.parametrize(
        "check_in,check_out",
        [
            ("2025-01-05", "2025-01-05"),
            ("2025-01-05", "2025-01-01"),
        ],
    )
    def test_zero_night_and_inverted_rejected(self, check_in, check_out):
        with pytest.raises(ValidationError):
            BookingInterval.model_validate(
                {"checkIn": check_in, "checkOut": check_out, "status": "confirmed"}
            )

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            BookingInterval.model_validate(
                {"checkIn": "2025-01-01", "checkOut": "2025-01-02", "status": "tentative"}
            )

    def test_interval_is_immutable(self, confirmed_jan_1_to_5):
        with pytest.raises(ValidationError):
            confirmed_jan_1_to_5[0].status = BookingStatus.PENDING


class TestBookingStatusMapper:
    """Tests for BookingStatusMapper."""

    @pytest.mark.parametrize(
        "record_status,expected",
        [
            ("confirmed", BookingStatus.CONFIRMED),
            ("completed", BookingStatus.CONFIRMED),
            ("pending", BookingStatus.PENDING),
            ("blocked", BookingStatus.BLOCKED),
            ("canceled", None),
            ("Cancelled", None),
        ],
    )
    def test_known_statuses(self, record_status, expected):
        assert BookingStatusMapper.to_interval_status(record_status) == expected

    def test_unknown_status_fails_closed(self):
        assert BookingStatusMapper.to_interval_status("on-hold") is BookingStatus.CONFIRMED

    def test_accepts_record_status_members(self):
        assert BookingStatusMapper.to_interval_status(BookingRecordStatus.COMPLETED) is BookingStatus.CONFIRMED
        assert BookingStatusMapper.to_interval_status(BookingRecordStatus.CANCELED) is None

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("pending", BookingRecordStatus.PENDING),
            (" Confirmed ", BookingRecordStatus.CONFIRMED),
            ("CANCELLED", BookingRecordStatus.CANCELED),
            ("blocked", BookingRecordStatus.BLOCKED),
        ],
    )
    def test_record_status_parsing(self, raw, expected):
        assert BookingRecordStatus(raw) is expected

    def test_record_status_rejects_unknown(self):
        with pytest.raises(ValueError):
            BookingRecordStatus("on-hold")


class TestBookingRecords:
    """Tests for Booking, BookingRequest and Property models."""

    def test_booking_to_interval(self, property_response):
        raw = property_response["data"]["bookings"][0]

        booking = Booking.model_validate(raw)
        interval = booking.to_interval()

        assert booking.guest_name == "Sam Rivera"
        assert interval.check_in == date(2025, 1, 1)
        assert interval.check_out == date(2025, 1, 5)
        assert interval.status is BookingStatus.CONFIRMED
        assert interval.guest_name == "Sam Rivera"

    def test_cancelled_booking_has_no_interval(self, property_response):
        booking = Booking.model_validate(property_response["data"]["bookings"][2])

        assert booking.to_interval() is None

    def test_zero_night_booking_rejected_on_conversion(self, property_response):
        booking = Booking.model_validate(property_response["data"]["bookings"][3])

        with pytest.raises(ValidationError):
            booking.to_interval()

    def test_booking_request_payload(self):
        request = BookingRequest(
            property_id="prop-101",
            check_in_date=date(2025, 1, 5),
            check_out_date=date(2025, 1, 8),
            number_of_guests=2,
            special_requests="Late arrival",
        )

        assert request.to_payload() == {
            "propertyId": "prop-101",
            "checkInDate": "2025-01-05",
            "checkOutDate": "2025-01-08",
            "numberOfGuests": 2,
            "specialRequests": "Late arrival",
        }

    def test_booking_request_requires_a_guest(self):
        with pytest.raises(ValidationError):
            BookingRequest(
                property_id="prop-101",
                check_in_date=date(2025, 1, 5),
                check_out_date=date(2025, 1, 8),
                number_of_guests=0,
            )

    def test_property_pricing(self, property_response):
        prop = Property.model_validate(property_response["data"]["property"])

        pricing = prop.pricing()

        assert prop.id == "prop-101"
        assert prop.check_in_time == "15:00"
        assert pricing.price_per_night == 100
        assert pricing.max_guests == 4
        assert pricing.cleaning_fee is None
        assert pricing.service_fee is None
