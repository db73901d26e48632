import json
from datetime import date
from pathlib import Path

import pytest

from stay_booking.models.booking import BookingInterval
from stay_booking.models.booking_status import BookingStatus
from stay_booking.models.property import PropertyPricing


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def property_response():
    """Load property-with-bookings response from fixture."""
    with open(FIXTURES_DIR / "booking_api" / "property_response.json") as f:
        return json.load(f)


@pytest.fixture
def create_booking_response():
    """Load booking creation response from fixture."""
    with open(FIXTURES_DIR / "booking_api" / "create_booking_response.json") as f:
        return json.load(f)


@pytest.fixture
def user_bookings_response():
    """Load paginated user bookings response from fixture."""
    with open(FIXTURES_DIR / "booking_api" / "user_bookings_response.json") as f:
        return json.load(f)


@pytest.fixture
def confirmed_jan_1_to_5():
    """Confirmed stay occupying the nights of Jan 1-4, 2025."""
    return [
        BookingInterval(
            check_in=date(2025, 1, 1),
            check_out=date(2025, 1, 5),
            status=BookingStatus.CONFIRMED,
        )
    ]


@pytest.fixture
def mixed_intervals():
    """Confirmed, pending and host-blocked spans in January 2025."""
    return [
        BookingInterval(check_in=date(2025, 1, 1), check_out=date(2025, 1, 5), status=BookingStatus.CONFIRMED),
        BookingInterval(check_in=date(2025, 1, 10), check_out=date(2025, 1, 12), status=BookingStatus.PENDING),
        BookingInterval(check_in=date(2025, 1, 20), check_out=date(2025, 1, 22), status=BookingStatus.BLOCKED),
    ]


@pytest.fixture
def pricing():
    """Property pricing with no explicit fees."""
    return PropertyPricing(price_per_night=100, max_guests=4)
