"""Pydantic models for booking records, calendar intervals and booking requests."""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from stay_booking.models.booking_status import BookingStatus, BookingStatusMapper


def parse_calendar_date(v: Any) -> Any:
    """Reduce ISO datetime strings and datetimes to their date part."""
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, str) and len(v) > 10 and v[10] in ("T", " "):  # YYYY-MM-DDTHH:MM...
        return v[:10]
    return v


class BookingInterval(BaseModel):
    """One occupied or blocked span on a property's calendar.

    ``check_in`` is inclusive (that night is occupied), ``check_out`` is
    exclusive, so a new stay may start on the day another one ends.
    """

    check_in: date = Field(
        validation_alias=AliasChoices("checkIn", "checkInDate", "check_in"),
        serialization_alias="checkIn",
    )
    check_out: date = Field(
        validation_alias=AliasChoices("checkOut", "checkOutDate", "check_out"),
        serialization_alias="checkOut",
    )
    status: BookingStatus
    guest_name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("guestName", "guest_name"),
        serialization_alias="guestName",
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def parse_dates(cls, v):
        """Accept full ISO timestamps for interval bounds."""
        return parse_calendar_date(v)

    @model_validator(mode="after")
    def check_order(self) -> "BookingInterval":
        """Reject zero-night and inverted intervals."""
        if self.check_in >= self.check_out:
            raise ValueError(
                f"Interval check-in {self.check_in} must be before check-out {self.check_out}"
            )
        return self

    @property
    def nights(self) -> int:
        """Number of occupied nights."""
        return (self.check_out - self.check_in).days

    def covers(self, day: date) -> bool:
        """Check whether ``day`` falls in [check_in, check_out)."""
        return self.check_in <= day < self.check_out


class Booking(BaseModel):
    """Booking record as returned by the booking store."""

    id: str
    property_id: str = Field(alias="propertyId")
    check_in_date: date = Field(alias="checkInDate")
    check_out_date: date = Field(alias="checkOutDate")
    total_price: float = Field(default=0.0, alias="totalPrice")
    number_of_guests: int = Field(default=1, alias="numberOfGuests")
    status: str = "pending"  # pending, confirmed, canceled, completed
    special_requests: Optional[str] = Field(None, alias="specialRequests")
    payment_status: Optional[str] = Field(None, alias="paymentStatus")  # pending, paid, refunded
    cancellation_reason: Optional[str] = Field(None, alias="cancellationReason")
    canceled_at: Optional[datetime] = Field(None, alias="canceledAt")
    number_of_nights: Optional[int] = Field(None, alias="numberOfNights")
    renter: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @field_validator("check_in_date", "check_out_date", mode="before")
    @classmethod
    def parse_dates(cls, v):
        """Accept full ISO timestamps for stay dates."""
        return parse_calendar_date(v)

    @property
    def guest_name(self) -> Optional[str]:
        """Renter display name, when the store embeds the renter."""
        if self.renter:
            return self.renter.get("name")
        return None

    def to_interval(self) -> Optional[BookingInterval]:
        """Convert this record to the calendar interval it occupies.

        Returns:
            BookingInterval, or None for cancelled bookings

        Raises:
            pydantic.ValidationError: If the record has an empty or inverted date range
        """
        interval_status = BookingStatusMapper.to_interval_status(self.status)
        if interval_status is None:
            return None
        return BookingInterval(
            check_in=self.check_in_date,
            check_out=self.check_out_date,
            status=interval_status,
            guest_name=self.guest_name,
        )


class BookingRequest(BaseModel):
    """Booking-request payload handed to the booking-submission collaborator."""

    property_id: str = Field(alias="propertyId")
    check_in_date: date = Field(alias="checkInDate")
    check_out_date: date = Field(alias="checkOutDate")
    number_of_guests: int = Field(default=1, ge=1, alias="numberOfGuests")
    special_requests: str = Field(default="", alias="specialRequests")

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Serialise to the JSON body, dates as yyyy-MM-dd."""
        return self.model_dump(by_alias=True, mode="json")


class Pagination(BaseModel):
    """Pagination block of list responses."""

    current_page: int = Field(default=1, alias="currentPage")
    total_pages: int = Field(default=1, alias="totalPages")
    total: int = 0
    has_next: bool = Field(default=False, alias="hasNext")
    has_prev: bool = Field(default=False, alias="hasPrev")

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class BookingsResponse(BaseModel):
    """Paginated booking list."""

    bookings: list[Booking] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)

    model_config = ConfigDict(extra="allow", populate_by_name=True)
