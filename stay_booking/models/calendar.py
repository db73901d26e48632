"""Per-date render hints for calendar views."""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from stay_booking.models.booking_status import BookingStatus, DateAvailability


class CalendarDay(BaseModel):
    """Single day in a calendar view."""

    date: dt.date
    availability: DateAvailability
    selectable: bool = Field(
        description="Whether the date may be offered as a check-in or check-out pick",
    )
    status: Optional[BookingStatus] = Field(
        None,
        description="Status of the interval covering this date, if any",
    )

    model_config = ConfigDict(frozen=True)
