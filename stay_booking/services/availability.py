"""Availability resolver for a property's booked and blocked dates."""

from calendar import monthrange
from collections.abc import Iterable
from datetime import date, timedelta
from typing import Optional

from structlog import get_logger

from stay_booking.config import settings
from stay_booking.models.booking import BookingInterval
from stay_booking.models.booking_status import (
    BLOCKING_STATUSES,
    BookingStatus,
    DateAvailability,
)
from stay_booking.models.calendar import CalendarDay

logger = get_logger(__name__)


class AvailabilityResolver:
    """Classifies dates and validates stay ranges against booking intervals.

    Every method is a pure function of its arguments. Intervals are read-only
    input; overlapping intervals of different statuses are evaluated
    independently and occupancy is the logical OR of the blocking ones.
    """

    @staticmethod
    def is_occupied(
        day: date,
        intervals: Iterable[BookingInterval],
        blocking_statuses: frozenset[BookingStatus] = BLOCKING_STATUSES,
    ) -> bool:
        """Check whether a night is taken by a confirmed or blocked interval.

        Intervals are half-open: the check-out date of an interval is never
        occupied by it. Pending intervals do not block unless the caller
        passes them in ``blocking_statuses``.

        Args:
            day: Date to check
            intervals: Property's booking intervals
            blocking_statuses: Statuses that make a date unavailable

        Returns:
            True if the night of ``day`` is occupied
        """
        return any(
            interval.status in blocking_statuses and interval.covers(day)
            for interval in intervals
        )

    @staticmethod
    def range_is_valid(
        check_in: date,
        check_out: date,
        intervals: Iterable[BookingInterval],
        blocking_statuses: frozenset[BookingStatus] = BLOCKING_STATUSES,
    ) -> bool:
        """Check that a candidate stay is non-empty and every night is free.

        A half-open interval [a, b) shares a night with [check_in, check_out)
        exactly when a < check_out and check_in < b, so testing overlap covers
        every date in the range, including blocked spans wholly inside it.

        Args:
            check_in: Candidate check-in (first night)
            check_out: Candidate check-out (not a night)
            intervals: Property's booking intervals
            blocking_statuses: Statuses that make a date unavailable

        Returns:
            True if the stay has at least one night and none is occupied
        """
        if check_in >= check_out:
            return False

        for interval in intervals:
            if interval.status not in blocking_statuses:
                continue
            if interval.check_in < check_out and check_in < interval.check_out:
                return False
        return True

    @staticmethod
    def is_within_bounds(
        day: date,
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
    ) -> bool:
        """Check a date against optional inclusive lower and upper bounds."""
        if min_date is not None and day < min_date:
            return False
        if max_date is not None and day > max_date:
            return False
        return True

    @staticmethod
    def classify(day: date, intervals: Iterable[BookingInterval]) -> DateAvailability:
        """Derive the availability of a single date.

        A date covered by both a blocking and a pending interval is
        unavailable.
        """
        soft_held = False
        for interval in intervals:
            if not interval.covers(day):
                continue
            if interval.status in BLOCKING_STATUSES:
                return DateAvailability.UNAVAILABLE
            soft_held = True
        return DateAvailability.SOFT_HELD if soft_held else DateAvailability.AVAILABLE

    @staticmethod
    def is_selectable(
        day: date,
        intervals: Iterable[BookingInterval],
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
    ) -> bool:
        """Disabled-date predicate: a date may be picked if in bounds and not occupied."""
        return AvailabilityResolver.is_within_bounds(
            day, min_date, max_date
        ) and not AvailabilityResolver.is_occupied(day, intervals)

    @staticmethod
    def default_bounds(today: Optional[date] = None) -> tuple[Optional[date], Optional[date]]:
        """Selectable window from calendar settings.

        Args:
            today: Reference date, defaults to the current date

        Returns:
            (min_date, max_date); either may be None for an open end
        """
        today = today or date.today()
        min_date = None if settings.calendar.allow_past_dates else today
        horizon = settings.calendar.booking_horizon_days
        max_date = today + timedelta(days=horizon) if horizon is not None else None
        return min_date, max_date

    @staticmethod
    def calendar(
        start: date,
        end: date,
        intervals: Iterable[BookingInterval],
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
    ) -> list[CalendarDay]:
        """Build render hints for every date in [start, end).

        Args:
            start: First date to render
            end: Date after the last one to render
            intervals: Property's booking intervals
            min_date: Optional lower selection bound
            max_date: Optional upper selection bound

        Returns:
            One CalendarDay per date, in order
        """
        intervals = list(intervals)
        days = []
        current = start
        while current < end:
            covering = [i for i in intervals if i.covers(current)]
            # Report the blocking interval when a pending one overlaps it
            covering.sort(key=lambda i: i.status not in BLOCKING_STATUSES)
            days.append(
                CalendarDay(
                    date=current,
                    availability=AvailabilityResolver.classify(current, covering),
                    selectable=AvailabilityResolver.is_selectable(
                        current, covering, min_date, max_date
                    ),
                    status=covering[0].status if covering else None,
                )
            )
            current += timedelta(days=1)

        logger.debug(
            "Calendar hints built",
            start=start.isoformat(),
            end=end.isoformat(),
            day_count=len(days),
            interval_count=len(intervals),
        )
        return days

    @staticmethod
    def month_calendar(
        year: int,
        month: int,
        intervals: Iterable[BookingInterval],
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
    ) -> list[CalendarDay]:
        """Render hints for one calendar month."""
        first = date(year, month, 1)
        last = date(year, month, monthrange(year, month)[1])
        return AvailabilityResolver.calendar(
            first, last + timedelta(days=1), intervals, min_date, max_date
        )

    @staticmethod
    def intervals_starting_in_month(
        year: int,
        month: int,
        intervals: Iterable[BookingInterval],
    ) -> list[BookingInterval]:
        """Intervals whose check-in falls in the given month, ordered by check-in."""
        return sorted(
            (
                i for i in intervals
                if i.check_in.year == year and i.check_in.month == month
            ),
            key=lambda i: i.check_in,
        )
