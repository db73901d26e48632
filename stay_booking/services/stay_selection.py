"""Two-click check-in/check-out selection protocol."""

from collections.abc import Iterable
from datetime import date
from enum import Enum
from typing import Optional

from structlog import get_logger

from stay_booking.models.booking import BookingInterval
from stay_booking.services.availability import AvailabilityResolver

logger = get_logger(__name__)


class SelectionState(str, Enum):
    """Progress of a stay selection."""
    EMPTY = "empty"
    CHECK_IN_CHOSEN = "check_in_chosen"
    RANGE_COMPLETE = "range_complete"


class StaySelection:
    """In-progress check-in/check-out choice of one picker session.

    Clicks are applied with ``select``:

    1. With nothing selected, or with a complete range, the click starts a
       fresh selection with that date as check-in.
    2. With only a check-in, a date before it replaces the check-in;
       any other date (including the check-in itself) becomes the check-out.

    ``clear`` resets from any state. The selection only enforces ordering;
    occupancy and the minimum stay are checked with ``is_bookable``.
    Callers are expected to offer only selectable dates.
    """

    def __init__(self):
        self.check_in: Optional[date] = None
        self.check_out: Optional[date] = None

    def __repr__(self) -> str:
        return f"StaySelection(check_in={self.check_in}, check_out={self.check_out})"

    @property
    def state(self) -> SelectionState:
        """Current state derived from which dates are set."""
        if self.check_in is None:
            return SelectionState.EMPTY
        if self.check_out is None:
            return SelectionState.CHECK_IN_CHOSEN
        return SelectionState.RANGE_COMPLETE

    @property
    def is_complete(self) -> bool:
        return self.state is SelectionState.RANGE_COMPLETE

    @property
    def nights(self) -> int:
        """Nights in the selected range, 0 unless complete."""
        if not self.is_complete:
            return 0
        return (self.check_out - self.check_in).days

    def select(self, day: date) -> SelectionState:
        """Apply a date click.

        Args:
            day: Clicked date

        Returns:
            State after the transition
        """
        previous = self.state

        if previous is SelectionState.CHECK_IN_CHOSEN:
            if day < self.check_in:
                self.check_in = day
            else:
                self.check_out = day
        else:
            self.check_in = day
            self.check_out = None

        logger.debug(
            "Stay selection updated",
            previous_state=previous.value,
            state=self.state.value,
            check_in=self.check_in.isoformat(),
            check_out=self.check_out.isoformat() if self.check_out else None,
        )
        return self.state

    def clear(self) -> None:
        """Reset to an empty selection."""
        self.check_in = None
        self.check_out = None

    def is_bookable(self, intervals: Iterable[BookingInterval]) -> bool:
        """Check that the range is complete, at least one night and free."""
        if not self.is_complete:
            return False
        return AvailabilityResolver.range_is_valid(self.check_in, self.check_out, intervals)
