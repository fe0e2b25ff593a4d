"""Calendar month and scheduled plant full-stop overrides."""
import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple

from quattrodue.errors import ConfigurationError
from quattrodue.utils.logging_setup import get_logger

from .day import Day

logger = get_logger("quattrodue.models.month")

SHIFTS_PER_DAY = 3


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def days_in_month(d: date) -> int:
    return calendar.monthrange(d.year, d.month)[1]


def add_months(d: date, months: int) -> date:
    """First day of the month ``months`` away from ``d``."""
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


@dataclass(frozen=True)
class Stop:
    """
    A scheduled plant full-stop.

    Covers the half-open interval from (start date, start shift) to
    (end date, end shift). Shift numbers are 1-based, as written in the
    plant calendar. A day past the end of its month rolls over, so
    ``end_day=32`` in December means January 1st of the next year.
    """
    year: int
    month: int
    day: int
    shift: int
    end_year: int
    end_month: int
    end_day: int
    end_shift: int

    @property
    def start_position(self) -> Tuple[date, int]:
        return _position(self.year, self.month, self.day, self.shift)

    @property
    def end_position(self) -> Tuple[date, int]:
        return _position(self.end_year, self.end_month, self.end_day, self.end_shift)

    def covers(self, d: date, shift_number: int) -> bool:
        return self.start_position <= (d, shift_number) < self.end_position

    def overlaps_month(self, year: int, month: int) -> bool:
        first = date(year, month, 1)
        last = first.replace(day=calendar.monthrange(year, month)[1])
        return self.start_position <= (last, SHIFTS_PER_DAY) and self.end_position > (first, 1)


def _position(year: int, month: int, day: int, shift: int) -> Tuple[date, int]:
    # Shift numbers past the last shift roll into the next day
    base = date(year, month, 1) + timedelta(days=day - 1)
    extra_days, shift_offset = divmod(shift - 1, SHIFTS_PER_DAY)
    return base + timedelta(days=extra_days), shift_offset + 1


# Scheduled plant stops, 2018-2019
DEFAULT_STOPS = (
    Stop(2018, 8, 11, 3, 2018, 8, 20, 1),
    Stop(2018, 12, 21, 3, 2018, 12, 32, 1),
    Stop(2019, 1, 1, 1, 2019, 1, 3, 1),
    Stop(2019, 4, 19, 3, 2019, 4, 23, 1),
    Stop(2019, 6, 20, 3, 2019, 6, 25, 1),
    Stop(2019, 8, 13, 3, 2019, 8, 21, 1),
    Stop(2019, 12, 24, 3, 2019, 12, 27, 1),
    Stop(2019, 12, 31, 3, 2019, 12, 32, 1),
)


def stops_for_month(stops: Iterable[Stop], year: int, month: int) -> List[Stop]:
    return [s for s in stops if s.overlaps_month(year, month)]


@dataclass
class Month:
    """An ordered, contiguous list of Days for one calendar month."""

    first_day: date
    days: List[Day] = field(default_factory=list)
    stops: List[Stop] = field(default_factory=list)
    reference: Optional[date] = None  # reference start date the days were computed under

    @classmethod
    def build(cls, month_date: date, days: List[Day]) -> "Month":
        first = first_of_month(month_date)
        expected = days_in_month(first)
        if len(days) != expected:
            raise ConfigurationError(
                f"{first:%Y-%m} needs {expected} days, got {len(days)}",
                operation="Month.build",
            )
        for offset, day in enumerate(days):
            if day.date != first + timedelta(days=offset):
                raise ConfigurationError(
                    f"{first:%Y-%m} day {offset + 1} is dated {day.date.isoformat()}",
                    operation="Month.build",
                )
        return cls(first_day=first, days=list(days))

    @property
    def year(self) -> int:
        return self.first_day.year

    @property
    def month(self) -> int:
        return self.first_day.month

    @property
    def length(self) -> int:
        return len(self.days)

    @property
    def title(self) -> str:
        return self.first_day.strftime("%B %Y")

    def is_current(self, today: Optional[date] = None) -> bool:
        today = today or date.today()
        return (today.year, today.month) == (self.year, self.month)

    def today_index(self, today: Optional[date] = None) -> Optional[int]:
        today = today or date.today()
        if not self.is_current(today):
            return None
        return today.day - 1

    def apply_stops(self, stops: Iterable[Stop]) -> int:
        """Force every shift covered by a stop into full-stop state."""
        applied = stops_for_month(stops, self.year, self.month)
        stopped = 0
        for stop in applied:
            for day in self.days:
                for index, assignment in enumerate(day.shifts):
                    if stop.covers(day.date, index + 1) and not assignment.stop:
                        assignment.stop = True
                        stopped += 1
        self.stops.extend(applied)
        if applied:
            logger.debug(f"{self.first_day:%Y-%m}: {len(applied)} stops, {stopped} shifts stopped")
        return stopped

    def __str__(self) -> str:
        return f"Month{{{self.first_day:%Y-%m}, days: {len(self.days)}}}"
