"""
Pattern Engine
==============
The QuattroDue rotation: nine teams, three shifts a day, an 18-day cycle
in which every team works 4 days and rests 2.

The cycle table plus a single reference start date (anchored to row 0)
determine the whole schedule. Any date maps to a row with a floored
modulo of its calendar-exact day distance from the reference date, so
dates before the reference wrap to the tail of the cycle.
"""
import threading
from datetime import date, datetime, timedelta
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from quattrodue.errors import ConfigurationError, InvalidIndexError, UnknownTeamError
from quattrodue.models.config import DEFAULT_REFERENCE_START_DATE
from quattrodue.models.day import Day
from quattrodue.models.month import Month, Stop, days_in_month, first_of_month
from quattrodue.models.shift import DEFAULT_SHIFT_TYPES, ShiftAssignment, ShiftType
from quattrodue.models.team import ALL_TEAMS, TEAM_CODES, Team, TeamLike, get_team, teams_from_codes
from quattrodue.utils.logging_setup import get_logger, log_function_call

logger = get_logger("quattrodue.engine.pattern")

SHIFTS_PER_DAY = 3

# One row per cycle day: teams on shift 0, 1, 2, then the teams off work.
CYCLE_TABLE: Tuple[Tuple[str, str, str, str], ...] = (
    ("AB", "CD", "EF", "GHI"),
    ("AB", "CD", "EF", "GHI"),
    ("AH", "DI", "GF", "ECB"),
    ("AH", "DI", "GF", "ECB"),
    ("CH", "EI", "GB", "ADF"),
    ("CH", "EI", "GB", "ADF"),
    ("CD", "EF", "AB", "GHI"),
    ("CD", "EF", "AB", "GHI"),
    ("DI", "GF", "AH", "ECB"),
    ("DI", "GF", "AH", "ECB"),
    ("EI", "GB", "CH", "ADF"),
    ("EI", "GB", "CH", "ADF"),
    ("EF", "AB", "CD", "GHI"),
    ("EF", "AB", "CD", "GHI"),
    ("GF", "AH", "DI", "ECB"),
    ("GF", "AH", "DI", "ECB"),
    ("GB", "CH", "EI", "ADF"),
    ("GB", "CH", "EI", "ADF"),
)

CYCLE_LENGTH = len(CYCLE_TABLE)

Row = Tuple[Tuple[Team, ...], ...]


class _EngineState(NamedTuple):
    reference: date
    template: Tuple[Day, ...]


def plain_date(value: date) -> date:
    """A date with no time part; datetimes are truncated."""
    if isinstance(value, datetime):
        return value.date()
    if not isinstance(value, date):
        raise TypeError(f"reference start date must be a date, got {type(value).__name__}")
    return value


def validate_cycle_table(table: Sequence[Sequence[str]]) -> Tuple[Row, ...]:
    """
    Resolve team codes and check the table's shape.

    Every row needs one column per shift plus the off-work column, and
    together those columns must name each registered team exactly once.
    """
    if len(table) != CYCLE_LENGTH:
        raise ConfigurationError(
            f"cycle table has {len(table)} rows, expected {CYCLE_LENGTH}",
            operation="validate_cycle_table",
        )
    rows = []
    for index, row in enumerate(table):
        if len(row) != SHIFTS_PER_DAY + 1:
            raise ConfigurationError(
                f"row {index} has {len(row)} columns, expected {SHIFTS_PER_DAY + 1}",
                operation="validate_cycle_table",
            )
        try:
            resolved = tuple(tuple(teams_from_codes(column)) for column in row)
        except UnknownTeamError as e:
            raise ConfigurationError(f"row {index}: {e}", operation="validate_cycle_table") from e
        codes = sorted(t.code for column in resolved for t in column)
        if codes != sorted(TEAM_CODES):
            raise ConfigurationError(
                f"row {index} does not partition the teams: {''.join(codes)}",
                operation="validate_cycle_table",
            )
        rows.append(resolved)
    return tuple(rows)


class PatternEngine:
    """
    Maps dates to cycle rows and materializes calendar days.

    Usage:
        engine = PatternEngine()
        engine.cycle_index_for_date(date(2018, 11, 25))   # 0
        days = engine.materialize_month(date(2024, 2, 1))  # 29 Days
    """

    def __init__(
        self,
        reference_start_date: date = DEFAULT_REFERENCE_START_DATE,
        shift_types: Iterable[ShiftType] = DEFAULT_SHIFT_TYPES,
        table: Sequence[Sequence[str]] = CYCLE_TABLE,
    ):
        reference_start_date = plain_date(reference_start_date)
        self._rows = validate_cycle_table(table)
        self._shift_types = tuple(shift_types)
        if len(self._shift_types) != SHIFTS_PER_DAY:
            raise ConfigurationError(
                f"{len(self._shift_types)} shift types given, expected {SHIFTS_PER_DAY}",
                operation="PatternEngine",
            )
        self._write_lock = threading.Lock()
        self._state = _EngineState(
            reference_start_date,
            tuple(self.generate_template_cycle(reference=reference_start_date)),
        )
        logger.debug(f"Pattern engine ready: reference={reference_start_date.isoformat()}")

    # Configuration ---------------------------------------------------------

    @property
    def cycle_length(self) -> int:
        return CYCLE_LENGTH

    @property
    def shifts_per_day(self) -> int:
        return SHIFTS_PER_DAY

    @property
    def shift_types(self) -> Tuple[ShiftType, ...]:
        return self._shift_types

    @property
    def reference_start_date(self) -> date:
        return self._state.reference

    def set_reference_start_date(self, new_date: date) -> None:
        """Re-anchor the cycle. Callers holding cached days must drop them."""
        new_date = plain_date(new_date)
        with self._write_lock:
            template = tuple(self.generate_template_cycle(reference=new_date))
            # Single assignment: readers see either the old or the new pair
            self._state = _EngineState(new_date, template)
        logger.info(f"Reference start date set to {new_date.isoformat()}")

    # Date arithmetic -------------------------------------------------------

    def days_from_reference(self, d: date) -> int:
        return (d - self._state.reference).days

    def cycle_index_for_date(self, d: date) -> int:
        # Python's % is floored: negative offsets wrap to the tail
        return self.days_from_reference(d) % CYCLE_LENGTH

    def cycle_row(self, index: int) -> Row:
        if not 0 <= index < CYCLE_LENGTH:
            raise InvalidIndexError(index, CYCLE_LENGTH, "cycle index")
        return self._rows[index]

    def teams_on_shift(self, cycle_index: int, shift_index: int) -> List[Team]:
        row = self.cycle_row(cycle_index)
        if not 0 <= shift_index < SHIFTS_PER_DAY:
            raise InvalidIndexError(shift_index, SHIFTS_PER_DAY, "shift index")
        return list(row[shift_index])

    # Generation ------------------------------------------------------------

    def generate_template_cycle(
        self,
        shift_types: Optional[Sequence[ShiftType]] = None,
        reference: Optional[date] = None,
    ) -> List[Day]:
        """One Day per cycle row, dated from the reference date onwards."""
        shift_types = tuple(shift_types) if shift_types is not None else self._shift_types
        if len(shift_types) != SHIFTS_PER_DAY:
            raise ConfigurationError(
                f"{len(shift_types)} shift types given, expected {SHIFTS_PER_DAY}",
                operation="generate_template_cycle",
            )
        reference = reference or self._state.reference
        cycle = []
        for row_index, row in enumerate(self._rows):
            day = Day(reference + timedelta(days=row_index))
            for shift_index, shift_type in enumerate(shift_types):
                day.add_shift(ShiftAssignment(shift_type, list(row[shift_index])))
            cycle.append(day)
        return cycle

    @log_function_call
    def materialize_month(self, target: date, template: Optional[Sequence[Day]] = None) -> List[Day]:
        """
        Calendar days of the month containing ``target``.

        Each day is a fresh copy of its template row relabeled to the
        concrete date; template days are never shared.
        """
        state = self._state
        if template is not None:
            state = state._replace(template=tuple(template))
        return self._materialize(target, state)

    def _materialize(self, target: date, state: _EngineState) -> List[Day]:
        if len(state.template) != CYCLE_LENGTH:
            raise ConfigurationError(
                f"template has {len(state.template)} days, expected {CYCLE_LENGTH}",
                operation="materialize_month",
            )
        first = first_of_month(target)
        days = []
        for offset in range(days_in_month(first)):
            current = first + timedelta(days=offset)
            index = (current - state.reference).days % CYCLE_LENGTH
            days.append(state.template[index].copy(date=current))
        return days

    def build_month(self, target: date, stops: Optional[Iterable[Stop]] = None) -> Month:
        """
        Materialize a Month and apply full-stop overrides once.

        The month is computed from a single snapshot of the engine state;
        ``Month.reference`` records the reference date it was built under.
        """
        state = self._state
        month = Month.build(target, self._materialize(target, state))
        month.reference = state.reference
        if stops:
            month.apply_stops(stops)
        return month

    def day_for_date(self, d: date) -> Day:
        state = self._state
        return state.template[(d - state.reference).days % CYCLE_LENGTH].copy(date=d)

    # Team queries ----------------------------------------------------------

    def teams_working_on(self, d: date) -> List[Team]:
        row = self._rows[self.cycle_index_for_date(d)]
        return [t for column in row[:SHIFTS_PER_DAY] for t in column]

    def teams_off_work_on(self, d: date) -> List[Team]:
        working = set(self.teams_working_on(d))
        return [t for t in ALL_TEAMS if t not in working]

    def works_on(self, team: TeamLike, d: date) -> bool:
        return get_team(team) in self.teams_working_on(d)

    @staticmethod
    def find_team_shift_index(day: Day, team: TeamLike) -> Optional[int]:
        """Shift index the team works on ``day``, None if it rests."""
        return day.team_shift_index(team)

    def find_next_working_date(self, team: TeamLike, from_date: date, max_days: int) -> Optional[date]:
        """First date after ``from_date`` the team works, within ``max_days``."""
        return self._scan(team, from_date, max_days, 1)

    def find_previous_working_date(self, team: TeamLike, from_date: date, max_days: int) -> Optional[date]:
        """Last date before ``from_date`` the team works, within ``max_days``."""
        return self._scan(team, from_date, max_days, -1)

    def _scan(self, team: TeamLike, from_date: date, max_days: int, direction: int) -> Optional[date]:
        team = get_team(team)
        if max_days <= 0:
            return None
        for step in range(1, max_days + 1):
            candidate = from_date + timedelta(days=step * direction)
            if self.works_on(team, candidate):
                return candidate
        return None
