"""Calendar day: its shift assignments and the teams off work."""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from quattrodue.errors import AssignmentError, InvalidIndexError

from .shift import ShiftAssignment
from .team import ALL_TEAMS, Team, TeamLike, get_team, teams_as_string


@dataclass
class Day:
    """
    One calendar day of the rotation.

    Built empty and filled by successive ``add_shift`` calls, or produced
    from a template with ``copy(date=...)``. ``off_work`` always equals the
    registry minus every team assigned to a shift.
    """

    date: date
    shifts: List[ShiftAssignment] = field(default_factory=list)
    off_work: List[Team] = field(default_factory=lambda: list(ALL_TEAMS))

    def add_shift(self, shift: ShiftAssignment) -> None:
        """Append a shift and remove its teams from the off-work set."""
        for team in shift.teams:
            if self.team_shift_index(team) is not None:
                raise AssignmentError(
                    f"{team.code} already assigned on {self.date.isoformat()}",
                    operation="add_shift",
                )
        self.shifts.append(shift)
        self.off_work = [t for t in self.off_work if t not in shift.teams]

    def shift(self, index: int) -> ShiftAssignment:
        if not 0 <= index < len(self.shifts):
            raise InvalidIndexError(index, len(self.shifts), "shift index")
        return self.shifts[index]

    def set_stop(self, index: int, stop: bool = True) -> None:
        self.shift(index).stop = stop

    def team_shift_index(self, team: TeamLike) -> Optional[int]:
        """Index of the shift the team works, or None when resting."""
        team = get_team(team)
        for i, assignment in enumerate(self.shifts):
            if team in assignment.teams:
                return i
        return None

    @property
    def working_teams(self) -> List[Team]:
        return [t for s in self.shifts for t in s.teams]

    @property
    def has_work_schedule(self) -> bool:
        return any(s.teams for s in self.shifts)

    def is_today(self, today: Optional[date] = None) -> bool:
        return self.date == (today or date.today())

    @property
    def day_of_month(self) -> int:
        return self.date.day

    @property
    def weekday(self) -> int:
        """ISO weekday, Monday = 1."""
        return self.date.isoweekday()

    @property
    def day_name(self) -> str:
        return self.date.strftime("%A")

    @property
    def off_work_as_string(self) -> str:
        return teams_as_string(self.off_work)

    def teams_as_string(self, position: int) -> str:
        if position >= len(self.shifts):
            return ""
        return self.shifts[position].teams_as_string

    def copy(self, date: Optional[date] = None) -> "Day":
        """Independent copy, optionally relabeled to another date."""
        return Day(
            date=self.date if date is None else date,
            shifts=[s.copy() for s in self.shifts],
            off_work=list(self.off_work),
        )

    def __str__(self) -> str:
        shifts = ", ".join(str(s) for s in self.shifts)
        return f"{self.date.isoformat()} {shifts} off [{self.off_work_as_string}]"
