"""Shift type catalog and per-day shift assignments."""
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Iterable, List, Optional

from .team import Team, TeamLike, get_team, teams_as_string


@dataclass(frozen=True)
class ShiftType:
    """A named shift template: start time, duration, display color."""
    name: str
    description: str
    start: time
    duration: timedelta
    color: str = "#000000"

    @property
    def end_time(self) -> time:
        """Wall-clock end (wraps past midnight for night shifts)."""
        return (datetime.combine(datetime.min, self.start) + self.duration).time()

    @property
    def crosses_midnight(self) -> bool:
        start_minutes = self.start.hour * 60 + self.start.minute
        return start_minutes + self.duration.total_seconds() / 60 > 24 * 60

    @property
    def hours(self) -> float:
        return self.duration.total_seconds() / 3600

    @property
    def formatted_start(self) -> str:
        return self.start.strftime("%H:%M")

    @property
    def formatted_end(self) -> str:
        return self.end_time.strftime("%H:%M")

    def includes(self, t: time) -> bool:
        """True if ``t`` falls within the shift, both ends inclusive."""
        if self.crosses_midnight:
            return t >= self.start or t <= self.end_time
        return self.start <= t <= self.end_time

    def __str__(self) -> str:
        return f"{self.name} {self.formatted_start}-{self.formatted_end}"


def _shift(name: str, description: str, hour: int, hours: int, color: str) -> ShiftType:
    return ShiftType(name, description, time(hour, 0), timedelta(hours=hours), color)


# Default catalog
MORNING = _shift("Morning", "Morning shift 06:00-14:00", 6, 8, "#B3E5FC")
AFTERNOON = _shift("Afternoon", "Afternoon shift 14:00-22:00", 14, 8, "#FFE0B2")
NIGHT = _shift("Night", "Night shift 22:00-06:00", 22, 8, "#E1BEE7")

DEFAULT_SHIFT_TYPES = (MORNING, AFTERNOON, NIGHT)


def get_shift_type(name: str, catalog: Iterable[ShiftType] = DEFAULT_SHIFT_TYPES) -> Optional[ShiftType]:
    """Look up a shift type by name, case-insensitive."""
    key = str(name).strip().lower()
    for shift_type in catalog:
        if shift_type.name.lower() == key:
            return shift_type
    return None


@dataclass
class ShiftAssignment:
    """A shift type plus the teams working it on a given day."""
    shift_type: ShiftType
    teams: List[Team] = field(default_factory=list)
    stop: bool = False  # plant full-stop override

    def add_team(self, team: TeamLike) -> None:
        team = get_team(team)
        if team not in self.teams:
            self.teams.append(team)

    def contains(self, team: TeamLike) -> bool:
        return get_team(team) in self.teams

    @property
    def name(self) -> str:
        return self.shift_type.name

    @property
    def teams_as_string(self) -> str:
        return teams_as_string(self.teams)

    def copy(self) -> "ShiftAssignment":
        return ShiftAssignment(self.shift_type, list(self.teams), self.stop)

    def __str__(self) -> str:
        suffix = "-stop" if self.stop else ""
        return f"{self.shift_type.name}{suffix} [{self.teams_as_string}]"
