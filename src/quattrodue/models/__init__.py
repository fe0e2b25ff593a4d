# quattrodue/models - Calendar data model for the rotation
from .config import DEFAULT_REFERENCE_START_DATE, ScheduleConfig
from .day import Day
from .month import DEFAULT_STOPS, Month, Stop
from .schedule import ScheduleRange
from .shift import (
    AFTERNOON,
    DEFAULT_SHIFT_TYPES,
    MORNING,
    NIGHT,
    ShiftAssignment,
    ShiftType,
    get_shift_type,
)
from .team import ALL_TEAMS, TEAM_CODES, Team, get_team

__all__ = [
    "Team", "ALL_TEAMS", "TEAM_CODES", "get_team",
    "ShiftType", "ShiftAssignment", "MORNING", "AFTERNOON", "NIGHT",
    "DEFAULT_SHIFT_TYPES", "get_shift_type",
    "Day", "Month", "Stop", "DEFAULT_STOPS",
    "ScheduleRange",
    "ScheduleConfig", "DEFAULT_REFERENCE_START_DATE",
]
