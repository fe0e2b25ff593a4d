"""QuattroDue: 18-day, nine-team shift rotation calendar."""
from .engine import CalendarCache, PatternEngine
from .models import Day, Month, ScheduleConfig, Team, get_team
from .services import WorkScheduleService, build_service

__version__ = "1.0.0"

__all__ = [
    "PatternEngine",
    "CalendarCache",
    "WorkScheduleService",
    "build_service",
    "Day",
    "Month",
    "Team",
    "get_team",
    "ScheduleConfig",
]
