# quattrodue/engine - Rotation pattern engine and month cache
from .cache import CACHE_TTL_SECONDS, MAX_CACHED_MONTHS, CalendarCache, TodayPosition
from .pattern import CYCLE_LENGTH, CYCLE_TABLE, SHIFTS_PER_DAY, PatternEngine, validate_cycle_table

__all__ = [
    "PatternEngine",
    "CYCLE_TABLE", "CYCLE_LENGTH", "SHIFTS_PER_DAY",
    "validate_cycle_table",
    "CalendarCache", "TodayPosition",
    "CACHE_TTL_SECONDS", "MAX_CACHED_MONTHS",
]
