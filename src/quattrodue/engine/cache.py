"""
Calendar Cache
==============
Month-scoped cache in front of the pattern engine.

Entries are keyed by (year, month) and live for a fixed TTL from their
creation, independent of access. The map is bounded: on overflow expired
entries go first, then the oldest ones, down to a small margin below the
bound so the next insert does not trigger another pass.

Thread safety: single dict operations are atomic, so lookups and inserts
take no lock. Eviction passes are serialized by their own lock, and
preloads collapse into a single in-flight run through a non-blocking
acquire.
"""
import threading
import time
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Iterable, List, Tuple

from quattrodue.models.day import Day
from quattrodue.models.month import DEFAULT_STOPS, Stop, add_months, first_of_month
from quattrodue.utils.structured_logging import get_structured_logger

from .pattern import PatternEngine

log = get_structured_logger("quattrodue.engine.cache")

CACHE_TTL_SECONDS = 5 * 60
MAX_CACHED_MONTHS = 24
EVICTION_MARGIN = 2

MonthKey = Tuple[int, int]


@dataclass(frozen=True)
class MonthCacheEntry:
    """Materialized days of one month and when they were computed."""
    days: Tuple[Day, ...]
    created_at: float
    reference: date
    show_stops: bool = True

    def is_expired(self, now: float, ttl: float) -> bool:
        return now - self.created_at > ttl

    def days_copy(self) -> List[Day]:
        return [d.copy() for d in self.days]


@dataclass(frozen=True)
class TodayPosition:
    """Where today's date sits in its own month."""
    month_date: date
    day_index: int
    found: bool


def month_key(d: date) -> MonthKey:
    return d.year, d.month


class CalendarCache:
    """
    Cache of materialized months.

    Usage:
        cache = CalendarCache(PatternEngine())
        days = cache.get_month_days(date(2024, 2, 1))
        cache.preload_months_around(date.today(), radius=2)
    """

    def __init__(
        self,
        engine: PatternEngine,
        *,
        show_stops: bool = True,
        stops: Iterable[Stop] = DEFAULT_STOPS,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        max_entries: int = MAX_CACHED_MONTHS,
        timer: Callable[[], float] = time.monotonic,
        clock: Callable[[], date] = date.today,
    ):
        self._engine = engine
        self.show_stops = show_stops
        self._stops = tuple(stops)
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._timer = timer
        self._clock = clock
        self._entries: Dict[MonthKey, MonthCacheEntry] = {}
        self._cleanup_lock = threading.Lock()
        self._preload_lock = threading.Lock()

    @property
    def engine(self) -> PatternEngine:
        return self._engine

    @property
    def size(self) -> int:
        return len(self._entries)

    @property
    def is_preloading(self) -> bool:
        return self._preload_lock.locked()

    def today(self) -> date:
        return self._clock()

    def contains(self, month_date: date) -> bool:
        entry = self._entries.get(month_key(month_date))
        return entry is not None and self._is_live(entry)

    def _is_live(self, entry: MonthCacheEntry) -> bool:
        return (
            not entry.is_expired(self._timer(), self._ttl)
            and entry.reference == self._engine.reference_start_date
            and entry.show_stops == self.show_stops
        )

    def get_month_days(self, month_date: date) -> List[Day]:
        """
        Days of the month containing ``month_date``, as independent copies.

        A failure to compute the month is logged and yields an empty list,
        so callers iterating over many months keep going.
        """
        first = first_of_month(month_date)
        key = month_key(first)

        entry = self._entries.get(key)
        if entry is not None and self._is_live(entry):
            log.debug("cache_hit", month=f"{first:%Y-%m}")
            return entry.days_copy()

        log.debug("cache_miss", month=f"{first:%Y-%m}")
        # Entries carry the reference and show_stops they were built under
        show_stops = self.show_stops
        try:
            month = self._engine.build_month(first, self._stops if show_stops else None)
        except Exception as e:
            log.error(
                "month_materialization_failed",
                month=f"{first:%Y-%m}",
                error=f"{type(e).__name__}: {e}",
            )
            return []

        reference = month.reference if month.reference is not None else self._engine.reference_start_date
        entry = MonthCacheEntry(tuple(month.days), self._timer(), reference, show_stops)
        self._entries[key] = entry
        self._cleanup_if_needed()
        return entry.days_copy()

    def preload_months_around(self, center: date, radius: int) -> int:
        """
        Fill the cache for ``center`` ± ``radius`` months.

        Returns the number of months computed; 0 when another preload is
        already running (the request is dropped, not queued).
        """
        if not self._preload_lock.acquire(blocking=False):
            log.debug("preload_skipped", center=center.isoformat())
            return 0
        loaded = 0
        try:
            for offset in range(-radius, radius + 1):
                month_date = add_months(center, offset)
                if not self.contains(month_date):
                    if self.get_month_days(month_date):
                        loaded += 1
        finally:
            self._preload_lock.release()
        log.debug("preload_done", center=center.isoformat(), radius=radius, loaded=loaded)
        return loaded

    def find_today_position(self) -> TodayPosition:
        today = self._clock()
        month_date = first_of_month(today)
        for index, day in enumerate(self.get_month_days(month_date)):
            if day.date == today:
                return TodayPosition(month_date, index, True)
        return TodayPosition(month_date, -1, False)

    def invalidate_month(self, month_date: date) -> bool:
        return self._entries.pop(month_key(month_date), None) is not None

    def clear_cache(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        log.info("cache_cleared", entries=count)

    def on_team_changed(self) -> None:
        """Cached months hold every team, so nothing is invalidated."""
        log.debug("team_changed")

    def cached_months(self) -> List[date]:
        return sorted(date(y, m, 1) for y, m in self._entries.copy())

    def cache_summary(self) -> str:
        now = self._timer()
        entries = list(self._entries.copy().values())
        expired = sum(1 for e in entries if e.is_expired(now, self._ttl))
        return (
            f"CalendarCache{{entries: {len(entries)}/{self._max_entries}, "
            f"expired: {expired}, ttl: {self._ttl:g}s, preloading: {self.is_preloading}}}"
        )

    def _cleanup_if_needed(self) -> None:
        if len(self._entries) <= self._max_entries:
            return
        with self._cleanup_lock:
            if len(self._entries) <= self._max_entries:
                return
            now = self._timer()
            for key, entry in self._entries.copy().items():
                if entry.is_expired(now, self._ttl):
                    self._entries.pop(key, None)

            if len(self._entries) > self._max_entries:
                by_age = sorted(self._entries.copy().items(), key=lambda item: item[1].created_at)
                to_remove = len(by_age) - self._max_entries + EVICTION_MARGIN
                for key, _ in by_age[:to_remove]:
                    self._entries.pop(key, None)
                log.debug("cache_evicted", removed=to_remove, remaining=len(self._entries))
