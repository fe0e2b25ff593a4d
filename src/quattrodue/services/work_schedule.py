"""
Work Schedule Service
=====================
Query surface over the calendar cache and the pattern engine.

Usage:
    service = build_service(ScheduleConfig())
    service.get_schedule_for_date(date(2024, 2, 29))
    service.find_next_working_day("C", date.today())
    service.update_reference_start_date(date(2018, 11, 8))   # clears the cache
"""
from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd

from quattrodue.core.dto import OperationResult, OperationType
from quattrodue.engine.cache import CalendarCache
from quattrodue.engine.pattern import PatternEngine
from quattrodue.errors import QuattroDueError
from quattrodue.models.config import ScheduleConfig
from quattrodue.models.day import Day
from quattrodue.models.month import add_months, first_of_month
from quattrodue.models.schedule import ScheduleRange
from quattrodue.models.shift import ShiftAssignment, ShiftType, get_shift_type
from quattrodue.models.team import ALL_TEAMS, Team, TeamLike, get_team
from quattrodue.models.validated import ValidatedScheduleConfig
from quattrodue.utils.logging_setup import get_logger, log_check

logger = get_logger("quattrodue.services.work_schedule")


class WorkScheduleService:
    """Facade composing the calendar cache and the pattern engine."""

    def __init__(self, engine: PatternEngine, cache: CalendarCache, config: Optional[ScheduleConfig] = None):
        self._engine = engine
        self._cache = cache
        self._config = config or ScheduleConfig(
            reference_start_date=engine.reference_start_date,
            show_stops=cache.show_stops,
        )

    @property
    def config(self) -> ScheduleConfig:
        return self._config

    @property
    def cache(self) -> CalendarCache:
        return self._cache

    @property
    def reference_start_date(self) -> date:
        return self._engine.reference_start_date

    @property
    def user_team(self) -> Team:
        return get_team(self._config.user_team)

    # Calendar queries ------------------------------------------------------

    def get_schedule_for_date(self, d: date) -> Optional[Day]:
        days = self._cache.get_month_days(d)
        index = d.day - 1
        if index < len(days):
            return days[index]
        return None

    def get_schedule_for_month(self, month_date: date) -> List[Day]:
        return self._cache.get_month_days(month_date)

    def get_schedule_for_range(self, start: date, end: date) -> List[Day]:
        """Days from ``start`` to ``end`` inclusive, stitched across months."""
        if end < start:
            return []
        result = []
        month = first_of_month(start)
        while month <= end:
            for day in self._cache.get_month_days(month):
                if start <= day.date <= end:
                    result.append(day)
            month = add_months(month, 1)
        return result

    def get_schedule_frame(self, start: date, end: date) -> pd.DataFrame:
        return ScheduleRange(self.get_schedule_for_range(start, end)).to_dataframe()

    def get_schedule_range(self, start: date, end: date) -> ScheduleRange:
        return ScheduleRange(self.get_schedule_for_range(start, end))

    def get_shifts_for_date(self, d: date) -> List[ShiftAssignment]:
        day = self.get_schedule_for_date(d)
        return list(day.shifts) if day else []

    # Team queries ----------------------------------------------------------

    def get_all_teams(self) -> List[Team]:
        return list(ALL_TEAMS)

    def get_all_shift_types(self) -> List[ShiftType]:
        return list(self._engine.shift_types)

    def get_shift_type_by_name(self, name: str) -> Optional[ShiftType]:
        return get_shift_type(name, self._engine.shift_types)

    def get_teams_working_on(self, d: date) -> List[Team]:
        return self._engine.teams_working_on(d)

    def get_teams_off_work_on(self, d: date) -> List[Team]:
        return self._engine.teams_off_work_on(d)

    def get_team_shift(self, d: date, team: TeamLike) -> Optional[ShiftAssignment]:
        """The shift ``team`` works on ``d``, None on a rest day."""
        day = self.get_schedule_for_date(d)
        if day is None:
            return None
        index = self._engine.find_team_shift_index(day, team)
        return None if index is None else day.shifts[index]

    def is_working_day(self, d: date) -> bool:
        return bool(self._engine.teams_working_on(d))

    def is_working_day_for_team(self, d: date, team: TeamLike) -> bool:
        return get_team(team) in self._engine.teams_working_on(d)

    def is_rest_day_for_team(self, d: date, team: TeamLike) -> bool:
        return get_team(team) in self._engine.teams_off_work_on(d)

    def find_next_working_day(self, team: TeamLike, from_date: date, max_days: Optional[int] = None) -> Optional[date]:
        limit = self._config.max_scan_days if max_days is None else max_days
        return self._engine.find_next_working_date(team, from_date, limit)

    def find_previous_working_day(self, team: TeamLike, from_date: date, max_days: Optional[int] = None) -> Optional[date]:
        limit = self._config.max_scan_days if max_days is None else max_days
        return self._engine.find_previous_working_date(team, from_date, limit)

    # Cycle diagnostics -----------------------------------------------------

    def get_day_in_cycle(self, d: date) -> int:
        return self._engine.cycle_index_for_date(d)

    def get_days_from_reference_start(self, d: date) -> int:
        return self._engine.days_from_reference(d)

    def get_work_schedule_summary(self, d: date) -> Optional[str]:
        """e.g. ``Morning (AB), Afternoon (CD), Night (EF)``"""
        day = self.get_schedule_for_date(d)
        if day is None or not day.has_work_schedule:
            return None
        return ", ".join(
            f"{s.name}{' [stop]' if s.stop else ''} ({s.teams_as_string})" for s in day.shifts
        )

    def get_work_schedule_color(self, d: date, team: Optional[TeamLike] = None) -> Optional[str]:
        """Color of the team's shift (user team by default), None on rest days."""
        assignment = self.get_team_shift(d, team or self.user_team)
        return assignment.shift_type.color if assignment else None

    # Configuration ---------------------------------------------------------

    def update_reference_start_date(self, new_date: date) -> OperationResult:
        """Re-anchor the cycle; every cached month is dropped."""
        try:
            self._engine.set_reference_start_date(new_date)
        except (QuattroDueError, TypeError, ValueError) as e:
            logger.error(f"Failed to update reference start date: {e}")
            return OperationResult.failure(
                "Failed to update reference start date", OperationType.UPDATE, error=str(e)
            )
        finally:
            self._cache.clear_cache()
        self._config.reference_start_date = self._engine.reference_start_date
        return OperationResult.ok(
            "Reference start date updated", OperationType.UPDATE,
            reference_start_date=self._engine.reference_start_date.isoformat(),
        )

    def get_schedule_configuration(self) -> Dict[str, Any]:
        config = self._config.to_dict()
        config["reference_start_date"] = self.reference_start_date.isoformat()
        config["teams_count"] = len(ALL_TEAMS)
        config["shift_types_count"] = len(self._engine.shift_types)
        config["cycle_length"] = self._engine.cycle_length
        return config

    def update_schedule_configuration(self, changes: Dict[str, Any]) -> OperationResult:
        """Validate and apply configuration changes."""
        merged = {**self._config.to_dict(), **changes}
        try:
            validated = ValidatedScheduleConfig.model_validate(merged).to_dataclass()
        except ValueError as e:
            logger.warning(f"Rejected configuration update: {e}")
            return OperationResult.failure(
                "Invalid configuration", OperationType.UPDATE, error=str(e)
            )

        if validated.reference_start_date != self.reference_start_date:
            result = self.update_reference_start_date(validated.reference_start_date)
            if not result:
                return result
        if validated.show_stops != self._cache.show_stops:
            self._cache.show_stops = validated.show_stops
            self._cache.clear_cache()
        if validated.user_team != self._config.user_team:
            self._cache.on_team_changed()

        self._config = validated
        logger.info(f"Schedule configuration updated: {sorted(changes)}")
        return OperationResult.ok("Schedule configuration updated", OperationType.UPDATE, **validated.to_dict())

    def validate_configuration(self, today: Optional[date] = None) -> OperationResult:
        today = today or self._cache.today()
        checks = {
            "teams_available": len(ALL_TEAMS) == 9,
            "shift_types_available": len(self._engine.shift_types) == self._engine.shifts_per_day,
            "reference_start_date_valid": self.reference_start_date <= today,
            "user_team_valid": self._config.user_team in {t.code for t in ALL_TEAMS},
        }
        for name, passed in checks.items():
            log_check(logger, name, passed)
        if all(checks.values()):
            return OperationResult.ok("Configuration valid", OperationType.VALIDATION, **checks)
        failed = [name for name, passed in checks.items() if not passed]
        return OperationResult.failure(
            "Configuration validation failed", OperationType.VALIDATION,
            error=", ".join(failed), **checks,
        )

    def get_service_status(self) -> Dict[str, Any]:
        return {
            "reference_start_date": self.reference_start_date.isoformat(),
            "cached_months": self._cache.size,
            "cache": self._cache.cache_summary(),
            "show_stops": self._cache.show_stops,
            "user_team": self._config.user_team,
        }

    # Cache pass-through ----------------------------------------------------

    def preload_around(self, center: date, radius: Optional[int] = None) -> int:
        return self._cache.preload_months_around(
            center, self._config.preload_radius if radius is None else radius
        )

    def refresh_data(self) -> OperationResult:
        self._cache.clear_cache()
        return OperationResult.ok("Work schedule data refreshed", OperationType.READ)

    def clear_cache(self) -> None:
        self._cache.clear_cache()

    def on_team_changed(self) -> None:
        self._cache.on_team_changed()


def build_service(config: Optional[ScheduleConfig] = None, **cache_options: Any) -> WorkScheduleService:
    """Wire an engine, its cache and the service from a configuration."""
    config = config or ScheduleConfig()
    engine = PatternEngine(reference_start_date=config.reference_start_date)
    cache = CalendarCache(engine, show_stops=config.show_stops, **cache_options)
    return WorkScheduleService(engine, cache, config)
