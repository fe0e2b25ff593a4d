"""Schedule configuration."""
from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Dict

# Date anchored to cycle index 0
DEFAULT_REFERENCE_START_DATE = date(2018, 11, 7)


@dataclass
class ScheduleConfig:
    """Runtime configuration for the schedule service."""

    reference_start_date: date = DEFAULT_REFERENCE_START_DATE
    show_stops: bool = True  # apply plant full-stop overrides
    user_team: str = "A"
    preload_radius: int = 2  # months on each side
    max_scan_days: int = 365  # next/previous working day horizon

    def __post_init__(self):
        if isinstance(self.reference_start_date, str):
            self.reference_start_date = date.fromisoformat(self.reference_start_date)
        elif isinstance(self.reference_start_date, datetime):
            self.reference_start_date = self.reference_start_date.date()
        self.user_team = str(self.user_team).strip().upper()

    def to_dict(self) -> Dict:
        """Serialize to dictionary."""
        return {
            "reference_start_date": self.reference_start_date.isoformat(),
            "show_stops": self.show_stops,
            "user_team": self.user_team,
            "preload_radius": self.preload_radius,
            "max_scan_days": self.max_scan_days,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "ScheduleConfig":
        """Create from dictionary, ignoring unknown keys."""
        names = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in d.items() if key in names})
