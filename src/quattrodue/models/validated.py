"""
Pydantic Validated Models
=========================
Validation layer for configuration read at the application boundary
(JSON files, CLI options, service configuration updates).

Usage:
    from quattrodue.models.validated import ValidatedScheduleConfig

    config = ValidatedScheduleConfig(reference_start_date="2018-11-07", user_team="c")
    schedule_config = config.to_dataclass()

Note: the engine itself works with the plain ``ScheduleConfig`` dataclass.
"""
from datetime import date
from pathlib import Path
from typing import Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .config import DEFAULT_REFERENCE_START_DATE, ScheduleConfig
from .team import TEAM_CODES


class ValidatedScheduleConfig(BaseModel):
    """
    Pydantic-validated schedule configuration.

    Can be converted to/from the dataclass ScheduleConfig.
    """
    reference_start_date: date = Field(
        default=DEFAULT_REFERENCE_START_DATE,
        description="Date anchored to the first row of the cycle",
    )
    show_stops: bool = Field(default=True)
    user_team: str = Field(default="A", min_length=1, max_length=1)
    preload_radius: int = Field(default=2, ge=0, le=12, description="Months preloaded on each side")
    max_scan_days: int = Field(default=365, ge=1, le=3660)

    @field_validator("user_team", mode="before")
    @classmethod
    def validate_team(cls, v) -> str:
        """Normalize and check the team letter."""
        code = str(v).strip().upper()
        if len(code) != 1 or code not in TEAM_CODES:
            raise ValueError(f"user_team must be one of {TEAM_CODES}")
        return code

    @model_validator(mode="after")
    def validate_model(self):
        """Cross-field validation."""
        if self.reference_start_date.year < 1900:
            raise ValueError("reference_start_date is before 1900")
        return self

    def to_dataclass(self) -> ScheduleConfig:
        """Convert to the dataclass used by the engine."""
        return ScheduleConfig(
            reference_start_date=self.reference_start_date,
            show_stops=self.show_stops,
            user_team=self.user_team,
            preload_radius=self.preload_radius,
            max_scan_days=self.max_scan_days,
        )

    @classmethod
    def from_dataclass(cls, config: ScheduleConfig) -> "ValidatedScheduleConfig":
        """Create from dataclass ScheduleConfig."""
        return cls(
            reference_start_date=config.reference_start_date,
            show_stops=config.show_stops,
            user_team=config.user_team,
            preload_radius=config.preload_radius,
            max_scan_days=config.max_scan_days,
        )

    class Config:
        """Pydantic model config."""
        validate_assignment = True
        extra = "forbid"


def load_config(path: Union[str, Path]) -> ScheduleConfig:
    """Read and validate a JSON configuration file."""
    text = Path(path).read_text(encoding="utf-8")
    return ValidatedScheduleConfig.model_validate_json(text).to_dataclass()
