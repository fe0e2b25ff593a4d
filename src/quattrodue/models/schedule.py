"""Tabular views over a range of materialized days."""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd

from .day import Day
from .team import ALL_TEAMS

REST = "-"


@dataclass
class ScheduleRange:
    """Ordered days between two dates, with DataFrame conversions."""

    days: List[Day] = field(default_factory=list)

    @property
    def start(self) -> Optional[date]:
        return self.days[0].date if self.days else None

    @property
    def end(self) -> Optional[date]:
        return self.days[-1].date if self.days else None

    def to_dataframe(self) -> pd.DataFrame:
        """One row per (date, shift)."""
        columns = ["date", "shift_index", "shift", "start", "end", "teams", "stop"]
        rows = [
            {
                "date": day.date,
                "shift_index": i,
                "shift": s.name,
                "start": s.shift_type.formatted_start,
                "end": s.shift_type.formatted_end,
                "teams": s.teams_as_string,
                "stop": s.stop,
            }
            for day in self.days
            for i, s in enumerate(day.shifts)
        ]
        if not rows:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame(rows, columns=columns)

    def to_matrix(self) -> pd.DataFrame:
        """Team × date matrix of shift names, ``-`` on rest days."""
        if not self.days:
            return pd.DataFrame()
        data = {}
        for day in self.days:
            column = {}
            for team in ALL_TEAMS:
                index = day.team_shift_index(team)
                column[team.code] = REST if index is None else day.shifts[index].name
            data[day.date] = column
        matrix = pd.DataFrame(data)
        matrix.index.name = "team"
        return matrix

    def team_stats(self) -> pd.DataFrame:
        """Per-team count of each shift and of rest days."""
        matrix = self.to_matrix()
        if matrix.empty:
            return pd.DataFrame(columns=["team", "working_days", "rest_days"])

        stats = matrix.apply(lambda row: row.value_counts(), axis=1).fillna(0).astype(int)
        if REST not in stats.columns:
            stats[REST] = 0
        stats = stats.rename(columns={REST: "rest_days"})
        shift_columns = [c for c in stats.columns if c != "rest_days"]
        stats["working_days"] = stats[shift_columns].sum(axis=1)
        return stats.reset_index()

    def summary(self) -> Dict[str, Any]:
        stopped = sum(1 for d in self.days for s in d.shifts if s.stop)
        return {
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
            "days": len(self.days),
            "stopped_shifts": stopped,
        }
