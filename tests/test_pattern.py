"""Tests for the rotation pattern engine."""
from datetime import date, datetime, timedelta

import pytest

from quattrodue.engine.pattern import CYCLE_LENGTH, CYCLE_TABLE, PatternEngine, validate_cycle_table
from quattrodue.errors import ConfigurationError, InvalidIndexError, UnknownTeamError
from quattrodue.models.month import DEFAULT_STOPS
from quattrodue.models.shift import MORNING, NIGHT
from quattrodue.models.team import ALL_TEAMS, teams_as_string


def codes(teams):
    return teams_as_string(teams)


class TestCycleTable:
    """Tests for cycle table validation."""

    def test_default_table_is_valid(self):
        rows = validate_cycle_table(CYCLE_TABLE)
        assert len(rows) == CYCLE_LENGTH == 18

    def test_each_team_works_four_rests_two(self):
        """Within each 6-row block every team rests exactly twice."""
        for team in ALL_TEAMS:
            for block in range(3):
                rows = CYCLE_TABLE[block * 6:(block + 1) * 6]
                rest = sum(1 for row in rows if team.code in row[3])
                assert rest == 2

    def test_wrong_row_count(self):
        with pytest.raises(ConfigurationError):
            validate_cycle_table(CYCLE_TABLE[:17])

    def test_wrong_column_count(self):
        table = list(CYCLE_TABLE)
        table[3] = ("AH", "DI", "GFECB")
        with pytest.raises(ConfigurationError):
            validate_cycle_table(table)

    def test_not_a_partition(self):
        table = list(CYCLE_TABLE)
        table[0] = ("AB", "CD", "EF", "GHA")
        with pytest.raises(ConfigurationError):
            validate_cycle_table(table)

    def test_unknown_code(self):
        table = list(CYCLE_TABLE)
        table[0] = ("AB", "CD", "EF", "GHZ")
        with pytest.raises(ConfigurationError):
            validate_cycle_table(table)


class TestPatternEngine:
    """Tests for date to cycle mapping."""

    def test_requires_three_shift_types(self):
        with pytest.raises(ConfigurationError):
            PatternEngine(shift_types=[MORNING, NIGHT])

    def test_properties(self, engine, reference):
        assert engine.cycle_length == 18
        assert engine.shifts_per_day == 3
        assert engine.reference_start_date == reference
        assert len(engine.shift_types) == 3

    def test_reference_date_is_row_zero(self, engine, reference):
        assert engine.cycle_index_for_date(reference) == 0
        assert engine.cycle_index_for_date(reference + timedelta(days=18)) == 0
        assert engine.cycle_index_for_date(date(2018, 11, 25)) == 0

    def test_dates_before_reference_wrap(self, engine):
        """Day -1 maps to the last row, not to a negative index."""
        assert engine.cycle_index_for_date(date(2018, 11, 6)) == 17
        assert engine.days_from_reference(date(2018, 11, 6)) == -1
        assert codes(engine.teams_on_shift(17, 0)) == "GB"

    def test_exact_day_count_across_years(self, engine, reference):
        d = date(2024, 2, 29)
        assert engine.days_from_reference(d) == (d - reference).days
        assert engine.cycle_index_for_date(d) == (d - reference).days % 18

    def test_teams_on_shift(self, engine):
        assert codes(engine.teams_on_shift(0, 0)) == "AB"
        assert codes(engine.teams_on_shift(0, 1)) == "CD"
        assert codes(engine.teams_on_shift(0, 2)) == "EF"
        assert codes(engine.teams_on_shift(2, 2)) == "GF"

    def test_index_out_of_range(self, engine):
        with pytest.raises(InvalidIndexError):
            engine.cycle_row(18)
        with pytest.raises(InvalidIndexError):
            engine.teams_on_shift(0, 3)
        with pytest.raises(IndexError):
            engine.teams_on_shift(-1, 0)

    def test_teams_working_and_off(self, engine, reference):
        assert codes(engine.teams_working_on(reference)) == "ABCDEF"
        assert codes(engine.teams_off_work_on(reference)) == "GHI"
        assert codes(engine.teams_off_work_on(date(2018, 11, 9))) == "BCE"
        assert engine.works_on("a", reference)
        assert not engine.works_on("G", reference)

    def test_works_on_unknown_team(self, engine, reference):
        with pytest.raises(UnknownTeamError):
            engine.works_on("Q", reference)

    def test_set_reference_start_date(self, engine):
        engine.set_reference_start_date(date(2018, 11, 8))
        assert engine.reference_start_date == date(2018, 11, 8)
        assert engine.cycle_index_for_date(date(2018, 11, 8)) == 0
        assert engine.cycle_index_for_date(date(2018, 11, 7)) == 17

    def test_datetime_reference_is_truncated(self, engine):
        engine.set_reference_start_date(datetime(2018, 11, 8, 6, 30))
        assert type(engine.reference_start_date) is date
        assert engine.reference_start_date == date(2018, 11, 8)
        assert engine.cycle_index_for_date(date(2018, 11, 8)) == 0
        assert len(engine.materialize_month(date(2024, 2, 1))) == 29

    def test_datetime_reference_at_construction(self):
        engine = PatternEngine(reference_start_date=datetime(2018, 11, 7, 22, 0))
        assert engine.reference_start_date == date(2018, 11, 7)
        assert engine.days_from_reference(date(2018, 11, 9)) == 2

    def test_set_reference_rejects_non_date(self, engine, reference):
        with pytest.raises(TypeError):
            engine.set_reference_start_date("2018-11-08")
        with pytest.raises(TypeError):
            engine.set_reference_start_date(None)
        assert engine.reference_start_date == reference


class TestGeneration:
    """Tests for template and month materialization."""

    def test_template_cycle(self, engine, reference):
        template = engine.generate_template_cycle()
        assert len(template) == 18
        assert template[0].date == reference
        assert template[17].date == reference + timedelta(days=17)
        assert template[0].off_work_as_string == "GHI"
        assert all(len(d.shifts) == 3 for d in template)

    def test_template_wrong_shift_count(self, engine):
        with pytest.raises(ConfigurationError):
            engine.generate_template_cycle(shift_types=[MORNING])

    def test_materialize_leap_february(self, engine):
        days = engine.materialize_month(date(2024, 2, 10))
        assert len(days) == 29
        assert days[0].date == date(2024, 2, 1)
        assert days[-1].date == date(2024, 2, 29)
        for prev, nxt in zip(days, days[1:]):
            assert nxt.date - prev.date == timedelta(days=1)

    def test_materialize_matches_cycle_index(self, engine):
        days = engine.materialize_month(date(2019, 3, 1))
        for day in days:
            row = engine.cycle_row(engine.cycle_index_for_date(day.date))
            for index, assignment in enumerate(day.shifts):
                assert assignment.teams == list(row[index])

    def test_reference_month(self, engine):
        days = engine.materialize_month(date(2018, 11, 1))
        day = days[6]
        assert day.date == date(2018, 11, 7)
        assert day.shifts[0].teams_as_string == "AB"
        assert day.shifts[1].teams_as_string == "CD"
        assert day.shifts[2].teams_as_string == "EF"
        assert days[24].shifts[0].teams_as_string == "AB"  # 2018-11-25

    def test_materialized_days_are_independent(self, engine):
        first = engine.materialize_month(date(2024, 2, 1))
        first[0].shifts[0].stop = True
        first[0].shifts[0].add_team("G")
        again = engine.materialize_month(date(2024, 2, 1))
        assert again[0].shifts[0].stop is False
        assert "G" not in again[0].shifts[0].teams_as_string

    def test_materialize_rejects_short_template(self, engine):
        with pytest.raises(ConfigurationError):
            engine.materialize_month(date(2024, 2, 1), template=engine.generate_template_cycle()[:5])

    def test_build_month_with_stops(self, engine):
        month = engine.build_month(date(2019, 12, 1), DEFAULT_STOPS)
        stopped = [(d.day_of_month, i) for d in month.days for i, s in enumerate(d.shifts) if s.stop]
        assert stopped[0] == (24, 2)
        assert (25, 0) in stopped
        assert (27, 0) not in stopped
        assert stopped[-1] == (31, 2)
        assert len(stopped) == 8

    def test_build_month_without_stops(self, engine):
        month = engine.build_month(date(2019, 12, 1))
        assert not any(s.stop for d in month.days for s in d.shifts)

    def test_day_for_date(self, engine):
        day = engine.day_for_date(date(2018, 11, 6))
        assert day.date == date(2018, 11, 6)
        assert day.shifts[0].teams_as_string == "GB"
        assert day.off_work_as_string == "ADF"


class TestWorkingDayScan:
    """Tests for next/previous working day lookup."""

    def test_find_team_shift_index(self, engine, reference):
        day = engine.day_for_date(reference)
        assert PatternEngine.find_team_shift_index(day, "C") == 1
        assert engine.find_team_shift_index(day, "H") is None

    def test_next_skips_rest_days(self, engine):
        # A rests on cycle rows 4 and 5
        assert engine.find_next_working_date("A", date(2018, 11, 10), 30) == date(2018, 11, 13)

    def test_next_excludes_start(self, engine, reference):
        assert engine.find_next_working_date("A", reference, 30) == reference + timedelta(days=1)

    def test_previous_skips_rest_days(self, engine):
        assert engine.find_previous_working_date("A", date(2018, 11, 13), 30) == date(2018, 11, 10)

    def test_bounded_scan(self, engine):
        assert engine.find_next_working_date("A", date(2018, 11, 10), 2) is None
        assert engine.find_next_working_date("A", date(2018, 11, 10), 3) == date(2018, 11, 13)

    def test_non_positive_limit(self, engine, reference):
        assert engine.find_next_working_date("A", reference, 0) is None
        assert engine.find_previous_working_date("A", reference, -5) is None

    def test_unknown_team(self, engine, reference):
        with pytest.raises(UnknownTeamError):
            engine.find_next_working_date("X", reference, 10)
