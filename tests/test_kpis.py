"""
test_kpis.py — Unit tests for the aggregation engine.

Tests cover:
  - consistency_score: empty, single, zero-mean, identical, CV arithmetic
  - overall_averages / group_averages / employee_averages
  - top_n: top, bottom (reverse-after-sort), stable ties
  - get_kpi_summary, day_of_week_averages, monthly_averages
  - idempotence and empty input handling
"""

import math

import pandas as pd
import pytest

from production_dashboard.kpis import (
    consistency_score,
    day_of_week_averages,
    employee_averages,
    get_kpi_summary,
    group_averages,
    monthly_averages,
    overall_averages,
    top_n,
)
from production_dashboard.models import METRIC_COLUMNS


class TestConsistencyScore:

    def test_empty(self):
        assert consistency_score([]) == 0
        assert consistency_score(None) == 0

    @pytest.mark.parametrize("x", [0.0, 7.5, -3.0, 1e6])
    def test_single_value(self, x):
        assert consistency_score([x]) == 100

    def test_all_zero(self):
        assert consistency_score([0, 0, 0]) == 100

    def test_zero_mean_with_spread(self):
        assert consistency_score([0, 0, 5]) == 0
        # mean 0 but not all zero
        assert consistency_score([-5, 5]) == 0

    @pytest.mark.parametrize("v", [4.0, 0.1, -2.5])
    def test_identical_values(self, v):
        assert consistency_score([v, v, v]) == pytest.approx(100.0)

    def test_population_cv(self):
        # mean 15, population std 5 -> cv 1/3
        assert consistency_score([10, 20]) == pytest.approx(200 / 3)

    def test_negative_mean_uses_absolute(self):
        assert consistency_score([-10, -20]) == pytest.approx(200 / 3)

    def test_floor_at_zero(self):
        # cv > 1
        assert consistency_score([1, 1, 1, 50]) == 0

    def test_accepts_series(self):
        assert consistency_score(pd.Series([10.0, 20.0])) == pytest.approx(200 / 3)


class TestOverallAverages:

    def test_sum_over_count(self, fact_production):
        result = overall_averages(fact_production)
        for col in METRIC_COLUMNS:
            expected = sum(fact_production[col]) / len(fact_production)
            assert math.isclose(result[col], expected, abs_tol=1e-9)

    def test_subset_of_metrics(self, fact_production):
        assert list(overall_averages(fact_production, ["pieces"])) == ["pieces"]

    def test_empty_is_none(self, make_records):
        assert overall_averages(make_records([])) is None


class TestGroupAverages:

    def test_by_store(self, make_records):
        records = make_records([
            {"store": "S2", "pieces": 10},
            {"store": "S1", "pieces": 20},
            {"store": "S2", "pieces": 30},
        ])
        result = group_averages(records, "store")
        assert result["group"].tolist() == ["S2", "S1"]
        assert result["count"].tolist() == [2, 1]
        assert result["pieces"].tolist() == [20.0, 20.0]
        assert list(result.columns) == ["group", "count", *METRIC_COLUMNS]

    def test_by_supervisor(self, fact_production):
        result = group_averages(fact_production, "supervisor", ["pieces"])
        by_group = dict(zip(result["group"], result["pieces"]))
        assert by_group["Cat Diaz"] == pytest.approx((100 + 80 + 120) / 3)
        assert by_group["99"] == 60

    def test_invalid_group_field(self, fact_production):
        with pytest.raises(ValueError, match="Cannot group by"):
            group_averages(fact_production, "office")

    def test_empty(self, make_records):
        result = group_averages(make_records([]), "store")
        assert result.empty
        assert "count" in result.columns


class TestEmployeeAverages:

    def test_consistency_per_employee(self, make_records):
        records = make_records([
            {"employee": "A", "pieces": 10},
            {"employee": "B", "pieces": 5},
            {"employee": "A", "pieces": 10},
            {"employee": "C", "pieces": 0},
            {"employee": "C", "pieces": 4},
        ])
        result = employee_averages(records, "pieces").set_index("employee")
        assert result.loc["A", "consistency"] == pytest.approx(100)
        assert result.loc["B", "consistency"] == 100
        # mean 2, std 2 -> cv 1
        assert result.loc["C", "consistency"] == pytest.approx(0)
        assert result.loc["A", "count"] == 2

    def test_columns(self, fact_production):
        result = employee_averages(fact_production, "dollars")
        assert list(result.columns[:3]) == ["employee", "consistency", "count"]

    def test_empty(self, make_records):
        assert employee_averages(make_records([]), "pieces").empty


class TestTopN:

    @pytest.fixture
    def ranked(self, make_records):
        return make_records([
            {"employee": "A", "pieces": 10},
            {"employee": "B", "pieces": 5},
            {"employee": "C", "pieces": 1},
        ])

    def test_top(self, ranked):
        result = top_n(ranked, "pieces", 2, "top")
        assert result["employee"].tolist() == ["A", "B"]

    def test_bottom_reverses_after_sort(self, ranked):
        result = top_n(ranked, "pieces", 2, "bottom")
        assert result["employee"].tolist() == ["C", "B"]
        assert result["pieces"].tolist() == [1.0, 5.0]

    def test_averages_per_employee(self, make_records):
        records = make_records([
            {"employee": "A", "pieces": 10},
            {"employee": "A", "pieces": 0},
            {"employee": "B", "pieces": 6},
        ])
        result = top_n(records, "pieces", 5)
        assert result["employee"].tolist() == ["B", "A"]
        assert result["pieces"].tolist() == [6.0, 5.0]

    def test_ties_keep_first_appearance(self, make_records):
        records = make_records([
            {"employee": "X", "pieces": 5},
            {"employee": "Y", "pieces": 5},
            {"employee": "Z", "pieces": 1},
        ])
        assert top_n(records, "pieces", 3, "top")["employee"].tolist() == ["X", "Y", "Z"]
        assert top_n(records, "pieces", 3, "bottom")["employee"].tolist() == ["Z", "Y", "X"]

    def test_n_larger_than_employees(self, ranked):
        assert len(top_n(ranked, "pieces", 50)) == 3

    def test_invalid_direction(self, ranked):
        with pytest.raises(ValueError):
            top_n(ranked, "pieces", 2, "middle")

    def test_empty(self, make_records):
        assert top_n(make_records([]), "pieces", 5).empty


class TestKpiSummary:

    def test_summary(self, fact_production):
        summary = get_kpi_summary(fact_production, "pieces")
        assert summary["avg_metric"] == pytest.approx((100 + 80 + 60 + 120) / 4)
        assert summary["unique_employees"] == 4
        assert summary["best_performer"] == {"name": "Annie Lee", "value": 120.0}

    def test_first_best_wins_ties(self, make_records):
        records = make_records([
            {"employee": "A", "pieces": 3},
            {"employee": "B", "pieces": 9},
            {"employee": "C", "pieces": 9},
        ])
        assert get_kpi_summary(records, "pieces")["best_performer"]["name"] == "B"

    def test_empty(self, make_records):
        summary = get_kpi_summary(make_records([]), "pieces")
        assert summary == {
            "avg_metric": 0.0,
            "unique_employees": 0,
            "best_performer": {"name": "N/A", "value": 0.0},
        }


class TestCalendarAverages:

    def test_day_of_week(self, make_records):
        records = make_records([
            {"date": "2024-03-17", "pieces": 10},  # Sunday
            {"date": "2024-03-17", "pieces": 20},
            {"date": "2024-03-18", "pieces": 5},   # Monday
        ])
        result = day_of_week_averages(records, "pieces")
        assert result["day"].tolist() == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
        assert result["pieces"].tolist() == [15.0, 5.0, 0.0, 0.0, 0.0, 0.0, 0.0]

    def test_day_of_week_empty(self, make_records):
        assert day_of_week_averages(make_records([]), "pieces").empty

    def test_monthly(self, make_records):
        records = make_records([
            {"date": "2024-02-03", "skus": 4},
            {"date": "2024-01-09", "skus": 1},
            {"date": "2024-02-20", "skus": 8},
        ])
        result = monthly_averages(records, "skus")
        assert result["month"].tolist() == ["2024-01", "2024-02"]
        assert result["skus"].tolist() == [1.0, 6.0]


class TestIdempotence:

    def test_repeated_calls_identical(self, fact_production):
        pd.testing.assert_frame_equal(
            group_averages(fact_production, "store"), group_averages(fact_production, "store")
        )
        pd.testing.assert_frame_equal(
            employee_averages(fact_production, "pieces"), employee_averages(fact_production, "pieces")
        )
        assert overall_averages(fact_production) == overall_averages(fact_production)
        assert consistency_score(fact_production["pieces"]) == consistency_score(fact_production["pieces"])
