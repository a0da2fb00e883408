"""
tests/test_summary_service.py

Pytest unit tests for the district summary projection.

All tests are pure Python - no database, no I/O.

Coverage
--------
- "no data" sentinel for empty input
- first-record-only projection
- lenient numeric coercion (missing, blank, non-numeric, zero)
- Number() string grammar (separators, infinity spellings, radix literals)
- pass-through of financial year and month
"""

from __future__ import annotations

import math

import pytest

from app.services.summary_service import (
    NO_DATA_MESSAGE,
    SUMMARY_FIELD_MAP,
    coerce_number,
    project_summary,
)


def _record(**overrides: object) -> dict[str, object]:
    record: dict[str, object] = {
        "district_name": "PUNE",
        "state_name": "MAHARASHTRA",
        "fin_year": "2024-2025",
        "month": "Dec",
        "Total_No_of_Works_Takenup": "1200",
        "Number_of_Completed_Works": "450",
        "Number_of_Ongoing_Works": "750",
        "Total_Households_Worked": "3100",
        "Total_Individuals_Worked": "5200",
        "Average_Wage_rate_per_day_per_person": "297.35",
        "Total_Exp": "1532.5",
        "percentage_payments_gererated_within_15_days": "99.8",
    }
    record.update(overrides)
    return record


# ---------------------------------------------------------------------------
# Empty input
# ---------------------------------------------------------------------------


class TestNoData:
    def test_empty_sequence_returns_sentinel(self) -> None:
        result = project_summary([])
        assert result == {"message": NO_DATA_MESSAGE}

    def test_sentinel_is_not_an_all_zero_summary(self) -> None:
        result = project_summary([])
        assert "totalExpenditure" not in result


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------


class TestProjection:
    def test_contains_every_summary_field(self) -> None:
        summary = project_summary([_record()])
        expected = {"financialYear", "month", *SUMMARY_FIELD_MAP.keys()}
        assert set(summary.keys()) == expected

    def test_numeric_strings_are_parsed(self) -> None:
        summary = project_summary([_record()])
        assert summary["totalWorksTakenUp"] == 1200
        assert summary["completedWorks"] == 450
        assert summary["avgWageRate"] == pytest.approx(297.35)
        assert summary["totalExpenditure"] == pytest.approx(1532.5)

    def test_year_and_month_pass_through_unchanged(self) -> None:
        summary = project_summary([_record()])
        assert summary["financialYear"] == "2024-2025"
        assert summary["month"] == "Dec"

    def test_missing_fields_default_to_zero(self) -> None:
        summary = project_summary([{"district_name": "PUNE"}])
        assert summary["scPersonDays"] == 0
        assert summary["womenPersonDays"] == 0
        assert summary["financialYear"] is None

    def test_only_first_record_is_used(self) -> None:
        """Later matches for the same district are discarded, not aggregated."""
        first = _record(Total_Exp="100")
        second = _record(Total_Exp="900")
        third = _record(Total_Exp="5000")

        summary = project_summary([first, second, third])

        assert summary["totalExpenditure"] == 100

    def test_input_records_are_not_mutated(self) -> None:
        record = _record()
        snapshot = dict(record)
        project_summary([record])
        assert record == snapshot


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------


class TestCoercion:
    def test_non_numeric_total_exp_equals_explicit_zero(self) -> None:
        non_numeric = project_summary([_record(Total_Exp="not reported")])
        explicit_zero = project_summary([_record(Total_Exp="0")])

        assert non_numeric["totalExpenditure"] == 0
        assert non_numeric == explicit_zero

    @pytest.mark.parametrize(
        "value",
        [None, "", "   ", "abc", "NaN", float("nan"), 0, 0.0, "0", "-0", [], {}],
    )
    def test_unusable_values_collapse_to_zero(self, value: object) -> None:
        assert coerce_number(value) == 0

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("42", 42),
            (" 12 ", 12),
            ("1e3", 1000),
            (7, 7),
            (2.5, 2.5),
            ("-3.25", -3.25),
            (True, 1),
            (False, 0),
        ],
    )
    def test_usable_values_are_parsed(self, value: object, expected: float) -> None:
        assert coerce_number(value) == expected

    def test_integral_values_are_returned_as_int(self) -> None:
        assert isinstance(coerce_number("300.0"), int)

    @pytest.mark.parametrize(
        "value",
        ["1_000", "inf", "-inf", "INF", "infinity", "INFINITY", "+inf", "nan", "1 000", "12abc", "0x", "-0x1A", "0b102", "."],
    )
    def test_strings_outside_number_grammar_collapse_to_zero(self, value: str) -> None:
        assert coerce_number(value) == 0

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("0x1A", 26),
            ("0X1a", 26),
            ("0b101", 5),
            ("0o17", 15),
            (" 0x10 ", 16),
            ("1.", 1),
            (".5", 0.5),
            ("+4", 4),
            ("2E2", 200),
        ],
    )
    def test_number_grammar_literals_are_parsed(self, value: str, expected: float) -> None:
        assert coerce_number(value) == expected

    @pytest.mark.parametrize("value, sign", [("Infinity", 1), ("+Infinity", 1), ("-Infinity", -1), ("1e999", 1)])
    def test_infinity_literal_is_kept(self, value: str, sign: int) -> None:
        result = coerce_number(value)
        assert math.isinf(result)
        assert (result > 0) == (sign > 0)
