"""
app/services/summary_service.py

Projects one raw provider record into the fixed district summary shape.

Pure Python, no I/O. Numeric fields use a lenient coercion: missing,
blank, non-numeric, NaN and zero values all become 0, so a legitimate
zero is indistinguishable from a missing value.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from typing import Any

NO_DATA_MESSAGE = "No data available for this district"

# Number() string grammar: no digit separators, and infinity only as "Infinity".
_DECIMAL_LITERAL = re.compile(r"[+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")
_RADIX_LITERAL = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")

# summary key -> provider field name
SUMMARY_FIELD_MAP: dict[str, str] = {
    "totalWorksTakenUp": "Total_No_of_Works_Takenup",
    "completedWorks": "Number_of_Completed_Works",
    "ongoingWorks": "Number_of_Ongoing_Works",
    "totalHouseholdsWorked": "Total_Households_Worked",
    "totalIndividualsWorked": "Total_Individuals_Worked",
    "totalJobCardsIssued": "Total_No_of_JobCards_issued",
    "totalActiveJobCards": "Total_No_of_Active_Job_Cards",
    "totalActiveWorkers": "Total_No_of_Active_Workers",
    "totalPersonDays": "Persondays_of_Central_Liability_so_far",
    "scPersonDays": "SC_persondays",
    "stPersonDays": "ST_persondays",
    "womenPersonDays": "Women_Persondays",
    "avgWageRate": "Average_Wage_rate_per_day_per_person",
    "avgDaysEmployment": "Average_days_of_employment_provided_per_Household",
    "totalExpenditure": "Total_Exp",
    "adminExpenditure": "Total_Adm_Expenditure",
    "materialWages": "Material_and_skilled_Wages",
    "wageExpenditure": "Wages",
    "percentAgriAlliedWorks": "percent_of_Expenditure_on_Agriculture_Allied_Works",
    "percentNRMExpenditure": "percent_of_NRM_Expenditure",
    "timelyPaymentsPercent": "percentage_payments_gererated_within_15_days",
}


def no_data_result() -> dict[str, str]:
    return {"message": NO_DATA_MESSAGE}


def coerce_number(value: Any) -> int | float:
    """
    Lenient numeric coercion with ECMAScript ``Number(x) || 0`` semantics.

    Strings are trimmed and must be a decimal literal, ``[+-]Infinity`` or an
    unsigned ``0x``/``0o``/``0b`` literal; anything else collapses to 0, as do
    NaN and zero. Integral results are returned as ``int`` so counts serialize
    without a trailing ``.0``.
    """

    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        number = _parse_numeric_string(value)
    else:
        return 0

    if math.isnan(number) or number == 0:
        return 0
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return number


def _parse_numeric_string(value: str) -> float:
    stripped = value.strip()
    if not stripped:
        return 0.0
    if _RADIX_LITERAL.fullmatch(stripped):
        try:
            return float(int(stripped, 0))
        except OverflowError:
            return math.inf
    if not _DECIMAL_LITERAL.fullmatch(stripped):
        return math.nan
    return float(stripped)


def project_summary(records: Sequence[dict[str, Any]]) -> dict[str, Any]:
    """
    Build the district summary from the first record.

    Returns the "no data" sentinel for an empty sequence. Additional
    records for the same district are ignored.
    """

    if not records:
        return no_data_result()

    record = records[0]
    summary: dict[str, Any] = {
        "financialYear": record.get("fin_year"),
        "month": record.get("month"),
    }
    for key, source_field in SUMMARY_FIELD_MAP.items():
        summary[key] = coerce_number(record.get(source_field))
    return summary
