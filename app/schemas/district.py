"""
app/schemas/district.py

Response schemas for district insight endpoints.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer


def _json_safe_summary(summary: dict[str, Any]) -> dict[str, Any]:
    # Infinite figures are written as null, the way JSON.stringify does.
    return {
        key: None if isinstance(value, float) and not math.isfinite(value) else value
        for key, value in summary.items()
    }


class DistrictDataResponse(BaseModel):
    """
    Summary, narrative and raw records for one district.
    """

    model_config = ConfigDict(populate_by_name=True)

    source: str
    last_updated: datetime | None = Field(default=None, alias="lastUpdated")
    summary: dict[str, Any]
    ai_insight: str = Field(..., alias="aiInsight")
    data: list[dict[str, Any]] = Field(default_factory=list)

    @field_serializer("summary")
    def _serialize_summary(self, summary: dict[str, Any]) -> dict[str, Any]:
        return _json_safe_summary(summary)


class DistrictAISummaryResponse(BaseModel):
    """
    Cache-only summary and narrative for one district.
    """

    model_config = ConfigDict(populate_by_name=True)

    district: str
    summary: dict[str, Any]
    ai_insight: str = Field(..., alias="aiInsight")

    @field_serializer("summary")
    def _serialize_summary(self, summary: dict[str, Any]) -> dict[str, Any]:
        return _json_safe_summary(summary)


class ErrorResponse(BaseModel):
    message: str
