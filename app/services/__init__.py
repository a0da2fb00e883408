"""
app/services package marker.
"""

from app.services.district_service import DistrictInsightService, get_district_service
from app.services.narrative_service import FALLBACK_NARRATIVE, NarrativeGenerator

__all__ = [
    "DistrictInsightService",
    "get_district_service",
    "FALLBACK_NARRATIVE",
    "NarrativeGenerator",
]
