"""
app/domain package marker.
"""

from app.domain.district import (
    DistrictInsightResult,
    DistrictLookupResult,
    DistrictNotFoundError,
    DistrictSnapshot,
    DistrictValidationError,
    PageFetchResult,
    normalize_district_name,
)

__all__ = [
    "DistrictInsightResult",
    "DistrictLookupResult",
    "DistrictNotFoundError",
    "DistrictSnapshot",
    "DistrictValidationError",
    "PageFetchResult",
    "normalize_district_name",
]
