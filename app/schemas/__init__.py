"""
app/schemas package marker.
"""

from app.schemas.district import DistrictAISummaryResponse, DistrictDataResponse, ErrorResponse

__all__ = [
    "DistrictAISummaryResponse",
    "DistrictDataResponse",
    "ErrorResponse",
]
