"""
app/repositories package marker.
"""

from app.repositories.district_cache_repository import DistrictCacheRepository, DistrictCacheStore

__all__ = [
    "DistrictCacheRepository",
    "DistrictCacheStore",
]
