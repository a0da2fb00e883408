"""
app/api/routers package marker.
"""

from app.api.routers.district_router import router as district_router

__all__ = [
    "district_router",
]
