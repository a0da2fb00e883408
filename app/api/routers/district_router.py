"""
app/api/routers/district_router.py

District statistics HTTP endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.domain.district import DistrictNotFoundError, DistrictValidationError
from app.schemas.district import DistrictAISummaryResponse, DistrictDataResponse, ErrorResponse
from app.services.district_service import DistrictInsightService, get_district_service
from db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/data", tags=["districts"])

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@router.get(
    "/{district_name}",
    response_model=DistrictDataResponse,
    responses=_ERROR_RESPONSES,
)
def get_district_data(
    district_name: str,
    db: Session = Depends(get_db),
    service: DistrictInsightService = Depends(get_district_service),
) -> DistrictDataResponse:
    """
    Return summary, narrative and raw records, served from cache when fresh.
    """

    try:
        result = service.get_district(db=db, district_name=district_name)
    except DistrictValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except DistrictNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("District lookup failed district=%s", district_name)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Server error: {exc}",
        ) from exc

    return DistrictDataResponse(
        source=result.source,
        last_updated=result.last_updated,
        summary=result.summary,
        ai_insight=result.ai_insight,
        data=result.data,
    )


@router.get(
    "/{district_name}/refresh",
    response_model=DistrictDataResponse,
    responses=_ERROR_RESPONSES,
)
def refresh_district_data(
    district_name: str,
    db: Session = Depends(get_db),
    service: DistrictInsightService = Depends(get_district_service),
) -> DistrictDataResponse:
    """
    Discard the cached entry and refetch from the provider.
    """

    try:
        result = service.refresh_district(db=db, district_name=district_name)
    except DistrictValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except DistrictNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("District refresh failed district=%s", district_name)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Server error: {exc}",
        ) from exc

    return DistrictDataResponse(
        source=result.source,
        last_updated=result.last_updated,
        summary=result.summary,
        ai_insight=result.ai_insight,
        data=result.data,
    )


@router.get(
    "/{district_name}/ai-summary",
    response_model=DistrictAISummaryResponse,
    responses=_ERROR_RESPONSES,
)
def get_ai_summary(
    district_name: str,
    db: Session = Depends(get_db),
    service: DistrictInsightService = Depends(get_district_service),
) -> DistrictAISummaryResponse:
    """
    Summarize cached records only; no provider fallback.
    """

    try:
        result = service.get_ai_summary(db=db, district_name=district_name)
    except DistrictValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except DistrictNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("AI summary failed district=%s", district_name)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"AI summary error: {exc}",
        ) from exc

    return DistrictAISummaryResponse(
        district=result.district_name,
        summary=result.summary,
        ai_insight=result.ai_insight,
    )
