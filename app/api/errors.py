"""
app/api/errors.py

Error envelope shared by all routes: ``{"message": ...}``.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException


async def _http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(application: FastAPI) -> None:
    """
    Render route and framework HTTP errors as ``{"message": detail}``.
    """

    application.add_exception_handler(HTTPException, _http_exception_handler)
