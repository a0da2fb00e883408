"""
Run the API with uvicorn: ``python -m app``.
"""

from __future__ import annotations

import uvicorn

from app.config import get_relay_settings


def main() -> None:
    settings = get_relay_settings()
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
