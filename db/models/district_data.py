"""
db/models/district_data.py

Cached provider records for one district.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, Index, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, JSONDocument


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DistrictData(Base):
    __tablename__ = "district_data"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    district_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Trimmed, lower-cased district name",
    )
    state_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    month: Mapped[str | None] = mapped_column(String(32), nullable=True)
    fin_year: Mapped[str | None] = mapped_column(String(32), nullable=True)
    record_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    data: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONDocument,
        nullable=False,
        default=list,
        comment="Raw provider records in arrival order",
    )
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    __table_args__ = (
        UniqueConstraint("district_name", name="uq_district_data_district_name"),
        Index("ix_district_data_last_updated", "last_updated"),
    )
