"""
app/repositories/district_cache_repository.py

Persistence layer for cached district records.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any, Protocol

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.domain.district import DistrictSnapshot, RawRecord
from db.models.district_data import DistrictData


class DistrictCacheStore(Protocol):
    """
    Cache operations the retrieval workflow depends on.
    """

    def get(self, district_name: str) -> DistrictSnapshot | None: ...

    def upsert(self, district_name: str, records: Sequence[RawRecord]) -> DistrictSnapshot: ...

    def delete(self, district_name: str) -> bool: ...


def _first_text(records: Sequence[RawRecord], key: str) -> str | None:
    if not records:
        return None
    value = records[0].get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class DistrictCacheRepository:
    """
    One row per normalized district name; ``data`` is replaced on every write.

    Callers own the transaction boundary: ``upsert`` and ``delete`` flush but
    do not commit.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, district_name: str) -> DistrictSnapshot | None:
        row = self._session.scalar(
            select(DistrictData)
            .where(DistrictData.district_name == district_name)
            .execution_options(populate_existing=True)
        )
        if row is None:
            return None
        return self._to_snapshot(row)

    def upsert(self, district_name: str, records: Sequence[RawRecord]) -> DistrictSnapshot:
        """
        Insert or replace the cached records for ``district_name``.
        """

        data = list(records)
        now = datetime.now(timezone.utc)
        values: dict[str, Any] = {
            "district_name": district_name,
            "data": data,
            "record_count": len(data),
            "last_updated": now,
            "state_name": _first_text(data, "state_name"),
            "month": _first_text(data, "month"),
            "fin_year": _first_text(data, "fin_year"),
        }

        insert = self._insert_for_dialect()
        stmt = insert(DistrictData).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[DistrictData.district_name],
            set_={key: stmt.excluded[key] for key in values if key != "district_name"},
        )
        self._session.execute(stmt)
        self._session.flush()

        return DistrictSnapshot(
            district_name=district_name,
            data=data,
            last_updated=now,
            state_name=values["state_name"],
            month=values["month"],
            fin_year=values["fin_year"],
        )

    def delete(self, district_name: str) -> bool:
        result = self._session.execute(
            delete(DistrictData).where(DistrictData.district_name == district_name)
        )
        self._session.flush()
        return bool(result.rowcount)

    def _insert_for_dialect(self) -> Any:
        dialect = self._session.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite.insert
        return postgresql.insert

    @staticmethod
    def _to_snapshot(row: DistrictData) -> DistrictSnapshot:
        last_updated = row.last_updated
        if last_updated.tzinfo is None:
            last_updated = last_updated.replace(tzinfo=timezone.utc)
        return DistrictSnapshot(
            district_name=row.district_name,
            data=list(row.data or []),
            last_updated=last_updated,
            state_name=row.state_name,
            month=row.month,
            fin_year=row.fin_year,
        )
