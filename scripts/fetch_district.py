"""
Fetch or refresh one district's statistics from the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging

from app.domain.district import DistrictNotFoundError, DistrictValidationError
from app.services.district_service import get_district_service
from db.session import SessionLocal


def main() -> int:
    parser = argparse.ArgumentParser(description="Look up district employment statistics.")
    parser.add_argument("district", help="District name, any casing.")
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Ignore the cache and refetch from the provider.",
    )
    parser.add_argument(
        "--include-data",
        action="store_true",
        help="Print the raw provider records as well.",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    service = get_district_service()
    with SessionLocal() as db:
        try:
            if args.refresh:
                result = service.refresh_district(db=db, district_name=args.district)
            else:
                result = service.get_district(db=db, district_name=args.district)
        except (DistrictValidationError, DistrictNotFoundError) as exc:
            print(json.dumps({"message": str(exc)}, indent=2))
            return 1

    payload = {
        "district": result.district_name,
        "source": result.source,
        "lastUpdated": result.last_updated.isoformat() if result.last_updated else None,
        "summary": result.summary,
        "aiInsight": result.ai_insight,
    }
    if args.include_data:
        payload["data"] = result.data
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
