"""
Import a CSV export or JSON listing document from the command line.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from app.config import get_app_settings
from app.parsers.errors import ListingStructureError
from app.repositories.property_listing_repository import PropertyListingRepository
from app.services.import_result_reporter import failed_rows
from app.services.listing_import_service import get_listing_import_service
from db.session import session_scope


def main() -> int:
    parser = argparse.ArgumentParser(description="Import property listings into the database.")
    parser.add_argument(
        "--format",
        dest="source_format",
        choices=("csv", "json"),
        required=True,
        help="Source format of the input file.",
    )
    parser.add_argument("path", type=Path, help="CSV or JSON file to import.")
    parser.add_argument(
        "--deadline",
        dest="deadline_seconds",
        type=float,
        default=None,
        help="Stop processing rows after this many seconds.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only run the structural checks; nothing is written.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, get_app_settings().log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    service = get_listing_import_service()
    raw = args.path.read_bytes()

    if args.dry_run:
        check = (
            service.validate_delimited_text(raw)
            if args.source_format == "csv"
            else service.validate_structure(raw)
        )
        print(json.dumps(asdict(check), indent=2, ensure_ascii=False))
        return 0 if check.valid else 1

    try:
        with session_scope() as db:
            repository = PropertyListingRepository(db)
            if args.source_format == "csv":
                result = service.import_from_delimited_text(
                    raw, gateway=repository, deadline_seconds=args.deadline_seconds
                )
            else:
                result = service.import_from_structured_document(
                    raw, gateway=repository, deadline_seconds=args.deadline_seconds
                )
    except ListingStructureError as exc:
        print(json.dumps(exc.to_dict(), indent=2, ensure_ascii=False), file=sys.stderr)
        return 2

    payload = {
        "source_format": result.source_format,
        "completed": result.completed,
        "summary": asdict(result.summary),
        "metadata": result.metadata,
        "failed_rows": [asdict(row) for row in failed_rows(result.rows)],
    }
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
