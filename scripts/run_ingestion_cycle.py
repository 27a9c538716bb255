"""
Run one ingestion cycle, or one source, from CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import uuid
from dataclasses import asdict

from app.services.ingestion_run_service import build_ingestion_service
from db.config import load_env_files
from db.session import session_scope


def main() -> int:
    parser = argparse.ArgumentParser(description="Run external posting ingestion.")
    parser.add_argument(
        "--source-id",
        dest="source_id",
        type=uuid.UUID,
        default=None,
        help="Run only this source, ignoring its re-run interval.",
    )
    args = parser.parse_args()

    load_env_files()
    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    with session_scope() as db:
        service = build_ingestion_service(db)
        if args.source_id is not None:
            result = asdict(service.run_source(args.source_id))
        else:
            result = asdict(service.run_cycle())

    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
