"""
Run one link verification pass from CLI.
"""

from __future__ import annotations

import json
import logging
import os

from db.config import load_env_files
from db.session import session_scope
from verification.orchestrator import build_verification_orchestrator


def main() -> int:
    load_env_files()
    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    with session_scope() as db:
        summary = build_verification_orchestrator(db).run()

    print(json.dumps(summary.as_dict(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
