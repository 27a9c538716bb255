"""
Container health check for the ingestion API.

Exits 0 only when /health answers with {"status": "ok"}.
"""

from __future__ import annotations

import os

import requests


def main() -> int:
    port = os.getenv("PORT", "8000")
    path = os.getenv("HEALTHCHECK_PATH", "/health")

    try:
        response = requests.get(f"http://127.0.0.1:{port}{path}", timeout=2)
        response.raise_for_status()
        body = response.json()
    except (requests.RequestException, ValueError):
        return 1
    return 0 if body.get("status") == "ok" else 1


if __name__ == "__main__":
    raise SystemExit(main())
