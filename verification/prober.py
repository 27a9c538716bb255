"""
verification/prober.py

Lightweight reachability probe for a posting's apply link.
"""

from __future__ import annotations

import logging

import requests

from app.config import VerificationSettings, get_verification_settings
from app.domain.errors import ProbeError
from verification.base import ProbeResult, classify_status_code

logger = logging.getLogger(__name__)


class LinkProber:
    """
    HEAD first; if that attempt fails outright, one ranged GET.

    Never raises to callers. An unreachable link is HARD_FAIL.
    """

    def __init__(
        self,
        *,
        settings: VerificationSettings | None = None,
        session: requests.Session | None = None,
    ) -> None:
        resolved = settings or get_verification_settings()
        self._timeout_seconds = resolved.timeout_seconds
        self._session = session or requests.Session()
        self._headers = {"User-Agent": resolved.user_agent}

    def probe(self, url: str) -> str:
        try:
            status_code = self._head(url)
        except ProbeError as head_error:
            logger.debug("HEAD probe failed, trying ranged GET url=%s error=%s", url, head_error)
            try:
                status_code = self._ranged_get(url)
            except ProbeError as get_error:
                logger.info("Link unreachable url=%s error=%s", url, get_error)
                return ProbeResult.HARD_FAIL
        return classify_status_code(status_code)

    def _head(self, url: str) -> int:
        try:
            response = self._session.head(
                url,
                headers=self._headers,
                timeout=self._timeout_seconds,
                allow_redirects=True,
            )
        except requests.RequestException as exc:
            raise ProbeError(f"HEAD {url} failed: {exc}") from exc
        return response.status_code

    def _ranged_get(self, url: str) -> int:
        try:
            response = self._session.get(
                url,
                headers={**self._headers, "Range": "bytes=0-0"},
                timeout=self._timeout_seconds,
                allow_redirects=True,
                stream=True,
            )
        except requests.RequestException as exc:
            raise ProbeError(f"GET {url} failed: {exc}") from exc
        try:
            return response.status_code
        finally:
            response.close()
