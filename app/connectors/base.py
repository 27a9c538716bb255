"""
app/connectors/base.py

Source adapter abstraction and shared feed-fetch HTTP mechanics.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

import requests

from app.config import ExternalHTTPSettings
from app.domain.errors import SourceFetchError
from app.domain.ingestion import SourceConfig
from app.domain.opportunity import Candidate

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class BaseSourceConnector(ABC):
    """
    Fetches one source's feed and normalizes it into Candidates.

    Subclasses implement `parse_payload` for one source type. A single
    malformed entry is dropped, never raised; only fetch or decode failures
    of the feed itself surface, as SourceFetchError.
    """

    source_type: str = ""

    def __init__(
        self,
        *,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout_seconds = http_settings.timeout_seconds
        self._max_retries = http_settings.max_retries
        self._backoff_initial_seconds = http_settings.backoff_initial_seconds
        self._backoff_multiplier = http_settings.backoff_multiplier
        self._headers = {
            "User-Agent": http_settings.user_agent,
            "Accept": "application/json,text/plain,*/*",
        }

    def fetch_candidates(self, source: SourceConfig) -> list[Candidate]:
        """
        Fetch the source endpoint and return every well-formed candidate.
        """

        payload = self._request_json(url=source.endpoint, source=source)
        return self.parse_payload(payload, source)

    @abstractmethod
    def parse_payload(self, payload: Any, source: SourceConfig) -> list[Candidate]:
        """
        Turn an already-decoded payload into candidates.
        """

    def _normalize_items(
        self,
        items: list[Any],
        source: SourceConfig,
    ) -> list[Candidate]:
        candidates: list[Candidate] = []
        dropped = 0
        for index, item in enumerate(items):
            if not isinstance(item, Mapping):
                dropped += 1
                continue
            try:
                candidate = self.normalize_item(item, source)
            except Exception as exc:
                dropped += 1
                logger.warning(
                    "Failed to normalize feed item source=%s index=%s error=%s",
                    source.name,
                    index,
                    exc,
                )
                continue
            if candidate is None:
                dropped += 1
                continue
            candidates.append(candidate)

        if dropped:
            logger.info(
                "Dropped malformed feed items source=%s dropped=%s kept=%s",
                source.name,
                dropped,
                len(candidates),
            )
        return candidates

    @abstractmethod
    def normalize_item(self, item: Mapping[str, Any], source: SourceConfig) -> Candidate | None:
        """
        Normalize one entry, or return None when title or company is missing.
        """

    def _request_json(self, *, url: str, source: SourceConfig) -> Any:
        response = self._request(url=url, source=source)
        try:
            return response.json()
        except ValueError as exc:
            raise SourceFetchError(f"{source.name}: response was not valid JSON.") from exc

    def _request(self, *, url: str, source: SourceConfig) -> requests.Response:
        """
        GET with a bounded timeout and exponential backoff on transient failures.
        """

        last_error: Exception | None = None
        for attempt in range(self._max_retries + 1):
            try:
                response = self._session.get(
                    url,
                    headers=self._headers,
                    timeout=self._timeout_seconds,
                )
                if response.status_code in RETRYABLE_STATUS_CODES:
                    raise requests.HTTPError(
                        f"Retryable HTTP status code: {response.status_code}",
                        response=response,
                    )
                response.raise_for_status()
                return response
            except requests.HTTPError as exc:
                last_error = exc
                status_code = exc.response.status_code if exc.response is not None else None
                if status_code not in RETRYABLE_STATUS_CODES:
                    logger.error(
                        "Source fetch failed source=%s status=%s url=%s",
                        source.name,
                        status_code,
                        url,
                    )
                    raise SourceFetchError(f"Source responded {status_code}") from exc
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc
            except requests.RequestException as exc:
                raise SourceFetchError(f"{source.name}: request failed: {exc}") from exc

            if attempt >= self._max_retries:
                break

            backoff_seconds = self._backoff_initial_seconds * (self._backoff_multiplier**attempt)
            logger.warning(
                "Source fetch retry source=%s attempt=%s/%s wait_seconds=%.2f url=%s",
                source.name,
                attempt + 1,
                self._max_retries,
                backoff_seconds,
                url,
            )
            time.sleep(backoff_seconds)

        logger.error(
            "Source fetch exhausted retries source=%s url=%s error=%s",
            source.name,
            url,
            last_error,
        )
        raise SourceFetchError(f"{source.name}: request failed after retries: {last_error}") from last_error
