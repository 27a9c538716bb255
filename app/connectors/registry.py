"""
Source adapter registry keyed by the source's configured type tag.
"""

from __future__ import annotations

from collections.abc import Mapping

import requests

from app.config import ExternalHTTPSettings
from app.connectors.base import BaseSourceConnector
from app.connectors.job_board_connector import JobBoardConnector
from app.connectors.json_feed_connector import JSONFeedConnector
from app.connectors.workday_connector import WorkdayConnector
from app.domain.errors import SourceFetchError
from db.models.ingestion_source import IngestionSourceType


class ConnectorRegistry:
    """
    Builds one connector per source type and reuses it across sources.
    """

    def __init__(
        self,
        *,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
        registrations: Mapping[str, type[BaseSourceConnector]] | None = None,
    ) -> None:
        builtins: dict[str, type[BaseSourceConnector]] = {
            IngestionSourceType.JSON_FEED: JSONFeedConnector,
            IngestionSourceType.WORKDAY: WorkdayConnector,
            IngestionSourceType.CUSTOM: JobBoardConnector,
        }
        if registrations:
            builtins.update(registrations)
        self._registrations = builtins
        self._http_settings = http_settings
        self._session = session or requests.Session()
        self._instances: dict[str, BaseSourceConnector] = {}

    def register(self, *, source_type: str, connector_class: type[BaseSourceConnector]) -> None:
        key = source_type.strip().upper()
        self._registrations[key] = connector_class
        self._instances.pop(key, None)

    def get(self, source_type: str) -> BaseSourceConnector:
        key = (source_type or "").strip().upper()
        connector = self._instances.get(key)
        if connector is not None:
            return connector

        connector_class = self._registrations.get(key)
        if connector_class is None:
            allowed = ", ".join(sorted(self._registrations.keys()))
            raise SourceFetchError(
                f"Source type {source_type} parser is not implemented. Allowed types: {allowed}."
            )
        connector = connector_class(http_settings=self._http_settings, session=self._session)
        self._instances[key] = connector
        return connector
