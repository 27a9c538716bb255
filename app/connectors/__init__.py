"""
app/connectors package marker.
"""

from app.connectors.base import BaseSourceConnector
from app.connectors.job_board_connector import JobBoardConnector
from app.connectors.json_feed_connector import JSONFeedConnector
from app.connectors.registry import ConnectorRegistry
from app.connectors.workday_connector import WorkdayConnector

__all__ = [
    "BaseSourceConnector",
    "ConnectorRegistry",
    "JobBoardConnector",
    "JSONFeedConnector",
    "WorkdayConnector",
]
