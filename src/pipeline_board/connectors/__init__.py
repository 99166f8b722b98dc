"""Deal sources: the remote system of record behind the board."""

from pipeline_board.connectors.base import DealSource, DealSourceError
from pipeline_board.connectors.registry import ConnectorRegistry

__all__ = ["ConnectorRegistry", "DealSource", "DealSourceError"]
