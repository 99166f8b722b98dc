"""Registry for discovering and instantiating deal sources."""

from typing import Type

from pipeline_board.connectors.base import DealSource
from pipeline_board.connectors.http_api import HttpDealSource
from pipeline_board.connectors.json_file import JsonFileDealSource


class ConnectorRegistry:
    """Discovers and provides deal sources."""

    _connectors: dict[str, Type[DealSource]] = {
        "http": HttpDealSource,
        "json": JsonFileDealSource,
    }

    @classmethod
    def get(cls, source_id: str, **kwargs) -> DealSource:
        """Get a source instance by id. kwargs passed to the source __init__."""
        connector_cls = cls._connectors.get(source_id.lower())
        if not connector_cls:
            raise ValueError(f"Unknown source: {source_id}. Available: {list(cls._connectors.keys())}")
        return connector_cls(**kwargs)

    @classmethod
    def available_sources(cls) -> list[str]:
        """Return list of available source identifiers."""
        return list(cls._connectors.keys())
