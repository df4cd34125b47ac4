"""Contract for reading the event history of an outcome feed."""

from .history_source_gateway import IHistorySourceGateway

__all__ = ["IHistorySourceGateway"]
