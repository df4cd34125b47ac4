"""
HTTP access to outcome feeds.

The gateway fetches raw JSON records; the normalizer turns the loosely
keyed records of the known feeds into ordered ``Event`` values.
"""

from .history_source_gateway import HttpHistorySourceGateway
from .record_normalizer import normalize_record, normalize_records

__all__ = ["HttpHistorySourceGateway", "normalize_record", "normalize_records"]
