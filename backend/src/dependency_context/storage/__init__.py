"""Record storage backends (JSON file only)."""

from .base import RecordStore
from .factory import make_record_store
from .json_store import JsonFileStore

__all__ = [
    "RecordStore",
    "JsonFileStore",
    "make_record_store",
]
