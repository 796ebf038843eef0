"""Factory for creating record store instances (JSON files only)."""

from __future__ import annotations

from typing import Dict

from .base import RecordStore
from .json_store import DEFAULT_STORAGE_DIR, JsonFileStore


def make_record_store(cfg: Dict) -> RecordStore:
    storage_dir = cfg.get("storage_dir") or DEFAULT_STORAGE_DIR
    return JsonFileStore(storage_dir=storage_dir)
