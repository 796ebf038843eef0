"""JSON file record store, one file per project."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..core.errors import InvalidInput, StorageReadFailure, StorageWriteFailure
from ..core.models import Record
from .base import PathLike, RecordStore

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_DIR = ".dependency-context"
STORE_FILENAME = "vector-store.json"

_project_locks: Dict[str, threading.Lock] = {}
_project_locks_guard = threading.Lock()


def _lock_for(store_file: Path) -> threading.Lock:
    key = str(store_file.resolve())
    with _project_locks_guard:
        lock = _project_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _project_locks[key] = lock
        return lock


class JsonFileStore(RecordStore):
    """Stores records as ``{"entries": [...]}`` under the project directory.

    Every append rewrites the whole file through a temporary file that is
    renamed into place, so a concurrent ``load`` sees either the old or the
    new content. Load-modify-write cycles on one project are serialized by
    an in-process lock.
    """

    def __init__(self, storage_dir: str = DEFAULT_STORAGE_DIR, filename: str = STORE_FILENAME):
        self.storage_dir = storage_dir
        self.filename = filename

    def store_path(self, project_path: PathLike) -> Path:
        return Path(project_path) / self.storage_dir / self.filename

    def exists(self, project_path: PathLike) -> bool:
        return self.store_path(project_path).is_file()

    def load(self, project_path: PathLike) -> List[Record]:
        return self._read(self.store_path(project_path))

    def append(self, project_path: PathLike, records: Sequence[Record]) -> None:
        path = self.store_path(project_path)
        with _lock_for(path):
            existing = self._read(path)
            combined = existing + list(records)
            self._check_dimensions(combined)
            self._write(path, combined)
        logger.info(
            f"Appended {len(records)} records to {path} ({len(combined)} total)"
        )

    def replace_dependency(
        self, project_path: PathLike, dependency_name: str, records: Sequence[Record]
    ) -> None:
        path = self.store_path(project_path)
        with _lock_for(path):
            existing = self._read(path)
            kept = [r for r in existing if r.metadata.dependency_name != dependency_name]
            combined = kept + list(records)
            self._check_dimensions(combined)
            self._write(path, combined)
        logger.info(
            f"Replaced {len(existing) - len(kept)} records of {dependency_name} "
            f"with {len(records)} new ones in {path}"
        )

    def clear(self, project_path: PathLike) -> None:
        path = self.store_path(project_path)
        with _lock_for(path):
            try:
                path.unlink()
            except FileNotFoundError:
                return
            except OSError as e:
                raise StorageWriteFailure(f"Could not remove store {path}: {e}") from e

    @staticmethod
    def _check_dimensions(records: List[Record]) -> None:
        if not records:
            return
        dim = len(records[0].embedding)
        for i, record in enumerate(records):
            if len(record.embedding) != dim:
                raise InvalidInput(
                    f"Record {i} from {record.metadata.file_path} has embedding dimension "
                    f"{len(record.embedding)}, expected {dim}. Clear the store and re-index."
                )

    @staticmethod
    def _read(path: Path) -> List[Record]:
        if not path.is_file():
            return []
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageReadFailure(f"Could not read store {path}: {e}") from e

        entries = data.get("entries") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise StorageReadFailure(f"Store {path} has no 'entries' array")
        try:
            return [Record.from_dict(entry) for entry in entries]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise StorageReadFailure(f"Malformed entry in store {path}: {e}") from e

    @staticmethod
    def _write(path: Path, records: List[Record]) -> None:
        payload = {"entries": [r.to_dict() for r in records]}
        tmp_name: Optional[str] = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=path.name + ".",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(payload, f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageWriteFailure(f"Could not write store {path}: {e}") from e
