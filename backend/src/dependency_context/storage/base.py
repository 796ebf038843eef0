"""Abstract record storage interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..core.models import Record

PathLike = Union[str, Path]


class RecordStore(ABC):
    """Abstract base class for per-project record storage backends."""

    @abstractmethod
    def load(self, project_path: PathLike) -> List[Record]:
        """Load every record for the project. Empty when nothing is stored yet."""
        pass

    @abstractmethod
    def append(self, project_path: PathLike, records: Sequence[Record]) -> None:
        """Append records to the project's store."""
        pass

    @abstractmethod
    def exists(self, project_path: PathLike) -> bool:
        """Check if a store has been created for the project."""
        pass

    @abstractmethod
    def clear(self, project_path: PathLike) -> None:
        """Remove the project's store entirely."""
        pass

    @abstractmethod
    def replace_dependency(
        self, project_path: PathLike, dependency_name: str, records: Sequence[Record]
    ) -> None:
        """Swap all records of one dependency for new ones in a single write."""
        pass

    def count(self, project_path: PathLike, dependency_name: Optional[str] = None) -> int:
        """Count records in the store (default implementation)."""
        records = self.load(project_path)
        if dependency_name is None:
            return len(records)
        return sum(1 for r in records if r.metadata.dependency_name == dependency_name)
