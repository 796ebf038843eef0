"""File utility functions."""

from __future__ import annotations

from pathlib import Path
from typing import Union


def is_binary_file(path: Path) -> bool:
    """Check if file is binary by looking for null bytes."""
    try:
        with path.open("rb") as f:
            sample = f.read(2048)
        return b"\x00" in sample
    except OSError:
        return True


def is_valid_project_path(path: Union[str, Path, None]) -> bool:
    """A project path must name an existing directory."""
    if not path:
        return False
    return Path(path).is_dir()


def relative_doc_path(file_path: Path, root: Path) -> str:
    """Repository-relative POSIX path with a leading slash, e.g. ``/docs/guide.md``."""
    return "/" + file_path.relative_to(root).as_posix()
