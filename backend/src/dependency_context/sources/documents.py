"""Collect Markdown documentation from a repository checkout."""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from ..core import Document, Repository
from ..utils import is_binary_file, relative_doc_path

logger = logging.getLogger(__name__)

SKIP_DIRS = {"node_modules", ".git", "dist", "build", "__pycache__"}
DOC_EXTENSIONS = {".md"}
CLONE_TIMEOUT = 300


def collect_documents(root: Union[str, Path]) -> List[Document]:
    """Find all non-empty Markdown files under root, in a stable order."""
    root = Path(root)
    documents: List[Document] = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
        for fname in sorted(filenames):
            if Path(fname).suffix.lower() not in DOC_EXTENSIONS:
                continue
            fp = Path(dirpath) / fname
            if is_binary_file(fp):
                continue
            try:
                content = fp.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.warning(f"Skipping unreadable file {fp}: {e}")
                continue
            if not content.strip():
                continue
            documents.append(
                Document(content=content, path=relative_doc_path(fp, root), filename=fname)
            )

    return documents


def _clone_args(repository: Repository, target: Path) -> List[str]:
    args = ["git", "clone", "--depth", "1", "--single-branch"]
    if repository.ref:
        args += ["--branch", repository.ref]
    return args + [f"https://github.com/{repository.owner}/{repository.name}.git", str(target)]


def fetch_docs(repository: Repository, timeout: Optional[int] = CLONE_TIMEOUT) -> List[Document]:
    """Shallow-clone a repository into a temp dir and collect its docs.

    Failures are logged and yield an empty list.
    """
    with tempfile.TemporaryDirectory(prefix=f"dependency-context-{repository.owner}-{repository.name}-") as tmp:
        target = Path(tmp) / "repo"
        cmd = _clone_args(repository, target)
        logger.info(f"Cloning {repository.owner}/{repository.name} ({repository.ref or 'default branch'})")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout, check=False)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"Error cloning {repository.owner}/{repository.name}: {e}")
            return []

        if result.returncode != 0:
            logger.warning(
                f"Git clone of {repository.owner}/{repository.name} failed "
                f"(exit {result.returncode}): {result.stderr.strip()}"
            )
            return []

        return collect_documents(target)
