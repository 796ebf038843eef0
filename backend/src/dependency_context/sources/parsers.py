"""Dependency discovery from project manifest files."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Dict, List, Union

from ..core import Dependency

logger = logging.getLogger(__name__)

CUSTOM_DEPENDENCY_FILE = "dependency-context.json"

_REQ_PINNED_RE = re.compile(r"^([\w.-]+)\s*(?:\[[^\]]*\])?\s*(?:[=<>~!]=+|[<>])\s*([\w.-]+)")
_REQ_NAME_RE = re.compile(r"^([\w.-]+)")


def _clean_npm_version(version) -> str:
    return re.sub(r"[^0-9.]", "", str(version))


def parse_dependencies(project_path: Union[str, Path]) -> List[Dependency]:
    """Find the project's dependencies.

    The first manifest found wins, in this order: dependency-context.json,
    package.json, requirements.txt.
    """
    root = Path(project_path)

    custom = root / CUSTOM_DEPENDENCY_FILE
    if custom.is_file():
        return parse_dependency_context_json(custom)

    package_json = root / "package.json"
    if package_json.is_file():
        return parse_package_json(package_json)

    requirements = root / "requirements.txt"
    if requirements.is_file():
        return parse_requirements_txt(requirements)

    return []


def _read_json(path: Path) -> Dict:
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object in {path.name}")
    return data


def parse_dependency_context_json(path: Path) -> List[Dependency]:
    try:
        content = _read_json(path)
    except (OSError, ValueError) as e:
        logger.error(f"Error parsing {path}: {e}")
        return []
    return [Dependency(name, _clean_npm_version(version), "npm") for name, version in content.items()]


def parse_package_json(path: Path) -> List[Dependency]:
    try:
        content = _read_json(path)
    except (OSError, ValueError) as e:
        logger.error(f"Error parsing {path}: {e}")
        return []

    deps: List[Dependency] = []
    for section in ("dependencies", "devDependencies"):
        for name, version in (content.get(section) or {}).items():
            deps.append(Dependency(name, _clean_npm_version(version), "npm"))
    return deps


def parse_requirements_txt(path: Path) -> List[Dependency]:
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        logger.error(f"Error parsing {path}: {e}")
        return []

    deps: List[Dependency] = []
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#") or line.startswith("-"):
            continue

        pinned = _REQ_PINNED_RE.match(line)
        if pinned:
            deps.append(Dependency(pinned.group(1), pinned.group(2), "python"))
            continue

        bare = _REQ_NAME_RE.match(line)
        if bare:
            deps.append(Dependency(bare.group(1), "latest", "python"))
    return deps
