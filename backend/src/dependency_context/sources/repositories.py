"""Locate the GitHub repository behind a dependency."""

from __future__ import annotations

import logging
import os
import re
from typing import Dict, List, Optional, Tuple

import requests

from ..core import Dependency, Repository

logger = logging.getLogger(__name__)

NPM_REGISTRY_URL = "https://registry.npmjs.org"
PYPI_URL = "https://pypi.org/pypi"
GITHUB_API_URL = "https://api.github.com"
REQUEST_TIMEOUT = 15

GITHUB_URL_RE = re.compile(r"github\.com[/:]([\w.-]+)/([\w.-]+)")
_VERSION_RE = re.compile(r"^\d+(\.\d+)*$")

PYPI_SOURCE_KEYS = ("Source", "Source Code", "Code", "Repository", "GitHub", "Homepage")


def parse_github_url(url: str) -> Optional[Tuple[str, str]]:
    """Extract (owner, name) from any GitHub URL form, or None."""
    if not url:
        return None
    match = GITHUB_URL_RE.search(url)
    if not match:
        return None
    name = match.group(2)
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return match.group(1), name


def pick_best_tag(tag_names: List[str], version: str) -> Optional[str]:
    """Choose the tag closest to a version.

    An exact match (``1.2.3``, ``v1.2.3`` or ``name@1.2.3``) wins; otherwise the
    numerically closest version-shaped tag, weighting major over minor over
    patch.
    """
    if not tag_names:
        return None
    for tag in tag_names:
        if tag == version or tag == f"v{version}" or tag.endswith(f"@{version}"):
            return tag

    if not _VERSION_RE.match(version or ""):
        return None
    wanted = [int(p) for p in version.split(".")]

    best: Optional[str] = None
    best_distance = float("inf")
    for tag in tag_names:
        clean = tag[1:] if tag.startswith("v") else tag
        if not _VERSION_RE.match(clean):
            continue
        parts = [int(p) for p in clean.split(".")]
        distance = 0
        for i in range(max(len(wanted), len(parts))):
            w = wanted[i] if i < len(wanted) else 0
            t = parts[i] if i < len(parts) else 0
            distance += abs(w - t) * 100 ** max(3 - i, 0)
        if distance < best_distance:
            best_distance = distance
            best = tag
    return best


class RepositoryFinder:
    """Resolve dependencies to repositories through registry and GitHub APIs."""

    def __init__(self, github_token: Optional[str] = None, timeout: int = REQUEST_TIMEOUT):
        self.github_token = github_token or os.getenv("GITHUB_TOKEN")
        self.timeout = timeout

    @property
    def github_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self.github_token:
            headers["Authorization"] = f"token {self.github_token}"
        return headers

    def _get_json(self, url: str, headers: Optional[Dict[str, str]] = None, params: Optional[Dict] = None):
        response = requests.get(url, headers=headers, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def find(self, dependency: Dependency) -> Optional[Repository]:
        try:
            if dependency.ecosystem == "npm":
                repo = self._find_npm(dependency)
            elif dependency.ecosystem == "python":
                repo = self._find_python(dependency)
            else:
                repo = None
            return repo or self._find_via_github_search(dependency)
        except requests.RequestException as e:
            logger.warning(f"Error finding repository for {dependency.name}: {e}")
            return None

    def _to_repository(self, owner: str, name: str, version: str) -> Repository:
        return Repository(
            name=name,
            owner=owner,
            url=f"https://github.com/{owner}/{name}",
            ref=self.find_best_ref(owner, name, version) or "",
        )

    def _find_npm(self, dependency: Dependency) -> Optional[Repository]:
        try:
            data = self._get_json(f"{NPM_REGISTRY_URL}/{dependency.name}")
        except requests.RequestException as e:
            logger.warning(f"npm lookup failed for {dependency.name}: {e}")
            return None

        repository = data.get("repository")
        repo_url = repository if isinstance(repository, str) else (repository or {}).get("url", "")
        parsed = parse_github_url(repo_url or "")
        if not parsed:
            return None
        return self._to_repository(parsed[0], parsed[1], dependency.version)

    def _find_python(self, dependency: Dependency) -> Optional[Repository]:
        try:
            data = self._get_json(f"{PYPI_URL}/{dependency.name}/json")
        except requests.RequestException as e:
            logger.warning(f"PyPI lookup failed for {dependency.name}: {e}")
            return None

        info = data.get("info") or {}
        project_urls = info.get("project_urls") or {}
        candidates = [project_urls.get(key) for key in PYPI_SOURCE_KEYS] + [info.get("home_page")]
        for url in candidates:
            parsed = parse_github_url(url or "")
            if parsed:
                return self._to_repository(parsed[0], parsed[1], dependency.version)
        return None

    def _find_via_github_search(self, dependency: Dependency) -> Optional[Repository]:
        data = self._get_json(
            f"{GITHUB_API_URL}/search/repositories",
            headers=self.github_headers,
            params={"q": f"{dependency.name} in:name fork:false", "sort": "stars", "order": "desc"},
        )
        items = data.get("items") or []
        if not items:
            return None
        top = items[0]
        owner = top["owner"]["login"]
        return Repository(
            name=top["name"],
            owner=owner,
            url=top.get("html_url") or f"https://github.com/{owner}/{top['name']}",
            ref=self.find_best_ref(owner, top["name"], dependency.version) or "",
        )

    def find_best_ref(self, owner: str, name: str, version: str) -> Optional[str]:
        if not version or version == "latest":
            return None
        try:
            tags = self._get_json(
                f"{GITHUB_API_URL}/repos/{owner}/{name}/tags",
                headers=self.github_headers,
                params={"per_page": 100},
            )
        except requests.RequestException as e:
            logger.warning(f"Error listing tags of {owner}/{name}: {e}")
            return None
        return pick_best_tag([t.get("name", "") for t in tags or []], version)


def find_repository(dependency: Dependency, cfg: Dict) -> Optional[Repository]:
    finder = RepositoryFinder(github_token=cfg.get("github_token"))
    return finder.find(dependency)
