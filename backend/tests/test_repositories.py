"""Tests for resolving dependencies to GitHub repositories."""

from unittest.mock import Mock, patch

import pytest
import requests

from dependency_context.core import Dependency, Repository
from dependency_context.sources import RepositoryFinder, find_repository, parse_github_url, pick_best_tag


def fake_get(routes):
    """Build a requests.get stand-in that serves JSON by URL."""

    def _get(url, headers=None, params=None, timeout=None):
        if url not in routes:
            response = Mock()
            response.raise_for_status.side_effect = requests.HTTPError(f"404 for {url}")
            return response
        payload = routes[url]
        if isinstance(payload, Exception):
            raise payload
        response = Mock()
        response.json.return_value = payload
        response.raise_for_status.return_value = None
        return response

    return _get


class TestParseGithubUrl:

    @pytest.mark.parametrize("url", [
        "https://github.com/expressjs/express",
        "git+https://github.com/expressjs/express.git",
        "git@github.com:expressjs/express.git",
        "https://github.com/expressjs/express/tree/master/docs",
    ])
    def test_forms(self, url):
        assert parse_github_url(url) == ("expressjs", "express")

    @pytest.mark.parametrize("url", ["", "https://gitlab.com/a/b", "not a url"])
    def test_non_github(self, url):
        assert parse_github_url(url) is None


class TestPickBestTag:

    def test_exact_matches(self):
        assert pick_best_tag(["1.0.0", "2.0.0"], "2.0.0") == "2.0.0"
        assert pick_best_tag(["v1.0.0", "v2.0.0"], "2.0.0") == "v2.0.0"
        assert pick_best_tag(["express@4.18.2", "express@4.18.1"], "4.18.2") == "express@4.18.2"

    def test_closest_version(self):
        assert pick_best_tag(["v1.0.0", "v2.0.0", "v3.0.0"], "2.0.5") == "v2.0.0"

    def test_major_outweighs_minor(self):
        assert pick_best_tag(["v1.9.0", "v2.0.0"], "2.3.0") == "v2.0.0"

    def test_no_tags_or_unparseable(self):
        assert pick_best_tag([], "1.0.0") is None
        assert pick_best_tag(["release-a", "nightly"], "1.0.0") is None
        assert pick_best_tag(["v1.0.0"], "latest") is None


class TestRepositoryFinder:

    def test_npm_package_with_version(self):
        routes = {
            "https://registry.npmjs.org/express": {
                "repository": {"type": "git", "url": "git+https://github.com/expressjs/express.git"}
            },
            "https://api.github.com/repos/expressjs/express/tags": [
                {"name": "4.18.1"}, {"name": "4.18.2"}, {"name": "5.0.0"},
            ],
        }
        with patch("dependency_context.sources.repositories.requests.get", side_effect=fake_get(routes)):
            repo = RepositoryFinder().find(Dependency("express", "4.18.2", "npm"))

        assert repo == Repository(
            name="express", owner="expressjs", url="https://github.com/expressjs/express", ref="4.18.2"
        )

    def test_latest_uses_default_branch(self):
        routes = {"https://registry.npmjs.org/lodash": {"repository": "https://github.com/lodash/lodash"}}
        with patch("dependency_context.sources.repositories.requests.get", side_effect=fake_get(routes)) as get:
            repo = RepositoryFinder().find(Dependency("lodash", "latest", "npm"))

        assert repo.ref == ""
        assert get.call_count == 1

    def test_python_package_from_project_urls(self):
        routes = {
            "https://pypi.org/pypi/flask/json": {
                "info": {"project_urls": {"Source": "https://github.com/pallets/flask/"}, "home_page": None}
            },
        }
        with patch("dependency_context.sources.repositories.requests.get", side_effect=fake_get(routes)):
            repo = RepositoryFinder().find(Dependency("flask", "latest", "python"))

        assert (repo.owner, repo.name) == ("pallets", "flask")

    def test_falls_back_to_github_search(self):
        routes = {
            "https://registry.npmjs.org/obscure": {"repository": "https://gitlab.com/x/obscure"},
            "https://api.github.com/search/repositories": {
                "items": [{"name": "obscure", "owner": {"login": "someone"},
                           "html_url": "https://github.com/someone/obscure"}]
            },
        }
        with patch("dependency_context.sources.repositories.requests.get", side_effect=fake_get(routes)):
            repo = RepositoryFinder().find(Dependency("obscure", "latest", "npm"))

        assert repo.url == "https://github.com/someone/obscure"

    def test_nothing_found(self):
        routes = {"https://api.github.com/search/repositories": {"items": []}}
        with patch("dependency_context.sources.repositories.requests.get", side_effect=fake_get(routes)):
            assert RepositoryFinder().find(Dependency("ghost", "latest", "npm")) is None

    def test_network_errors_yield_none(self):
        def boom(*args, **kwargs):
            raise requests.ConnectionError("offline")

        with patch("dependency_context.sources.repositories.requests.get", side_effect=boom):
            assert RepositoryFinder().find(Dependency("express", "4.18.2", "npm")) is None

    def test_token_is_sent_to_github(self):
        captured = {}

        def _get(url, headers=None, params=None, timeout=None):
            captured[url] = headers
            response = Mock()
            response.json.return_value = {"items": []}
            return response

        with patch("dependency_context.sources.repositories.requests.get", side_effect=_get):
            find_repository(Dependency("ghost", "latest", "other"), {"github_token": "ghp_secret"})

        assert captured["https://api.github.com/search/repositories"]["Authorization"] == "token ghp_secret"
