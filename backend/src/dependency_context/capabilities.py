"""Project-level index and search operations.

These wrap the core pipelines with dependency discovery, repository lookup
and documentation fetching, and turn every outcome into a JSON-ready dict.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Union

from .config import apply_env_vars, load_config
from .core import DependencyContextError, EmbedderCache, make_embedder
from .indexing import index_documentation
from .search import format_hit, search
from .sources import fetch_docs, find_repository, parse_dependencies
from .utils import is_valid_project_path

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, str], None]


def _noop_progress(percent: int, message: str) -> None:
    pass


def analyze_and_index(
    project_path: Union[str, Path],
    env_vars: Optional[Mapping[str, str]] = None,
    progress: Optional[ProgressCallback] = None,
    embedder_cache: Optional[EmbedderCache] = None,
) -> Dict:
    """Discover, fetch and index the documentation of every project dependency.

    One failing dependency never stops the others. The run succeeds when at
    least one dependency was indexed.

    Returns:
        {"status": "success" | "failure", "message": str}
    """
    report = progress or _noop_progress

    if not is_valid_project_path(project_path):
        return {"status": "failure", "message": f"Invalid project path: {project_path}"}

    logger.info(f"Starting dependency analysis for project at {project_path}")
    report(0, "starting")

    apply_env_vars(env_vars)
    cfg = load_config(project_path)
    if cfg.get("debug"):
        redacted = dict(cfg, github_token="***" if cfg.get("github_token") else None)
        logger.debug(f"Config: {redacted}")

    report(10, "parsing dependencies")
    dependencies = parse_dependencies(project_path)
    if not dependencies:
        return {"status": "failure", "message": "No dependencies found in project"}

    logger.info(f"Found {len(dependencies)} dependencies")
    report(20, f"found {len(dependencies)} dependencies")

    embedder = make_embedder(cfg, cache=embedder_cache)
    success_count = 0
    errors: List[str] = []
    step = 70.0 / len(dependencies)
    current = 20.0

    for dep in dependencies:
        try:
            logger.info(f"Processing dependency: {dep.name}@{dep.version}")

            repo = find_repository(dep, cfg)
            current += step / 3
            report(round(current), f"{dep.name}: repository lookup")
            if repo is None:
                errors.append(f"Could not find GitHub repository for {dep.name}@{dep.version}")
                continue

            docs = fetch_docs(repo)
            current += step / 3
            report(round(current), f"{dep.name}: fetched {len(docs)} documents")
            if not docs:
                errors.append(f"No markdown documentation found for {dep.name}")
                continue

            result = index_documentation(project_path, dep, repo, docs, cfg, embedder=embedder)
            current += step / 3
            report(round(current), f"{dep.name}: indexed {result.chunks_indexed} chunks")
            errors.extend(f"{dep.name}: {msg}" for msg in result.errors)
            if result.succeeded:
                success_count += 1
                logger.info(f"Successfully processed {dep.name}")
            else:
                errors.append(f"No chunks indexed for {dep.name}")
        except DependencyContextError as e:
            logger.warning(f"Error processing {dep.name}: {e}")
            errors.append(f"Error processing {dep.name}: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error processing {dep.name}")
            errors.append(f"Error processing {dep.name}: {e!r}")

    report(100, "done")

    error_count = len(dependencies) - success_count
    message = (
        f"Processed {len(dependencies)} dependencies. "
        f"Successfully indexed: {success_count}. Errors: {error_count}"
    )
    if errors:
        message += f". Error details: {'; '.join(errors)}"

    return {
        "status": "success" if success_count > 0 else "failure",
        "message": message,
    }


def search_dependency_docs(
    project_path: Union[str, Path],
    query: str,
    repository_context: Optional[str] = None,
    env_vars: Optional[Mapping[str, str]] = None,
    embedder_cache: Optional[EmbedderCache] = None,
) -> Dict:
    """Semantic search over a project's indexed dependency docs.

    Returns:
        {"results": [...]} or, on failure, {"results": [], "error": str}
    """
    logger.info(f"Searching for {query!r} in project at {project_path}")
    try:
        apply_env_vars(env_vars)
        cfg = load_config(project_path)
        embedder = make_embedder(cfg, cache=embedder_cache)
        results = search(project_path, query, cfg, repository_context=repository_context, embedder=embedder)
    except (DependencyContextError, ValueError) as e:
        logger.error(f"Error performing search: {e}")
        return {"results": [], "error": str(e)}

    if cfg.get("debug"):
        for r in results:
            logger.debug(format_hit(r, max_chars=200))
    logger.info(f"Found {len(results)} results for search query")
    return {"results": [r.to_dict() for r in results]}
