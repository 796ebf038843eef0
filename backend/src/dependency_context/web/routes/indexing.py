"""Indexing routes with SSE support."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sse_starlette.sse import EventSourceResponse

from ...capabilities import analyze_and_index
from ...config import load_config
from ...core import EmbedderCache
from ...storage import make_record_store
from ...utils import is_valid_project_path
from ..dependencies import get_embedder_cache
from ..schemas import IndexProgress, IndexRequest, IndexStartedResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/index")

# Global dict to track indexing progress, keyed by resolved project path
indexing_progress: Dict[str, Dict] = {}


def _key(project_path: str) -> str:
    return str(Path(project_path).resolve())


def index_project_task(
    project_path: str,
    env_vars: Optional[Dict[str, str]],
    embedder_cache: EmbedderCache,
) -> None:
    """Background task to index every dependency of a project."""
    key = _key(project_path)
    state = indexing_progress.setdefault(key, {"status": "indexing", "progress": 0, "step": ""})

    def on_progress(percent: int, step: str) -> None:
        state["progress"] = percent
        state["step"] = step

    try:
        result = analyze_and_index(
            project_path, env_vars=env_vars, progress=on_progress, embedder_cache=embedder_cache
        )
        if result["status"] == "success":
            store = make_record_store(load_config(project_path))
            state["records_indexed"] = store.count(project_path)
    except Exception as e:
        # Anything escaping the orchestration layer still has to end the job
        logger.exception(f"Indexing of {project_path} crashed")
        state["status"] = "error"
        state["message"] = str(e)
        return

    state["status"] = "indexed" if result["status"] == "success" else "error"
    state["message"] = result["message"]
    logger.info(f"Indexing of {project_path} finished: {result['message']}")


@router.post("", response_model=IndexStartedResponse)
async def start_indexing(
    request: IndexRequest,
    background_tasks: BackgroundTasks,
    embedder_cache: EmbedderCache = Depends(get_embedder_cache),
):
    """Start indexing all dependencies of a project."""
    if not is_valid_project_path(request.project_path):
        raise HTTPException(status_code=404, detail=f"Invalid project path: {request.project_path}")

    key = _key(request.project_path)
    current = indexing_progress.get(key)
    if current and current.get("status") == "indexing":
        raise HTTPException(status_code=400, detail="Project is already being indexed")

    indexing_progress[key] = {"status": "indexing", "progress": 0, "step": "queued"}
    logger.info(f"Starting background indexing task for {request.project_path}")
    background_tasks.add_task(index_project_task, request.project_path, request.env_vars, embedder_cache)

    return IndexStartedResponse(
        message=f"Indexing started for project '{request.project_path}'",
        project_path=request.project_path,
    )


def _snapshot(project_path: str) -> IndexProgress:
    state = indexing_progress.get(_key(project_path))
    if state is None:
        raise HTTPException(status_code=404, detail="No indexing job for this project")
    return IndexProgress(project_path=project_path, **state)


@router.get("/status", response_model=IndexProgress)
async def index_status(project_path: str):
    return _snapshot(project_path)


@router.get("/progress")
async def index_progress(project_path: str):
    """SSE endpoint for real-time indexing progress."""
    _snapshot(project_path)

    async def event_generator():
        while True:
            snapshot = _snapshot(project_path)
            yield {"event": "progress", "data": json.dumps(snapshot.model_dump())}
            if snapshot.status in ("indexed", "error"):
                break
            await asyncio.sleep(1)

    return EventSourceResponse(event_generator())
