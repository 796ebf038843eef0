"""Search routes."""

from fastapi import APIRouter, Depends

from ...capabilities import search_dependency_docs
from ...core import EmbedderCache
from ..dependencies import get_embedder_cache
from ..schemas import SearchRequest, SearchResponse

router = APIRouter()


@router.post("/search", response_model=SearchResponse)
def search(request: SearchRequest, embedder_cache: EmbedderCache = Depends(get_embedder_cache)):
    # Blocking model inference; FastAPI runs sync handlers in its threadpool
    response = search_dependency_docs(
        request.project_path,
        request.query,
        repository_context=request.repository_context,
        env_vars=request.env_vars,
        embedder_cache=embedder_cache,
    )
    return SearchResponse(**response)
