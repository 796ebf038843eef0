from pydantic import BaseModel
from typing import Optional, List, Dict, Literal


class IndexRequest(BaseModel):
    project_path: str
    env_vars: Optional[Dict[str, str]] = None


class IndexStartedResponse(BaseModel):
    message: str
    project_path: str


class IndexProgress(BaseModel):
    project_path: str
    status: Literal["indexing", "indexed", "error"]
    progress: int = 0
    step: str = ""
    message: Optional[str] = None
    records_indexed: Optional[int] = None


class SearchRequest(BaseModel):
    project_path: str
    query: str
    repository_context: Optional[str] = None
    env_vars: Optional[Dict[str, str]] = None


class SearchResult(BaseModel):
    text_chunk: str
    source_repository: str
    source_file: str
    similarity_score: float


class SearchResponse(BaseModel):
    results: List[SearchResult]
    error: Optional[str] = None
