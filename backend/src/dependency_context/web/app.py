"""Main FastAPI application."""

from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware

from ..config import load_config
from ..utils import setup_logging
from .routes import indexing, search


def create_app() -> FastAPI:
    cfg = load_config()
    setup_logging(debug=bool(cfg.get("debug")))

    app = FastAPI(title="Dependency Documentation Server")

    # Setup CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_router = APIRouter(prefix="/api")
    api_router.include_router(indexing.router)
    api_router.include_router(search.router)

    @api_router.get("/health")
    async def health():
        return {"status": "ok"}

    app.include_router(api_router)
    return app


app = create_app()


def main() -> None:
    import uvicorn

    cfg = load_config()
    uvicorn.run(app, host="0.0.0.0", port=int(cfg["port"]))
