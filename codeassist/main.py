from contextlib import asynccontextmanager
import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi import HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from loguru import logger

from codeassist.api.v1.router import api_router
from codeassist.core.config import REPO_ROOT, settings
from codeassist.core.context import AppContext, build_context
from codeassist.core.errors import register_error_handlers
from codeassist.core.logging import configure_logging
from codeassist.core.providers import get_provider_registry

configure_logging(settings.LOG_LEVEL, serialize=settings.LOG_JSON)


@asynccontextmanager
async def lifespan(app: FastAPI):
    registry = get_provider_registry()
    logger.info('app.startup', model=app.state.context.gateway.model_id, models=registry.model_ids())
    yield
    logger.info('app.shutdown')


def _get_frontend_dist() -> Path:
    env_path = os.getenv("FRONTEND_DIST")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return REPO_ROOT / "dist"


def _mount_frontend(app: FastAPI, frontend_dist: Path) -> None:
    index_file = frontend_dist / "index.html"
    if not (frontend_dist.exists() and index_file.exists()):
        return

    @app.get("/", include_in_schema=False)
    def serve_frontend_index():
        return FileResponse(index_file)

    @app.get("/{full_path:path}", include_in_schema=False)
    def serve_frontend_assets(full_path: str):
        if full_path.startswith("api/"):
            raise HTTPException(status_code=404)
        candidate = (frontend_dist / full_path).resolve()
        if candidate.is_file() and candidate.is_relative_to(frontend_dist):
            return FileResponse(candidate)
        return FileResponse(index_file)


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG, lifespan=lifespan)
    app.state.context = context or build_context(settings)

    allow_origins = settings.CORS_ORIGINS
    allow_credentials = '*' not in allow_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_error_handlers(app)
    app.include_router(api_router)
    _mount_frontend(app, _get_frontend_dist())
    return app


app = create_app()
