import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from editcore.adapters.memory_surface import TextNotFoundError
from editcore.api.deps import get_rules, get_settings
from editcore.components.catalog import InvalidCommandValueError, UnknownCommandError
from editcore.core.ports.surface import NodeNotFoundError, SurfaceError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules on startup (fail-fast on an invalid file)
    try:
        rules = get_rules()
        logger.info("Rules %s v%s active", rules.project.slug, rules.project.rules_version)
    except (OSError, ValueError) as e:
        logger.critical("Rules load from %s failed: %s", settings.rules_path, e)
        sys.exit(1)

    yield


app = FastAPI(
    title="editcore API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from editcore.api.routes import commands, sessions  # noqa: E402

app.include_router(commands.router, prefix="/api", tags=["Commands"])
app.include_router(sessions.router, prefix="/api", tags=["Sessions"])


# --- Error Mapping ---


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": {"code": code, "message": message}})


@app.exception_handler(UnknownCommandError)
async def unknown_command_handler(request: Request, exc: UnknownCommandError) -> JSONResponse:
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return _error(404, "unknown_command", str(exc))


@app.exception_handler(InvalidCommandValueError)
async def invalid_value_handler(request: Request, exc: InvalidCommandValueError) -> JSONResponse:
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return _error(422, "invalid_value", str(exc))


@app.exception_handler(NodeNotFoundError)
async def node_not_found_handler(request: Request, exc: NodeNotFoundError) -> JSONResponse:
    return _error(404, "node_not_found", str(exc))


@app.exception_handler(TextNotFoundError)
async def text_not_found_handler(request: Request, exc: TextNotFoundError) -> JSONResponse:
    return _error(404, "text_not_found", str(exc))


@app.exception_handler(SurfaceError)
async def surface_error_handler(request: Request, exc: SurfaceError) -> JSONResponse:
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return _error(400, "surface_error", str(exc))


# CORS (Allow Frontend)
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}
