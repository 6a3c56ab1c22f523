import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Mount

from taskboard.config import get_settings
from taskboard.exceptions import NotFoundError, StorageError, ValidationError
from taskboard.mcp_server import mcp
from taskboard.models.common import HealthResponse
from taskboard.routers.todos import router as todos_router
from taskboard.store import TaskStore, get_store

logger = logging.getLogger(__name__)


# --- FastAPI app ---

api = FastAPI(title="Taskboard", version="0.1.0")
api.include_router(todos_router)


@api.get("/api/health")
def api_health(store: TaskStore = Depends(get_store)) -> HealthResponse:
    return HealthResponse(status="ok", data_file=str(get_settings().data_file), total=len(store.load()))


# --- Exception handlers ---

def _error(status_code: int, error_code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error_code": error_code, "error": message})


@api.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error(400, "validation_error", str(exc))


@api.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return _error(400, "validation_error", f"{location}: {message}" if location else message)


@api.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    return _error(404, "not_found", "Todo not found")


@api.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(500, "storage_error", "Failed to access todo storage")


# --- Starlette root app ---

mcp_app = mcp.http_app(path="/", stateless_http=True)


@asynccontextmanager
async def lifespan(app: Starlette):
    get_store().initialize()
    async with mcp_app.lifespan(app):
        yield


app = Starlette(
    middleware=[
        Middleware(
            CORSMiddleware,
            allow_origins=get_settings().cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        ),
    ],
    routes=[
        Mount("/mcp", app=mcp_app),
        Mount("/", app=api),
    ],
    lifespan=lifespan,
)


def run():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "taskboard.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
