import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from agent_dashboard_service.config import settings
from agent_dashboard_service.constants import (
    DATABASE_ERROR,
    INTERNAL_SERVER_ERROR,
    INVALID_JSON,
    INVALID_REFERENCE,
    RESOURCE_ALREADY_EXISTS,
    RESOURCE_NOT_FOUND,
    VALIDATION_FAILED,
)
from agent_dashboard_service.db import dispose_engine
from agent_dashboard_service.dependencies import get_token_payload
from agent_dashboard_service.logging_config import setup_logging, setup_middleware
from agent_dashboard_service.middleware import (
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
)
from agent_dashboard_service.rate_limiting import setup_rate_limiting
from agent_dashboard_service.routers import (
    agent_router,
    health_router,
    mcp_router,
    model_router,
    prompt_label_router,
    prompt_router,
    prompt_version_router,
    tool_router,
)
from agent_dashboard_service.schemas.common import error_body, format_validation_errors
from agent_dashboard_service.services.mcp_service import get_mcp_service

# Postgres SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle manager.

    Starts the MCP connection health checks and, on shutdown, closes MCP
    clients and the database engine.
    """
    app.logger.info(f"'{settings.PROJECT_NAME}' startup sequence initiated.")
    app.state.startup_time = time.time()

    mcp_service = get_mcp_service()
    mcp_service.start_health_checks()

    app.logger.info(f"'{settings.PROJECT_NAME}' startup complete.")

    yield

    # --- Application Shutdown ---
    app.logger.info(f"'{settings.PROJECT_NAME}' shutdown sequence initiated.")
    await mcp_service.shutdown()
    await dispose_engine()
    app.logger.info(f"'{settings.PROJECT_NAME}' shutdown complete.")


# Configure logging before app initialization
setup_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    description=(
        "Admin API for AI agents and the models, prompts, prompt labels, "
        "tools and MCP servers they are built from."
    ),
    version="1.0.0",
    root_path=settings.ROOT_PATH,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Agents", "description": "Agent configuration and hierarchy"},
        {"name": "Models", "description": "Language models by provider"},
        {"name": "Prompts", "description": "Prompts and their version history"},
        {"name": "Prompt Versions", "description": "Adding versions and moving labels"},
        {"name": "Prompt Labels", "description": "Tenant-scoped version labels"},
        {"name": "Tools", "description": "Locally registered tools"},
        {"name": "MCPs", "description": "MCP servers and live tool discovery"},
        {"name": "Health", "description": "Service health"},
    ],
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.logger = logging.getLogger(settings.SERVICE_NAME)

# Middleware added last runs first: security headers wrap everything
setup_rate_limiting(app)
setup_middleware(app)
app.add_middleware(RequestSizeLimitMiddleware, max_body_size=settings.MAX_REQUEST_BODY_SIZE)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SecurityHeadersMiddleware)


# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    content = exc.detail if isinstance(exc.detail, dict) else error_body(str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        return JSONResponse(status_code=400, content=error_body(INVALID_JSON))
    return JSONResponse(
        status_code=400,
        content=error_body(VALIDATION_FAILED, format_validation_errors(errors)),
    )


def _integrity_error_kind(exc: IntegrityError) -> str:
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if sqlstate == UNIQUE_VIOLATION:
        return "unique"
    if sqlstate == FOREIGN_KEY_VIOLATION:
        return "foreign_key"

    message = str(exc.orig).lower()
    if "unique" in message or "duplicate" in message:
        return "unique"
    if "foreign key" in message:
        return "foreign_key"
    return "other"


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    kind = _integrity_error_kind(exc)
    app.logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    if kind == "unique":
        return JSONResponse(status_code=409, content=error_body(RESOURCE_ALREADY_EXISTS))
    if kind == "foreign_key":
        return JSONResponse(status_code=422, content=error_body(INVALID_REFERENCE))
    return JSONResponse(status_code=500, content=error_body(DATABASE_ERROR))


@app.exception_handler(NoResultFound)
async def no_result_found_handler(request: Request, exc: NoResultFound):
    return JSONResponse(status_code=404, content=error_body(RESOURCE_NOT_FOUND))


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
    app.logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content=error_body(DATABASE_ERROR))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    app.logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content=error_body(INTERNAL_SERVER_ERROR))


# --- Include API routers, protected when AUTH_ENABLED ---
protected = [Depends(get_token_payload)]

app.include_router(agent_router, prefix="/api/agents", tags=["Agents"], dependencies=protected)
app.include_router(model_router, prefix="/api/models", tags=["Models"], dependencies=protected)
app.include_router(prompt_router, prefix="/api/prompts", tags=["Prompts"], dependencies=protected)
app.include_router(
    prompt_version_router,
    prefix="/api/prompt-versions",
    tags=["Prompt Versions"],
    dependencies=protected,
)
app.include_router(
    prompt_label_router,
    prefix="/api/prompt-labels",
    tags=["Prompt Labels"],
    dependencies=protected,
)
app.include_router(tool_router, prefix="/api/tools", tags=["Tools"], dependencies=protected)
app.include_router(mcp_router, prefix="/api/mcps", tags=["MCPs"], dependencies=protected)
app.include_router(health_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint returning a welcome message."""
    return {"message": f"Welcome to the {settings.PROJECT_NAME} API"}
