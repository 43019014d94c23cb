from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from timing_asgi import TimingMiddleware, TimingClient  # type: ignore
from timing_asgi.integrations import StarletteScopeToName  # type: ignore

from app.core import config
from app.core.database.engine import init_db
from app.core.errors import (
    AppError,
    ConfigurationError,
    ConflictError,
    ForbiddenError,
    InvalidReferenceError,
    NotFoundError,
    UnauthorizedError,
)
from app.core.rate_limit import limiter
from app.features.auth.routes import router as auth_router
from app.features.users.routes import router as user_router
from app.features.workspaces.routes import router as workspace_router
from app.features.members.routes import router as member_router
from app.features.projects.routes import router as project_router
from app.features.tasks.routes import router as task_router
from app.utils import get_logger


log = get_logger(__name__)
log.info("Initializing server")
app = FastAPI(
    title="Workspace Backend",
    description="Multi-tenant workspaces, projects and tasks with role-based membership",
    version="0.1.0",
    docs_url="/docs" if config.ENABLE_DOCS else None,
    redoc_url="/redoc" if config.ENABLE_DOCS else None,
    openapi_url="/openapi.json" if config.ENABLE_DOCS else None
)
app.state.limiter = limiter


class PrintTimings(TimingClient):
    def timing(self, metric_name, timing, tags):
        log.debug(dict(route=metric_name.removeprefix("main.app.features."), timing=timing, tags=tags))


app.add_middleware(TimingMiddleware, client=PrintTimings(), metric_namer=StarletteScopeToName("main", app))

if config.ENABLE_DOCS:
    log.warning("Docs enabled")
if config.ALLOW_ORIGIN:
    log.warning("Setting allow origin to %s", config.ALLOW_ORIGIN)
    origins = [config.ALLOW_ORIGIN]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# Most specific kinds first
ERROR_STATUS: list[tuple[type[AppError], int]] = [
    (NotFoundError, 404),
    (ForbiddenError, 403),
    (ConflictError, 409),
    (InvalidReferenceError, 400),
    (UnauthorizedError, 401),
    (ConfigurationError, 500),
]


def status_for(exc: AppError) -> int:
    for kind, status_code in ERROR_STATUS:
        if isinstance(exc, kind):
            return status_code
    return 500


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    status_code = status_for(exc)
    if isinstance(exc, ConfigurationError):
        log.error("Configuration error on %s: %s", request.url.path, exc.message)
    else:
        log.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"message": exc.message, "errorCode": exc.error_code},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    errors = dict()
    for error in exc.errors():
        if "loc" not in error or "msg" not in error:
            continue
        key = error["loc"][-1] if error["loc"] else "root"
        if key == "__root__":
            key = "root"
        errors[key] = error["msg"]
    log.info("Request validation error %s", errors)
    return JSONResponse(status_code=400, content=jsonable_encoder(errors))


@app.exception_handler(RateLimitExceeded)
def rate_limit_exceeded_handler(_request: Request, _exc: RateLimitExceeded) -> Response:
    return JSONResponse({"error": "You are going too fast"}, status_code=429)


@app.on_event("startup")
async def startup():
    """Create tables and seed roles on application startup."""
    log.info("Initializing database...")
    await init_db()
    log.info("Database initialized successfully")


@app.get("/")
async def root():
    """Root endpoint - API health check."""
    return {
        "message": "Workspace Backend API",
        "version": "0.1.0",
        "status": "online",
        "docs": "/docs" if config.ENABLE_DOCS else None,
        "authentication": {
            "info": "Protected endpoints require Bearer token in Authorization header",
            "public_endpoints": ["/auth/register", "/auth/login"],
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(user_router, prefix="/users", tags=["users"])
app.include_router(workspace_router, prefix="/workspaces", tags=["workspaces"])
app.include_router(member_router, prefix="/members", tags=["members"])

# Workspace-scoped resources
app.include_router(project_router, prefix="/workspaces/{workspace_id}/projects", tags=["projects"])
app.include_router(task_router, prefix="/workspaces/{workspace_id}", tags=["tasks"])
