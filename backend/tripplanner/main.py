from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import time
import uuid
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from tripplanner.core.config import Settings
from tripplanner.core.database import Base, create_db_engine, create_session_factory
from tripplanner.core.errors import AppError
from tripplanner.api import activities, admin, auth, cities, health, recommendations, seed, shared, trips, users
from tripplanner.auth.jwt_manager import JWTManager
from tripplanner.auth.password import PasswordManager

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def error_response(request: Request, status_code: int, message: str, details: Any = None) -> JSONResponse:
    """Render the ``{"error", "details"}`` body; details only leave the server in debug mode."""
    content = {"error": message}
    if details is not None and request.app.state.settings.debug:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def validation_message(exc: RequestValidationError) -> str:
    """First validation problem as a single human-readable line."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]

    # Messages raised from our own validators are already phrased for users
    ctx_error = first.get("ctx", {}).get("error")
    if isinstance(ctx_error, ValueError):
        return str(ctx_error)

    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    msg = first.get("msg", "Invalid value")
    return f"{'.'.join(loc)}: {msg}" if loc else msg


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting Travel Planner API (%s)", app.state.settings.environment)

    # Create database tables
    Base.metadata.create_all(bind=app.state.engine)

    yield

    # Shutdown
    logger.info("Shutting down Travel Planner API")
    app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API. Fails fast when the settings are unusable (e.g. no signing secret)."""
    settings = settings or Settings()
    if settings.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    app = FastAPI(
        title="Travel Planner API",
        description="Plan multi-city trips with itineraries, activities and budgets",
        version=health.VERSION,
        lifespan=lifespan
    )

    engine = create_db_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.jwt_manager = JWTManager(settings)
    app.state.password_manager = PasswordManager(rounds=settings.bcrypt_rounds)

    # Security headers middleware
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        """Add security headers to all responses."""
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response

    # Logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests with timing."""
        start_time = time.time()
        logger.debug(
            "Request started %s %s",
            request.method,
            request.url.path,
            extra={
                "request_id": getattr(request.state, "request_id", "unknown"),
                "client_ip": request.client.host if request.client else "unknown"
            }
        )

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "%s %s -> %s (%.2f ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={"request_id": getattr(request.state, "request_id", "unknown")}
        )

        return response

    # Request ID middleware; registered last so it runs first
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Add unique request ID for tracing."""
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials="*" not in settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("Application error: %s", exc.message, exc_info=True)
        return error_response(request, exc.status_code, exc.message, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Unknown routes, wrong methods and framework-raised HTTP errors."""
        response = error_response(request, exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg")}
            for err in exc.errors()
        ]
        return error_response(request, 400, validation_message(exc), details)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(
            "Database error: %s",
            exc,
            extra={"request_id": getattr(request.state, "request_id", "unknown")},
            exc_info=True
        )
        return error_response(request, 500, "Database error", str(exc))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(
            "Unhandled exception: %s",
            exc,
            extra={
                "request_id": getattr(request.state, "request_id", "unknown"),
                "exception_type": type(exc).__name__
            },
            exc_info=True
        )
        return error_response(request, 500, "Internal server error", str(exc))

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(trips.router)
    app.include_router(shared.router)
    app.include_router(cities.router)
    app.include_router(activities.router)
    app.include_router(admin.router)
    app.include_router(recommendations.router)

    if settings.enable_seed_endpoint:
        app.include_router(seed.router)
        logger.warning("Seed endpoint enabled; POST /seed wipes reference data")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "Travel Planner API",
            "version": health.VERSION,
            "docs": "/docs",
            "health": "/healthz"
        }

    return app
