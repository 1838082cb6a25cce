"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import marketplace_config
from ..database import get_engine, init_db
from ..errors import MarketplaceError, ValidationFailure
from ..logging_config import configure_logging, get_logger
from .routers import favorites, locations, search
from .security import close_auth_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: initialize database on startup."""
    engine = get_engine()
    await init_db(engine)

    # Store engine in app state for routers
    search._engine = engine
    favorites._engine = engine

    yield

    await close_auth_client()
    await engine.dispose()


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed parameters are rejected with the same body as range errors."""
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"][1:]) or "request"
        details.append(f"{location}: {error['msg']}")
    failure = ValidationFailure("Invalid request parameters", details)
    return JSONResponse(status_code=failure.status_code, content=failure.to_body())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    configure_logging(
        log_level=marketplace_config.log_level,
        use_json=marketplace_config.log_json,
    )

    app = FastAPI(
        title="AgroConnect Marketplace API",
        description="Buyer product search, favorites and reference data",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Include routers
    app.include_router(search.router, prefix="/api/buyer", tags=["search"])
    app.include_router(favorites.router, prefix="/api/buyer/favorites", tags=["favorites"])
    app.include_router(locations.router, prefix="/api/locations", tags=["locations"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
