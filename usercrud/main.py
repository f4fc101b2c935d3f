"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from usercrud import __version__
from usercrud.config import Settings, get_settings
from usercrud.database import Database
from usercrud.api import api_router
from usercrud.exceptions import (
    AuthError,
    BadRequestError,
    ConflictError,
    HashError,
    NotFoundError,
    StorageError,
    UserServiceError,
    ValidationError,
)
from usercrud.seed import seed_users

logger = logging.getLogger("usercrud")

HTTP_422_UNPROCESSABLE = 422

# ConflictError stays a 500 for compatibility with existing clients
STATUS_CODES = {
    ValidationError: HTTP_422_UNPROCESSABLE,
    ConflictError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    AuthError: status.HTTP_401_UNAUTHORIZED,
    BadRequestError: status.HTTP_400_BAD_REQUEST,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    HashError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def status_code_for(exc: UserServiceError) -> int:
    """Status of the closest mapped exception class."""
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def user_service_error_handler(request: Request, exc: UserServiceError) -> JSONResponse:
    """Convert domain exceptions to ``{"error": message}`` responses."""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(
        status_code=status_code_for(exc),
        content={"error": exc.message},
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Give framework errors (unknown route, wrong method) the same body shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report unparsable request bodies without leaking schema details."""
    logger.debug("Rejected request body: %s", exc.errors())
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE,
        content={"error": "Invalid Request Body"},
    )


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: configuration, defaults to the cached environment settings
        database: database manager, built from ``settings`` when omitted
    """
    settings = settings or get_settings()
    if database is None:
        database = Database(
            settings.database_url,
            echo=settings.database_echo,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        # Startup
        await database.connect()
        if settings.seed_on_startup:
            await seed_users(database)
        else:
            await database.create_all()
        logger.info("%s started", settings.app_name)
        yield
        # Shutdown
        await database.disconnect()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="CRUD API for users with token-protected updates",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, specify exact origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(UserServiceError, user_service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    app.include_router(api_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "app": settings.app_name}

    return app


configure_logging(get_settings())
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("usercrud.main:app", host="0.0.0.0", port=8000, reload=True)
