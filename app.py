"""Main FastAPI application entry point for the quotes API."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import Settings, settings as default_settings
from config.logging_utils import log_error
from api.routers.auth import router as auth_router
from api.routers.favorites import router as favorites_router
from api.routers.quotes import router as quotes_router
from services.container import Services, build_services
from services.errors import ServiceError, UnauthenticatedError

logger = logging.getLogger(__name__)


ENDPOINTS = {
    "getAllQuotes": "GET /api/quotes",
    "getRandomQuote": "GET /api/quotes/random",
    "getQuoteById": "GET /api/quotes/:id",
    "getQuotesByCategory": "GET /api/quotes/category/:category",
    "healthCheck": "GET /api/health",
    "databaseStats": "GET /api/stats",
    "register": "POST /api/auth/register",
    "login": "POST /api/auth/login",
    "logout": "POST /api/auth/logout",
    "verifyToken": "GET /api/auth/verify",
    "getProfile": "GET /api/auth/profile",
    "updateProfile": "PUT /api/auth/profile",
    "deleteProfile": "DELETE /api/auth/profile",
    "getFavorites": "GET /api/favorites",
    "addToFavorites": "POST /api/favorites/:quoteId",
    "removeFromFavorites": "DELETE /api/favorites/:quoteId",
    "checkFavorite": "GET /api/favorites/check/:quoteId",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    services: Services = app.state.services
    await services.startup()
    yield
    await services.shutdown()


def _error_response(status_code: int, message: str, headers: Optional[dict] = None, **extra) -> JSONResponse:
    body = {"success": False, "message": message}
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Map exceptions to the JSON error envelope."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
        logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
        return _error_response(exc.status_code, exc.message, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = []
        for error in exc.errors():
            field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            errors.append({"field": field, "message": error.get("msg", "Invalid value")})
        first = errors[0] if errors else {"field": "", "message": "Invalid request"}
        message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]
        return _error_response(400, message, errors=errors)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return _error_response(exc.status_code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        log_error(f"{request.method} {request.url.path} failed: {exc}", prefix="API")
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        extra = {"error": str(exc)} if settings.is_development else {}
        return _error_response(500, "Something went wrong!", **extra)


def create_app(settings: Optional[Settings] = None, services: Optional[Services] = None) -> FastAPI:
    """Build the application with explicitly wired services."""
    settings = settings or default_settings
    services = services or build_services(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Motivational quotes with user accounts and favorites",
        lifespan=lifespan
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, settings)

    app.include_router(auth_router)
    app.include_router(favorites_router)
    app.include_router(quotes_router)

    @app.get("/")
    async def api_info():
        """API information endpoint."""
        db_healthy = await services.database.health_check()
        return {
            "message": f"Welcome to the {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "database": "connected" if db_healthy else "disconnected",
            "endpoints": ENDPOINTS,
        }

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        db_healthy = await services.database.health_check()
        body = {
            "success": db_healthy,
            "database": services.database.backend_name,
            "status": "connected" if db_healthy else "disconnected",
        }
        return JSONResponse(status_code=200 if db_healthy else 503, content=body)

    @app.get("/api/stats")
    async def database_stats():
        """Document counts per collection."""
        return {
            "success": True,
            "database": services.database.backend_name,
            "collections": await services.collection_counts(),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG
    )
