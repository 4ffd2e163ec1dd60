"""
FastAPI application entry point for the NomNomNow backend.

This module creates the FastAPI app instance and registers all routers.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nomnom.auth.dependencies import get_authenticated_user
from nomnom.config import settings
from nomnom.routes.friends import router as friends_router
from nomnom.routes.health import router as health_router
from nomnom.routes.picker import router as picker_router
from nomnom.routes.profile import router as profile_router
from nomnom.routes.restaurants import router as restaurants_router
from nomnom.routes.users import router as users_router

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: Uses CORS_ALLOWED_ORIGINS (none allowed if unset)
    - ENVIRONMENT=testing/development: Allows all origins for local dev

    Returns:
        List of allowed origin URLs, or ["*"] for development.
    """
    if settings.is_production():
        origins = settings.CORS_ALLOWED_ORIGINS
        if origins:
            logger.info(f"CORS configured for production with {len(origins)} allowed origins")
        else:
            logger.warning(
                "CORS_ALLOWED_ORIGINS not set in production. "
                "No web origins allowed. Set CORS_ALLOWED_ORIGINS for the web client."
            )
        return origins

    logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
    return ["*"]


def _format_validation_errors(exc: RequestValidationError) -> str:
    """Turn pydantic errors into one readable line, e.g. "messages: Field required"."""
    parts = []
    for error in exc.errors():
        loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path", "header")]
        field = ".".join(loc) or "request"
        parts.append(f"{field}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts) or "Invalid request"


# Create FastAPI app
app = FastAPI(
    title="NomNomNow API",
    description="Backend service for NomNomNow, the saved-restaurant picker",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


def _requires_auth(request: Request) -> bool:
    """True when the matched route depends on get_authenticated_user."""
    dependant = getattr(request.scope.get("route"), "dependant", None)
    if dependant is None:
        return False
    return any(dep.call is get_authenticated_user for dep in dependant.dependencies)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Report malformed requests as 400 with a field-level message.

    FastAPI parses the body before resolving dependencies, so protected
    routes verify the caller here first: an unauthenticated request gets
    401 whatever its body looks like.
    """
    # An override replaces token verification entirely
    if _requires_auth(request) and get_authenticated_user not in app.dependency_overrides:
        try:
            await get_authenticated_user(request.headers.get("Authorization"))
        except HTTPException as auth_error:
            return await http_exception_handler(request, auth_error)

    logger.warning(
        f"Validation error on {request.method} {request.url.path}: {exc.errors()}"
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "validation_error",
            "details": _format_validation_errors(exc),
        }
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Return {"error", "details"} at the top level of error bodies.

    Routes raise HTTPException(detail={"error": ..., "details": ...});
    plain string details are wrapped the same way.
    """
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": "http_error", "details": exc.detail}

    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


# Configure CORS with environment-based origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router)
app.include_router(profile_router)
app.include_router(restaurants_router)
app.include_router(friends_router)
app.include_router(users_router)
app.include_router(picker_router)

logger.info("FastAPI app initialized successfully")
