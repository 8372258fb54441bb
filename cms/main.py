"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, ProgrammingError

from cms.api import auth, categories, posts, settings as settings_api, tags, users
from cms.config import get_settings
from cms.exceptions import CMSError

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info(f"Starting CMS API ({settings.environment})")
    yield


app = FastAPI(
    title="CMS API",
    description="Identity, access control and taxonomy core of the content management system",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(CMSError)
async def cms_error_handler(request: Request, exc: CMSError):
    """Render domain errors with their status code."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(OperationalError)
@app.exception_handler(ProgrammingError)
async def database_error_handler(request: Request, exc: OperationalError | ProgrammingError):
    """Store outages and missing schema are operational problems, not bugs."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc.orig}")
    message = str(exc.orig).lower()
    if "no such table" in message or "does not exist" in message:
        detail = "Database not initialized. Please run the setup first."
    else:
        detail = "Cannot connect to database. Please check your database configuration."
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": detail},
    )


# Register routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(categories.router)
app.include_router(tags.router)
app.include_router(settings_api.router)
app.include_router(posts.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
