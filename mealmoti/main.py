"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mealmoti.api import auth, catalog, items, lists, purchases, recipes
from mealmoti.config import get_settings
from mealmoti.services.errors import MealmotiError

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info(f"Starting Mealmoti API ({settings.environment})")
    yield
    logger.info("Mealmoti API stopped")


app = FastAPI(
    title="Mealmoti API",
    description="Shared shopping lists, recipes and store catalog",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(MealmotiError)
async def domain_error_handler(request: Request, exc: MealmotiError):
    """Translate domain errors into JSON responses."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, **exc.extra},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Log unexpected errors and hide their details from clients."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


# Register routers
app.include_router(auth.router)
app.include_router(lists.router)
app.include_router(items.router)
app.include_router(purchases.router)
app.include_router(recipes.router)
app.include_router(catalog.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
