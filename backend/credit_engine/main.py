"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from credit_engine.api.v1.router import api_router
from credit_engine.config import settings
from credit_engine.core.exceptions import register_exception_handlers
from credit_engine.core.logging_config import configure_logging
from credit_engine.core.rate_limit import close_rate_limiter

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_rate_limiter()


# Create FastAPI application
app = FastAPI(
    title="Credit Decision Engine API",
    description="API for scoring credit applicants and applying configurable business rules",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API router with v1 prefix
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "message": "Credit Decision Engine API",
        "version": "1.0.0",
        "model_version": settings.MODEL_VERSION,
        "docs": "/api/docs",
    }
