"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from user_service.api import health, users
from user_service.api.errors import register_exception_handlers
from user_service.api.middleware import register_middleware
from user_service.config import get_settings
from user_service.database import engine
from user_service.logging_config import configure_logging
from user_service.services.registry import ConsulRegistry

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    registry = ConsulRegistry(settings) if settings.consul_enabled else None
    if registry is not None:
        await registry.register()
    logger.info(f"User service starting (environment: {settings.environment})")
    yield
    logger.info("User service shutting down")
    if registry is not None:
        await registry.deregister()
    engine.dispose()


app = FastAPI(
    title="User Service API",
    description="API documentation for the User Service",
    version="0.1.0",
    docs_url="/documentation",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["x-correlation-id"],
)
register_middleware(app)
register_exception_handlers(app)

# Register routers
app.include_router(health.router)
app.include_router(users.router)


def run() -> None:
    """Run the service with uvicorn."""
    uvicorn.run(
        "user_service.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
