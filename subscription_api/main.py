"""
FastAPI application entrypoint.

    uvicorn subscription_api.main:app --port 8080
"""
import sys
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load environment variables from .env before settings are read
load_dotenv()

from fastapi import FastAPI

from .core.config import settings, validate_config
from .core.context import build_context
from .db import init_db
from .exception_handlers import register_exception_handlers
from .middleware.logging import LoggingMiddleware
from .middleware.rate_limit import RateLimitMiddleware
from .routers import auth, health, subscription

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger("subscription_api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate config, ensure the schema and build the app context."""
    logger.info("Starting Subscription API...")
    validate_config(settings)
    init_db()

    # Tests pre-populate the context with fakes
    if getattr(app.state, "context", None) is None:
        app.state.context = build_context(settings)

    logger.info(f"Subscription API ready (ENV={settings.ENV})")
    yield
    logger.info("Subscription API shutting down")


def create_app() -> FastAPI:
    app = FastAPI(title="Subscription API", lifespan=lifespan)
    app.state.context = None

    # Last added runs first: logging wraps rate limiting
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        enabled=settings.RATE_LIMIT_ENABLED,
    )
    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(subscription.router)
    return app


app = create_app()
