"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from memoir.api import auth, diary, health, users
from memoir.api.errors import register_exception_handlers
from memoir.config import get_settings
from memoir.logging_config import configure_logging

settings = get_settings()

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    # Schema is managed by alembic; nothing to warm up
    yield


app = FastAPI(
    title="Memoir API",
    description="Personal diary with password and Google sign-in",
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)

# The frontend runs on its own origin in development and sends the auth cookie
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(diary.router)
app.include_router(users.router)
