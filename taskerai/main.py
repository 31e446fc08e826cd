"""
Main FastAPI application entry point.
Configures the application, middleware, and routes.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session, SQLModel

from taskerai.api.routes import auth, cleanup, health, invite, notifications, users
from taskerai.core.config import settings
from taskerai.core.exceptions import TaskerError, tasker_error_handler, validation_error_handler
from taskerai.core.logging import get_logger, setup_logging
from taskerai.db.session import engine
from taskerai.models.user import UserRole
from taskerai.schemas.user import UserCreate
from taskerai.services.user_service import UserService

setup_logging()
logger = get_logger(__name__)


def bootstrap_owner(session: Session) -> None:
    """Create the first OWNER account unless one already exists."""
    if UserService.get_owner(session) is not None:
        return
    if UserService.get_by_email(session, settings.FIRST_OWNER_EMAIL) is not None:
        logger.warning(
            f"No OWNER exists but {settings.FIRST_OWNER_EMAIL} is taken; skipping owner bootstrap"
        )
        return

    owner_in = UserCreate(
        email=settings.FIRST_OWNER_EMAIL,
        password=settings.FIRST_OWNER_PASSWORD,
        first_name="System",
        last_name="Owner",
    )
    UserService.create(session, owner_in, role=UserRole.OWNER, is_verified=True, active=True)
    logger.info(f"Owner account created: {settings.FIRST_OWNER_EMAIL}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.
    Runs startup and shutdown logic.
    """
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")

    logger.info("Creating database tables...")
    SQLModel.metadata.create_all(engine)

    if not settings.DISABLE_BOOTSTRAP_OWNER:
        with Session(engine) as session:
            bootstrap_owner(session)
    else:
        logger.info("Owner bootstrapping disabled (DISABLE_BOOTSTRAP_OWNER=true)")

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS]
    or [settings.FRONTEND_BASE_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["authorization", "x-api-key", "content-type", "accept"],
)

app.add_exception_handler(TaskerError, tasker_error_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]

app.include_router(health.router, prefix=settings.API_PREFIX)
app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(users.router, prefix=settings.API_PREFIX)
app.include_router(invite.router, prefix=settings.API_PREFIX)
app.include_router(notifications.router, prefix=settings.API_PREFIX)
app.include_router(cleanup.router, prefix=settings.API_PREFIX)
