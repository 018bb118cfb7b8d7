"""
Pesagem — application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `api/`, `services/`, `models/`, and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pesagem.api.v1.api import api_router
from pesagem.api.v1.endpoints.auth import limiter
from pesagem.core.config import settings
from pesagem.core.exceptions import register_exception_handlers
from pesagem.db.base import Base
from pesagem.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from pesagem.models.user import User  # noqa: F401
from pesagem.models.weight_record import WeightRecord  # noqa: F401
from pesagem.schemas.user import UserCreate
from pesagem.services.sessions import build_session_store
from pesagem.services.storage import Storage

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


async def seed_first_admin() -> None:
    """Create the configured admin account unless that CPF already exists."""
    async with async_session_factory() as session:
        storage = Storage(session)
        if await storage.get_user_by_cpf(settings.FIRST_ADMIN_CPF) is not None:
            return
        admin = await storage.create_user(
            UserCreate(
                cpf=settings.FIRST_ADMIN_CPF,
                password=settings.FIRST_ADMIN_PASSWORD,
                first_name="Usuário",
                last_name="Admin",
                is_admin=True,
            )
        )
        logger.info(
            "Default admin created: user %d, CPF %s (password: <redacted>)",
            admin.id,
            settings.FIRST_ADMIN_CPF,
        )


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    await seed_first_admin()

    logger.info("Pesagem v%s started", settings.VERSION)
    yield
    await app.state.session_store.close()
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Production weight tracking for fish-processing workers",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.state.session_store = build_session_store(settings)
    application.state.limiter = limiter

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.API_PREFIX)

    return application


app = create_app()
