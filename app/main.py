import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.assignments.router import router as assignments_router
from app.api.v1.attendance.router import router as attendance_router
from app.api.v1.behaviors.router import router as behaviors_router
from app.api.v1.classes.classes_router import router as classes_router
from app.api.v1.expectations.router import router as expectations_router
from app.api.v1.groups.router import router as groups_router
from app.api.v1.points.router import router as points_router
from app.api.v1.reward_items.router import router as reward_items_router
from app.api.v1.roster.router import router as roster_router
from app.api.v1.students.router import router as students_router
from app.core.config import get_settings
from app.core.logging_config import configure_logging
from app.db.session import Base, engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    settings = get_settings()
    if settings.auto_create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    # CORS: allow frontend to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(roster_router)
    app.include_router(classes_router)
    app.include_router(students_router)
    app.include_router(groups_router)
    app.include_router(behaviors_router)
    app.include_router(reward_items_router)
    app.include_router(points_router)
    app.include_router(attendance_router)
    app.include_router(assignments_router)
    app.include_router(expectations_router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
