"""QuickClock — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from quickclock.attendance.router import router as attendance_router
from quickclock.auth.router import router as auth_router
from quickclock.common.exceptions import register_exception_handlers
from quickclock.common.rate_limit import limiter
from quickclock.config import settings
from quickclock.database import async_session_factory, check_connection
from quickclock.geofence.router import router as geofence_router
from quickclock.holidays.router import router as holidays_router
from quickclock.leave.router import router as leave_router
from quickclock.logging import configure_logging
from quickclock.manual_requests.router import router as manual_requests_router
from quickclock.notifications.router import router as notifications_router
from quickclock.reconciliation.scheduler import create_scheduler
from quickclock.reconciliation.service import run_absence_check
from quickclock.users.router import router as users_router
from quickclock.users.service import UserService

logger = logging.getLogger(__name__)


async def _bootstrap_admin() -> None:
    async with async_session_factory() as db:
        await UserService.ensure_bootstrap_admin(
            db, settings.BOOTSTRAP_ADMIN_EMAIL, settings.BOOTSTRAP_ADMIN_PASSWORD,
        )
        await db.commit()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: verify the database, seed an admin, start the scheduler."""
    configure_logging()

    # Fails fast when the database is unreachable
    await check_connection()
    logger.info("Database connection verified")

    await _bootstrap_admin()

    scheduler = None
    if settings.SCHEDULER_ENABLED:
        if settings.ABSENCE_CHECK_ON_STARTUP:
            try:
                await run_absence_check()
            except Exception:
                logger.exception("Startup absence check failed")
        scheduler = create_scheduler()
        scheduler.start()
        logger.info("Absence check scheduled: %s", settings.ABSENCE_CHECK_CRON)

    yield

    if scheduler is not None:
        scheduler.shutdown(wait=False)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="QuickClock",
        description="Employee attendance, leave and manual-correction backend",
        version="1.0.0",
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check (no auth)
    @app.get("/api/v1/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": "1.0.0",
            "environment": settings.ENVIRONMENT,
        }

    # Register routers
    app.include_router(auth_router, prefix="/api/v1/auth", tags=["auth"])
    app.include_router(users_router, prefix="/api/v1/users", tags=["users"])
    app.include_router(attendance_router, prefix="/api/v1/attendance", tags=["attendance"])
    app.include_router(geofence_router, prefix="/api/v1/geofences", tags=["geofences"])
    app.include_router(
        manual_requests_router, prefix="/api/v1/manual-requests", tags=["manual-requests"],
    )
    app.include_router(leave_router, prefix="/api/v1/leaves", tags=["leaves"])
    app.include_router(holidays_router, prefix="/api/v1/holidays", tags=["holidays"])
    app.include_router(notifications_router, prefix="/api/v1/notifications", tags=["notifications"])

    return app


app = create_app()
