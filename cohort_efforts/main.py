from fastapi import FastAPI

from cohort_efforts.api.routes.efforts import router as efforts_router
from cohort_efforts.api.routes.health import router as health_router
from cohort_efforts.core.logger import setup_logger
from cohort_efforts.core.middleware import SubmissionRateLimitMiddleware
from cohort_efforts.core.observability import init_sentry
from cohort_efforts.settings import Settings


def create_app() -> FastAPI:
    """Build the FastAPI application from environment settings."""

    settings = Settings()
    setup_logger(level=settings.log_level)
    init_sentry(settings)

    app = FastAPI(title="Cohort Effort Log")
    app.add_middleware(
        SubmissionRateLimitMiddleware,
        requests_per_window=settings.rate_limit_per_minute,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.include_router(health_router)
    app.include_router(efforts_router)
    return app


app = create_app()
