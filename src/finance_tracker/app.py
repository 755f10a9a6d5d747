from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from finance_tracker.api.routes import categories, dashboard, data, preferences, transactions, validation
from finance_tracker.core import settings
from finance_tracker.domain.search import use_system_collation
from finance_tracker.logger import get_logger, setup_logging
from finance_tracker.services.persistence import create_storage
from finance_tracker.state import FinanceState

logger = get_logger(__name__)


def create_app() -> FastAPI:
    setup_logging()
    use_system_collation()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing state...")
        settings.log_environment()

        if getattr(app.state, "finance", None) is None:
            state = FinanceState(storage=create_storage(), default_sort=settings.DEFAULT_SORT)
            state.initialize()
            app.state.finance = state

        logger.info("State initialized.")
        yield
        logger.info("Service shutting down.")

    app = FastAPI(title="Finance Tracker", lifespan=lifespan)

    app.include_router(transactions.router)
    app.include_router(validation.router)
    app.include_router(categories.router)
    app.include_router(preferences.router)
    app.include_router(dashboard.router)
    app.include_router(data.router)

    return app


app = create_app()
