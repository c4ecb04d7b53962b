from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from qash import __version__
from qash.analysis.factory import AnalysisClientFactory
from qash.analysis.insights import InsightService
from qash.api.errors import register_error_handlers
from qash.api.routes import router
from qash.config.settings import Settings
from qash.logging.logger import Log
from qash.processor.processor import Processor, build_processor
from qash.reporting.email_sender import EmailSender
from qash.storage.base import AnalysisStore
from qash.storage.connection import close_pool, init_pool, is_pool_open
from qash.storage.database_store import DatabaseAnalysisStore
from qash.storage.factory import AnalysisStoreFactory


def create_app(
    settings: Settings | None = None,
    processor: Processor | None = None,
    insight_service: InsightService | None = None,
    store: AnalysisStore | None = None,
    email_sender: EmailSender | None = None,
) -> FastAPI:
    """Build the HTTP application. Collaborators not passed in are built from settings."""
    settings = settings or Settings()
    if processor is None or insight_service is None:
        client = AnalysisClientFactory.create_client(settings)
        processor = processor or build_processor(
            settings, AnalysisClientFactory.create_requester(settings, client)
        )
        insight_service = insight_service or AnalysisClientFactory.create_insight_service(
            settings, client
        )
    store = store or AnalysisStoreFactory.create(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        opened_pool = False
        if isinstance(store, DatabaseAnalysisStore) and not is_pool_open():
            init_pool(settings)
            opened_pool = True
            store.ensure_schema()
        Log.info(
            f"Qash API ready on {settings.api_host}:{settings.api_port}",
            provider=settings.analysis_provider,
            store=settings.analysis_store,
        )
        try:
            yield
        finally:
            if opened_pool:
                close_pool()

    app = FastAPI(title="Qash", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.processor = processor
    app.state.insight_service = insight_service
    app.state.store = store
    app.state.email_sender = email_sender or EmailSender(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(router)
    return app
