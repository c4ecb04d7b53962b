from qash.config.settings import Settings
from qash.storage.base import AnalysisStore
from qash.storage.database_store import DatabaseAnalysisStore
from qash.storage.memory_store import InMemoryAnalysisStore


class AnalysisStoreFactory:
    """Creates the configured AnalysisStore from settings."""

    STORES: dict[str, type[AnalysisStore]] = {
        "memory": InMemoryAnalysisStore,
        "database": DatabaseAnalysisStore,
    }

    @classmethod
    def create(cls, settings: Settings) -> AnalysisStore:
        store_class = cls.STORES.get(settings.analysis_store)
        if store_class is None:
            raise ValueError(
                f"Unknown analysis store: {settings.analysis_store}. "
                f"Choose from: {', '.join(cls.STORES)}"
            )
        return store_class()
