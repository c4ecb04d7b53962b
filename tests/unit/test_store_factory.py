import pytest

from qash.config.settings import Settings
from qash.storage.database_store import DatabaseAnalysisStore
from qash.storage.factory import AnalysisStoreFactory
from qash.storage.memory_store import InMemoryAnalysisStore


class TestAnalysisStoreFactory:
    def test_memory_is_default(self) -> None:
        assert isinstance(AnalysisStoreFactory.create(Settings(_env_file=None)), InMemoryAnalysisStore)

    def test_database(self) -> None:
        settings = Settings(_env_file=None, analysis_store="database")
        assert isinstance(AnalysisStoreFactory.create(settings), DatabaseAnalysisStore)

    def test_unknown_store(self) -> None:
        with pytest.raises(ValueError, match="Unknown analysis store: redis"):
            AnalysisStoreFactory.create(Settings(_env_file=None, analysis_store="redis"))
