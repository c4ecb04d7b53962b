import os
import uuid
from collections.abc import Callable, Generator

import pytest

from qash.config.settings import Settings
from qash.storage.connection import close_pool, get_connection, init_pool
from qash.storage.database_store import DatabaseAnalysisStore

TEST_USER_PREFIX = "it-"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "qash_test")
    return Settings(_env_file=None)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute("SELECT 1")
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def database_store(integration_pool: None) -> Generator[DatabaseAnalysisStore, None, None]:
    store = DatabaseAnalysisStore()
    store.ensure_schema()
    yield store
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM chat_sessions WHERE user_id LIKE %s", (TEST_USER_PREFIX + "%",))
            cur.execute("DELETE FROM documents WHERE user_id LIKE %s", (TEST_USER_PREFIX + "%",))
        conn.commit()


@pytest.fixture
def make_user() -> Callable[[], str]:
    return lambda: f"{TEST_USER_PREFIX}{uuid.uuid4()}"
