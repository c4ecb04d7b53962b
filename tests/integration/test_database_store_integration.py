
from collections.abc import Callable

import pytest

from qash.storage.database_store import DatabaseAnalysisStore
from qash.storage.exceptions import DocumentNotFoundError
from qash.storage.models import ChatTurn, DocumentDraft


def _draft(file_hash: str, name: str = "a.pdf") -> DocumentDraft:
    return DocumentDraft(
        file_name=name,
        file_size=10,
        file_count=1,
        file_hash=file_hash,
        analysis={"success": True, "files": [{"fileName": name, "analysis": {"amount": "$5"}}]},
    )

class TestDatabaseAnalysisStoreIntegration:
    def test_document_round_trip(
        self, database_store: DatabaseAnalysisStore, make_user: Callable[[], str]
    ) -> None:
        user = make_user()
        saved = database_store.save_document(user, _draft("h1"))

        fetched = database_store.get_document(user, saved.id)
        assert fetched.analysis_data["files"][0]["analysis"] == {"amount": "$5"}
        assert fetched.created_at is not None

    def test_listing_is_newest_first_and_scoped(
        self, database_store: DatabaseAnalysisStore, make_user: Callable[[], str]
    ) -> None:
        user = make_user()
        first = database_store.save_document(user, _draft("h1", "first.pdf"))
        second = database_store.save_document(user, _draft("h2", "second.pdf"))

        assert [d.id for d in database_store.get_documents(user)] == [second.id, first.id]
        assert database_store.get_documents(make_user()) == []

    def test_hash_check_and_delete(
        self, database_store: DatabaseAnalysisStore, make_user: Callable[[], str]
    ) -> None:
        user = make_user()
        saved = database_store.save_document(user, _draft("dup"))
        assert database_store.check_document_hash(user, "dup")
        assert not database_store.check_document_hash(make_user(), "dup")

        assert database_store.delete_document(user, saved.id)
        assert not database_store.delete_document(user, saved.id)
        with pytest.raises(DocumentNotFoundError):
            database_store.get_document(user, saved.id)

    def test_chat_sessions(
        self, database_store: DatabaseAnalysisStore, make_user: Callable[[], str]
    ) -> None:
        user = make_user()
        document = database_store.save_document(user, _draft("h", "ledger.xlsx"))
        chat = database_store.save_chat(user, document.id, [ChatTurn("user", "Hi")])

        updated = database_store.update_chat(
            user, chat.id, [ChatTurn("user", "Hi"), ChatTurn("assistant", "Hello")]
        )
        assert len(updated.messages) == 2

        [listed] = database_store.get_chats(user)
        assert listed.file_name == "ledger.xlsx"
        assert listed.messages[1] == ChatTurn("assistant", "Hello")
