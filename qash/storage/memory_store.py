import threading
from dataclasses import replace
from datetime import datetime, timezone

from qash.storage.base import DEFAULT_CHAT_LIMIT, DEFAULT_DOCUMENT_LIMIT, AnalysisStore
from qash.storage.exceptions import DocumentNotFoundError
from qash.storage.models import ChatTurn, DocumentDraft, StoredChat, StoredDocument


class InMemoryAnalysisStore(AnalysisStore):
    """Process-local store for development and tests. Lost on restart."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._documents: dict[int, StoredDocument] = {}
        self._chats: dict[int, StoredChat] = {}
        self._next_document_id = 1
        self._next_chat_id = 1

    def save_document(self, user_id: str, draft: DocumentDraft) -> StoredDocument:
        with self._lock:
            document = StoredDocument(
                id=self._next_document_id,
                user_id=user_id,
                file_name=draft.file_name,
                file_size=draft.file_size,
                file_count=draft.file_count,
                file_hash=draft.file_hash,
                analysis_data=draft.analysis,
                created_at=datetime.now(timezone.utc),
            )
            self._documents[document.id] = document
            self._next_document_id += 1
        return document

    def get_documents(self, user_id: str, limit: int = DEFAULT_DOCUMENT_LIMIT) -> list[StoredDocument]:
        with self._lock:
            owned = [doc for doc in self._documents.values() if doc.user_id == user_id]
        owned.sort(key=lambda doc: doc.id, reverse=True)
        return owned[:limit]

    def get_document(self, user_id: str, document_id: int) -> StoredDocument:
        with self._lock:
            document = self._documents.get(document_id)
        if document is None or document.user_id != user_id:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return document

    def delete_document(self, user_id: str, document_id: int) -> bool:
        with self._lock:
            document = self._documents.get(document_id)
            if document is None or document.user_id != user_id:
                return False
            del self._documents[document_id]
        return True

    def check_document_hash(self, user_id: str, file_hash: str) -> bool:
        with self._lock:
            return any(
                doc.user_id == user_id and doc.file_hash == file_hash
                for doc in self._documents.values()
            )

    def save_chat(
        self, user_id: str, document_id: int | None, messages: list[ChatTurn]
    ) -> StoredChat:
        now = datetime.now(timezone.utc)
        with self._lock:
            document = self._documents.get(document_id) if document_id is not None else None
            chat = StoredChat(
                id=self._next_chat_id,
                user_id=user_id,
                document_id=document_id,
                messages=list(messages),
                file_name=document.file_name if document else None,
                created_at=now,
                updated_at=now,
            )
            self._chats[chat.id] = chat
            self._next_chat_id += 1
        return chat

    def update_chat(self, user_id: str, chat_id: int, messages: list[ChatTurn]) -> StoredChat:
        with self._lock:
            chat = self._chats.get(chat_id)
            if chat is None or chat.user_id != user_id:
                raise DocumentNotFoundError(f"Chat {chat_id} not found")
            updated = replace(chat, messages=list(messages), updated_at=datetime.now(timezone.utc))
            self._chats[chat_id] = updated
        return updated

    def get_chats(self, user_id: str, limit: int = DEFAULT_CHAT_LIMIT) -> list[StoredChat]:
        with self._lock:
            owned = [chat for chat in self._chats.values() if chat.user_id == user_id]
        owned.sort(key=lambda chat: (chat.updated_at, chat.id), reverse=True)
        return owned[:limit]
