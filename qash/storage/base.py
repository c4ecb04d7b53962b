from abc import ABC, abstractmethod

from qash.storage.models import ChatTurn, DocumentDraft, StoredChat, StoredDocument

DEFAULT_DOCUMENT_LIMIT = 100
DEFAULT_CHAT_LIMIT = 50


class AnalysisStore(ABC):
    """Save and look up analysed batches and chat sessions per user.

    Every read and delete is scoped to ``user_id``; a document owned by
    someone else behaves exactly like a missing one.
    """

    @abstractmethod
    def save_document(self, user_id: str, draft: DocumentDraft) -> StoredDocument:
        raise NotImplementedError

    @abstractmethod
    def get_documents(self, user_id: str, limit: int = DEFAULT_DOCUMENT_LIMIT) -> list[StoredDocument]:
        """Newest first."""
        raise NotImplementedError

    @abstractmethod
    def get_document(self, user_id: str, document_id: int) -> StoredDocument:
        """Raises:
            DocumentNotFoundError: if the user owns no document with this id.
        """
        raise NotImplementedError

    @abstractmethod
    def delete_document(self, user_id: str, document_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def check_document_hash(self, user_id: str, file_hash: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def save_chat(
        self, user_id: str, document_id: int | None, messages: list[ChatTurn]
    ) -> StoredChat:
        raise NotImplementedError

    @abstractmethod
    def update_chat(self, user_id: str, chat_id: int, messages: list[ChatTurn]) -> StoredChat:
        """Replace the messages of an existing session.

        Raises:
            DocumentNotFoundError: if the user owns no chat with this id.
        """
        raise NotImplementedError

    @abstractmethod
    def get_chats(self, user_id: str, limit: int = DEFAULT_CHAT_LIMIT) -> list[StoredChat]:
        """Most recently updated first."""
        raise NotImplementedError
