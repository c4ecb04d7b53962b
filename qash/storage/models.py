from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

ChatRole = Literal["user", "assistant", "error"]
CHAT_ROLES: tuple[str, ...] = ("user", "assistant", "error")


@dataclass(frozen=True)
class ChatTurn:
    """One message of a chat session."""

    role: ChatRole
    text: str
    timestamp: str = ""

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ChatTurn":
        role = payload.get("role") or payload.get("type") or "user"
        if role not in CHAT_ROLES:
            raise ValueError(f"Unknown chat role: {role}. Choose from: {', '.join(CHAT_ROLES)}")
        return cls(
            role=role,
            text=str(payload.get("text") or payload.get("content") or ""),
            timestamp=str(payload.get("timestamp") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "text": self.text, "timestamp": self.timestamp}


@dataclass(frozen=True)
class DocumentDraft:
    """Analysis batch about to be saved for a user."""

    file_name: str
    file_size: int
    file_count: int
    file_hash: str
    analysis: dict[str, Any]


@dataclass(frozen=True)
class StoredDocument:
    """Represents a row from the documents table."""

    id: int
    user_id: str
    file_name: str
    file_size: int
    file_count: int
    file_hash: str
    analysis_data: dict[str, Any]
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "fileCount": self.file_count,
            "fileHash": self.file_hash,
            "analysisData": self.analysis_data,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class StoredChat:
    """Represents a row from the chat_sessions table."""

    id: int
    user_id: str
    document_id: int | None
    messages: list[ChatTurn] = field(default_factory=list)
    file_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "documentId": self.document_id,
            "fileName": self.file_name,
            "messages": [turn.to_dict() for turn in self.messages],
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
