from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from qash.storage.base import DEFAULT_CHAT_LIMIT, DEFAULT_DOCUMENT_LIMIT, AnalysisStore
from qash.storage.connection import get_connection
from qash.storage.exceptions import DocumentNotFoundError, StoreError
from qash.storage.models import ChatTurn, DocumentDraft, StoredChat, StoredDocument


SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    id BIGSERIAL PRIMARY KEY,
    user_id TEXT NOT NULL,
    file_name TEXT NOT NULL,
    file_size BIGINT NOT NULL DEFAULT 0,
    file_count INTEGER NOT NULL DEFAULT 1,
    file_hash TEXT NOT NULL,
    analysis_data JSONB NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS documents_user_hash_idx ON documents (user_id, file_hash);
CREATE TABLE IF NOT EXISTS chat_sessions (
    id BIGSERIAL PRIMARY KEY,
    user_id TEXT NOT NULL,
    document_id BIGINT REFERENCES documents (id) ON DELETE SET NULL,
    messages JSONB NOT NULL DEFAULT '[]'::jsonb,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""

_DOCUMENT_COLUMNS = "id, user_id, file_name, file_size, file_count, file_hash, analysis_data, created_at"


def _document_from_row(row: dict[str, Any]) -> StoredDocument:
    return StoredDocument(
        id=row["id"],
        user_id=row["user_id"],
        file_name=row["file_name"],
        file_size=row["file_size"],
        file_count=row["file_count"],
        file_hash=row["file_hash"],
        analysis_data=row["analysis_data"],
        created_at=row["created_at"],
    )


def _chat_from_row(row: dict[str, Any]) -> StoredChat:
    return StoredChat(
        id=row["id"],
        user_id=row["user_id"],
        document_id=row["document_id"],
        messages=[ChatTurn.from_dict(turn) for turn in row["messages"] or []],
        file_name=row.get("file_name"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _turns_payload(messages: list[ChatTurn]) -> Jsonb:
    return Jsonb([turn.to_dict() for turn in messages])


class DatabaseAnalysisStore(AnalysisStore):
    """PostgreSQL-backed store over the documents and chat_sessions tables."""

    def __init__(self, connection_factory: Callable[[], Any] = get_connection) -> None:
        self._connection = connection_factory

    @contextmanager
    def _cursor(self) -> Iterator[psycopg.Cursor[dict[str, Any]]]:
        try:
            with self._connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    yield cur
                conn.commit()
        except psycopg.Error as exc:
            raise StoreError(f"Database operation failed: {exc}") from exc

    def ensure_schema(self) -> None:
        """Create the tables when they do not exist yet."""
        with self._cursor() as cur:
            cur.execute(SCHEMA)

    def save_document(self, user_id: str, draft: DocumentDraft) -> StoredDocument:
        with self._cursor() as cur:
            cur.execute(
                f"""
                INSERT INTO documents
                (user_id, file_name, file_size, file_count, file_hash, analysis_data)
                VALUES (%s, %s, %s, %s, %s, %s)
                RETURNING {_DOCUMENT_COLUMNS}
                """,
                (
                    user_id,
                    draft.file_name,
                    draft.file_size,
                    draft.file_count,
                    draft.file_hash,
                    Jsonb(draft.analysis),
                ),
            )
            row = cur.fetchone()
        if row is None:
            raise StoreError("Insert into documents returned no row")
        return _document_from_row(row)

    def get_documents(self, user_id: str, limit: int = DEFAULT_DOCUMENT_LIMIT) -> list[StoredDocument]:
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_DOCUMENT_COLUMNS}
                FROM documents
                WHERE user_id = %s
                ORDER BY created_at DESC, id DESC
                LIMIT %s
                """,
                (user_id, limit),
            )
            rows = cur.fetchall()
        return [_document_from_row(row) for row in rows]

    def get_document(self, user_id: str, document_id: int) -> StoredDocument:
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {_DOCUMENT_COLUMNS} FROM documents WHERE id = %s AND user_id = %s",
                (document_id, user_id),
            )
            row = cur.fetchone()
        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _document_from_row(row)

    def delete_document(self, user_id: str, document_id: int) -> bool:
        with self._cursor() as cur:
            cur.execute(
                "DELETE FROM documents WHERE id = %s AND user_id = %s",
                (document_id, user_id),
            )
            deleted = cur.rowcount > 0
        return deleted

    def check_document_hash(self, user_id: str, file_hash: str) -> bool:
        with self._cursor() as cur:
            cur.execute(
                "SELECT id FROM documents WHERE user_id = %s AND file_hash = %s LIMIT 1",
                (user_id, file_hash),
            )
            row = cur.fetchone()
        return row is not None

    def save_chat(
        self, user_id: str, document_id: int | None, messages: list[ChatTurn]
    ) -> StoredChat:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO chat_sessions (user_id, document_id, messages)
                VALUES (%s, %s, %s)
                RETURNING id, user_id, document_id, messages, created_at, updated_at
                """,
                (user_id, document_id, _turns_payload(messages)),
            )
            row = cur.fetchone()
        if row is None:
            raise StoreError("Insert into chat_sessions returned no row")
        return _chat_from_row(row)

    def update_chat(self, user_id: str, chat_id: int, messages: list[ChatTurn]) -> StoredChat:
        with self._cursor() as cur:
            cur.execute(
                """
                UPDATE chat_sessions
                SET messages = %s, updated_at = NOW()
                WHERE id = %s AND user_id = %s
                RETURNING id, user_id, document_id, messages, created_at, updated_at
                """,
                (_turns_payload(messages), chat_id, user_id),
            )
            row = cur.fetchone()
        if row is None:
            raise DocumentNotFoundError(f"Chat {chat_id} not found")
        return _chat_from_row(row)

    def get_chats(self, user_id: str, limit: int = DEFAULT_CHAT_LIMIT) -> list[StoredChat]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT cs.id, cs.user_id, cs.document_id, cs.messages,
                       cs.created_at, cs.updated_at, d.file_name
                FROM chat_sessions cs
                LEFT JOIN documents d ON cs.document_id = d.id
                WHERE cs.user_id = %s
                ORDER BY cs.updated_at DESC, cs.id DESC
                LIMIT %s
                """,
                (user_id, limit),
            )
            rows = cur.fetchall()
        return [_chat_from_row(row) for row in rows]
