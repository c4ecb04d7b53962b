from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MetricsRequest(BaseModel):
    metrics: dict[str, Any] | None = None
    files: list[dict[str, Any]] = Field(default_factory=list)


class ChatDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    analysis: dict[str, Any] | None = None


class ChatRequest(BaseModel):
    query: str = ""
    documents: list[ChatDocument] = Field(default_factory=list)


class SendReportRequest(BaseModel):
    to: str = ""
    subject: str = ""
    message: str = ""
    document: dict[str, Any] | None = None


class ChatTurnPayload(BaseModel):
    role: str = "user"
    text: str = ""
    timestamp: str = ""


class ChatSessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chat_id: int | None = Field(default=None, alias="chatId")
    document_id: int | None = Field(default=None, alias="documentId")
    messages: list[ChatTurnPayload] = Field(default_factory=list)
