from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, File, Query, UploadFile

from qash import __version__
from qash.analysis.exceptions import AnalysisServiceError
from qash.analysis.insights import InsightService
from qash.api.deps import (
    get_email_sender,
    get_insight_service,
    get_processor,
    get_settings,
    get_store,
    optional_user_id,
    require_user_id,
)
from qash.api.errors import ApiError
from qash.api.schemas import ChatRequest, ChatSessionRequest, MetricsRequest, SendReportRequest
from qash.classification.formats import SUPPORTED_FORMATS
from qash.config.settings import Settings
from qash.logging.logger import Log
from qash.processor.models import BatchResult, UploadedFile
from qash.processor.processor import Processor
from qash.reporting.email_sender import EmailSender
from qash.reporting.exceptions import EmailDeliveryError
from qash.reporting.report_builder import attachment_name, build_report_text
from qash.storage.base import AnalysisStore
from qash.storage.exceptions import DocumentNotFoundError, StoreError
from qash.storage.models import ChatTurn, DocumentDraft

router = APIRouter()

DEFAULT_MEDIA_TYPE = "application/octet-stream"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/")
def root() -> dict[str, Any]:
    return {
        "message": "Qash API is running",
        "version": __version__,
        "endpoints": {
            "health": "/api/health",
            "analyze": "POST /api/analyze",
            "analyzeMetrics": "POST /api/analyze-metrics",
            "chat": "POST /api/chat",
            "sendReport": "POST /api/send-report",
            "documents": "/api/documents",
            "chats": "/api/chats",
            "supportedFormats": "/api/supported-formats",
        },
    }


@router.get("/api/health")
def health() -> dict[str, Any]:
    return {"status": "Server is running", "timestamp": _timestamp(), "version": __version__}


@router.get("/api/supported-formats")
def supported_formats(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    size_mb = settings.max_file_size_bytes // (1024 * 1024)
    return {
        "supportedFormats": [
            {"type": f.type, "extensions": list(f.extensions), "description": f.description}
            for f in SUPPORTED_FORMATS
        ],
        "maxFileSize": f"{size_mb}MB per file",
        "maxFiles": settings.max_files_per_batch,
        "notes": [
            "Financial documents work best for cash flow analysis",
            "Images are processed with OCR for text extraction",
            "Non-financial documents will receive general analysis",
        ],
    }


def _read_uploads(documents: list[UploadFile], settings: Settings) -> list[UploadedFile]:
    if len(documents) > settings.max_files_per_batch:
        raise ApiError(
            400, f"Too many files. Maximum {settings.max_files_per_batch} files allowed."
        )
    size_mb = settings.max_file_size_bytes // (1024 * 1024)
    uploads = []
    for document in documents:
        content = document.file.read()
        if len(content) > settings.max_file_size_bytes:
            raise ApiError(400, f"File too large. Maximum size is {size_mb}MB per file.")
        uploads.append(
            UploadedFile.from_bytes(
                name=document.filename or "upload",
                media_type=document.content_type or DEFAULT_MEDIA_TYPE,
                content=content,
            )
        )
    return uploads


def _save_batch(
    store: AnalysisStore, user_id: str, uploads: list[UploadedFile], batch: BatchResult
) -> int | None:
    draft = DocumentDraft(
        file_name=", ".join(upload.name for upload in uploads),
        file_size=sum(upload.size for upload in uploads),
        file_count=len(uploads),
        file_hash=batch.file_hash,
        analysis=batch.to_dict(),
    )
    try:
        return store.save_document(user_id, draft).id
    except StoreError as exc:
        Log.error(f"Failed to save analysis: {exc}", user_id=user_id)
        return None


@router.post("/api/analyze")
def analyze(
    documents: list[UploadFile] | None = File(default=None),
    user_id: str | None = Depends(optional_user_id),
    settings: Settings = Depends(get_settings),
    processor: Processor = Depends(get_processor),
    store: AnalysisStore = Depends(get_store),
) -> dict[str, Any]:
    if not documents:
        raise ApiError(400, "No files uploaded")
    uploads = _read_uploads(documents, settings)
    batch = processor.process(uploads)
    response = batch.to_dict()
    if user_id is not None:
        document_id = _save_batch(store, user_id, uploads, batch)
        if document_id is not None:
            response["documentId"] = document_id
    return response


@router.post("/api/analyze-metrics")
def analyze_metrics(
    payload: MetricsRequest,
    insights: InsightService = Depends(get_insight_service),
) -> dict[str, Any]:
    if not payload.metrics or not payload.files:
        raise ApiError(400, "No metrics data provided")
    Log.info(f"Processing metrics for files: {[f.get('fileName') for f in payload.files]}")
    try:
        analysis = insights.synthesize_metrics(payload.metrics, payload.files)
    except AnalysisServiceError as exc:
        raise ApiError(500, "Failed to analyze metrics", str(exc)) from exc
    return {"success": True, "analysis": analysis, "timestamp": _timestamp()}


@router.post("/api/chat")
def chat(
    payload: ChatRequest,
    insights: InsightService = Depends(get_insight_service),
) -> dict[str, Any]:
    if not payload.query.strip() or not payload.documents:
        raise ApiError(400, "No query or documents provided")
    documents = [document.model_dump() for document in payload.documents]
    try:
        answer = insights.answer(payload.query, documents)
    except AnalysisServiceError as exc:
        raise ApiError(500, "Failed to process chat query", str(exc)) from exc
    return {
        "success": True,
        "query": payload.query,
        "response": answer,
        "documentCount": len(documents),
        "timestamp": _timestamp(),
    }


@router.post("/api/send-report")
def send_report(
    payload: SendReportRequest,
    sender: EmailSender = Depends(get_email_sender),
) -> dict[str, Any]:
    if not payload.to or not payload.subject or not payload.document:
        raise ApiError(400, "Missing required fields")
    file_name = str(payload.document.get("fileName") or "report")
    try:
        sender.send_report(
            to=payload.to,
            subject=payload.subject,
            message=payload.message,
            attachment_name=attachment_name(file_name),
            attachment_text=build_report_text(payload.document),
        )
    except EmailDeliveryError as exc:
        raise ApiError(500, "Failed to send email", str(exc)) from exc
    return {"success": True, "message": "Report sent successfully"}


@router.get("/api/documents")
def list_documents(
    user_id: str = Depends(require_user_id),
    store: AnalysisStore = Depends(get_store),
) -> dict[str, Any]:
    documents = store.get_documents(user_id)
    return {"success": True, "documents": [document.to_dict() for document in documents]}


@router.get("/api/documents/check-hash")
def check_hash(
    file_hash: str = Query(default="", alias="hash"),
    user_id: str = Depends(require_user_id),
    store: AnalysisStore = Depends(get_store),
) -> dict[str, Any]:
    if not file_hash:
        raise ApiError(400, "hash query parameter is required")
    return {"exists": store.check_document_hash(user_id, file_hash)}


@router.get("/api/documents/{document_id}")
def get_document(
    document_id: int,
    user_id: str = Depends(require_user_id),
    store: AnalysisStore = Depends(get_store),
) -> dict[str, Any]:
    try:
        document = store.get_document(user_id, document_id)
    except DocumentNotFoundError as exc:
        raise ApiError(404, "Document not found") from exc
    return {"success": True, "document": document.to_dict()}


@router.delete("/api/documents/{document_id}")
def delete_document(
    document_id: int,
    user_id: str = Depends(require_user_id),
    store: AnalysisStore = Depends(get_store),
) -> dict[str, Any]:
    if not store.delete_document(user_id, document_id):
        raise ApiError(404, "Document not found")
    return {"success": True}


@router.post("/api/chats")
def save_chat(
    payload: ChatSessionRequest,
    user_id: str = Depends(require_user_id),
    store: AnalysisStore = Depends(get_store),
) -> dict[str, Any]:
    try:
        messages = [ChatTurn.from_dict(turn.model_dump()) for turn in payload.messages]
    except ValueError as exc:
        raise ApiError(400, str(exc)) from exc
    if payload.chat_id is None:
        chat = store.save_chat(user_id, payload.document_id, messages)
    else:
        try:
            chat = store.update_chat(user_id, payload.chat_id, messages)
        except DocumentNotFoundError as exc:
            raise ApiError(404, "Chat not found") from exc
    return {"success": True, "chat": chat.to_dict()}


@router.get("/api/chats")
def list_chats(
    user_id: str = Depends(require_user_id),
    store: AnalysisStore = Depends(get_store),
) -> dict[str, Any]:
    return {"success": True, "chats": [chat.to_dict() for chat in store.get_chats(user_id)]}
