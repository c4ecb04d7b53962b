from fastapi import Header, Request

from qash.analysis.insights import InsightService
from qash.api.errors import ApiError
from qash.config.settings import Settings
from qash.processor.processor import Processor
from qash.reporting.email_sender import EmailSender
from qash.storage.base import AnalysisStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_processor(request: Request) -> Processor:
    return request.app.state.processor


def get_insight_service(request: Request) -> InsightService:
    return request.app.state.insight_service


def get_store(request: Request) -> AnalysisStore:
    return request.app.state.store


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender


def optional_user_id(x_user_id: str | None = Header(default=None)) -> str | None:
    return x_user_id.strip() if x_user_id and x_user_id.strip() else None


def require_user_id(x_user_id: str | None = Header(default=None)) -> str:
    user_id = optional_user_id(x_user_id)
    if user_id is None:
        raise ApiError(400, "X-User-Id header is required")
    return user_id
