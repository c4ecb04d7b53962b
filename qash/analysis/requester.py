"""Turns extracted document text into a completion-service analysis call."""

import re
from pathlib import Path

from qash.analysis.client_base import BaseCompletionClient
from qash.analysis.exceptions import AnalysisServiceError
from qash.analysis.models import AnalysisRequest, DocumentClass
from qash.analysis.prompt_loader import (
    FINANCIAL_TEMPLATE,
    GENERAL_TEMPLATE,
    load_prompt_template,
    render_prompt,
)
from qash.logging.logger import Log
from qash.processor.cancellation import CancellationToken

_ANGLE_BRACKETS = re.compile(r"[<>]")

DEFAULT_MAX_INPUT_CHARS = 50_000


def sanitize_text(text: str, max_chars: int = DEFAULT_MAX_INPUT_CHARS) -> tuple[str, bool]:
    """Strip angle brackets and cut to ``max_chars`` characters.

    Returns:
        The sanitized text and whether it was truncated.
    """
    cleaned = _ANGLE_BRACKETS.sub("", text)
    return cleaned[:max_chars], len(cleaned) > max_chars


class AnalysisRequester:
    """Builds a bounded prompt for one file and returns the model's raw reply."""

    def __init__(
        self,
        *,
        client: BaseCompletionClient,
        model: str,
        max_tokens: int = 2000,
        temperature: float = 0.3,
        max_input_chars: int = DEFAULT_MAX_INPUT_CHARS,
        prompt_dir: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._max_input_chars = max_input_chars
        self._templates = {
            DocumentClass.FINANCIAL: load_prompt_template(FINANCIAL_TEMPLATE, prompt_dir),
            DocumentClass.GENERAL: load_prompt_template(GENERAL_TEMPLATE, prompt_dir),
        }

    def build_request(
        self,
        text: str,
        *,
        file_name: str,
        media_type: str,
        document_class: DocumentClass,
    ) -> AnalysisRequest:
        sanitized, truncated = sanitize_text(text, self._max_input_chars)
        return AnalysisRequest(
            document_class=document_class,
            file_name=file_name,
            media_type=media_type,
            sanitized_text=sanitized,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
            truncated=truncated,
        )

    def render(self, request: AnalysisRequest) -> str:
        return render_prompt(
            self._templates[request.document_class],
            file_name=request.file_name,
            media_type=request.media_type,
            document_text=request.sanitized_text,
        )

    def request(
        self,
        request: AnalysisRequest,
        token: CancellationToken | None = None,
    ) -> str:
        """Issue one completion call and return the reply unmodified.

        Raises:
            AnalysisServiceError: if the call fails.
            FileDeadlineExceededError: if the token is already expired.
        """
        if token is not None:
            token.raise_if_cancelled("analysis request")
        prompt = self.render(request)
        Log.debug(
            f"Analysis prompt for {request.file_name} "
            f"({request.document_class.value}, {len(prompt)} chars)"
        )
        try:
            reply = self._client.create_completion(
                model=self._model,
                prompt=prompt,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
                timeout_seconds=token.remaining_seconds() if token is not None else None,
            )
        except AnalysisServiceError as exc:
            Log.error(f"Completion service failed for {request.file_name}: {exc}")
            raise AnalysisServiceError("Failed to analyze document with AI") from exc
        Log.debug(f"Raw model reply for {request.file_name}: {Log.preview(reply, 500)}")
        return reply
