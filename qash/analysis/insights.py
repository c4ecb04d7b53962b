"""Follow-up completion calls over already-normalized analyses."""

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from qash.analysis.client_base import BaseCompletionClient
from qash.analysis.exceptions import AnalysisServiceError
from qash.analysis.prompt_loader import (
    CHAT_TEMPLATE,
    METRICS_TEMPLATE,
    load_prompt_template,
    render_prompt,
)
from qash.logging.logger import Log


def _metric(metrics: Mapping[str, Any], key: str) -> object:
    value = metrics.get(key)
    return value if value not in (None, "", 0) else "N/A"


class InsightService:
    """Answers questions about analysed documents and synthesises batch metrics."""

    def __init__(
        self,
        *,
        client: BaseCompletionClient,
        model: str,
        chat_max_tokens: int = 1000,
        metrics_max_tokens: int = 2000,
        temperature: float = 0.3,
        prompt_dir: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._chat_max_tokens = chat_max_tokens
        self._metrics_max_tokens = metrics_max_tokens
        self._temperature = temperature
        self._chat_template = load_prompt_template(CHAT_TEMPLATE, prompt_dir)
        self._metrics_template = load_prompt_template(METRICS_TEMPLATE, prompt_dir)

    def answer(self, query: str, documents: Sequence[Mapping[str, Any]]) -> str:
        """Answer a user question using prior analyses as context.

        Raises:
            AnalysisServiceError: if the completion call fails.
        """
        prompt = render_prompt(
            self._chat_template,
            documents_context=self.documents_context(documents),
            query=query,
        )
        Log.info(f"Chat query over {len(documents)} document(s)")
        return self._complete(prompt, self._chat_max_tokens)

    def synthesize_metrics(
        self,
        metrics: Mapping[str, Any],
        files: Sequence[Mapping[str, Any]],
    ) -> str:
        """Produce a CFO-level narrative over aggregated metrics.

        Raises:
            AnalysisServiceError: if the completion call fails.
        """
        prompt = render_prompt(
            self._metrics_template,
            files_summary=self.files_summary(files),
            total_revenue=_metric(metrics, "totalRevenue"),
            total_expenses=_metric(metrics, "totalExpenses"),
            net_cash_flow=_metric(metrics, "netCashFlow"),
            avg_profit_margin=_metric(metrics, "avgProfitMargin"),
            file_analyses=json.dumps([f.get("analysis") for f in files], indent=2),
        )
        Log.info(f"Metrics synthesis over {len(files)} file(s)")
        return self._complete(prompt, self._metrics_max_tokens)

    @staticmethod
    def documents_context(documents: Sequence[Mapping[str, Any]]) -> str:
        parts = []
        for index, document in enumerate(documents, 1):
            parts.append(f"\nDocument {index}: {document.get('name', '')}\n")
            analysis = document.get("analysis")
            if analysis:
                parts.append(f"Analysis: {json.dumps(analysis, indent=2)}\n")
        return "".join(parts)

    @staticmethod
    def files_summary(files: Sequence[Mapping[str, Any]]) -> str:
        lines = []
        for file in files:
            analysis = file.get("analysis") or {}
            summary = analysis.get("executiveSummary") if isinstance(analysis, dict) else None
            business = summary.get("businessName") if isinstance(summary, dict) else None
            lines.append(f"- {file.get('fileName', '')}: {business or 'Unknown'}")
        return "\n".join(lines)

    def _complete(self, prompt: str, max_tokens: int) -> str:
        try:
            return self._client.create_completion(
                model=self._model,
                prompt=prompt,
                max_tokens=max_tokens,
                temperature=self._temperature,
            )
        except AnalysisServiceError as exc:
            Log.error(f"Completion service failed: {exc}")
            raise
