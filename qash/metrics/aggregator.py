"""Dashboard figures derived from normalized per-file analyses.

Everything here is a pure function of already-normalized data. Raw
(unparsed) analyses are excluded from every aggregate.
"""

import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from qash.normalization.models import NormalizedAnalysis, RawAnalysis, StructuredAnalysis

CONFIDENCE_SCORES: dict[str, int] = {"HIGH": 90, "MEDIUM": 70}
DEFAULT_CONFIDENCE_SCORE = 50

_NON_NUMERIC = re.compile(r"[^\d.-]")
_LEADING_NUMBER = re.compile(r"^[-+]?(\d+\.?\d*|\.\d+)")
_DATE_FORMATS = ("%m/%d/%Y", "%B %d, %Y", "%b %d, %Y", "%d %B %Y", "%Y/%m/%d")

AnalysisLike = NormalizedAnalysis | Mapping[str, Any]


@dataclass(frozen=True)
class CfoMetrics:
    total_amount: float = 0.0
    high_urgency_count: int = 0
    overdue_count: int = 0
    avg_confidence: int = 0
    documents_processed: int = 0
    executive_summary: dict[str, Any] = field(default_factory=dict)
    has_financial_metrics: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalAmount": self.total_amount,
            "highUrgencyCount": self.high_urgency_count,
            "overdueCount": self.overdue_count,
            "avgConfidence": self.avg_confidence,
            "documentsProcessed": self.documents_processed,
            "executiveSummary": self.executive_summary,
            "hasFinancialMetrics": self.has_financial_metrics,
        }


def structured_payloads(analyses: Iterable[AnalysisLike | None]) -> list[dict[str, Any]]:
    """Keep only structured analyses, as plain dicts."""
    payloads = []
    for analysis in analyses:
        if analysis is None or isinstance(analysis, RawAnalysis):
            continue
        if isinstance(analysis, StructuredAnalysis):
            payloads.append(analysis.data)
        elif isinstance(analysis, Mapping) and analysis and "rawAnalysis" not in analysis:
            payloads.append(dict(analysis))
    return payloads


def parse_amount(value: object) -> float:
    """Leading number of a money string after dropping currency and separators.

    Anything unparseable is worth 0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if not isinstance(value, str):
        return 0.0
    match = _LEADING_NUMBER.match(_NON_NUMERIC.sub("", value))
    if match is None:
        return 0.0
    return float(match.group(0))


def parse_due_date(value: object) -> datetime | None:
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def is_overdue(value: object, now: datetime) -> bool:
    due = parse_due_date(value)
    if due is None:
        return False
    if due.tzinfo is None:
        reference = now.replace(tzinfo=None) if now.tzinfo is not None else now
    else:
        reference = now if now.tzinfo is not None else now.replace(tzinfo=timezone.utc)
    return due < reference


def confidence_score(level: object) -> int:
    return CONFIDENCE_SCORES.get(level, DEFAULT_CONFIDENCE_SCORE) if isinstance(level, str) else DEFAULT_CONFIDENCE_SCORE


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_cfo_metrics(
    analyses: Iterable[AnalysisLike | None],
    now: datetime | None = None,
) -> CfoMetrics:
    """Aggregate totals, urgency, overdue and confidence across analyses."""
    now = now or datetime.now()
    payloads = structured_payloads(analyses)
    total = 0.0
    high_urgency = 0
    overdue = 0
    confidence_sum = 0
    for data in payloads:
        if data.get("amount"):
            total += parse_amount(data["amount"])
        if data.get("urgencyLevel") == "HIGH":
            high_urgency += 1
        if is_overdue(data.get("dueDate"), now):
            overdue += 1
        confidence_sum += confidence_score(data.get("confidence"))

    summary = payloads[0].get("executiveSummary") if payloads else None
    summary = summary if isinstance(summary, dict) else {}
    return CfoMetrics(
        total_amount=total,
        high_urgency_count=high_urgency,
        overdue_count=overdue,
        avg_confidence=_round_half_up(confidence_sum / len(payloads)) if payloads else 0,
        documents_processed=len(payloads),
        executive_summary=summary,
        has_financial_metrics=bool(
            summary.get("revenueGrowth")
            or summary.get("grossMargin")
            or summary.get("workingCapital")
        ),
    )
