from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from qash.metrics.aggregator import is_overdue, parse_due_date
from qash.normalization.models import StructuredAnalysis
from qash.processor.models import FileAnalysis, FileError

URGENCY_ORDER: dict[str, int] = {"HIGH": 0, "MEDIUM": 1, "LOW": 2}


@dataclass(frozen=True)
class ActionItem:
    kind: str
    text: str
    urgency: str
    source: str
    category: str = ""

    def to_dict(self) -> dict[str, Any]:
        payload = {"type": self.kind, "text": self.text, "urgency": self.urgency, "source": self.source}
        if self.category:
            payload["category"] = self.category
        return payload


def _as_list(value: object) -> list[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [str(item) for item in value if item]
    return []


def _file_payload(entry: FileAnalysis | FileError | Mapping[str, Any]) -> tuple[str, dict[str, Any] | None]:
    if isinstance(entry, FileError):
        return entry.file_name, None
    if isinstance(entry, FileAnalysis):
        if isinstance(entry.analysis, StructuredAnalysis):
            return entry.file_name, entry.analysis.data
        return entry.file_name, None
    name = str(entry.get("fileName") or entry.get("filename") or "")
    analysis = entry.get("analysis")
    if not isinstance(analysis, Mapping) or not analysis or "rawAnalysis" in analysis:
        return name, None
    return name, dict(analysis)


def collect_action_items(
    files: Iterable[FileAnalysis | FileError | Mapping[str, Any]],
    now: datetime | None = None,
) -> list[ActionItem]:
    """Prioritized follow-ups across every structured analysis of a batch.

    Items are ordered HIGH, MEDIUM, LOW; ties keep collection order.
    """
    now = now or datetime.now()
    items: list[ActionItem] = []
    for entry in files:
        source, data = _file_payload(entry)
        if data is None:
            continue
        for text in _as_list(data.get("recommendations")):
            items.append(ActionItem("recommendation", text, "MEDIUM", source))

        urgency = data.get("urgencyLevel") or "MEDIUM"
        for text in _as_list(data.get("actionItems")):
            items.append(ActionItem("action", text, urgency, source))

        insights = data.get("actionableInsights")
        if isinstance(insights, Mapping):
            for key, value in insights.items():
                if isinstance(value, str) and value:
                    level = "HIGH" if "immediate" in key else "MEDIUM"
                    items.append(ActionItem("insight", value, level, source, category=key))

        if is_overdue(data.get("dueDate"), now):
            due = parse_due_date(data["dueDate"])
            label = data.get("documentType") or "Document"
            items.append(
                ActionItem("overdue", f"{label} is overdue (Due: {due:%Y-%m-%d})", "HIGH", source)
            )

    return sorted(items, key=lambda item: URGENCY_ORDER.get(item.urgency, 2))
