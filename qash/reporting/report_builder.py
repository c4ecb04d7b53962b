"""Plain-text rendering of a saved analysis batch for email delivery."""

import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from qash.metrics.action_items import collect_action_items
from qash.metrics.aggregator import compute_cfo_metrics

RULE = "=" * 60
SECTION_RULE = "-" * 40
REPORT_SECTIONS: tuple[str, ...] = (
    "financialHealth",
    "keyRisks",
    "cashFlowProjection",
    "recommendations",
)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def humanize_key(key: str) -> str:
    """``revenueGrowth`` -> ``revenue Growth``."""
    return _CAMEL_BOUNDARY.sub(" ", key).strip()


def attachment_name(file_name: str) -> str:
    stem = re.sub(r"\.[^/.]+$", "", file_name) or "report"
    return f"{stem}_analysis.txt"


def _format_value(value: object) -> str:
    if isinstance(value, list):
        return "\n".join(f"- {item}" for item in value)
    if isinstance(value, Mapping):
        return "\n".join(f"{humanize_key(str(k))}: {v}" for k, v in value.items() if v)
    return str(value)


def _format_date(value: object) -> str:
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M")
        except ValueError:
            return value
    return "Unknown"


def _file_section(index: int, file: Mapping[str, Any]) -> list[str]:
    lines = [f"\nFILE {index}: {file.get('fileName', '')}", SECTION_RULE]
    if file.get("error"):
        lines.append(f"Error: {file['error']}")
        return lines
    analysis = file.get("analysis")
    if not isinstance(analysis, Mapping):
        return lines
    if "rawAnalysis" in analysis:
        lines.extend(["\nANALYSIS", str(analysis["rawAnalysis"])])
        return lines

    summary = analysis.get("executiveSummary")
    if isinstance(summary, Mapping):
        lines.append("\nEXECUTIVE SUMMARY")
        lines.extend(f"• {humanize_key(key)}: {value}" for key, value in summary.items() if value)

    for section in REPORT_SECTIONS:
        if analysis.get(section):
            lines.append(f"\n{humanize_key(section).upper()}")
            lines.append(_format_value(analysis[section]))
    return lines


def build_report_text(document: Mapping[str, Any], now: datetime | None = None) -> str:
    """Render the report attached to outgoing emails.

    ``document`` is a saved document as the client holds it: ``fileName``,
    ``uploadDate``, ``fileCount`` and ``analysis`` (a serialized batch).
    """
    now = now or datetime.now()
    lines = [
        "QASH FINANCIAL ANALYSIS REPORT",
        RULE,
        "",
        f"Document: {document.get('fileName', '')}",
        f"Analysis Date: {_format_date(document.get('uploadDate'))}",
        f"File Count: {document.get('fileCount') or 1}",
    ]

    batch = document.get("analysis")
    files = batch.get("files") if isinstance(batch, Mapping) else None
    files = files if isinstance(files, list) else []

    analyses = [f.get("analysis") for f in files if isinstance(f, Mapping)]
    metrics = compute_cfo_metrics(analyses, now=now)
    if metrics.documents_processed:
        lines.extend([
            "",
            "KEY METRICS",
            f"Total Amount: {metrics.total_amount:,.2f}",
            f"High Urgency Items: {metrics.high_urgency_count}",
            f"Overdue Items: {metrics.overdue_count}",
            f"Average Confidence: {metrics.avg_confidence}%",
        ])

    for index, file in enumerate(files, 1):
        if isinstance(file, Mapping):
            lines.extend(_file_section(index, file))

    items = collect_action_items([f for f in files if isinstance(f, Mapping)], now=now)
    if items:
        lines.extend(["", "ACTION ITEMS"])
        lines.extend(f"[{item.urgency}] {item.text} ({item.source})" for item in items)

    lines.extend(["", RULE, f"Generated by Qash - {now:%Y-%m-%d %H:%M}"])
    return "\n".join(lines) + "\n"
