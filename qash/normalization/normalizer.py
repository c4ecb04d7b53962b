"""Salvage parsing of free-text model replies into analysis objects."""

import json
import re

from qash.logging.logger import Log
from qash.normalization.models import NormalizedAnalysis, RawAnalysis, StructuredAnalysis

_JSON_FENCE = "```json"
_FENCE = "```"
_LEADING_FENCE = re.compile(r"^```\s*")
_TRAILING_FENCE = re.compile(r"\s*```$")
_OBJECT_SPAN = re.compile(r"\{[\s\S]*\}")


class ResponseNormalizer:
    """Coerces a model reply into a StructuredAnalysis, or falls back to RawAnalysis.

    Salvage order:
        1. trim whitespace;
        2. take the body between the first ```json and the last ```;
        3. otherwise strip a bare leading/trailing ``` fence;
        4. narrow to the first ``{`` through the last ``}``;
        5. parse as JSON.

    Never raises.
    """

    def normalize(self, raw: str, file_name: str = "") -> NormalizedAnalysis:
        candidate = self.extract_candidate(raw)
        try:
            parsed = json.loads(candidate)
        except (ValueError, TypeError, RecursionError) as exc:
            Log.info(
                f"Model returned non-JSON response, using raw text: {exc}",
                file_name=file_name,
            )
            return RawAnalysis(raw_analysis=raw)
        if not isinstance(parsed, dict):
            Log.info("Model returned JSON that is not an object, using raw text", file_name=file_name)
            return RawAnalysis(raw_analysis=raw)
        Log.info("Parsed structured analysis", file_name=file_name, fields=len(parsed))
        return StructuredAnalysis(data=parsed)

    @staticmethod
    def extract_candidate(raw: str) -> str:
        cleaned = raw.strip()
        if _JSON_FENCE in cleaned:
            start = cleaned.index(_JSON_FENCE) + len(_JSON_FENCE)
            end = cleaned.rfind(_FENCE)
            if end > start:
                cleaned = cleaned[start:end].strip()
        elif cleaned.startswith(_FENCE):
            cleaned = _TRAILING_FENCE.sub("", _LEADING_FENCE.sub("", cleaned, count=1), count=1)

        match = _OBJECT_SPAN.search(cleaned)
        if match:
            cleaned = match.group(0)
        return cleaned
