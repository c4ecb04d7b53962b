from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class StructuredAnalysis:
    """A model reply that parsed as a JSON object.

    The field set follows whichever prompt template was used, so the parsed
    object is kept as-is rather than mapped onto a fixed class.
    """

    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return self.data


@dataclass(frozen=True)
class RawAnalysis:
    """Fallback wrapper for a reply that could not be parsed."""

    raw_analysis: str

    def to_dict(self) -> dict[str, Any]:
        return {"rawAnalysis": self.raw_analysis}


NormalizedAnalysis = StructuredAnalysis | RawAnalysis
