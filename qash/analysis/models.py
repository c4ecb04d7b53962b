from dataclasses import dataclass
from enum import Enum


class DocumentClass(str, Enum):
    """Which prompt template a document is analysed with."""

    FINANCIAL = "financial"
    GENERAL = "general"


@dataclass(frozen=True)
class AnalysisRequest:
    """Everything needed for one completion call; built fresh per file."""

    document_class: DocumentClass
    file_name: str
    media_type: str
    sanitized_text: str
    max_tokens: int
    temperature: float
    truncated: bool = False
