from dataclasses import dataclass


@dataclass(frozen=True)
class OcrResult:
    """Text recognised in an image and the engine's own confidence score."""

    text: str
    confidence: float
