from qash.normalization.models import NormalizedAnalysis, RawAnalysis, StructuredAnalysis
from qash.normalization.normalizer import ResponseNormalizer

__all__ = ["NormalizedAnalysis", "RawAnalysis", "ResponseNormalizer", "StructuredAnalysis"]
