import pytest

from qash.analysis.models import DocumentClass
from qash.processor.heuristics import classify_document, is_financial


class TestFinancialHeuristic:
    @pytest.mark.parametrize("text", ["Total REVENUE", "tax return", "Cashflow", "invoice #4"])
    def test_keywords_match_case_insensitively(self, text: str) -> None:
        assert is_financial(text)

    def test_non_financial(self) -> None:
        assert not is_financial("Team offsite agenda")

    def test_substring_matches_count(self) -> None:
        assert classify_document("totally unrelated") is DocumentClass.FINANCIAL

    def test_general_class(self) -> None:
        assert classify_document("Meeting notes") is DocumentClass.GENERAL
