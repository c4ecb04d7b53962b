from datetime import datetime

from qash.reporting.report_builder import attachment_name, build_report_text, humanize_key

NOW = datetime(2024, 6, 1, 9, 30)


def _document() -> dict:
    return {
        "fileName": "q1-ledger.xlsx",
        "uploadDate": "2024-05-30T10:00:00Z",
        "fileCount": 2,
        "analysis": {
            "files": [
                {
                    "fileName": "q1-ledger.xlsx",
                    "analysis": {
                        "executiveSummary": {"businessName": "Acme", "revenueGrowth": "12%", "period": ""},
                        "financialHealth": "Solid",
                        "recommendations": ["Reduce payroll", "Renegotiate rent"],
                        "amount": "$1,000",
                        "confidence": "HIGH",
                    },
                },
                {"fileName": "scan.png", "error": "No readable text found"},
                {"fileName": "notes.txt", "analysis": {"rawAnalysis": "Plain prose"}},
            ]
        },
    }


class TestReportBuilder:
    def test_header_and_footer(self) -> None:
        text = build_report_text(_document(), now=NOW)
        lines = text.splitlines()
        assert lines[0] == "QASH FINANCIAL ANALYSIS REPORT"
        assert lines[1] == "=" * 60
        assert "Document: q1-ledger.xlsx" in lines
        assert "Analysis Date: 2024-05-30 10:00" in lines
        assert "File Count: 2" in lines
        assert lines[-1] == "Generated by Qash - 2024-06-01 09:30"

    def test_file_sections(self) -> None:
        text = build_report_text(_document(), now=NOW)
        assert "FILE 1: q1-ledger.xlsx\n" + "-" * 40 in text
        assert "EXECUTIVE SUMMARY\n• business Name: Acme\n• revenue Growth: 12%" in text
        assert "period" not in text
        assert "FINANCIAL HEALTH\nSolid" in text
        assert "RECOMMENDATIONS\n- Reduce payroll\n- Renegotiate rent" in text
        assert "FILE 2: scan.png" in text
        assert "Error: No readable text found" in text
        assert "ANALYSIS\nPlain prose" in text

    def test_metrics_and_action_items(self) -> None:
        text = build_report_text(_document(), now=NOW)
        assert "Total Amount: 1,000.00" in text
        assert "Average Confidence: 90%" in text
        assert "[MEDIUM] Reduce payroll (q1-ledger.xlsx)" in text

    def test_document_without_analysis(self) -> None:
        text = build_report_text({"fileName": "x.pdf"}, now=NOW)
        assert "Analysis Date: Unknown" in text
        assert "File Count: 1" in text
        assert "KEY METRICS" not in text


class TestHelpers:
    def test_humanize_key(self) -> None:
        assert humanize_key("cashFlowProjection") == "cash Flow Projection"

    def test_attachment_name_drops_extension(self) -> None:
        assert attachment_name("q1-ledger.xlsx") == "q1-ledger_analysis.txt"
        assert attachment_name("README") == "README_analysis.txt"
