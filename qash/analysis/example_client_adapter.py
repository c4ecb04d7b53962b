"""Offline completion client.

Use this module as a reference when implementing new provider adapters.
Implement BaseCompletionClient and register the provider in AnalysisClientFactory.
"""

import json
from typing import ClassVar

from qash.analysis.client_base import BaseCompletionClient


class ExampleClientAdapter(BaseCompletionClient):
    """Returns canned replies shaped like a real model's, without network calls.

    Analysis prompts get a fenced JSON block matching the requested template;
    any other prompt gets a short prose answer.
    """

    FINANCIAL_RESPONSE: ClassVar[dict[str, object]] = {
        "executiveSummary": {
            "businessName": "Example Co",
            "period": "FY2024",
            "totalRevenue": "$0",
            "totalExpenses": "$0",
            "netIncome": "$0",
            "revenueGrowth": "0%",
        },
        "cashFlowAnalysis": {
            "operatingCashFlow": "N/A",
            "investingCashFlow": "N/A",
            "financingCashFlow": "N/A",
            "netCashFlow": "N/A",
            "cashFlowTrend": "Stable",
        },
        "financialHealth": "Offline example analysis.",
        "keyRisks": "None identified.",
        "opportunities": "None identified.",
        "cashFlowProjection": "Flat.",
        "recommendations": "Configure a real analysis provider.",
        "dataQuality": "LOW",
        "documentType": "example",
    }

    GENERAL_RESPONSE: ClassVar[dict[str, object]] = {
        "documentType": "example",
        "summary": "Offline example analysis.",
        "keyPoints": [],
        "extractedData": {"dates": [], "amounts": [], "names": []},
        "isFinancial": False,
        "suggestedAction": "Configure a real analysis provider.",
    }

    TEXT_RESPONSE: ClassVar[str] = "This is an offline example response."

    def create_completion(
        self,
        *,
        model: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
        timeout_seconds: float | None = None,
    ) -> str:
        _ = model, max_tokens, temperature, timeout_seconds
        if '"executiveSummary"' in prompt:
            return "```json\n" + json.dumps(self.FINANCIAL_RESPONSE, indent=2) + "\n```"
        if '"keyPoints"' in prompt:
            return json.dumps(self.GENERAL_RESPONSE)
        return self.TEXT_RESPONSE
