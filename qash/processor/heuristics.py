from qash.analysis.models import DocumentClass

FINANCIAL_KEYWORDS: tuple[str, ...] = (
    "revenue", "income", "expense", "profit", "loss", "cash", "balance", "asset",
    "liability", "equity", "invoice", "payment", "total", "amount", "tax", "cost",
)


def is_financial(text: str) -> bool:
    """True when any financial keyword occurs in the text, case-insensitively."""
    lowered = text.lower()
    return any(keyword in lowered for keyword in FINANCIAL_KEYWORDS)


def classify_document(text: str) -> DocumentClass:
    return DocumentClass.FINANCIAL if is_financial(text) else DocumentClass.GENERAL
