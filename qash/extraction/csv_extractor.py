import re

from qash.extraction.base import BaseExtractor
from qash.processor.cancellation import CancellationToken

_UNSAFE_CHARS = re.compile(r"[<>\"']")


def render_csv_rows(text: str) -> str:
    """Label each non-blank line as ``Row N`` with markup and quote characters removed."""
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    lines = [line for line in lines if line.strip()]
    if not lines:
        return ""
    rows = [f"Row {index}: {_UNSAFE_CHARS.sub('', line)}\n" for index, line in enumerate(lines, 1)]
    return "CSV Data:\n" + "".join(rows)


class CsvExtractor(BaseExtractor):
    """Delimited text, sanitized line by line before it reaches a prompt."""

    def extract(
        self,
        content: bytes,
        *,
        media_type: str,
        file_name: str,
        token: CancellationToken | None = None,
    ) -> str:
        return render_csv_rows(content.decode("utf-8", errors="replace"))
