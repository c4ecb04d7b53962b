import csv
import io
from collections.abc import Iterable, Iterator

import openpyxl
import xlrd

from qash.classification.formats import XLS_TYPE
from qash.extraction.base import BaseExtractor
from qash.extraction.exceptions import ExtractionError
from qash.logging.logger import Log
from qash.processor.cancellation import CancellationToken

Sheet = tuple[str, list[list[object]]]


def _read_xlsx(content: bytes) -> list[Sheet]:
    workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    try:
        return [
            (worksheet.title, [list(row) for row in worksheet.iter_rows(values_only=True)])
            for worksheet in workbook.worksheets
        ]
    finally:
        workbook.close()


def _read_xls(content: bytes) -> list[Sheet]:
    workbook = xlrd.open_workbook(file_contents=content)
    return [
        (sheet.name, [sheet.row_values(index) for index in range(sheet.nrows)])
        for sheet in workbook.sheets()
    ]


class SpreadsheetExtractor(BaseExtractor):
    """Flattens every sheet of a workbook into labelled CSV blocks.

    The reader matching the declared type runs first; the other one is tried
    once before giving up. A failure anywhere fails the whole file.
    """

    def extract(
        self,
        content: bytes,
        *,
        media_type: str,
        file_name: str,
        token: CancellationToken | None = None,
    ) -> str:
        readers = [_read_xls, _read_xlsx] if media_type == XLS_TYPE else [_read_xlsx, _read_xls]
        first_error: Exception | None = None
        for reader in readers:
            try:
                sheets = reader(content)
            except Exception as exc:
                if first_error is None:
                    first_error = exc
                    Log.warning(
                        "Primary spreadsheet reader failed, trying fallback",
                        file_name=file_name,
                        error=str(exc),
                    )
                continue
            return self._render(sheets, token)
        raise ExtractionError(
            file_name, f"Failed to process Excel file: {first_error}"
        ) from first_error

    def _render(self, sheets: list[Sheet], token: CancellationToken | None) -> str:
        parts = ["Excel Data:\n\n"]
        for name, rows in sheets:
            if token is not None:
                token.raise_if_cancelled(f"sheet {name}")
            parts.append(f"Sheet: {name}\n")
            parts.append(self._to_csv(rows))
            parts.append("\n\n")
        return "".join(parts)

    @staticmethod
    def _to_csv(rows: Iterable[list[object]]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        for row in _trim_trailing_empty(rows):
            writer.writerow(["" if value is None else value for value in row])
        return buffer.getvalue().rstrip("\n")


def _trim_trailing_empty(rows: Iterable[list[object]]) -> Iterator[list[object]]:
    """Drop trailing empty cells so sparse sheets do not render long comma runs."""
    for row in rows:
        cells = list(row)
        while cells and cells[-1] in (None, ""):
            cells.pop()
        yield cells
