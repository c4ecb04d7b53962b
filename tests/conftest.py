import io

import openpyxl
import pytest
from docx import Document
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from qash.config.settings import Settings


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Quarterly revenue 1200 USD")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_docx_bytes() -> bytes:
    """A DOCX with two paragraphs and a small table."""
    document = Document()
    document.add_paragraph("Invoice 42")
    document.add_paragraph("Payment due in 30 days")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Total"
    table.rows[0].cells[1].text = "300"
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture()
def two_sheet_xlsx_bytes() -> bytes:
    """Workbook with sheets Q1 and Q2."""
    workbook = openpyxl.Workbook()
    q1 = workbook.active
    q1.title = "Q1"
    q1.append(["Item", "Amount"])
    q1.append(["Rent", 1000])
    q2 = workbook.create_sheet("Q2")
    q2.append(["Item", "Amount"])
    q2.append(["Payroll", 2500])
    buf = io.BytesIO()
    workbook.save(buf)
    return buf.getvalue()


@pytest.fixture()
def sample_png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), color="white").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def example_settings() -> Settings:
    """Offline settings: canned completions and the in-memory store."""
    return Settings(
        _env_file=None,
        analysis_provider="example",
        analysis_store="memory",
        app_env="dev",
        file_deadline_seconds=0,
    )
