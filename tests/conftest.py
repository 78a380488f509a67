import io
import random
from collections.abc import Generator

import pymupdf
import pytest
from flask import Flask
from flask_jwt_extended import JWTManager
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
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
def titled_pdf_bytes() -> bytes:
    """Single-page PDF carrying title and author in its info dictionary."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.setTitle("Quarterly report")
    c.setAuthor("Finance team")
    c.drawString(72, 720, "Revenue went up")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def image_pdf_bytes() -> bytes:
    """Single-page PDF holding one losslessly stored noise image (incompressible)."""
    width = height = 200
    samples = random.Random(0).randbytes(width * height * 3)
    pix = pymupdf.Pixmap(pymupdf.csRGB, width, height, samples, False)
    doc = pymupdf.open()
    page = doc.new_page(width=612, height=792)
    page.insert_image(pymupdf.Rect(72, 72, 72 + width, 72 + height), pixmap=pix)
    data = doc.tobytes(deflate=True)
    doc.close()
    return data


@pytest.fixture()
def jwt_app() -> Generator[Flask, None, None]:
    """Bare Flask app context so session tokens can be issued and verified."""
    app = Flask(__name__)
    app.config["JWT_SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
    JWTManager(app)
    with app.app_context():
        yield app
