"""Shared fixtures: small PDFs generated with reportlab."""

from __future__ import annotations

from io import BytesIO

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docsign.api.auth import ApiKeyRecord, InMemoryApiKeyStore
from docsign.core.config import settings
from docsign.model.placeholder import Placeholder
from docsign.model.template import Template

PAGE_WIDTH, PAGE_HEIGHT = letter


def make_pdf(pages: int = 1, lines: list[tuple[str, float, str]] | None = None) -> bytes:
    """Letter-size PDF; ``lines`` are ``(font, size, text)`` drawn on page 1."""
    buffer = BytesIO()
    report = canvas.Canvas(buffer, pagesize=letter, invariant=1)
    for page_number in range(1, pages + 1):
        if page_number == 1:
            y = PAGE_HEIGHT - 72
            for font, size, text in lines or []:
                report.setFont(font, size)
                report.drawString(72, y, text)
                y -= 40
        report.showPage()
    report.save()
    return buffer.getvalue()


@pytest.fixture
def blank_pdf() -> bytes:
    return make_pdf(pages=2)


@pytest.fixture
def text_pdf() -> bytes:
    lines = [("Helvetica", 11, f"Body line {index}") for index in range(5)]
    lines.append(("Times-Bold", 14, "Heading"))
    return make_pdf(lines=lines)


@pytest.fixture
def acroform_pdf() -> bytes:
    buffer = BytesIO()
    report = canvas.Canvas(buffer, pagesize=letter)
    form = report.acroForm
    form.textfield(
        name="full_name",
        value="Jane",
        x=100,
        y=600,
        width=200,
        height=30,
        fontSize=10,
        fieldFlags="required",
    )
    form.checkbox(name="agree", x=100, y=500, size=20)
    report.showPage()
    report.save()
    return buffer.getvalue()


@pytest.fixture
def template() -> Template:
    return Template(
        title="Lease",
        owner_id="user-1",
        placeholders=[
            Placeholder(key="name", label="Name", x=100, y=50, width=200, height=30, required=True),
            Placeholder(key="city", label="City", x=100, y=120, width=200, height=30),
        ],
    )


@pytest.fixture
def key_store() -> InMemoryApiKeyStore:
    return InMemoryApiKeyStore(
        [
            ApiKeyRecord(key=f"{settings.API_KEY_PREFIX}valid", user_id="user-1", name="ci"),
            ApiKeyRecord(key=f"{settings.API_KEY_PREFIX}other", user_id="user-2"),
            ApiKeyRecord(key=f"{settings.API_KEY_PREFIX}off", user_id="user-1", enabled=False),
        ]
    )
