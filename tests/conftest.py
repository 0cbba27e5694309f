"""Pytest configuration and shared fixtures for tests."""

from collections.abc import Callable, Iterator
from decimal import Decimal
from typing import Any

import pytest
from fastapi.testclient import TestClient

from src.core.config import settings
from src.documents.models import DocumentStatus, TaxDocument, TaxFormType
from src.main import app

DocumentFactory = Callable[..., TaxDocument]


def _make_document(
    form_type: TaxFormType = TaxFormType.W2,
    data: dict[str, Any] | None = None,
    status: DocumentStatus = DocumentStatus.VERIFIED,
    name: str = "document.pdf",
) -> TaxDocument:
    """Build a document in the given state.

    Extracted data is only attached to verified documents.
    """
    return TaxDocument(
        name=name,
        type=form_type,
        status=status,
        extracted_data=data if status == DocumentStatus.VERIFIED else None,
    )


@pytest.fixture
def make_document() -> DocumentFactory:
    """Factory for documents in any lifecycle state."""
    return _make_document


@pytest.fixture
def sample_w2() -> TaxDocument:
    """Verified W-2 with $85,000 wages and $12,500 withheld."""
    return _make_document(
        TaxFormType.W2,
        {
            "Employer EIN": "12-3456789",
            "Wages, Tips": Decimal("85000"),
            "Fed Income Tax": Decimal("12500"),
            "State": "CA",
        },
        name="acme_w2.pdf",
    )


@pytest.fixture
def sample_receipt() -> TaxDocument:
    """Verified receipt for $500."""
    return _make_document(TaxFormType.RECEIPT, {"Amount": Decimal("500")}, name="receipt.jpg")


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """Create a test client with a fresh filing session.

    Entering the client runs the lifespan, which creates the session.
    """
    monkeypatch.setattr(settings, "demo_analysis_enabled", True)
    with TestClient(app) as test_client:
        yield test_client
