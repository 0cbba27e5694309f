"""Tests for the demo document analyzer."""

from decimal import Decimal

import pytest

from src.documents.analyzer import DEMO_CONFIDENCE, analyze_document, detect_form_type
from src.documents.models import TaxFormType


class TestDetectFormType:
    """Tests for file-name based classification."""

    @pytest.mark.parametrize(
        ("file_name", "expected"),
        [
            ("acme_W2_2024.pdf", TaxFormType.W2),
            ("w-2 scan.png", TaxFormType.W2),
            ("1099-nec-techcorp.pdf", TaxFormType.FORM_1099_NEC),
            ("Office Receipt.jpg", TaxFormType.RECEIPT),
            ("bank_statement.pdf", TaxFormType.UNKNOWN),
        ],
    )
    def test_detects_type(self, file_name, expected) -> None:
        assert detect_form_type(file_name) == expected

    def test_w2_wins_over_1099(self) -> None:
        assert detect_form_type("w2_and_1099.pdf") == TaxFormType.W2


class TestAnalyzeDocument:
    """Tests for the canned extraction results."""

    def test_w2_payload(self) -> None:
        result = analyze_document("w2.pdf")

        assert result.form_type == TaxFormType.W2
        assert result.confidence == DEMO_CONFIDENCE
        assert result.extracted_data["Wages, Tips"] == Decimal("85000")
        assert result.extracted_data["Fed Income Tax"] == Decimal("12500")
        assert result.summary

    def test_1099_payload(self) -> None:
        result = analyze_document("1099.pdf")

        assert result.form_type == TaxFormType.FORM_1099_NEC
        assert result.extracted_data["Nonemployee Comp"] == Decimal("15400")
        assert result.extracted_data["Fed Tax Withheld"] == Decimal("0")

    @pytest.mark.parametrize(
        ("file_name", "expected_type"),
        [("receipt.jpg", TaxFormType.RECEIPT), ("notes.txt", TaxFormType.UNKNOWN)],
    )
    def test_other_documents_get_generic_payload(self, file_name, expected_type) -> None:
        result = analyze_document(file_name)

        assert result.form_type == expected_type
        assert result.extracted_data["Amount"] == Decimal("120.50")
