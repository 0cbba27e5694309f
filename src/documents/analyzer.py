"""Demo document analyzer.

Stands in for the external document-analysis service when no real analysis
is wired up. The form type is guessed from the file name and a canned set of
extracted fields is returned, so the upload flow and the dashboard can be
exercised end to end without any API calls.

Example:
    >>> from src.documents.analyzer import analyze_document
    >>> result = analyze_document("acme_w2_2024.pdf")
    >>> result.form_type
    <TaxFormType.W2: 'W-2'>
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from src.documents.models import (
    AMOUNT,
    FED_INCOME_TAX,
    FED_TAX_WITHHELD,
    NONEMPLOYEE_COMP,
    WAGES_TIPS,
    FieldValue,
    TaxFormType,
)

DEMO_CONFIDENCE = 0.98


class AnalysisResult(BaseModel):
    """Outcome of analysing one document.

    Attributes:
        form_type: The identified form type.
        confidence: Confidence score between 0.0 and 1.0.
        summary: Short note for the user about what was found.
        extracted_data: Field name to value map.
    """

    form_type: TaxFormType
    confidence: float = Field(ge=0.0, le=1.0)
    summary: str
    extracted_data: dict[str, FieldValue]


def detect_form_type(file_name: str) -> TaxFormType:
    """Guess the form type from a file name.

    Matching is case-insensitive: `w2`/`w-2` is a W-2, `1099` a 1099-NEC and
    `receipt` a Receipt. Anything else is Unknown.
    """
    name = file_name.lower()
    if "w2" in name or "w-2" in name:
        return TaxFormType.W2
    if "1099" in name:
        return TaxFormType.FORM_1099_NEC
    if "receipt" in name:
        return TaxFormType.RECEIPT
    return TaxFormType.UNKNOWN


def _demo_fields(form_type: TaxFormType) -> tuple[str, dict[str, FieldValue]]:
    if form_type == TaxFormType.W2:
        return (
            "I've analyzed your W-2. It looks like standard employment income. "
            "I've extracted your wages and withholdings.",
            {
                "Employer EIN": "12-3456789",
                WAGES_TIPS: Decimal("85000.00"),
                FED_INCOME_TAX: Decimal("12500.00"),
                "SS Wages": Decimal("85000.00"),
                "Medicare Wages": Decimal("85000.00"),
                "State": "CA",
            },
        )
    if form_type == TaxFormType.FORM_1099_NEC:
        return (
            "I see a 1099-NEC. Since you have freelance income, Schedule C "
            "deductions for home office or equipment expenses may apply.",
            {
                "Payer Name": "Tech Corp LLC",
                "Payer TIN": "98-7654321",
                NONEMPLOYEE_COMP: Decimal("15400.00"),
                FED_TAX_WITHHELD: Decimal("0.00"),
                "State Tax No.": "CA-5542",
            },
        )
    return (
        "I've processed this document and kept it in your document vault "
        "for reference.",
        {
            "Document Date": "2024-03-15",
            "Category": "Uncategorized Expense",
            AMOUNT: Decimal("120.50"),
        },
    )


def analyze_document(file_name: str) -> AnalysisResult:
    """Analyze a document by name and return demo extraction results.

    Args:
        file_name: Original file name of the upload.

    Returns:
        AnalysisResult with the detected type and canned field values.
    """
    form_type = detect_form_type(file_name)
    summary, fields = _demo_fields(form_type)
    return AnalysisResult(
        form_type=form_type,
        confidence=DEMO_CONFIDENCE,
        summary=summary,
        extracted_data=fields,
    )
