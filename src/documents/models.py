"""Pydantic models for uploaded tax documents.

This module defines the document record exchanged between the upload flow,
the document-analysis collaborator and the summary calculator:
- TaxFormType: closed set of recognised form categories
- DocumentStatus: lifecycle state of an upload
- TaxDocument: the record itself, with its open map of extracted fields

Extracted values are either numbers (Decimal) or text. Numeric access goes
through `coerce_amount`, which degrades anything unusable to zero.
"""

from __future__ import annotations

import re
import uuid
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class TaxFormType(str, Enum):
    """Type of tax document."""

    W2 = "W-2"
    FORM_1099_NEC = "1099-NEC"
    FORM_1099_DIV = "1099-DIV"
    FORM_1099_INT = "1099-INT"
    SCHEDULE_K1 = "Schedule K-1"
    FORM_1040 = "1040"
    RECEIPT = "Receipt"
    UNKNOWN = "Unknown"


class DocumentStatus(str, Enum):
    """Lifecycle state of an uploaded document."""

    UPLOADING = "uploading"
    ANALYZING = "analyzing"
    VERIFIED = "verified"
    ERROR = "error"


class FilingStatus(str, Enum):
    """Readiness of the return, derived from the document collection."""

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    REVIEW_READY = "Review Ready"
    FILED = "Filed"


# Extracted field names, as produced by the analysis collaborator
WAGES_TIPS = "Wages, Tips"
FED_INCOME_TAX = "Fed Income Tax"
NONEMPLOYEE_COMP = "Nonemployee Comp"
FED_TAX_WITHHELD = "Fed Tax Withheld"
TOTAL_ORDINARY_DIVIDENDS = "Total Ordinary Dividends"
FEDERAL_INCOME_TAX_WITHHELD = "Federal Income Tax Withheld"
INTEREST_INCOME = "Interest Income"
ORDINARY_BUSINESS_INCOME = "Ordinary Business Income"
NET_RENTAL_REAL_ESTATE_INCOME = "Net Rental Real Estate Income"
AMOUNT = "Amount"

FieldValue = Decimal | str
"""A single extracted value: a number or free text."""

_AMOUNT_NOISE = re.compile(r"[\s,$]")

# Largest accepted magnitude is just under 10**16
MAX_AMOUNT_EXPONENT = 15


def coerce_amount(value: object) -> Decimal:
    """Convert an extracted value to a Decimal amount.

    Numbers pass through (floats via their string form), numeric strings are
    parsed after dropping whitespace, thousands separators and a dollar sign.
    Everything else, including booleans, NaN, infinities and magnitudes of
    10**16 or more, is zero.

    Args:
        value: Raw extracted value.

    Returns:
        Finite Decimal amount, `Decimal("0")` when the value is unusable.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = _AMOUNT_NOISE.sub("", value)
        if not cleaned:
            return Decimal("0")
        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            return Decimal("0")
    else:
        return Decimal("0")

    if not amount.is_finite() or amount.adjusted() > MAX_AMOUNT_EXPONENT:
        return Decimal("0")
    return amount


def _new_document_id() -> str:
    return uuid.uuid4().hex[:12]


class TaxDocument(BaseModel):
    """An uploaded tax document and whatever was extracted from it.

    Attributes:
        id: Opaque unique identifier.
        name: Original file name.
        type: Classified form type, `Unknown` until analysis completes.
        status: Lifecycle state.
        confidence: Classification confidence between 0.0 and 1.0.
        upload_date: Day the document was received.
        extracted_data: Field name to value map, only on verified documents.
        error: Reason recorded when analysis failed.
    """

    id: str = Field(default_factory=_new_document_id)
    name: str = Field(min_length=1)
    type: TaxFormType = TaxFormType.UNKNOWN
    status: DocumentStatus = DocumentStatus.UPLOADING
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    upload_date: date = Field(default_factory=date.today)
    extracted_data: dict[str, FieldValue] | None = None
    error: str | None = None

    @model_validator(mode="after")
    def _data_only_when_verified(self) -> TaxDocument:
        if self.extracted_data is not None and self.status != DocumentStatus.VERIFIED:
            raise ValueError("extracted_data is only allowed on verified documents")
        return self

    @property
    def is_verified(self) -> bool:
        return self.status == DocumentStatus.VERIFIED

    def amount(self, field_name: str) -> Decimal:
        """Numeric value of an extracted field, zero when missing or unusable."""
        if not self.extracted_data:
            return Decimal("0")
        return coerce_amount(self.extracted_data.get(field_name))
