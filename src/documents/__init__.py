"""Document models, lifecycle and demo analysis.

This module provides:
- Pydantic model for uploaded tax documents with lenient amount access
- Lifecycle state machine (uploading -> analyzing -> verified/error)
- File-name based demo analyzer standing in for the analysis service
"""

from src.documents.analyzer import AnalysisResult, analyze_document, detect_form_type
from src.documents.lifecycle import (
    DocumentStateMachine,
    TransitionNotAllowed,
    create_state_machine,
)
from src.documents.models import (
    DocumentStatus,
    FieldValue,
    FilingStatus,
    TaxDocument,
    TaxFormType,
    coerce_amount,
)

__all__ = [
    # Document models
    "DocumentStatus",
    "FieldValue",
    "FilingStatus",
    "TaxDocument",
    "TaxFormType",
    "coerce_amount",
    # Lifecycle
    "DocumentStateMachine",
    "TransitionNotAllowed",
    "create_state_machine",
    # Analyzer
    "AnalysisResult",
    "analyze_document",
    "detect_form_type",
]
