"""Document upload and analysis API endpoints."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.deps import get_filing_session, session_errors
from src.core.config import settings
from src.core.logging import get_logger
from src.documents.models import FieldValue, TaxDocument, TaxFormType
from src.filing.session import FilingSession

logger = get_logger(__name__)

router = APIRouter(prefix="/api/documents", tags=["documents"])

SessionDep = Annotated[FilingSession, Depends(get_filing_session)]


class UploadRequest(BaseModel):
    """Payload announcing a received file."""

    name: str = Field(min_length=1, max_length=255)


class AnalysisRequest(BaseModel):
    """Extraction results posted by the document-analysis service."""

    type: TaxFormType
    extracted_data: dict[str, FieldValue]
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)


class AnalysisErrorRequest(BaseModel):
    """Failure reported by the document-analysis service."""

    reason: str = ""


class DocumentResponse(BaseModel):
    """Document as returned to clients."""

    id: str
    name: str
    type: str
    status: str
    confidence: float
    upload_date: date
    extracted_data: dict[str, float | str] | None = None
    error: str | None = None


def _document_response(document: TaxDocument) -> DocumentResponse:
    """Build response model, keeping numbers numeric in JSON."""
    extracted: dict[str, float | str] | None = None
    if document.extracted_data is not None:
        extracted = {
            key: float(value) if isinstance(value, Decimal) else value
            for key, value in document.extracted_data.items()
        }
    return DocumentResponse(
        id=document.id,
        name=document.name,
        type=document.type.value,
        status=document.status.value,
        confidence=document.confidence,
        upload_date=document.upload_date,
        extracted_data=extracted,
        error=document.error,
    )


@router.get("", response_model=list[DocumentResponse])
async def list_documents(session: SessionDep) -> list[DocumentResponse]:
    """List documents in upload order."""
    return [_document_response(doc) for doc in session.documents]


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(payload: UploadRequest, session: SessionDep) -> DocumentResponse:
    """Register an uploaded file.

    With demo analysis enabled the file is analyzed immediately; otherwise it
    waits in `uploading` for the analysis service.
    """
    with session_errors():
        if settings.demo_analysis_enabled:
            document = session.process_upload(payload.name)
        else:
            document = session.upload(payload.name)
    return _document_response(document)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(document_id: str, session: SessionDep) -> DocumentResponse:
    """Get a single document."""
    with session_errors():
        document = session.get(document_id)
    return _document_response(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(document_id: str, session: SessionDep) -> None:
    """Remove a document from the return."""
    with session_errors():
        session.remove(document_id)


@router.post("/{document_id}/analysis/start", response_model=DocumentResponse)
async def start_analysis(document_id: str, session: SessionDep) -> DocumentResponse:
    """Mark a document as being analyzed."""
    with session_errors():
        document = session.start_analysis(document_id)
    return _document_response(document)


@router.post("/{document_id}/analysis", response_model=DocumentResponse)
async def complete_analysis(
    document_id: str,
    payload: AnalysisRequest,
    session: SessionDep,
) -> DocumentResponse:
    """Accept extraction results and verify the document."""
    with session_errors():
        document = session.complete_analysis(
            document_id,
            form_type=payload.type,
            extracted_data=payload.extracted_data,
            confidence=payload.confidence,
        )
    return _document_response(document)


@router.post("/{document_id}/analysis/error", response_model=DocumentResponse)
async def fail_analysis(
    document_id: str,
    payload: AnalysisErrorRequest,
    session: SessionDep,
) -> DocumentResponse:
    """Record that analysis of a document failed."""
    with session_errors():
        document = session.fail_analysis(document_id, reason=payload.reason)
    logger.info("document_analysis_error_reported", document_id=document_id)
    return _document_response(document)
