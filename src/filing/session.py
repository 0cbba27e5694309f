"""Filing session state container.

A FilingSession owns one taxpayer's document collection and the summary
derived from it. Every mutation goes through the session, which drives the
document lifecycle and recomputes the summary from scratch afterwards, so
readers always see a summary that matches the current documents.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from src.core.logging import get_logger
from src.documents.analyzer import AnalysisResult, analyze_document
from src.documents.lifecycle import create_state_machine
from src.documents.models import FilingStatus, TaxDocument, TaxFormType
from src.tax.summary import TaxSummary, calculate_tax_summary
from src.tax.year_config import TAX_YEAR_2024, TaxYearConfig

logger = get_logger(__name__)

Analyzer = Callable[[str], AnalysisResult]


class DocumentNotFoundError(KeyError):
    """Raised when a document id is not part of the session."""

    def __init__(self, document_id: str) -> None:
        self.document_id = document_id
        super().__init__(document_id)

    def __str__(self) -> str:
        return f"Document not found: {self.document_id}"


class FilingNotReadyError(RuntimeError):
    """Raised when submitting a return that is not ready for review."""

    def __init__(self, filing_status: FilingStatus) -> None:
        self.filing_status = filing_status
        super().__init__(
            f"Return cannot be filed while status is '{filing_status.value}'"
        )


class FilingLockedError(RuntimeError):
    """Raised when documents are changed after the return was filed."""


class FilingSession:
    """Explicit state for one return: documents plus their derived summary.

    Attributes:
        config: Tax year policy used for every recomputation.
    """

    def __init__(self, config: TaxYearConfig = TAX_YEAR_2024) -> None:
        self.config = config
        self._documents: list[TaxDocument] = []
        self._filed = False
        self._summary = calculate_tax_summary((), config)

    @property
    def documents(self) -> tuple[TaxDocument, ...]:
        """Snapshot of the documents in upload order."""
        return tuple(self._documents)

    @property
    def summary(self) -> TaxSummary:
        """Summary of the current documents, `Filed` once submitted."""
        if self._filed:
            return self._summary.with_status(FilingStatus.FILED)
        return self._summary

    @property
    def is_filed(self) -> bool:
        return self._filed

    def get(self, document_id: str) -> TaxDocument:
        """Look up a document by id.

        Raises:
            DocumentNotFoundError: If no document has that id.
        """
        for document in self._documents:
            if document.id == document_id:
                return document
        raise DocumentNotFoundError(document_id)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def upload(self, name: str) -> TaxDocument:
        """Register a newly received file in `uploading` state."""
        self._ensure_open()
        document = TaxDocument(name=name)
        self._documents.append(document)
        logger.info("document_uploaded", document_id=document.id, name=name)
        self._recompute()
        return document

    def start_analysis(self, document_id: str) -> TaxDocument:
        """Move a document from `uploading` to `analyzing`.

        Raises:
            DocumentNotFoundError: If the id is unknown.
            TransitionNotAllowed: If the document is not uploading.
        """
        self._ensure_open()
        document = self.get(document_id)
        create_state_machine(document).start_analysis()
        self._recompute()
        return document

    def complete_analysis(
        self,
        document_id: str,
        form_type: TaxFormType,
        extracted_data: dict[str, Any],
        confidence: float = 1.0,
    ) -> TaxDocument:
        """Accept extraction results and mark the document verified.

        Raises:
            DocumentNotFoundError: If the id is unknown.
            TransitionNotAllowed: If the document is not analyzing.
            pydantic.ValidationError: If the extraction results are malformed.
        """
        self._ensure_open()
        document = self.get(document_id)
        create_state_machine(document).verify(
            form_type=form_type,
            extracted_data=extracted_data,
            confidence=confidence,
        )
        self._recompute()
        return document

    def fail_analysis(self, document_id: str, reason: str = "") -> TaxDocument:
        """Mark a document as failed.

        Raises:
            DocumentNotFoundError: If the id is unknown.
            TransitionNotAllowed: If the document already finished analysis.
        """
        self._ensure_open()
        document = self.get(document_id)
        create_state_machine(document).reject(reason=reason)
        self._recompute()
        return document

    def process_upload(self, name: str, analyzer: Analyzer = analyze_document) -> TaxDocument:
        """Upload a file and run it through analysis in one go.

        Analyzer failures leave the document in `error` instead of raising.

        Args:
            name: Original file name.
            analyzer: Callable returning AnalysisResult for a file name.

        Returns:
            The document, verified or in error.
        """
        document = self.upload(name)
        self.start_analysis(document.id)
        try:
            result = analyzer(name)
        except Exception as exc:
            logger.exception("document_analysis_failed", document_id=document.id)
            return self.fail_analysis(document.id, reason=str(exc) or type(exc).__name__)

        return self.complete_analysis(
            document.id,
            form_type=result.form_type,
            extracted_data=result.extracted_data,
            confidence=result.confidence,
        )

    def remove(self, document_id: str) -> TaxDocument:
        """Drop a document from the return.

        Raises:
            DocumentNotFoundError: If the id is unknown.
        """
        self._ensure_open()
        document = self.get(document_id)
        self._documents.remove(document)
        logger.info("document_removed", document_id=document_id)
        self._recompute()
        return document

    def submit(self) -> TaxSummary:
        """File the return.

        Returns:
            The summary with `Filed` status.

        Raises:
            FilingNotReadyError: If the return is not `Review Ready`.
        """
        status = self._summary.filing_status
        if self._filed:
            status = FilingStatus.FILED
        if status != FilingStatus.REVIEW_READY:
            logger.warning("filing_submit_rejected", filing_status=status.value)
            raise FilingNotReadyError(status)

        self._filed = True
        logger.info(
            "filing_submitted",
            documents=len(self._documents),
            estimated_refund=self._summary.estimated_refund,
        )
        return self.summary

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._filed:
            raise FilingLockedError("Return has been filed; documents are locked")

    def _recompute(self) -> None:
        self._summary = calculate_tax_summary(tuple(self._documents), self.config)
        logger.debug(
            "tax_summary_recomputed",
            filing_status=self._summary.filing_status.value,
            total_income=self._summary.total_income,
            estimated_refund=self._summary.estimated_refund,
        )
