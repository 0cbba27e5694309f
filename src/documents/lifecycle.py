"""Document lifecycle state machine.

Provides declarative state transitions for uploaded documents with
callbacks that update the document record and log each step.
"""

from contextvars import Token
from typing import Any

import structlog
from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from src.core.logging import document_id_ctx
from src.documents.models import DocumentStatus, TaxDocument, TaxFormType

logger = structlog.get_logger()


class DocumentStateMachine(StateMachine):
    """State machine for document lifecycle management.

    States match DocumentStatus enum from models:
    - uploading: File received, not yet handed to analysis
    - analyzing: Classification and field extraction running
    - verified: Extraction accepted (final)
    - failed: Analysis failed, status `error` (final)

    Transitions:
    - start_analysis: uploading -> analyzing
    - verify: analyzing -> verified
    - reject: uploading/analyzing -> failed
    """

    uploading = State(initial=True, value=DocumentStatus.UPLOADING)
    analyzing = State(value=DocumentStatus.ANALYZING)
    verified = State(final=True, value=DocumentStatus.VERIFIED)
    failed = State(final=True, value=DocumentStatus.ERROR)

    start_analysis = uploading.to(analyzing)
    verify = analyzing.to(verified, validators="validate_extraction")
    reject = uploading.to(failed) | analyzing.to(failed)

    def __init__(self, document: TaxDocument) -> None:
        """Initialize state machine for a document.

        Args:
            document: Document record to manage; the machine starts from
                its current status.
        """
        self.document = document
        self._checked: TaxDocument | None = None
        self._context_token: Token[str | None] | None = None
        super().__init__(start_value=document.status)

    @property
    def document_status(self) -> DocumentStatus:
        """Get current state as DocumentStatus enum."""
        return self.current_state.value

    def before_transition(self, event: str) -> None:
        self._context_token = document_id_ctx.set(self.document.id)

    def after_transition(self, event: str) -> None:
        if self._context_token is not None:
            document_id_ctx.reset(self._context_token)
            self._context_token = None

    def on_start_analysis(self) -> None:
        """Called when analysis begins."""
        self.document.status = DocumentStatus.ANALYZING
        logger.info(
            "document_analysis_started",
            document_id=self.document.id,
            name=self.document.name,
        )

    def validate_extraction(
        self,
        form_type: TaxFormType,
        extracted_data: dict[str, Any],
        confidence: float = 1.0,
    ) -> None:
        """Reject malformed extraction results before the state changes.

        Raises:
            pydantic.ValidationError: If the form type, values or confidence
                do not fit a verified document.
        """
        self._checked = TaxDocument(
            name=self.document.name,
            type=form_type,
            status=DocumentStatus.VERIFIED,
            confidence=confidence,
            extracted_data=extracted_data,
        )

    def on_verify(self) -> None:
        """Called when extraction is accepted."""
        checked = self._checked
        self.document.type = checked.type
        self.document.confidence = checked.confidence
        self.document.extracted_data = checked.extracted_data
        self.document.status = DocumentStatus.VERIFIED
        logger.info(
            "document_verified",
            document_id=self.document.id,
            form_type=checked.type.value,
            fields=len(checked.extracted_data or {}),
            confidence=checked.confidence,
        )

    def on_reject(self, reason: str = "") -> None:
        """Called when analysis fails.

        Args:
            reason: Description of failure.
        """
        self.document.status = DocumentStatus.ERROR
        self.document.error = reason or None
        logger.warning(
            "document_rejected",
            document_id=self.document.id,
            reason=reason,
        )


def create_state_machine(document: TaxDocument) -> DocumentStateMachine:
    """Factory function to create state machine for a document.

    Args:
        document: Document record.

    Returns:
        DocumentStateMachine initialized from the document's current state.
    """
    return DocumentStateMachine(document=document)


__all__ = [
    "DocumentStateMachine",
    "TransitionNotAllowed",
    "create_state_machine",
]
