"""FastAPI dependency injection and error translation for the filing session."""

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, Request
from pydantic import ValidationError

from src.documents.lifecycle import TransitionNotAllowed
from src.filing.session import (
    DocumentNotFoundError,
    FilingLockedError,
    FilingNotReadyError,
    FilingSession,
)


def get_filing_session(request: Request) -> FilingSession:
    """Get the filing session from app state.

    Args:
        request: FastAPI request containing app state.

    Returns:
        FilingSession owned by the running application.
    """
    return request.app.state.filing_session


@contextmanager
def session_errors() -> Iterator[None]:
    """Translate filing session errors into HTTP responses.

    Raises:
        HTTPException: 404 for unknown documents, 409 for lifecycle and
            filing conflicts, 422 for malformed extraction results.
    """
    try:
        yield
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Document not found") from exc
    except TransitionNotAllowed as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except (FilingNotReadyError, FilingLockedError) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(
            status_code=422, detail=exc.errors(include_url=False)
        ) from exc
