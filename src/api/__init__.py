"""API module exports."""

from src.api.deps import get_filing_session, session_errors
from src.api.documents import router as documents_router
from src.api.health import router as health_router
from src.api.summary import router as summary_router

__all__ = [
    "documents_router",
    "get_filing_session",
    "health_router",
    "session_errors",
    "summary_router",
]
