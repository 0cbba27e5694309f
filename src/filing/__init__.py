"""Filing session: document collection and its derived tax summary."""

from src.filing.session import (
    DocumentNotFoundError,
    FilingLockedError,
    FilingNotReadyError,
    FilingSession,
)

__all__ = [
    "DocumentNotFoundError",
    "FilingLockedError",
    "FilingNotReadyError",
    "FilingSession",
]
