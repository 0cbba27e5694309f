"""Assistant context built from the tax summary."""

from src.context.chat import (
    SYSTEM_INSTRUCTION,
    build_summary_context,
    build_system_instruction,
    context_changed,
)

__all__ = [
    "SYSTEM_INSTRUCTION",
    "build_summary_context",
    "build_system_instruction",
    "context_changed",
]
