"""Chat context for the tax assistant.

Turns a TaxSummary into the plain-text snapshot the conversational
assistant is grounded on, and assembles the assistant's system instruction.
The assistant itself runs elsewhere; this module only builds its input.
"""

from __future__ import annotations

from decimal import Decimal

from src.tax.summary import TaxSummary

SYSTEM_INSTRUCTION = """You are a tax expert and filing assistant.
Your goal is to help users file their taxes accurately, maximize deductions, and ensure compliance with IRS regulations.
You are professional, precise, and reassuring.

Capabilities:
1. Explain tax concepts simply.
2. Analyze uploaded document metadata.
3. Suggest potential deductions based on user input.
4. Warn about audit risks.

Always maintain a helpful and secure tone. If you are unsure about a specific tax law, advise the user to consult a CPA for that specific edge case.
Keep responses concise and easy to read."""


def _dollars(amount: Decimal) -> str:
    # Whole amounts print without a trailing ".00"
    if amount == amount.to_integral_value():
        return f"${amount.to_integral_value():f}"
    return f"${amount.normalize():f}"


def build_summary_context(summary: TaxSummary) -> str:
    """Format the summary figures the assistant needs.

    Args:
        summary: Current tax summary.

    Returns:
        One `label: value` line per figure.
    """
    lines = [
        f"Total Income: {_dollars(summary.total_income)}",
        f"Deductions: {_dollars(summary.deductions)}",
        f"Taxable Income: {_dollars(summary.taxable_income)}",
        f"Estimated Tax: {_dollars(summary.estimated_tax)}",
        f"Current Refund Status: {_dollars(summary.estimated_refund)}",
        f"Filing Status: {summary.filing_status.value}",
    ]
    return "\n".join(lines)


def build_system_instruction(context: str | None = None) -> str:
    """System instruction, with the user's tax data appended when available."""
    if not context:
        return SYSTEM_INSTRUCTION
    return f"{SYSTEM_INSTRUCTION}\n\nCURRENT USER TAX DATA:\n{context}"


def context_changed(previous: TaxSummary | None, current: TaxSummary) -> bool:
    """Whether the assistant should be re-grounded on a new summary.

    Only income and refund movements matter; status-only changes do not
    warrant a fresh conversation.
    """
    if previous is None:
        return True
    return (
        previous.total_income != current.total_income
        or previous.estimated_refund != current.estimated_refund
    )
