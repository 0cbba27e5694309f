"""Tax summary and filing API endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.api.deps import get_filing_session, session_errors
from src.context.chat import build_summary_context, build_system_instruction
from src.filing.session import FilingSession
from src.tax.summary import BreakdownItem, TaxSummary

router = APIRouter(prefix="/api", tags=["summary"])

SessionDep = Annotated[FilingSession, Depends(get_filing_session)]


class CamelModel(BaseModel):
    """Response model serialized with camelCase keys for the dashboard."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BreakdownItemResponse(CamelModel):
    """One chart slice."""

    name: str
    value: float
    color: str


class SummaryResponse(CamelModel):
    """Tax summary payload."""

    total_income: float
    deductions: float
    taxable_income: float
    federal_withholding: float
    estimated_tax: int
    estimated_refund: int
    filing_status: str
    compliance_score: int
    income_breakdown: list[BreakdownItemResponse]
    deduction_breakdown: list[BreakdownItemResponse]


class ChatContextResponse(BaseModel):
    """Grounding text for the tax assistant."""

    context: str
    system_instruction: str


def _breakdown(items: tuple[BreakdownItem, ...]) -> list[BreakdownItemResponse]:
    return [
        BreakdownItemResponse(name=item.label, value=float(item.amount), color=item.color)
        for item in items
    ]


def _summary_response(summary: TaxSummary) -> SummaryResponse:
    return SummaryResponse(
        total_income=float(summary.total_income),
        deductions=float(summary.deductions),
        taxable_income=float(summary.taxable_income),
        federal_withholding=float(summary.federal_withholding),
        estimated_tax=int(summary.estimated_tax),
        estimated_refund=int(summary.estimated_refund),
        filing_status=summary.filing_status.value,
        compliance_score=summary.compliance_score,
        income_breakdown=_breakdown(summary.income_breakdown),
        deduction_breakdown=_breakdown(summary.deduction_breakdown),
    )


@router.get("/summary", response_model=SummaryResponse, response_model_by_alias=True)
async def get_summary(session: SessionDep) -> SummaryResponse:
    """Current tax summary."""
    return _summary_response(session.summary)


@router.get("/summary/context", response_model=ChatContextResponse)
async def get_chat_context(session: SessionDep) -> ChatContextResponse:
    """Summary snapshot and system instruction for the tax assistant."""
    context = build_summary_context(session.summary)
    return ChatContextResponse(
        context=context,
        system_instruction=build_system_instruction(context),
    )


@router.post("/filing/submit", response_model=SummaryResponse, response_model_by_alias=True)
async def submit_filing(session: SessionDep) -> SummaryResponse:
    """File the return once every document is verified."""
    with session_errors():
        summary = session.submit()
    return _summary_response(summary)
