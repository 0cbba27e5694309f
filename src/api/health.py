"""Health check endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.api.deps import get_filing_session
from src.filing.session import FilingSession

router = APIRouter(prefix="/api", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    tax_year: int
    documents: int


@router.get("/health", response_model=HealthResponse)
async def health_check(
    session: Annotated[FilingSession, Depends(get_filing_session)],
) -> HealthResponse:
    """Report liveness and the tax year the session calculates for."""
    return HealthResponse(
        status="ok",
        tax_year=session.config.tax_year,
        documents=len(session.documents),
    )
