"""FastAPI application entry point with lifespan management."""

from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.documents import router as documents_router
from src.api.health import router as health_router
from src.api.middleware import RequestContextMiddleware
from src.api.summary import router as summary_router
from src.core.config import settings
from src.core.logging import configure_logging, get_logger
from src.filing.session import FilingSession
from src.tax.year_config import get_tax_year_config

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle resources.

    Startup:
        - Configure structured logging
        - Create the filing session for the configured tax year
    """
    configure_logging()
    logger.info(
        "Starting application",
        environment=settings.environment,
        tax_year=settings.tax_year,
    )

    app.state.filing_session = FilingSession(get_tax_year_config(settings.tax_year))

    yield

    logger.info(
        "Shutting down application",
        documents=len(app.state.filing_session.documents),
    )


app = FastAPI(
    title="TaxPilot",
    description="Tax filing assistant: document intake and tax summary",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestContextMiddleware)

app.include_router(health_router)
app.include_router(documents_router)
app.include_router(summary_router)
