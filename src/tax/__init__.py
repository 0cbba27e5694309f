"""Tax summary calculation and year-specific configurations."""

from src.tax.summary import (
    BreakdownItem,
    DeductionChoice,
    IncomeTotals,
    TaxSummary,
    aggregate_income,
    build_deduction_breakdown,
    build_income_breakdown,
    calculate_compliance_score,
    calculate_tax_summary,
    calculate_taxable_income,
    derive_filing_status,
    estimate_tax,
    round_currency,
    select_deduction,
)
from src.tax.year_config import (
    TAX_YEAR_2024,
    TAX_YEAR_CONFIGS,
    TaxYearConfig,
    get_tax_year_config,
)

__all__ = [
    "TaxYearConfig",
    "TAX_YEAR_2024",
    "TAX_YEAR_CONFIGS",
    "get_tax_year_config",
    "BreakdownItem",
    "DeductionChoice",
    "IncomeTotals",
    "TaxSummary",
    "aggregate_income",
    "build_deduction_breakdown",
    "build_income_breakdown",
    "calculate_compliance_score",
    "calculate_tax_summary",
    "calculate_taxable_income",
    "derive_filing_status",
    "estimate_tax",
    "round_currency",
    "select_deduction",
]
