"""Tax summary calculation for the filing dashboard.

This module provides pure functions that project a collection of processed
documents onto a financial summary:
- Income aggregation from W-2, 1099 and K-1 documents
- Standard vs itemized (receipt) deduction selection
- Federal tax estimate using marginal brackets
- Refund/owed reconciliation against withholding
- Filing readiness and compliance heuristics
- Chart-ready income and deduction breakdowns

Nothing here keeps state or performs I/O: calling `calculate_tax_summary`
twice with the same documents yields identical summaries. All monetary
values use Decimal for precision; rounding happens once, on output.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from decimal import ROUND_FLOOR, Decimal

from src.documents.models import (
    AMOUNT,
    FED_INCOME_TAX,
    FED_TAX_WITHHELD,
    FEDERAL_INCOME_TAX_WITHHELD,
    INTEREST_INCOME,
    NET_RENTAL_REAL_ESTATE_INCOME,
    NONEMPLOYEE_COMP,
    ORDINARY_BUSINESS_INCOME,
    TOTAL_ORDINARY_DIVIDENDS,
    WAGES_TIPS,
    DocumentStatus,
    FilingStatus,
    TaxDocument,
    TaxFormType,
)
from src.tax.year_config import TAX_YEAR_2024, TaxYearConfig


# =============================================================================
# Data Structures
# =============================================================================


@dataclass(frozen=True)
class IncomeTotals:
    """Accumulated amounts from verified documents.

    Attributes:
        w2_income: Sum of W-2 wages and tips.
        nec_income: Sum of 1099-NEC nonemployee compensation.
        div_income: Sum of 1099-DIV total ordinary dividends.
        int_income: Sum of 1099-INT interest income.
        k1_income: Sum of K-1 ordinary business and net rental income.
        itemized_deductions: Sum of receipt amounts.
        federal_withholding: Sum of federal tax withheld across income forms.
    """

    w2_income: Decimal = Decimal("0")
    nec_income: Decimal = Decimal("0")
    div_income: Decimal = Decimal("0")
    int_income: Decimal = Decimal("0")
    k1_income: Decimal = Decimal("0")
    itemized_deductions: Decimal = Decimal("0")
    federal_withholding: Decimal = Decimal("0")

    @property
    def total_income(self) -> Decimal:
        return (
            self.w2_income
            + self.nec_income
            + self.div_income
            + self.int_income
            + self.k1_income
        )


@dataclass(frozen=True)
class DeductionChoice:
    """Result of deduction selection.

    Attributes:
        method: Either "standard" or "itemized".
        amount: The deduction amount to use.
        standard_amount: The standard deduction for the tax year.
        itemized_amount: The receipt total offered for itemizing.
    """

    method: str
    amount: Decimal
    standard_amount: Decimal
    itemized_amount: Decimal


@dataclass(frozen=True)
class BreakdownItem:
    """One slice of a chart series."""

    label: str
    amount: Decimal
    color: str


@dataclass(frozen=True)
class TaxSummary:
    """Financial summary derived from the current document collection.

    Attributes:
        total_income: Sum of all income-bearing documents.
        deductions: Larger of the standard deduction and itemized receipts.
        taxable_income: Income after deductions, never negative.
        federal_withholding: Federal tax already withheld.
        estimated_tax: Marginal-bracket tax estimate, whole units.
        estimated_refund: Withholding minus tax, whole units; negative is owed.
        filing_status: Readiness label.
        compliance_score: Heuristic between 0 and 100.
        income_breakdown: Non-empty series of income categories.
        deduction_breakdown: Single-entry series naming the chosen deduction.
    """

    total_income: Decimal
    deductions: Decimal
    taxable_income: Decimal
    federal_withholding: Decimal
    estimated_tax: Decimal
    estimated_refund: Decimal
    filing_status: FilingStatus
    compliance_score: int
    income_breakdown: tuple[BreakdownItem, ...]
    deduction_breakdown: tuple[BreakdownItem, ...]

    def with_status(self, filing_status: FilingStatus) -> TaxSummary:
        """Return a copy of this summary carrying another filing status."""
        return replace(self, filing_status=filing_status)


# =============================================================================
# Constants
# =============================================================================

COMPLIANCE_BASE_SCORE = 100
COMPLIANCE_ERROR_PENALTY = 20
COMPLIANCE_UNKNOWN_PENALTY = 10

# Chart colors by breakdown label
INCOME_COLORS: dict[str, str] = {
    "W-2 Wages": "#3b82f6",
    "1099-NEC": "#8b5cf6",
    "Dividends": "#06b6d4",
    "Interest": "#14b8a6",
    "K-1 Income": "#6366f1",
}
NO_INCOME_COLOR = "#e2e8f0"
STANDARD_DEDUCTION_COLOR = "#10b981"
BUSINESS_EXPENSES_COLOR = "#f59e0b"


# =============================================================================
# Income Aggregation
# =============================================================================


def aggregate_income(documents: Iterable[TaxDocument]) -> IncomeTotals:
    """Aggregate income, withholding and receipts from verified documents.

    Only verified documents that carry extracted data contribute. Missing or
    non-numeric fields count as zero. Unknown and 1040 documents contribute
    nothing.

    Args:
        documents: Documents in upload order.

    Returns:
        IncomeTotals with subtotals by income source.

    Example:
        >>> w2 = TaxDocument(name="w2.pdf", type=TaxFormType.W2, status="verified",
        ...                  extracted_data={"Wages, Tips": 85000})
        >>> aggregate_income([w2]).total_income
        Decimal('85000')
    """
    w2_income = Decimal("0")
    nec_income = Decimal("0")
    div_income = Decimal("0")
    int_income = Decimal("0")
    k1_income = Decimal("0")
    itemized_deductions = Decimal("0")
    federal_withholding = Decimal("0")

    for doc in documents:
        if doc.status != DocumentStatus.VERIFIED or not doc.extracted_data:
            continue

        if doc.type == TaxFormType.W2:
            w2_income += doc.amount(WAGES_TIPS)
            federal_withholding += doc.amount(FED_INCOME_TAX)
        elif doc.type == TaxFormType.FORM_1099_NEC:
            nec_income += doc.amount(NONEMPLOYEE_COMP)
            federal_withholding += doc.amount(FED_TAX_WITHHELD)
        elif doc.type == TaxFormType.FORM_1099_DIV:
            div_income += doc.amount(TOTAL_ORDINARY_DIVIDENDS)
            federal_withholding += doc.amount(FEDERAL_INCOME_TAX_WITHHELD)
        elif doc.type == TaxFormType.FORM_1099_INT:
            int_income += doc.amount(INTEREST_INCOME)
            federal_withholding += doc.amount(FEDERAL_INCOME_TAX_WITHHELD)
        elif doc.type == TaxFormType.SCHEDULE_K1:
            # K-1 carries no withholding
            k1_income += doc.amount(ORDINARY_BUSINESS_INCOME) + doc.amount(
                NET_RENTAL_REAL_ESTATE_INCOME
            )
        elif doc.type == TaxFormType.RECEIPT:
            itemized_deductions += doc.amount(AMOUNT)

    return IncomeTotals(
        w2_income=w2_income,
        nec_income=nec_income,
        div_income=div_income,
        int_income=int_income,
        k1_income=k1_income,
        itemized_deductions=itemized_deductions,
        federal_withholding=federal_withholding,
    )


# =============================================================================
# Deductions and Tax
# =============================================================================


def select_deduction(
    itemized_total: Decimal, config: TaxYearConfig = TAX_YEAR_2024
) -> DeductionChoice:
    """Select the larger of the standard deduction and the itemized total.

    Itemizing is chosen only when it strictly exceeds the standard amount.

    Example:
        >>> select_deduction(Decimal("10000")).method
        'standard'
    """
    standard_amount = config.standard_deduction_single

    if itemized_total > standard_amount:
        return DeductionChoice(
            method="itemized",
            amount=itemized_total,
            standard_amount=standard_amount,
            itemized_amount=itemized_total,
        )
    return DeductionChoice(
        method="standard",
        amount=standard_amount,
        standard_amount=standard_amount,
        itemized_amount=itemized_total,
    )


def calculate_taxable_income(total_income: Decimal, deduction: Decimal) -> Decimal:
    """Income after deductions, floored at zero."""
    return max(Decimal("0"), total_income - deduction)


def estimate_tax(taxable_income: Decimal, config: TaxYearConfig = TAX_YEAR_2024) -> Decimal:
    """Estimate federal income tax using marginal brackets.

    Each slice of income is taxed at the rate of the bracket it falls in. The
    result is unrounded; for 2024 it matches `1160 + 0.12 * (x - 11600)` in
    the second bracket and `5426 + 0.22 * (x - 47150)` in the third.

    Args:
        taxable_income: Income after deductions.
        config: Tax year holding the bracket table.

    Returns:
        Estimated tax, zero for non-positive income.

    Example:
        >>> estimate_tax(Decimal("70400"))
        Decimal('10541.00')
    """
    remaining_income = taxable_income
    tax = Decimal("0")
    prev_bracket = Decimal("0")

    for upper_bound, rate in config.brackets_single:
        if remaining_income <= Decimal("0"):
            break

        if upper_bound is None:
            bracket_size = remaining_income
        else:
            bracket_size = min(remaining_income, upper_bound - prev_bracket)

        tax += bracket_size * rate
        remaining_income -= bracket_size
        if upper_bound is not None:
            prev_bracket = upper_bound

    return tax


def round_currency(value: Decimal) -> Decimal:
    """Round to the nearest whole currency unit, halves toward +infinity.

    Example:
        >>> round_currency(Decimal("-2.5"))
        Decimal('-2')
    """
    return (value + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR)


# =============================================================================
# Readiness
# =============================================================================


def derive_filing_status(documents: Sequence[TaxDocument]) -> FilingStatus:
    """Derive the readiness label from document states.

    `Filed` is never produced here; it is set by an explicit submission.
    """
    if not documents:
        return FilingStatus.NOT_STARTED
    if all(doc.status == DocumentStatus.VERIFIED for doc in documents):
        return FilingStatus.REVIEW_READY
    return FilingStatus.IN_PROGRESS


def calculate_compliance_score(documents: Sequence[TaxDocument]) -> int:
    """Heuristic confidence that the return is complete and consistent.

    Starts at 100, loses 20 when any document failed analysis and 10 when a
    verified document could not be classified. An empty collection scores 0.
    The result is clamped to [0, 100].
    """
    if not documents:
        return 0

    score = COMPLIANCE_BASE_SCORE
    if any(doc.status == DocumentStatus.ERROR for doc in documents):
        score -= COMPLIANCE_ERROR_PENALTY
    if any(
        doc.status == DocumentStatus.VERIFIED and doc.type == TaxFormType.UNKNOWN
        for doc in documents
    ):
        score -= COMPLIANCE_UNKNOWN_PENALTY

    return max(0, min(COMPLIANCE_BASE_SCORE, score))


# =============================================================================
# Breakdowns
# =============================================================================


def build_income_breakdown(totals: IncomeTotals) -> tuple[BreakdownItem, ...]:
    """Income categories with a positive amount, in fixed order.

    A single `No Income` placeholder of 1 is returned when every category is
    zero so that chart consumers never receive an empty series.
    """
    categories = [
        ("W-2 Wages", totals.w2_income),
        ("1099-NEC", totals.nec_income),
        ("Dividends", totals.div_income),
        ("Interest", totals.int_income),
        ("K-1 Income", totals.k1_income),
    ]
    items = tuple(
        BreakdownItem(label=label, amount=amount, color=INCOME_COLORS[label])
        for label, amount in categories
        if amount > 0
    )
    if not items:
        return (BreakdownItem(label="No Income", amount=Decimal("1"), color=NO_INCOME_COLOR),)
    return items


def build_deduction_breakdown(choice: DeductionChoice) -> tuple[BreakdownItem, ...]:
    """Single entry naming the deduction that was taken."""
    if choice.method == "itemized":
        return (
            BreakdownItem(
                label="Business Expenses",
                amount=choice.itemized_amount,
                color=BUSINESS_EXPENSES_COLOR,
            ),
        )
    return (
        BreakdownItem(
            label="Standard Deduction",
            amount=choice.standard_amount,
            color=STANDARD_DEDUCTION_COLOR,
        ),
    )


# =============================================================================
# Summary
# =============================================================================


def calculate_tax_summary(
    documents: Sequence[TaxDocument],
    config: TaxYearConfig = TAX_YEAR_2024,
) -> TaxSummary:
    """Project the document collection onto a tax summary.

    Total over its input: malformed amounts degrade to zero and an empty
    collection yields an all-zero `Not Started` summary.

    Args:
        documents: Snapshot of the document collection, in upload order.
        config: Tax year policy values.

    Returns:
        TaxSummary recomputed from scratch.

    Example:
        >>> summary = calculate_tax_summary([])
        >>> summary.filing_status, summary.deductions
        (<FilingStatus.NOT_STARTED: 'Not Started'>, Decimal('14600'))
    """
    totals = aggregate_income(documents)
    deduction = select_deduction(totals.itemized_deductions, config)
    taxable_income = calculate_taxable_income(totals.total_income, deduction.amount)

    tax = estimate_tax(taxable_income, config)
    refund = totals.federal_withholding - tax

    return TaxSummary(
        total_income=totals.total_income,
        deductions=deduction.amount,
        taxable_income=taxable_income,
        federal_withholding=totals.federal_withholding,
        estimated_tax=round_currency(tax),
        estimated_refund=round_currency(refund),
        filing_status=derive_filing_status(documents),
        compliance_score=calculate_compliance_score(documents),
        income_breakdown=build_income_breakdown(totals),
        deduction_breakdown=build_deduction_breakdown(deduction),
    )
