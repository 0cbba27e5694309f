"""Tests for the tax summary calculator.

These tests cover:
- Income aggregation by form type
- Standard vs itemized deduction selection
- Marginal bracket estimate and rounding
- Filing status and compliance score derivation
- Chart breakdowns
- The end-to-end summary for empty and typical inputs
"""

from decimal import Decimal

import pytest

from src.documents.models import DocumentStatus, FilingStatus, TaxFormType
from src.tax.summary import (
    BreakdownItem,
    DeductionChoice,
    IncomeTotals,
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
from src.tax.year_config import TAX_YEAR_2024


# =============================================================================
# Income Aggregation
# =============================================================================


class TestAggregateIncome:
    """Tests for income aggregation from the supported document types."""

    def test_w2_wages_and_withholding(self, sample_w2) -> None:
        """W-2 wages count as income and its federal tax as withholding."""
        result = aggregate_income([sample_w2])

        assert result.w2_income == Decimal("85000")
        assert result.total_income == Decimal("85000")
        assert result.federal_withholding == Decimal("12500")

    def test_each_income_form_uses_its_own_fields(self, make_document) -> None:
        """Every income form reads its own amount and withholding field."""
        documents = [
            make_document(
                TaxFormType.FORM_1099_NEC,
                {"Nonemployee Comp": Decimal("15400"), "Fed Tax Withheld": Decimal("100")},
            ),
            make_document(
                TaxFormType.FORM_1099_DIV,
                {
                    "Total Ordinary Dividends": Decimal("1200"),
                    "Federal Income Tax Withheld": Decimal("50"),
                },
            ),
            make_document(
                TaxFormType.FORM_1099_INT,
                {"Interest Income": Decimal("300"), "Federal Income Tax Withheld": Decimal("25")},
            ),
        ]

        result = aggregate_income(documents)

        assert result.nec_income == Decimal("15400")
        assert result.div_income == Decimal("1200")
        assert result.int_income == Decimal("300")
        assert result.total_income == Decimal("16900")
        assert result.federal_withholding == Decimal("175")

    def test_k1_sums_business_and_rental_without_withholding(self, make_document) -> None:
        """K-1 adds ordinary business and net rental income, never withholding."""
        k1 = make_document(
            TaxFormType.SCHEDULE_K1,
            {
                "Ordinary Business Income": Decimal("10000"),
                "Net Rental Real Estate Income": Decimal("2500"),
                "Fed Income Tax": Decimal("999"),
            },
        )

        result = aggregate_income([k1])

        assert result.k1_income == Decimal("12500")
        assert result.total_income == Decimal("12500")
        assert result.federal_withholding == Decimal("0")

    def test_receipt_only_feeds_itemized_deductions(self, sample_w2, sample_receipt) -> None:
        """Receipts never change income."""
        without_receipt = aggregate_income([sample_w2])
        with_receipt = aggregate_income([sample_w2, sample_receipt])

        assert with_receipt.total_income == without_receipt.total_income
        assert with_receipt.itemized_deductions == Decimal("500")

    def test_unknown_and_1040_contribute_nothing(self, make_document) -> None:
        """Unclassified and reserved form types are ignored."""
        documents = [
            make_document(TaxFormType.UNKNOWN, {"Amount": Decimal("120.50")}),
            make_document(TaxFormType.FORM_1040, {"Wages, Tips": Decimal("5000")}),
        ]

        assert aggregate_income(documents) == IncomeTotals()

    def test_unverified_documents_are_skipped(self, make_document) -> None:
        """Only verified documents contribute."""
        documents = [
            make_document(TaxFormType.W2, status=DocumentStatus.UPLOADING),
            make_document(TaxFormType.W2, status=DocumentStatus.ANALYZING),
            make_document(TaxFormType.W2, status=DocumentStatus.ERROR),
        ]

        assert aggregate_income(documents).total_income == Decimal("0")

    def test_verified_without_data_is_skipped(self, make_document) -> None:
        """A verified document with no fields adds nothing."""
        assert aggregate_income([make_document(TaxFormType.W2, {})]) == IncomeTotals()

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("85000", Decimal("85000")),
            ("$85,000.00", Decimal("85000.00")),
            (85000.5, Decimal("85000.5")),
            ("N/A", Decimal("0")),
            ("", Decimal("0")),
        ],
    )
    def test_amounts_are_coerced(self, make_document, raw, expected) -> None:
        """Numeric strings parse; anything unusable is zero."""
        w2 = make_document(TaxFormType.W2, {"Wages, Tips": raw})

        assert aggregate_income([w2]).w2_income == expected

    def test_out_of_range_amount_does_not_overflow(self, make_document, sample_w2) -> None:
        huge = make_document(TaxFormType.FORM_1099_NEC, {"Nonemployee Comp": "1e1000000"})

        summary = calculate_tax_summary([sample_w2, huge])

        assert summary.total_income == Decimal("85000")
        assert summary.estimated_tax == Decimal("10541")

    def test_missing_fields_are_zero(self, make_document) -> None:
        """A W-2 with no wage field adds zero instead of failing."""
        w2 = make_document(TaxFormType.W2, {"State": "CA"})

        result = aggregate_income([w2])

        assert result.total_income == Decimal("0")
        assert result.federal_withholding == Decimal("0")


# =============================================================================
# Deductions and Tax
# =============================================================================


class TestSelectDeduction:
    """Tests for standard vs itemized selection."""

    def test_standard_when_itemized_is_lower(self) -> None:
        result = select_deduction(Decimal("500"))

        assert result.method == "standard"
        assert result.amount == Decimal("14600")

    def test_standard_when_itemized_equals_standard(self) -> None:
        """Ties keep the standard deduction."""
        result = select_deduction(Decimal("14600"))

        assert result.method == "standard"
        assert result.amount == Decimal("14600")

    def test_itemized_when_strictly_higher(self) -> None:
        result = select_deduction(Decimal("14601"))

        assert result.method == "itemized"
        assert result.amount == Decimal("14601")
        assert result.standard_amount == Decimal("14600")


class TestEstimateTax:
    """Tests for the marginal bracket estimate."""

    @pytest.mark.parametrize(
        ("taxable", "expected"),
        [
            (Decimal("0"), Decimal("0")),
            (Decimal("-100"), Decimal("0")),
            (Decimal("5000"), Decimal("500")),
            (Decimal("30000"), Decimal("3368")),
            (Decimal("70400"), Decimal("10541")),
            (Decimal("100000"), Decimal("17053")),
        ],
    )
    def test_matches_bracket_formulas(self, taxable, expected) -> None:
        assert estimate_tax(taxable) == expected

    def test_continuous_at_first_boundary(self) -> None:
        """First-bracket limit equals the second bracket's base of 1160."""
        at_boundary = estimate_tax(Decimal("11600"))

        assert at_boundary == Decimal("11600") * Decimal("0.10")
        assert at_boundary == Decimal("1160") + (Decimal("11600") - Decimal("11600")) * Decimal("0.12")

    def test_continuous_at_second_boundary(self) -> None:
        """Second-bracket limit equals the third bracket's base of 5426."""
        assert estimate_tax(Decimal("47150")) == Decimal("5426")

    def test_bracket_bases(self) -> None:
        assert TAX_YEAR_2024.bracket_bases == (Decimal("0"), Decimal("1160"), Decimal("5426"))

    def test_taxable_income_floor(self) -> None:
        assert calculate_taxable_income(Decimal("1000"), Decimal("14600")) == Decimal("0")
        assert calculate_taxable_income(Decimal("85000"), Decimal("14600")) == Decimal("70400")


class TestRoundCurrency:
    """Tests for whole-unit rounding."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (Decimal("10541.00"), Decimal("10541")),
            (Decimal("0.5"), Decimal("1")),
            (Decimal("1.49"), Decimal("1")),
            (Decimal("-0.5"), Decimal("0")),
            (Decimal("-2.5"), Decimal("-2")),
            (Decimal("-2.51"), Decimal("-3")),
        ],
    )
    def test_halves_round_up(self, value, expected) -> None:
        assert round_currency(value) == expected


# =============================================================================
# Readiness
# =============================================================================


class TestFilingStatus:
    """Tests for filing status derivation."""

    def test_no_documents(self) -> None:
        assert derive_filing_status([]) == FilingStatus.NOT_STARTED

    def test_all_verified(self, sample_w2, sample_receipt) -> None:
        assert derive_filing_status([sample_w2, sample_receipt]) == FilingStatus.REVIEW_READY

    @pytest.mark.parametrize(
        "status",
        [DocumentStatus.UPLOADING, DocumentStatus.ANALYZING, DocumentStatus.ERROR],
    )
    def test_any_unverified_is_in_progress(self, sample_w2, make_document, status) -> None:
        pending = make_document(TaxFormType.UNKNOWN, status=status)

        assert derive_filing_status([sample_w2, pending]) == FilingStatus.IN_PROGRESS


class TestComplianceScore:
    """Tests for the compliance heuristic."""

    def test_empty_scores_zero(self) -> None:
        assert calculate_compliance_score([]) == 0

    def test_clean_return_scores_full(self, sample_w2) -> None:
        assert calculate_compliance_score([sample_w2]) == 100

    def test_error_document_costs_twenty(self, sample_w2, make_document) -> None:
        failed = make_document(TaxFormType.UNKNOWN, status=DocumentStatus.ERROR)

        assert calculate_compliance_score([sample_w2, failed]) == 80

    def test_verified_unknown_costs_ten(self, sample_w2, make_document) -> None:
        unknown = make_document(TaxFormType.UNKNOWN, {"Amount": Decimal("1")})

        assert calculate_compliance_score([sample_w2, unknown]) == 90

    def test_unknown_still_uploading_is_not_penalized(self, sample_w2, make_document) -> None:
        uploading = make_document(TaxFormType.UNKNOWN, status=DocumentStatus.UPLOADING)

        assert calculate_compliance_score([sample_w2, uploading]) == 100

    def test_penalties_stack(self, make_document) -> None:
        documents = [
            make_document(TaxFormType.UNKNOWN, status=DocumentStatus.ERROR),
            make_document(TaxFormType.UNKNOWN, {}),
        ]

        assert calculate_compliance_score(documents) == 70


# =============================================================================
# Breakdowns
# =============================================================================


class TestBreakdowns:
    """Tests for chart series construction."""

    def test_placeholder_when_no_income(self) -> None:
        assert build_income_breakdown(IncomeTotals()) == (
            BreakdownItem(label="No Income", amount=Decimal("1"), color="#e2e8f0"),
        )

    def test_positive_categories_in_fixed_order(self) -> None:
        totals = IncomeTotals(
            w2_income=Decimal("100"),
            div_income=Decimal("30"),
            k1_income=Decimal("20"),
        )

        result = build_income_breakdown(totals)

        assert [item.label for item in result] == ["W-2 Wages", "Dividends", "K-1 Income"]
        assert sum(item.amount for item in result) == totals.total_income

    def test_standard_deduction_entry(self) -> None:
        choice = select_deduction(Decimal("0"))

        assert build_deduction_breakdown(choice) == (
            BreakdownItem(label="Standard Deduction", amount=Decimal("14600"), color="#10b981"),
        )

    def test_business_expenses_entry(self) -> None:
        choice = DeductionChoice(
            method="itemized",
            amount=Decimal("20000"),
            standard_amount=Decimal("14600"),
            itemized_amount=Decimal("20000"),
        )

        (entry,) = build_deduction_breakdown(choice)

        assert entry.label == "Business Expenses"
        assert entry.amount == Decimal("20000")


# =============================================================================
# Summary
# =============================================================================


class TestCalculateTaxSummary:
    """End-to-end summary tests."""

    def test_empty_collection(self) -> None:
        summary = calculate_tax_summary([])

        assert summary.total_income == 0
        assert summary.deductions == Decimal("14600")
        assert summary.estimated_tax == 0
        assert summary.estimated_refund == 0
        assert summary.filing_status == FilingStatus.NOT_STARTED
        assert summary.compliance_score == 0
        assert [(i.label, i.amount) for i in summary.income_breakdown] == [
            ("No Income", Decimal("1"))
        ]
        assert [(i.label, i.amount) for i in summary.deduction_breakdown] == [
            ("Standard Deduction", Decimal("14600"))
        ]

    def test_single_w2(self, sample_w2) -> None:
        summary = calculate_tax_summary([sample_w2])

        assert summary.total_income == Decimal("85000")
        assert summary.taxable_income == Decimal("70400")
        assert summary.estimated_tax == Decimal("10541")
        assert summary.estimated_refund == Decimal("1959")
        assert summary.filing_status == FilingStatus.REVIEW_READY
        assert summary.compliance_score == 100

    def test_amount_owed_is_negative(self, make_document) -> None:
        w2 = make_document(TaxFormType.W2, {"Wages, Tips": Decimal("85000")})

        assert calculate_tax_summary([w2]).estimated_refund == Decimal("-10541")

    def test_rounding_happens_once_at_output(self, make_document) -> None:
        """Tax of 0.50 rounds up; the refund of -0.50 rounds to 0."""
        w2 = make_document(TaxFormType.W2, {"Wages, Tips": Decimal("14605")})

        summary = calculate_tax_summary([w2])

        assert summary.estimated_tax == Decimal("1")
        assert summary.estimated_refund == Decimal("0")

    def test_small_receipt_changes_nothing_downstream(self, sample_w2, sample_receipt) -> None:
        base = calculate_tax_summary([sample_w2])
        with_receipt = calculate_tax_summary([sample_w2, sample_receipt])

        assert with_receipt.total_income == base.total_income
        assert with_receipt.deductions == base.deductions
        assert with_receipt.estimated_tax == base.estimated_tax

    def test_large_receipts_switch_to_itemized(self, sample_w2, make_document) -> None:
        receipts = [
            make_document(TaxFormType.RECEIPT, {"Amount": Decimal("10000")}),
            make_document(TaxFormType.RECEIPT, {"Amount": Decimal("10000")}),
        ]

        summary = calculate_tax_summary([sample_w2, *receipts])

        assert summary.total_income == Decimal("85000")
        assert summary.deductions == Decimal("20000")
        assert summary.taxable_income == Decimal("65000")
        # 5426 + (65000 - 47150) * 0.22 = 9353
        assert summary.estimated_tax == Decimal("9353")
        assert summary.deduction_breakdown[0].label == "Business Expenses"

    def test_error_document_blocks_review(self, sample_w2, make_document) -> None:
        failed = make_document(TaxFormType.UNKNOWN, status=DocumentStatus.ERROR)

        clean = calculate_tax_summary([sample_w2])
        with_error = calculate_tax_summary([sample_w2, failed])

        assert with_error.filing_status == FilingStatus.IN_PROGRESS
        assert with_error.compliance_score == clean.compliance_score - 20

    def test_never_reports_filed(self, sample_w2) -> None:
        assert calculate_tax_summary([sample_w2]).filing_status != FilingStatus.FILED

    def test_same_input_same_output(self, sample_w2, sample_receipt, make_document) -> None:
        documents = [
            sample_w2,
            sample_receipt,
            make_document(TaxFormType.FORM_1099_INT, {"Interest Income": "310.25"}),
        ]

        assert calculate_tax_summary(documents) == calculate_tax_summary(documents)

    def test_does_not_mutate_documents(self, sample_w2) -> None:
        before = sample_w2.model_copy(deep=True)

        calculate_tax_summary([sample_w2])

        assert sample_w2 == before
