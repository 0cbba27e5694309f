"""Tax year-specific constants and thresholds.

This module centralizes the policy values the summary calculator depends on,
the single-filer standard deduction and the marginal bracket table, so that
no tax figure is hardcoded in the calculation itself.

Example:
    >>> from src.tax.year_config import get_tax_year_config
    >>> config = get_tax_year_config(2024)
    >>> print(f"Standard deduction: {config.standard_deduction_single}")
    Standard deduction: 14600
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

# (upper_bound, rate); None for upper_bound means no limit
Bracket = tuple[Decimal | None, Decimal]


@dataclass(frozen=True)
class TaxYearConfig:
    """Tax year-specific constants and thresholds.

    All monetary values are Decimal for precision in tax calculations.
    This dataclass is frozen to prevent accidental modification.

    Attributes:
        tax_year: The tax year these values apply to.
        standard_deduction_single: Standard deduction for a single filer.
        brackets_single: Marginal brackets for a single filer, ascending,
            the last one open-ended.
    """

    tax_year: int
    standard_deduction_single: Decimal
    brackets_single: tuple[Bracket, ...]

    @property
    def bracket_bases(self) -> tuple[Decimal, ...]:
        """Cumulative tax owed at the lower edge of each bracket.

        For 2024 this is (0, 1160, 5426): the base amounts of the
        piecewise-linear tax function.
        """
        bases: list[Decimal] = []
        cumulative = Decimal("0")
        lower = Decimal("0")
        for upper_bound, rate in self.brackets_single:
            bases.append(cumulative)
            if upper_bound is None:
                break
            cumulative += (upper_bound - lower) * rate
            lower = upper_bound
        return tuple(bases)


# 2024 Configuration - single filer, first three marginal brackets
TAX_YEAR_2024 = TaxYearConfig(
    tax_year=2024,
    standard_deduction_single=Decimal("14600"),
    brackets_single=(
        (Decimal("11600"), Decimal("0.10")),
        (Decimal("47150"), Decimal("0.12")),
        (None, Decimal("0.22")),
    ),
)

# Registry of available tax year configurations
TAX_YEAR_CONFIGS: dict[int, TaxYearConfig] = {
    2024: TAX_YEAR_2024,
}


def get_tax_year_config(year: int) -> TaxYearConfig:
    """Get configuration for a specific tax year.

    Args:
        year: The tax year (e.g., 2024).

    Returns:
        TaxYearConfig for the specified year.

    Raises:
        ValueError: If no configuration exists for the requested year.
    """
    if year not in TAX_YEAR_CONFIGS:
        available = sorted(TAX_YEAR_CONFIGS.keys())
        raise ValueError(
            f"No tax configuration for year {year}. Available years: {available}"
        )
    return TAX_YEAR_CONFIGS[year]
