# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Display formatting for valuation outputs.
"""

from __future__ import annotations

from typing import List, Optional

from ..valuation import ValuationResult


def format_currency(value: float) -> str:
    """
    Compact dollar amount: millions to two decimals, thousands to none.

        >>> format_currency(13_333_333)
        '$13.33M'
        >>> format_currency(850_000)
        '$850K'
    """
    sign = "-" if value < 0 else ""
    amount = abs(value)
    if amount >= 1_000_000:
        return f"{sign}${amount / 1_000_000:.2f}M"
    if amount >= 1_000:
        return f"{sign}${amount / 1_000:.0f}K"
    return f"{sign}${amount:.0f}"


def format_percent(value: float, decimals: int = 2) -> str:
    """Fraction as a percentage, e.g. 0.075 -> '7.50%'."""
    return f"{value * 100:.{decimals}f}%"


def format_multiple(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f}x"


def format_coverage_ratio(value: float) -> str:
    return f"{value:.2f}x"


def format_valuation_summary(result: ValuationResult, title: Optional[str] = None) -> str:
    """Markdown summary of a reconciled valuation and its method breakdown."""
    output: List[str] = []
    output.append(f"# {title or f'{result.asset_type.value} Valuation'}")
    output.append("")
    output.append(f"- **Reconciled Value**: {format_currency(result.reconciled_value)}")
    output.append(
        f"- **Range**: {format_currency(result.value_low)} - {format_currency(result.value_high)}"
    )
    output.append(f"- **Confidence**: {result.overall_confidence.value}")
    if result.value_per_bed is not None:
        output.append(f"- **Value per Bed**: {format_currency(result.value_per_bed)}")
    if result.implied_cap_rate is not None:
        output.append(f"- **Implied Cap Rate**: {format_percent(result.implied_cap_rate)}")
    output.append("")
    output.append("| Method | Value | Confidence | Weight |")
    output.append("|--------|-------|------------|--------|")
    for method in result.methods.results():
        if not method.applicable:
            output.append(f"| {method.label} | n/a | - | - |")
            continue
        output.append(
            f"| {method.label} | {format_currency(method.value)} | "
            f"{method.confidence.value} | {format_percent(method.weight, 1)} |"
        )
    if result.confidence_factors:
        output.append("")
        output.append("## Confidence Factors")
        output.extend(f"- {factor}" for factor in result.confidence_factors)
    return "\n".join(output)
