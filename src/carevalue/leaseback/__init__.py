# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from .rent import (
    PortfolioRentSummary,
    RentAssumptions,
    RentSuggestion,
    calculate_rent_suggestion,
    coverage_status,
    project_rent_escalation,
    rent_for_target_coverage,
    rent_scenarios,
    suggest_with_assumptions,
    summarize_portfolio,
)

__all__ = [
    "PortfolioRentSummary",
    "RentAssumptions",
    "RentSuggestion",
    "calculate_rent_suggestion",
    "coverage_status",
    "project_rent_escalation",
    "rent_for_target_coverage",
    "rent_scenarios",
    "suggest_with_assumptions",
    "summarize_portfolio",
]
