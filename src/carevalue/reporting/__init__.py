# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from .formatting import (
    format_coverage_ratio,
    format_currency,
    format_multiple,
    format_percent,
    format_valuation_summary,
)

__all__ = [
    "format_coverage_ratio",
    "format_currency",
    "format_multiple",
    "format_percent",
    "format_valuation_summary",
]
