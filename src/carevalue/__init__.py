# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

import importlib
import logging

"""
CareValue - Healthcare Real Estate Valuation Engine

Values skilled nursing, assisted living and independent living facilities with
six independent methods, reconciles them into one estimate with a confidence
band, and explores that estimate with sensitivity and Monte Carlo analysis.

Key Entry Points:
- carevalue.valuation.value_facility() - Reconciled valuation of one facility
- carevalue.analysis.run_tornado() - One-at-a-time sensitivity ranking
- carevalue.analysis.run_monte_carlo() - Simulation over uncertain inputs
- carevalue.leaseback.calculate_rent_suggestion() - Sale-leaseback rent sizing
- carevalue.core.settings - Versioned valuation settings, merge and validation

Example Usage:
    ```python
    from carevalue.core.primitives import FacilityAttributes
    from carevalue.valuation import value_facility

    facility = FacilityAttributes(asset_type="SNF", beds=120, noi=1_800_000)
    result = value_facility(facility)
    print(f"Value: ${result.reconciled_value:,.0f} ({result.overall_confidence.value})")
    ```
"""

# Libraries leave handler configuration to the application
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "analysis",
    "core",
    "leaseback",
    "reporting",
    "valuation",
]


_LAZY_MODULES = {
    "analysis": "carevalue.analysis",
    "core": "carevalue.core",
    "leaseback": "carevalue.leaseback",
    "reporting": "carevalue.reporting",
    "valuation": "carevalue.valuation",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'carevalue' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
