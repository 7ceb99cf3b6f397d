# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations


class ValuationInvariantError(ValueError):
    """
    Raised when a calculation would violate an engine invariant.

    Missing facility data and invalid settings are reported in the returned
    results; this error is reserved for programming or data errors such as an
    unknown asset type, mismatched weight vectors, negative bed counts or a
    zero rate used as a denominator.
    """
