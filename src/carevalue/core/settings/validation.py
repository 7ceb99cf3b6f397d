# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Union

from pydantic import Field, ValidationError

from ..primitives import Model
from .settings import Settings

logger = logging.getLogger(__name__)

WEIGHT_TOLERANCE = 0.01


class SettingsValidationResult(Model):
    """Outcome of `validate_settings`."""

    valid: bool
    errors: List[str] = Field(default_factory=list)


def _sums_to_one(total: float) -> bool:
    return abs(total - 1.0) <= WEIGHT_TOLERANCE


def validate_settings(settings: Union[Settings, Mapping[str, Any]]) -> SettingsValidationResult:
    """
    Check the cross-field consistency of a settings object.

    Checks that the global cap rate floor sits below the ceiling and that the
    method weights of every active asset type, the CMS overall rating weights,
    the risk category weights and the comparable weighting factors each sum to
    1 within 0.01. A raw mapping is first validated against the schema and any
    schema failures are reported as errors.

    Never raises.
    """
    if not isinstance(settings, Settings):
        try:
            settings = Settings.model_validate(settings)
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            ]
            return SettingsValidationResult(valid=False, errors=errors)

    errors: List[str] = []
    valuation = settings.valuation

    cap_rate = valuation.cap_rate
    if cap_rate.global_min_cap_rate >= cap_rate.global_max_cap_rate:
        errors.append(
            f"Global minimum cap rate ({cap_rate.global_min_cap_rate:.2%}) must be less than "
            f"global maximum cap rate ({cap_rate.global_max_cap_rate:.2%})"
        )

    for asset_type in settings.active_asset_types.active():
        total = valuation.method_weights.for_type(asset_type).total
        if not _sums_to_one(total):
            errors.append(
                f"{asset_type.value} valuation method weights must sum to 1 (currently {total:.2f})"
            )

    rating_total = settings.risk.cms_scoring.overall_rating_weights.total
    if not _sums_to_one(rating_total):
        errors.append(f"CMS overall rating weights must sum to 1 (currently {rating_total:.2f})")

    risk_total = settings.risk.category_weights.total
    if not _sums_to_one(risk_total):
        errors.append(f"Risk category weights must sum to 1 (currently {risk_total:.2f})")

    comparable_total = valuation.comparable_sales.weighting_factors.total
    if not _sums_to_one(comparable_total):
        errors.append(
            f"Comparable sales weighting factors must sum to 1 (currently {comparable_total:.2f})"
        )

    if errors:
        logger.debug(f"Settings validation found {len(errors)} error(s)")
    return SettingsValidationResult(valid=not errors, errors=errors)
