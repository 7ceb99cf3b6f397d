# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Dotted parameter paths into the facility or the settings.

A path starts with ``facility`` or ``settings`` followed by field names, e.g.
``facility.noi`` or ``settings.valuation.cap_rate.by_asset_type.SNF.base_rate``.
Overrides never mutate their inputs: each root is rebuilt with `merge_model`.
"""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Annotated, Any, Dict, List, Mapping, Optional, Tuple, get_args, get_origin

from pydantic import BaseModel

from ..core.primitives import FacilityAttributes, ValuationInvariantError
from ..core.settings import Settings, deep_merge, merge_model

ROOTS = ("facility", "settings")


def split_path(path: str) -> Tuple[str, List[str]]:
    root, *parts = path.split(".")
    if root not in ROOTS or not parts:
        raise ValuationInvariantError(
            f"Parameter path must start with 'facility.' or 'settings.', got {path!r}"
        )
    return root, parts


def _resolve(
    facility: FacilityAttributes, settings: Settings, path: str
) -> Tuple[Any, Optional[BaseModel], str]:
    root, parts = split_path(path)
    current: Any = facility if root == "facility" else settings
    owner: Optional[BaseModel] = None
    for part in parts:
        if isinstance(current, BaseModel) and part in type(current).model_fields:
            owner, current = current, getattr(current, part)
        elif isinstance(current, Mapping) and part in current:
            owner, current = None, current[part]
        else:
            raise ValuationInvariantError(f"Unknown parameter path {path!r} (at '{part}')")
    return current, owner, parts[-1]


def get_path(facility: FacilityAttributes, settings: Settings, path: str) -> Any:
    """Read the value at a dotted path."""
    return _resolve(facility, settings, path)[0]


def _is_integer_field(owner: BaseModel, field: str) -> bool:
    annotation = type(owner).model_fields[field].annotation
    candidates = get_args(annotation) or (annotation,)
    kinds = {get_args(c)[0] if get_origin(c) is Annotated else c for c in candidates}
    return int in kinds and float not in kinds


def field_bounds(owner: BaseModel, field: str) -> Tuple[float, float]:
    """Inclusive (low, high) allowed by the field's ge/gt/le/lt constraints."""
    info = type(owner).model_fields[field]
    constraints = list(info.metadata)
    for candidate in get_args(info.annotation):
        if get_origin(candidate) is Annotated:
            for extra in get_args(candidate)[1:]:
                constraints.extend(getattr(extra, "metadata", [extra]))

    low, high = -math.inf, math.inf
    for constraint in constraints:
        if getattr(constraint, "ge", None) is not None:
            low = max(low, constraint.ge)
        if getattr(constraint, "gt", None) is not None:
            low = max(low, math.nextafter(constraint.gt, math.inf))
        if getattr(constraint, "le", None) is not None:
            high = min(high, constraint.le)
        if getattr(constraint, "lt", None) is not None:
            high = min(high, math.nextafter(constraint.lt, -math.inf))
    return low, high


def _coerce(current: Any, owner: Optional[BaseModel], field: str, value: Any) -> Any:
    # Sampled and swept values are floats: they clamp to the field's bounds
    # (an untruncated normal draw may leave them), and integer fields take the nearest integer
    if not isinstance(value, float):
        return value
    if owner is not None:
        low, high = field_bounds(owner, field)
        value = min(max(value, low), high)
        if not _is_integer_field(owner, field):
            return value
        rounded = round(value)
        if rounded < low:
            rounded += 1
        elif rounded > high:
            rounded -= 1
        return rounded
    if isinstance(current, int) and not isinstance(current, bool):
        return int(round(value))
    return value


def _nested(parts: List[str], value: Any) -> Dict[str, Any]:
    override: Dict[str, Any] = {parts[-1]: value}
    for part in reversed(parts[:-1]):
        override = {part: override}
    return override


def apply_overrides(
    facility: FacilityAttributes, settings: Settings, overrides: Mapping[str, Any]
) -> Tuple[FacilityAttributes, Settings]:
    """
    Return copies of facility and settings with each path set to its value.

    Raises:
        ValuationInvariantError: If a path does not exist
        pydantic.ValidationError: If a value does not fit the field's type (numeric
            values are first clamped to the field's bounds)
    """
    merged: Dict[str, Dict[str, Any]] = defaultdict(dict)
    for path, value in overrides.items():
        current, owner, field = _resolve(facility, settings, path)
        root, parts = split_path(path)
        merged[root] = deep_merge(merged[root], _nested(parts, _coerce(current, owner, field, value)))

    if merged.get("facility"):
        facility = merge_model(facility, merged["facility"])
    if merged.get("settings"):
        settings = merge_model(settings, merged["settings"])
    return facility, settings
