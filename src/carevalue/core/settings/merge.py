# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Settings merge: overlay a partial override onto a base configuration.

Nested mappings merge key by key; lists, tuples and scalars in the override
replace the base value wholesale. Inputs are never mutated.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, TypeVar, Union

from pydantic import BaseModel

from .settings import Settings

M = TypeVar("M", bound=BaseModel)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a new dict with `override` recursively merged over `base`."""
    merged: Dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _as_dict(value: Union[BaseModel, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return dict(value)


def merge_model(model: M, override: Union[BaseModel, Mapping[str, Any]]) -> M:
    """Merge an override into any model and revalidate into a new instance of its type."""
    merged = deep_merge(_as_dict(model), _as_dict(override))
    return type(model).model_validate(merged)


def merge_settings(
    base: Settings, override: Union[Settings, Mapping[str, Any]]
) -> Settings:
    """
    Overlay a partial settings override onto `base`.

    Args:
        base: Settings to start from
        override: Partial nested dict (or complete Settings) to apply

    Returns:
        New validated Settings; `base` is unchanged

    Raises:
        pydantic.ValidationError: If the merged tree does not match the schema
    """
    return merge_model(base, override)
