# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List

from ..core.primitives import ValuationMethodEnum

if TYPE_CHECKING:
    from ..core.primitives import FacilityAttributes
    from ..core.settings import Settings
    from .base import MethodResult

MethodCalculator = Callable[["FacilityAttributes", "Settings"], "MethodResult"]


@dataclass(frozen=True)
class RegisteredMethod:
    method: ValuationMethodEnum
    label: str
    calculate: MethodCalculator


METHOD_REGISTRY: Dict[ValuationMethodEnum, RegisteredMethod] = {}


def register_method(method: ValuationMethodEnum, label: str) -> Callable:
    """
    A decorator to register a calculator function for a valuation method.
    """

    def decorator(func: MethodCalculator) -> MethodCalculator:
        if method in METHOD_REGISTRY:
            raise ValueError(f"Calculator for method {method.value} is already registered.")
        METHOD_REGISTRY[method] = RegisteredMethod(method=method, label=label, calculate=func)
        return func

    return decorator


def registered_methods() -> List[RegisteredMethod]:
    """Registered calculators in `ValuationMethodEnum` order."""
    return [METHOD_REGISTRY[method] for method in ValuationMethodEnum if method in METHOD_REGISTRY]


def method_label(method: ValuationMethodEnum) -> str:
    return METHOD_REGISTRY[ValuationMethodEnum(method)].label
