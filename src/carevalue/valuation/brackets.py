# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Bracket Definitions and the Adjustment Step Pipeline

A bracket list is an ordered sequence of `(key, predicate)` pairs: the first
predicate that accepts the attribute value selects the key, and the key names
a field of the matching settings table. An `AdjustmentStep` binds a facility
attribute, a classifier and a settings table, so each calculator is a
declarative list of steps evaluated in a fixed order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from ..core.primitives import FacilityAttributes, Model
from .base import Adjustment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bracket:
    key: str
    predicate: Callable[[float], bool]


def below(limit: float) -> Callable[[float], bool]:
    return lambda value: value < limit


def at_least(limit: float) -> Callable[[float], bool]:
    return lambda value: value >= limit


def above(limit: float) -> Callable[[float], bool]:
    return lambda value: value > limit


def at_most(limit: float) -> Callable[[float], bool]:
    return lambda value: value <= limit


def always(_: float) -> bool:
    return True


def first_match(brackets: Sequence[Bracket], value: float) -> str:
    for bracket in brackets:
        if bracket.predicate(value):
            return bracket.key
    raise ValueError(f"No bracket matches value {value!r}")


QUALITY_BRACKETS = (
    Bracket("unrated", below(0.5)),
    Bracket("five_star", at_least(4.5)),
    Bracket("four_star", at_least(3.5)),
    Bracket("three_star", at_least(2.5)),
    Bracket("two_star", at_least(1.5)),
    Bracket("one_star", always),
)

SIZE_BRACKETS = (
    Bracket("under_30_beds", below(30)),
    Bracket("beds_30_to_50", below(50)),
    Bracket("beds_50_to_75", below(75)),
    Bracket("beds_75_to_100", below(100)),
    Bracket("beds_100_to_125", below(125)),
    Bracket("beds_125_to_150", below(150)),
    Bracket("beds_150_to_200", below(200)),
    Bracket("beds_200_to_300", below(300)),
    Bracket("over_300_beds", always),
)

AGE_BRACKETS = (
    Bracket("under_3_years", below(3)),
    Bracket("years_3_to_5", below(5)),
    Bracket("years_5_to_10", below(10)),
    Bracket("years_10_to_15", below(15)),
    Bracket("years_15_to_20", below(20)),
    Bracket("years_20_to_25", below(25)),
    Bracket("years_25_to_30", below(30)),
    Bracket("years_30_to_40", below(40)),
    Bracket("over_40_years", always),
)

OCCUPANCY_BRACKETS = (
    Bracket("above_98", above(0.98)),
    Bracket("percent_95_to_98", at_least(0.95)),
    Bracket("percent_92_to_95", at_least(0.92)),
    Bracket("percent_90_to_92", at_least(0.90)),
    Bracket("percent_87_to_90", at_least(0.87)),
    Bracket("percent_85_to_87", at_least(0.85)),
    Bracket("percent_82_to_85", at_least(0.82)),
    Bracket("percent_80_to_82", at_least(0.80)),
    Bracket("percent_75_to_80", at_least(0.75)),
    Bracket("percent_70_to_75", at_least(0.70)),
    Bracket("below_70", always),
)

MEDICARE_BRACKETS = (
    Bracket("high_medicare", above(0.30)),
    Bracket("moderate_medicare", at_least(0.20)),
    Bracket("low_medicare", always),
)

MEDICAID_BRACKETS = (
    Bracket("high_medicaid", above(0.70)),
    Bracket("moderate_medicaid", at_least(0.50)),
    Bracket("low_medicaid", always),
)

PRIVATE_PAY_BRACKETS = (
    Bracket("high_private_pay", above(0.30)),
    Bracket("moderate_private_pay", at_least(0.15)),
    Bracket("low_private_pay", always),
)

ACUITY_BRACKETS = (
    Bracket("high_acuity", above(1.2)),
    Bracket("moderate_acuity", at_least(1.0)),
    Bracket("low_acuity", always),
)

COMPETITION_BRACKETS = (
    Bracket("low_competition", below(0.85)),
    Bracket("moderate_competition", below(0.92)),
    Bracket("high_competition", at_most(0.97)),
    Bracket("very_high_competition", always),
)

RENOVATION_BRACKETS = (
    Bracket("recently_renovated", below(3)),
    Bracket("modernized", below(10)),
    Bracket("needs_updates", below(20)),
    Bracket("significant_deferred", always),
)

REGULATORY_BRACKETS = (
    Bracket("excellent_compliance", at_most(0)),
    Bracket("good_compliance", below(5)),
    Bracket("moderate_compliance", at_most(10)),
    Bracket("poor_compliance", at_most(20)),
    Bracket("severe_issues", always),
)

GROWTH_BRACKETS = (
    Bracket("rapid_growth", above(0.07)),
    Bracket("strong_growth", at_least(0.05)),
    Bracket("moderate_growth", at_least(0.03)),
    Bracket("slow_growth", at_least(0.01)),
    Bracket("stable", at_least(0.0)),
    Bracket("declining", always),
)

STABILITY_BRACKETS = (
    Bracket("very_stable", below(0.05)),
    Bracket("stable", below(0.10)),
    Bracket("moderate", below(0.15)),
    Bracket("volatile", below(0.25)),
    Bracket("very_volatile", always),
)


# === STEP PIPELINE ===


def by_brackets(attribute: str, brackets: Sequence[Bracket]) -> Callable[[FacilityAttributes], str]:
    return lambda facility: first_match(brackets, getattr(facility, attribute))


def by_enum(attribute: str) -> Callable[[FacilityAttributes], str]:
    return lambda facility: getattr(facility, attribute).value


def by_payer_share(share: str, brackets: Sequence[Bracket]) -> Callable[[FacilityAttributes], str]:
    return lambda facility: first_match(brackets, getattr(facility.payer_mix, share))


def regulatory_bracket(facility: FacilityAttributes) -> str:
    if facility.special_focus_facility:
        return "severe_issues"
    return first_match(REGULATORY_BRACKETS, facility.deficiency_count)


@dataclass(frozen=True)
class AdjustmentStep:
    """
    One bracket lookup in a calculator's adjustment sequence.

    Attributes:
        label: Display name used in adjustment descriptions
        attribute: Facility attribute the step reads; the step is skipped when it is missing
        table: Field name of the adjustment table on the method's base settings
        classify: Maps the facility to a bracket key of that table
    """

    label: str
    attribute: str
    table: str
    classify: Callable[[FacilityAttributes], str]


@dataclass
class StepOutcome:
    adjustments: List[Adjustment] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def impacts(self) -> Tuple[float, ...]:
        return tuple(adjustment.impact for adjustment in self.adjustments)


def apply_steps(
    steps: Sequence[AdjustmentStep],
    facility: FacilityAttributes,
    base_settings: Model,
    outcome: Optional[StepOutcome] = None,
) -> StepOutcome:
    """
    Evaluate steps in order, collecting one adjustment per step.

    Steps whose attribute is missing are recorded in `skipped` and contribute
    nothing (neutral).
    """
    outcome = outcome if outcome is not None else StepOutcome()
    for step in steps:
        if not facility.has(step.attribute):
            outcome.skipped.append(step.label)
            continue
        key = step.classify(facility)
        impact = getattr(base_settings, step.table).adjustment_for(key)
        outcome.adjustments.append(
            Adjustment(description=f"{step.label}: {key.replace('_', ' ')}", impact=impact)
        )
    if outcome.skipped:
        logger.debug(f"Skipped adjustment steps with missing inputs: {', '.join(outcome.skipped)}")
    return outcome
