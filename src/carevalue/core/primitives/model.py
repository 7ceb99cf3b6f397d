# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base Pydantic model shared by facility inputs, settings and results.

    Models are immutable value objects: calculators read them and build new
    ones, so any result can be handed across a thread or process boundary.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,  # Inputs and results are never mutated after construction
        slots=True,
        extra="forbid",  # Catches typos in settings overrides immediately
    )
