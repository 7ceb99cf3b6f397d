# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Core building blocks: immutable primitives and the settings layer.
"""

from . import primitives, settings

__all__ = ["primitives", "settings"]
