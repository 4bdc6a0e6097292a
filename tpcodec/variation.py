#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum
from typing import Dict


class Variation(Enum):
    """Orthographic systems a toki pona word can be written in.

    Values are the column codes used by dictionary sources.
    """

    DEFAULT = "tp"
    TIPUNSIN = "tp_S"
    HANZI = "tp_ZH"

    @classmethod
    def from_code(cls, code: str) -> "Variation":
        # Raises ValueError for unknown codes.
        return cls(str(code).strip())


# Stable ids for framed blocks; never renumber.
VARIATION_TO_ID: Dict[Variation, int] = {
    Variation.DEFAULT: 0,
    Variation.TIPUNSIN: 1,
    Variation.HANZI: 2,
}

VARIATION_FROM_ID: Dict[int, Variation] = {v: k for k, v in VARIATION_TO_ID.items()}


def variation_to_id(variation: Variation) -> int:
    return int(VARIATION_TO_ID[variation])


def variation_from_id(variation_id: int) -> Variation:
    return VARIATION_FROM_ID[int(variation_id)]
