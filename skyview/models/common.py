"""Common types and helpers shared across models."""

import math
import time
from typing import TypeAlias

EpochMillis: TypeAlias = int


def now_ms() -> EpochMillis:
    return int(time.time() * 1000)


def seconds_to_ms(seconds: int | float) -> EpochMillis:
    return int(seconds) * 1000


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return math.floor(value + 0.5)
