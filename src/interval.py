# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Closed numeric intervals used for tier bounds.

An interval whose low bound exceeds its high bound is empty. Empty
intervals are ordinary values meaning "no admissible tier".
"""

import re
import sys
from dataclasses import dataclass
from typing import Any, Union

Number = Union[int, float]

# Bounds used when no per-cell tier range is configured
SAFE_INTEGER_MIN = -(sys.maxsize)
SAFE_INTEGER_MAX = sys.maxsize


@dataclass(frozen=True)
class Interval:
    """Inclusive-inclusive interval [low, high]."""
    low: Number
    high: Number

    @classmethod
    def of(cls, value: Number) -> 'Interval':
        """Interval containing exactly one value."""
        return cls(value, value)

    @classmethod
    def unbounded(cls) -> 'Interval':
        """Interval spanning the whole safe integer range."""
        return cls(SAFE_INTEGER_MIN, SAFE_INTEGER_MAX)

    @classmethod
    def parse(cls, value: Any) -> 'Interval':
        """
        Build an interval from a config or command-line value.

        Accepts an Interval, a two-element list/tuple, a mapping with
        'low'/'high' (or 'min'/'max') keys, or a string like "10-14",
        "10,14" or "[10, 14]".

        Raises:
            ValueError: If the value cannot be read as an interval
        """
        if isinstance(value, Interval):
            return value
        if isinstance(value, dict):
            low = value.get('low', value.get('min'))
            high = value.get('high', value.get('max'))
            if low is None or high is None:
                raise ValueError(f"Interval mapping needs low and high: {value!r}")
            return cls(_to_bound(low), _to_bound(high))
        if isinstance(value, (list, tuple)):
            if len(value) != 2:
                raise ValueError(f"Interval needs exactly two bounds: {value!r}")
            return cls(_to_bound(value[0]), _to_bound(value[1]))
        if isinstance(value, str):
            match = re.fullmatch(
                r'\s*\[?\s*(-?\d+(?:\.\d+)?)\s*(?:,|-|\.\.)\s*(-?\d+(?:\.\d+)?)\s*\]?\s*',
                value
            )
            if not match:
                raise ValueError(f"Cannot parse interval: {value!r}")
            return cls(_to_number(match.group(1)), _to_number(match.group(2)))
        raise ValueError(f"Cannot parse interval from {type(value).__name__}")

    @property
    def is_empty(self) -> bool:
        return self.low > self.high

    def contains(self, value: Number) -> bool:
        """True if value lies inside the interval."""
        return self.low <= value <= self.high

    def shifted_by(self, x: Number) -> 'Interval':
        """Translate both bounds by x."""
        return Interval(self.low + x, self.high + x)

    def combined_with(self, other: 'Interval') -> 'Interval':
        """Sum of two intervals: [a+c, b+d]."""
        return Interval(self.low + other.low, self.high + other.high)

    def minus(self, other: 'Interval') -> 'Interval':
        """
        Remove a contribution drawn from `other`: [a-d, b-c].

        This is the set of values x such that x + y can land in self
        for some y in other.
        """
        return Interval(self.low - other.high, self.high - other.low)

    @staticmethod
    def intersect(a: 'Interval', b: 'Interval') -> 'Interval':
        """Pointwise max of lows and min of highs. May be empty."""
        return Interval(max(a.low, b.low), min(a.high, b.high))

    def to_list(self) -> list:
        return [self.low, self.high]

    def __str__(self) -> str:
        return f"[{self.low}, {self.high}]"


def _to_number(text: str) -> Number:
    return float(text) if '.' in text else int(text)


def _to_bound(value: Any) -> Number:
    """Check a single bound from a list or mapping."""
    if isinstance(value, bool):
        raise ValueError(f"Interval bound must be a number, got {value!r}")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and re.fullmatch(r'\s*-?\d+(?:\.\d+)?\s*', value):
        return _to_number(value.strip())
    raise ValueError(f"Interval bound must be a number, got {value!r}")
