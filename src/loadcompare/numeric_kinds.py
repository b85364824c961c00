"""Numeric kinds compared by the delta classifier.

Each kind keeps values in their native representation: integer nanoseconds
for durations, integers for counts and floats for rates and ratios. Equality
and margin checks happen in that representation; conversion to float only
happens for percentages and display.
"""
from abc import ABC, abstractmethod
from typing import Union

from .durations import smart_format

Number = Union[int, float]


class NumericKind(ABC):
    """Operations the classifier needs from a metric's value domain."""

    name: str = ""

    @abstractmethod
    def coerce(self, value: Number) -> Number:
        """Convert a value or margin to this kind's native representation."""

    def difference(self, before: Number, after: Number) -> Number:
        return self.coerce(after) - self.coerce(before)

    def compare(self, left: Number, right: Number) -> int:
        """Return -1, 0 or 1 as left is less than, equal to or greater than right."""
        left, right = self.coerce(left), self.coerce(right)
        return (left > right) - (left < right)

    def within_margin(self, before: Number, after: Number, margin: Number) -> bool:
        return abs(self.difference(before, after)) < self.coerce(margin)

    def as_float(self, value: Number) -> float:
        return float(value)

    @abstractmethod
    def format(self, value: Number) -> str:
        """Render a value for reports."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class DurationKind(NumericKind):
    """Durations in integer nanoseconds."""

    name = "duration"

    def coerce(self, value: Number) -> int:
        if isinstance(value, float):
            return round(value)
        return int(value)

    def format(self, value: Number) -> str:
        return smart_format(self.coerce(value))


class CountKind(NumericKind):
    """Integer counts such as the number of requests."""

    name = "count"

    def coerce(self, value: Number) -> int:
        if isinstance(value, float):
            return round(value)
        return int(value)

    def format(self, value: Number) -> str:
        return str(self.coerce(value))


class RatioKind(NumericKind):
    """Floating point rates, means and percentages."""

    name = "ratio"

    def coerce(self, value: Number) -> float:
        return float(value)

    def format(self, value: Number) -> str:
        text = repr(float(value))
        return text[:-2] if text.endswith(".0") else text


DURATION = DurationKind()
COUNT = CountKind()
RATIO = RatioKind()
