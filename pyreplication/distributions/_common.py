"""
Common types for the g-and-h distribution family.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from pyreplication.core.validation import check_nonnegative, check_real


@dataclass(frozen=True)
class GHShape:
    """
    Shape of a g-and-h distribution.

    g controls skewness (0 = symmetric, sign gives the direction) and
    h controls tail heaviness (0 = normal-like tails, larger = heavier).
    g = h = 0 is the standard normal.

    Attributes
    ----------
    g : float
        Skewness parameter, any finite real.
    h : float
        Tail-heaviness parameter, finite and >= 0.
    """
    g: float = 0.0
    h: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "g", check_real(self.g, "g"))
        object.__setattr__(self, "h", check_nonnegative(self.h, "h"))

    @classmethod
    def grid(cls, g_values: Iterable[float], h: float = 0.0) -> tuple[GHShape, ...]:
        """Shapes with varying g and a common h, in the order given."""
        return tuple(cls(g=g, h=h) for g in g_values)

    @property
    def is_normal(self) -> bool:
        return self.g == 0.0 and self.h == 0.0

    @property
    def label(self) -> str:
        return f"g={self.g:g}, h={self.h:g}"
