"""
Magnetic snapping and motion smoothing.

Two separate mechanisms drive the live feedback of a drag or resize:

- SnapAxis: a discrete snap target with hysteresis. It only jumps to the
  nearest cell once the raw pointer value has moved more than a threshold
  away from it, so the target does not flicker at cell boundaries.
- SmoothedRect: the displayed rect, pulled toward the snap target by a
  first-order low-pass filter on every animation tick. It never
  overshoots and reaches the target only in the limit.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from ..grid.abstraction import GridRect


def nearest_cell(value: float) -> int:
    """Round half up (``round`` would round 2.5 to 2)."""
    return int(math.floor(value + 0.5))


def smooth_step(current: float, target: float, damping: float) -> float:
    """One low-pass step: move `damping` of the remaining distance."""
    return current + (target - current) * damping


@dataclass
class SnapAxis:
    """Snap target for one coordinate, with hysteresis."""
    value: int
    threshold: float
    raw: float = 0.0

    def __post_init__(self):
        self.raw = float(self.value)

    def update(self, raw: float) -> bool:
        """Feed a raw value. Returns True if the snap target moved."""
        self.raw = raw
        if abs(raw - self.value) <= self.threshold:
            return False
        snapped = nearest_cell(raw)
        if snapped == self.value:
            return False
        self.value = snapped
        return True


@dataclass
class SmoothedRect:
    """Displayed rect in real-valued cells."""
    col: float
    row: float
    width: float
    height: float

    @classmethod
    def from_rect(cls, rect: GridRect) -> "SmoothedRect":
        return cls(float(rect.col), float(rect.row), float(rect.width), float(rect.height))

    def step(self, target: GridRect, damping: float):
        self.col = smooth_step(self.col, target.col, damping)
        self.row = smooth_step(self.row, target.row, damping)
        self.width = smooth_step(self.width, target.width, damping)
        self.height = smooth_step(self.height, target.height, damping)

    def distance_to(self, target: GridRect) -> float:
        """Largest per-field distance to `target`, in cells."""
        return max(abs(self.col - target.col), abs(self.row - target.row),
                   abs(self.width - target.width), abs(self.height - target.height))

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.col, self.row, self.width, self.height)
