"""
Coordinate Space Descriptors
============================
Immutable descriptions of the discrete grids on both displays.

Classes:
    AxisSpace: Bounds and discretisation of one axis.
    Space: A pair of axes (x, y) with a name, e.g. "physical" or "virtual".
"""
from __future__ import annotations

from dataclasses import dataclass
import math

# Tolerance used when checking that (max - min) / increment is whole
SUBDIVISION_TOLERANCE = 1e-9


@dataclass(frozen=True)
class AxisSpace:
    """
    One axis of a coordinate space.

    The axis is discretised into ``subdivisions`` steps of ``increment``.
    ``margin`` stretches the sampled extent past ``maximum`` (the physical
    display is sampled 5% beyond its nominal size).
    """
    minimum: float
    maximum: float
    increment: float = 1.0
    margin: float = 1.0

    def __post_init__(self) -> None:
        if self.increment <= 0.0:
            raise ValueError(f"Axis increment must be positive, got {self.increment}.")
        if self.maximum < self.minimum:
            raise ValueError(
                f"Axis maximum ({self.maximum}) must not be smaller than its minimum ({self.minimum})."
            )
        steps = (self.maximum - self.minimum) / self.increment
        if not math.isclose(steps, round(steps), rel_tol=0.0, abs_tol=SUBDIVISION_TOLERANCE):
            raise ValueError(
                f"Axis range [{self.minimum}, {self.maximum}] is not a whole number "
                f"of increments of {self.increment} ({steps} steps)."
            )

    @property
    def subdivisions(self) -> int:
        """Number of grid steps; the axis has ``subdivisions + 1`` grid points."""
        return int(round((self.maximum - self.minimum) / self.increment))

    @property
    def scale(self) -> float:
        """Real distance between two neighbouring grid points."""
        if self.subdivisions == 0:
            return 0.0
        return (self.maximum - self.minimum) * self.margin / self.subdivisions

    @property
    def offset(self) -> float:
        """Subtracted after scaling, so that index 0 lands on ``minimum``."""
        return -self.minimum

    @property
    def extent(self) -> tuple[float, float]:
        """Real coordinates of the first and the last grid point."""
        return -self.offset, self.subdivisions * self.scale - self.offset


@dataclass(frozen=True)
class Space:
    """A named 2D grid made of an x axis and a y axis."""
    name: str
    x: AxisSpace
    y: AxisSpace

    @property
    def shape(self) -> tuple[int, int]:
        """Shape of a table indexed ``[y, x]`` over every grid point."""
        return self.y.subdivisions + 1, self.x.subdivisions + 1

    @property
    def size(self) -> int:
        rows, cols = self.shape
        return rows * cols

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """Rectangle ``(x_lo, y_lo, x_hi, y_hi)`` covered by the grid points."""
        x_lo, x_hi = self.x.extent
        y_lo, y_hi = self.y.extent
        return x_lo, y_lo, x_hi, y_hi

    def contains_index(self, x: int, y: int) -> bool:
        return 0 <= x <= self.x.subdivisions and 0 <= y <= self.y.subdivisions

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "x": [self.x.minimum, self.x.maximum, self.x.increment, self.x.margin],
            "y": [self.y.minimum, self.y.maximum, self.y.increment, self.y.margin],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Space:
        return cls(
            name=str(data["name"]),
            x=AxisSpace(*(float(v) for v in data["x"])),
            y=AxisSpace(*(float(v) for v in data["y"])),
        )
