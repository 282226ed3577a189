"""
Calibration Data
================
Physical positions whose virtual coordinates are known. One set per virtual
axis; the heights of a set are the virtual x (or y) coordinate at each point.

Also provides the reference data of the PineTime display: a grid of points
over the sampled physical rectangle, with the virtual coordinates given by a
pincushion model of the curved screen.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt
    from displaymap.model.spaces import AxisSpace, Space

# Relative shrink of the virtual span at the top and bottom (left and right) edges
REFERENCE_CURVATURE = 0.06
REFERENCE_ROWS = 5
REFERENCE_COLUMNS = 5


@dataclass(frozen=True, eq=False)
class CalibrationSet:
    """
    Calibration points of one virtual axis.

    Attributes:
        label: Virtual axis the heights represent ("x" or "y").
        points: Physical positions, shape (N, 2).
        heights: Virtual coordinate at each position, shape (N,).
    """
    label: str
    points: npt.NDArray[np.float64]
    heights: npt.NDArray[np.float64]

    def __post_init__(self) -> None:
        if self.points.ndim != 2 or self.points.shape[1] != 2:
            raise ValueError(f"Calibration points must have shape (N, 2), got {self.points.shape}.")
        if self.heights.shape != (self.points.shape[0],):
            raise ValueError(
                f"Calibration set '{self.label}' has {self.points.shape[0]} points "
                f"but {self.heights.size} heights."
            )

    def __len__(self) -> int:
        return self.points.shape[0]


def _virtual_span(axis: AxisSpace) -> tuple[float, float]:
    """Centre and width of the virtual axis, counting the last coordinate as a full unit."""
    low = -axis.offset
    width = (axis.subdivisions + 1) * axis.scale
    return low + width / 2.0, width


def reference_calibration(
    physical: Space,
    virtual: Space,
    rows: int = REFERENCE_ROWS,
    columns: int = REFERENCE_COLUMNS,
    curvature: float = REFERENCE_CURVATURE,
) -> tuple[CalibrationSet, CalibrationSet]:
    """
    Build calibration sets from the curved-display model.

    Along the central row (column) of the physical rectangle the virtual
    coordinate grows linearly; towards the edges the virtual span shrinks by
    up to `curvature`, bending the virtual grid lines into a pincushion.

    Args:
        physical: Sampled physical space; the points cover its full bounds.
        virtual: Virtual space the heights are expressed in.
        rows: Number of calibration rows.
        columns: Number of calibration columns.
        curvature: Relative shrink of the span at the edges, in [0, 1).

    Returns:
        The virtual-x and virtual-y calibration sets.
    """
    if rows < 2 or columns < 2:
        raise ValueError(f"Calibration needs at least 2 x 2 points, got {columns} x {rows}.")
    if not 0.0 <= curvature < 1.0:
        raise ValueError(f"Curvature must be in [0, 1), got {curvature}.")

    x_lo, y_lo, x_hi, y_hi = physical.bounds
    px, py = np.meshgrid(np.linspace(x_lo, x_hi, columns), np.linspace(y_lo, y_hi, rows))
    points = np.column_stack([px.ravel(), py.ravel()])

    # Normalised distance from the physical centre, in [-1, 1]
    u = (points[:, 0] - (x_lo + x_hi) / 2.0) / ((x_hi - x_lo) / 2.0)
    v = (points[:, 1] - (y_lo + y_hi) / 2.0) / ((y_hi - y_lo) / 2.0)

    vx_center, vx_width = _virtual_span(virtual.x)
    vy_center, vy_width = _virtual_span(virtual.y)
    vx = vx_center + u * (vx_width / 2.0) * (1.0 - curvature * v ** 2)
    vy = vy_center + v * (vy_width / 2.0) * (1.0 - curvature * u ** 2)

    return (
        CalibrationSet(label="x", points=points, heights=vx),
        CalibrationSet(label="y", points=points.copy(), heights=vy),
    )
