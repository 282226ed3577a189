"""
Dense Grid Sampler
==================
Discretises an interpolated surface over every point of the physical grid.

Why is this file needed?
------------------------
The region resolver never touches the triangulation. It works on two dense
tables (virtual x and virtual y per physical cell), which this module builds
with one interpolation call per cell. The same tables are what the target
device would embed.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from displaymap.analysis.transform import AffineTransform
from displaymap.analysis.triangulation import OutOfHullError
from displaymap.model.grid import SampleGrid

if TYPE_CHECKING:
    from displaymap.analysis.interpolation import InterpolationMethod
    from displaymap.model.spaces import Space

logger = logging.getLogger(__name__)


class GridSampler:
    """
    Samples an interpolation method at every physical grid point.
    """

    def __init__(self, physical_space: Space, floor_values: bool = False) -> None:
        """
        Initialize the sampler.

        Args:
            physical_space: Grid to sample over.
            floor_values: Store ``floor(value)`` instead of the raw value.
        """
        self.space = physical_space
        self.transform = AffineTransform(physical_space)
        self.floor_values = floor_values

    def validate(self, method: InterpolationMethod) -> None:
        """
        Check that the corners of the physical grid can be interpolated.

        The triangulation is convex, so covering the four corners covers the
        whole rectangle.

        Raises:
            OutOfHullError: If a corner lies outside the triangulated data.
        """
        x_last = self.space.x.subdivisions
        y_last = self.space.y.subdivisions
        for index in ((0, 0), (x_last, 0), (0, y_last), (x_last, y_last)):
            corner = self.transform.to_position(index)
            if not method.covers(corner):
                logger.error(
                    f"Physical corner {corner} is not covered by the {method.NAME} data; "
                    "check the configured spaces."
                )
                raise OutOfHullError(corner)

    def sample(self, method: InterpolationMethod, label: str) -> SampleGrid:
        """
        Build the sample grid of one virtual axis.

        Args:
            method: Interpolation method over the calibration data of that axis.
            label: Virtual axis the heights represent ("x" or "y").

        Returns:
            Grid of shape ``physical_space.shape`` indexed ``[y, x]``.

        Raises:
            OutOfHullError: If the physical grid is not covered by the data.
        """
        self.validate(method)

        rows, cols = self.space.shape
        values = np.empty((rows, cols), dtype=np.float64)
        logger.info(f"Sampling {label}-axis with {method.NAME} over {cols} x {rows} physical points...")
        for y in range(rows):
            for x in range(cols):
                pos = self.transform.to_position((x, y))
                values[y, x] = method.interpolate(pos)
            logger.debug(f"Sampled row {y + 1}/{rows}.")

        if self.floor_values:
            values = np.floor(values)

        grid = SampleGrid(values, label=label, method=method.NAME)
        low, high = grid.value_range()
        logger.info(f"{label}-axis grid done, values in [{low:.3f}, {high:.3f}].")
        return grid

    def sample_axes(
        self,
        x_method: InterpolationMethod,
        y_method: InterpolationMethod,
    ) -> tuple[SampleGrid, SampleGrid]:
        """Sample the virtual x and virtual y surfaces."""
        return self.sample(x_method, label="x"), self.sample(y_method, label="y")
