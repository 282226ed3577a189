"""
Inverse Region Resolver
=======================
Inverts the sampled tables: for each virtual grid coordinate, finds every
physical cell whose samples floor to that coordinate and reduces them to a
bounding box.

Matching rule: both the sample and the virtual position are floored to
signed integers and compared as integers, so one virtual unit is one bucket.
"""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Optional

import numpy as np

from displaymap.analysis.transform import AffineTransform
from displaymap.model.regions import BoundingBox, RegionEntry, RegionMap

if TYPE_CHECKING:
    import numpy.typing as npt
    from displaymap.model.grid import SampleGrid
    from displaymap.model.spaces import Space

logger = logging.getLogger(__name__)

AXES = ("x", "y")


class RegionResolver:
    """
    Builds the virtual -> physical bounding-box map from two sample grids.
    """

    def __init__(self, virtual_space: Space, physical_space: Space) -> None:
        self.virtual_space = virtual_space
        self.physical_space = physical_space
        self.virtual_transform = AffineTransform(virtual_space)
        self.physical_transform = AffineTransform(physical_space)
        # Physical position of every cell, entry [y, x]
        self._physical_x, self._physical_y = self.physical_transform.index_grid()

    def _check_grid(self, grid: SampleGrid) -> None:
        if grid.shape != self.physical_space.shape:
            raise ValueError(
                f"Sample grid '{grid.label}' has shape {grid.shape}, expected "
                f"{self.physical_space.shape} for the '{self.physical_space.name}' space."
            )

    def _check_virtual_index(self, vx: int, vy: int) -> None:
        if not self.virtual_space.contains_index(vx, vy):
            raise ValueError(
                f"Virtual coordinate ({vx}, {vy}) is outside "
                f"[0, {self.virtual_space.x.subdivisions}] x [0, {self.virtual_space.y.subdivisions}]."
            )

    def _box_from_mask(self, mask: npt.NDArray[np.bool_]) -> Optional[BoundingBox]:
        if not mask.any():
            return None
        xs = self._physical_x[mask]
        ys = self._physical_y[mask]
        return BoundingBox(
            left=math.floor(xs.min()),
            top=math.floor(ys.min()),
            right=math.floor(xs.max()),
            bottom=math.floor(ys.max()),
        )

    def _entry(
        self,
        x_buckets: npt.NDArray[np.int64],
        y_buckets: npt.NDArray[np.int64],
        vx: int,
        vy: int,
    ) -> RegionEntry:
        pos = self.virtual_transform.to_position((vx, vy))
        mask = (x_buckets == math.floor(pos[0])) & (y_buckets == math.floor(pos[1]))
        return RegionEntry(
            virtual_index=(vx, vy),
            virtual_position=pos,
            box=self._box_from_mask(mask),
        )

    def bounding_box(
        self,
        x_grid: SampleGrid,
        y_grid: SampleGrid,
        vx: int,
        vy: int,
    ) -> Optional[BoundingBox]:
        """
        Bounding box of the physical cells that interpolate to one virtual coordinate.

        Args:
            x_grid: Virtual x sampled at every physical cell.
            y_grid: Virtual y sampled at every physical cell.
            vx: Virtual grid index along x.
            vy: Virtual grid index along y.

        Returns:
            The floored (left, top, right, bottom) box, or None if no cell matches.

        Raises:
            ValueError: If a grid does not fit the physical space, or
                ``(vx, vy)`` lies outside the virtual grid.
        """
        self._check_grid(x_grid)
        self._check_grid(y_grid)
        self._check_virtual_index(vx, vy)
        return self._entry(x_grid.buckets(), y_grid.buckets(), vx, vy).box

    def resolve(self, x_grid: SampleGrid, y_grid: SampleGrid) -> RegionMap:
        """
        Resolve the bounding box of every virtual grid coordinate.

        Degenerate boxes (a single physical point) stay in the map and are
        reported as warnings; coordinates without any cell get a None box.

        Raises:
            ValueError: If a grid does not fit the physical space.
        """
        self._check_grid(x_grid)
        self._check_grid(y_grid)
        x_buckets = x_grid.buckets()
        y_buckets = y_grid.buckets()

        entries: list[RegionEntry] = []
        for vy in range(self.virtual_space.y.subdivisions + 1):
            for vx in range(self.virtual_space.x.subdivisions + 1):
                entry = self._entry(x_buckets, y_buckets, vx, vy)
                if entry.box is None:
                    logger.debug(f"Virtual ({vx}, {vy}) not found in the sample grids.")
                elif entry.degenerate:
                    logger.warning(
                        f"Virtual ({vx}, {vy}) maps to the single physical point "
                        f"({entry.box.left}, {entry.box.top}); the physical grid is too coarse here."
                    )
                entries.append(entry)

        region_map = RegionMap(entries)
        logger.info(
            f"Resolved {len(region_map)} virtual coordinates: "
            f"{len(region_map.missing())} not found, {len(region_map.degenerate())} degenerate."
        )
        return region_map

    def axis_range(self, grid: SampleGrid, axis: str, value: float) -> Optional[tuple[float, float]]:
        """
        Physical range along one axis of the cells whose sample floors to `value`.

        Single-axis form of the lookup: for a virtual x (or y) value, the
        minimum and maximum physical x (or y) over all matching cells.

        Args:
            grid: Samples of the virtual axis `axis`.
            axis: "x" or "y"; selects which physical coordinate is reduced.
            value: Virtual coordinate, floored before matching.

        Returns:
            ``(min, max)`` physical coordinate, or None if no cell matches.
        """
        if axis not in AXES:
            raise ValueError(f"Axis must be one of {AXES}, got '{axis}'.")
        self._check_grid(grid)
        mask = grid.buckets() == math.floor(value)
        if not mask.any():
            return None
        positions = (self._physical_x if axis == "x" else self._physical_y)[mask]
        return float(positions.min()), float(positions.max())
