"""
Sample Grid
Dense, read-only table of interpolated values indexed by physical grid coordinates.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


class SampleGrid:
    """
    Interpolated virtual coordinate (one axis) for every physical grid point.

    The values are stored row-major with shape ``(rows, columns)``, i.e.
    ``(y_subdivisions + 1, x_subdivisions + 1)``, and are accessed as
    ``grid[y, x]``. The underlying array is made read-only on construction.
    """

    def __init__(
        self,
        values: npt.ArrayLike,
        label: str,
        method: Optional[str] = None,
    ) -> None:
        """
        Initialize the grid.

        Args:
            values: 2D array of samples, indexed ``[y, x]``.
            label: Virtual axis the samples belong to ("x" or "y").
            method: Name of the interpolation method that produced the samples.

        Raises:
            ValueError: If `values` is not a non-empty 2D array.
        """
        array = np.array(values, dtype=np.float64)
        if array.ndim != 2 or array.size == 0:
            raise ValueError(f"Sample grid must be a non-empty 2D array, got shape {array.shape}.")
        array.setflags(write=False)
        self._values = array
        self.label = label
        self.method = method

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(label='{self.label}', shape={self.shape}, method={self.method!r})"

    def __getitem__(self, index):
        return self._values[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SampleGrid):
            return NotImplemented
        return self.label == other.label and np.array_equal(self._values, other._values)

    __hash__ = None

    @property
    def values(self) -> npt.NDArray[np.float64]:
        """Read-only view of the samples."""
        return self._values

    @property
    def shape(self) -> tuple[int, int]:
        return self._values.shape

    @property
    def width(self) -> int:
        return self._values.shape[1]

    @property
    def height(self) -> int:
        return self._values.shape[0]

    def buckets(self) -> npt.NDArray[np.int64]:
        """Integer floor of every sample; the unit used when matching virtual coordinates."""
        return np.floor(self._values).astype(np.int64)

    def floored(self) -> SampleGrid:
        """Copy of the grid holding the floored samples."""
        return SampleGrid(np.floor(self._values), label=self.label, method=self.method)

    def value_range(self) -> tuple[float, float]:
        return float(self._values.min()), float(self._values.max())
