from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt
    from displaymap.model.spaces import Space


class AffineTransform:
    """
    Maps normalised integer grid indices of a space to real coordinates, and back.

    ``position = index * scale - offset`` on each axis. Indices outside
    ``[0, subdivisions]`` are not rejected; they extrapolate linearly.
    """

    def __init__(self, space: Space) -> None:
        self.space = space
        self._scale = (space.x.scale, space.y.scale)
        self._offset = (space.x.offset, space.y.offset)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(space='{self.space.name}')"

    def to_position(self, index: tuple[float, float]) -> tuple[float, float]:
        """
        Convert a grid index into real coordinates.

        Args:
            index: Grid index ``(x, y)``.

        Returns:
            Real coordinates ``(x, y)`` in this space.
        """
        return (
            index[0] * self._scale[0] - self._offset[0],
            index[1] * self._scale[1] - self._offset[1],
        )

    def to_index(self, position: tuple[float, float]) -> tuple[float, float]:
        """
        Convert real coordinates back into a (fractional) grid index.

        Raises:
            ValueError: If an axis of the space has no extent.
        """
        if self._scale[0] == 0.0 or self._scale[1] == 0.0:
            raise ValueError(f"Space '{self.space.name}' has an axis without extent.")
        return (
            (position[0] + self._offset[0]) / self._scale[0],
            (position[1] + self._offset[1]) / self._scale[1],
        )

    def index_grid(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """
        Real coordinates of every grid index, as two arrays of the space's shape.

        Entry ``[y, x]`` holds exactly ``to_position((x, y))``.
        """
        rows, cols = self.space.shape
        ys, xs = np.mgrid[0:rows, 0:cols].astype(np.float64)
        return xs * self._scale[0] - self._offset[0], ys * self._scale[1] - self._offset[1]


def to_physical(index: tuple[float, float], space: Space) -> tuple[float, float]:
    """Given a normalised point, return the physical (x, y) coordinates."""
    return AffineTransform(space).to_position(index)


def to_virtual(index: tuple[float, float], space: Space) -> tuple[float, float]:
    """Given a normalised point, return the virtual (x, y) coordinates."""
    return AffineTransform(space).to_position(index)
