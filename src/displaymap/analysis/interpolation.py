"""
Interpolation Methods
=====================
Closed set of strategies that evaluate the calibration surface at a point.

Every method raises ``OutOfHullError`` outside the triangulated data. The
natural neighbour family returns the barycentric value on the hull itself,
where Voronoi cells are unbounded and the value is linear along the edge.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
import itertools as it
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt
    from displaymap.analysis.triangulation import Triangulation


class InterpolationMethod(ABC):
    """
    Abstract base class for interpolation methods.
    """
    KEY: str = "interpolation"
    NAME: str = "Interpolation"

    def __init__(self, triangulation: Triangulation) -> None:
        self.triangulation = triangulation

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.triangulation!r})"

    @abstractmethod
    def interpolate(self, point: tuple[float, float]) -> float:
        """
        Evaluate the surface at a point.

        Args:
            point: Query point (x, y).

        Returns:
            Interpolated height.

        Raises:
            OutOfHullError: If `point` lies outside the triangulated data.
        """
        pass

    def covers(self, point: tuple[float, float]) -> bool:
        """Whether `point` can be interpolated."""
        return self.triangulation.contains(point)


class BarycentricInterpolation(InterpolationMethod):
    """
    Linear interpolation inside the triangle containing the point.
    """
    KEY = "barycentric"
    NAME = "barycentric interpolation"

    def interpolate(self, point: tuple[float, float]) -> float:
        simplex, weights = self.triangulation.barycentric(point)
        heights = self.triangulation.heights[self.triangulation.simplices[simplex]]
        return float(weights @ heights)


class _NaturalNeighborFamily(InterpolationMethod):
    """
    Shared handling of data vertices and hull points for Sibson-coordinate methods.
    """

    def interpolate(self, point: tuple[float, float]) -> float:
        triangulation = self.triangulation
        vertex = triangulation.vertex_at(point)
        if vertex is not None:
            return float(triangulation.heights[vertex])
        if triangulation.on_boundary(point):
            simplex, weights = triangulation.barycentric(point)
            return float(weights @ triangulation.heights[triangulation.simplices[simplex]])
        indices, weights = triangulation.natural_neighbors(point)
        return self._blend(np.asarray(point, dtype=np.float64), indices, weights)

    @abstractmethod
    def _blend(
        self,
        point: npt.NDArray[np.float64],
        indices: npt.NDArray[np.int64],
        weights: npt.NDArray[np.float64],
    ) -> float:
        """Combine the natural neighbours of `point` into a value."""
        pass


class NaturalNeighborInterpolation(_NaturalNeighborFamily):
    """
    Sibson's natural neighbour interpolation; C0 at the data vertices.
    """
    KEY = "natural-neighbor"
    NAME = "natural neighbor interpolation"

    def _blend(self, point, indices, weights) -> float:
        return float(weights @ self.triangulation.heights[indices])


class SibsonC1Interpolation(_NaturalNeighborFamily):
    """
    Sibson's C1 interpolation.

    Blends the linear natural neighbour value with the mean of the first-order
    extrapolations ``h_i + g_i . (p - x_i)`` from every neighbour. Distances
    are raised to `smoothness` (1.0 is Sibson's original choice; larger values
    flatten the surface around the data vertices).
    """
    KEY = "sibson-c1"
    NAME = "sibson's c1 interpolation"

    def __init__(self, triangulation: Triangulation, smoothness: float = 1.0) -> None:
        if smoothness <= 0.0:
            raise ValueError(f"Smoothness must be positive, got {smoothness}.")
        super().__init__(triangulation)
        self.smoothness = smoothness

    def _blend(self, point, indices, weights) -> float:
        heights = self.triangulation.heights[indices]
        gradients = self.triangulation.gradients[indices]
        offsets = point - self.triangulation.points[indices]
        r = np.power(np.sqrt((offsets ** 2).sum(axis=1)), self.smoothness)

        linear = weights @ heights
        extrapolated = heights + (gradients * offsets).sum(axis=1)
        inverse_weights = weights / r
        zeta = (inverse_weights @ extrapolated) / inverse_weights.sum()

        alpha = (weights @ r) / inverse_weights.sum()
        beta = weights @ (r ** 2)
        return float((alpha * linear + beta * zeta) / (alpha + beta))


class FarinC1Interpolation(_NaturalNeighborFamily):
    """
    Farin's C1 interpolation: a cubic Bernstein-Bezier polynomial in the Sibson coordinates.

    Control ordinates:
        b_iii = h_i
        b_iij = h_i + g_i . (x_j - x_i) / 3
        b_ijk = E + (E - V) / 2, with E the mean of the six b_iij-type
                ordinates of {i, j, k} and V the mean of their heights.
    """
    KEY = "farin-c1"
    NAME = "farin's c1 interpolation"

    def _blend(self, point, indices, weights) -> float:
        heights = self.triangulation.heights[indices]
        gradients = self.triangulation.gradients[indices]
        positions = self.triangulation.points[indices]

        # edge[i, j] = b_iij
        spans = positions[None, :, :] - positions[:, None, :]
        edge = heights[:, None] + (spans * gradients[:, None, :]).sum(axis=2) / 3.0

        value = (weights ** 3) @ heights
        n = len(indices)
        for i, j in it.permutations(range(n), 2):
            value += 3.0 * weights[i] ** 2 * weights[j] * edge[i, j]
        for i, j, k in it.combinations(range(n), 3):
            e = (edge[i, j] + edge[i, k] + edge[j, i] + edge[j, k] + edge[k, i] + edge[k, j]) / 6.0
            v = (heights[i] + heights[j] + heights[k]) / 3.0
            value += 6.0 * weights[i] * weights[j] * weights[k] * (e + (e - v) / 2.0)
        return float(value)


INTERPOLATION_METHODS: dict[str, type[InterpolationMethod]] = {
    cls.KEY: cls
    for cls in (
        BarycentricInterpolation,
        NaturalNeighborInterpolation,
        SibsonC1Interpolation,
        FarinC1Interpolation,
    )
}


def get_method(key: str, triangulation: Triangulation, smoothness: float = 1.0) -> InterpolationMethod:
    """
    Instantiate an interpolation method by key.

    Raises:
        ValueError: If `key` is not one of ``INTERPOLATION_METHODS``.
    """
    if key not in INTERPOLATION_METHODS:
        raise ValueError(
            f"Unknown interpolation method '{key}'. "
            f"Choose one of: {', '.join(INTERPOLATION_METHODS)}."
        )
    if key == SibsonC1Interpolation.KEY:
        return SibsonC1Interpolation(triangulation, smoothness=smoothness)
    return INTERPOLATION_METHODS[key](triangulation)
