"""
Triangulated Calibration Surface
================================
Wraps ``scipy.spatial.Delaunay`` with the queries the interpolation methods
need: point location, barycentric coordinates, natural neighbour (Sibson)
coordinates, and per-vertex gradient and normal estimates.

Classes:
    OutOfHullError: Raised when a query point lies outside the triangulated data.
    Triangulation: Delaunay triangulation of points carrying a height.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import numpy as np
from scipy.spatial import ConvexHull, Delaunay, QhullError

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

# Barycentric slack accepted by point location; grid corners sit exactly on the hull
HULL_TOLERANCE = 1e-9
# Squared distance below which a query point is taken to be a data vertex
VERTEX_TOLERANCE = 1e-18


class OutOfHullError(ValueError):
    """The surface was queried outside the convex hull of its data points."""

    def __init__(self, point: tuple[float, float]) -> None:
        self.point = (float(point[0]), float(point[1]))
        super().__init__(
            f"Point ({self.point[0]:.6g}, {self.point[1]:.6g}) lies outside the convex hull "
            "of the triangulated data."
        )


def circumcenter(
    a: npt.NDArray[np.float64],
    b: npt.NDArray[np.float64],
    c: npt.NDArray[np.float64],
) -> npt.NDArray[np.float64]:
    """
    Circumcenter of the triangle (a, b, c).

    Raises:
        ZeroDivisionError: If the three points are collinear.
    """
    d = 2.0 * (a[0] * (b[1] - c[1]) + b[0] * (c[1] - a[1]) + c[0] * (a[1] - b[1]))
    if d == 0.0:
        raise ZeroDivisionError("Circumcenter of collinear points is undefined.")
    a2 = a[0] ** 2 + a[1] ** 2
    b2 = b[0] ** 2 + b[1] ** 2
    c2 = c[0] ** 2 + c[1] ** 2
    return np.array([
        (a2 * (b[1] - c[1]) + b2 * (c[1] - a[1]) + c2 * (a[1] - b[1])) / d,
        (a2 * (c[0] - b[0]) + b2 * (a[0] - c[0]) + c2 * (b[0] - a[0])) / d,
    ])


class Triangulation:
    """
    Delaunay triangulation of 2D calibration points with a scalar height each.

    Gradients and normals are estimated once, at construction, from the
    area-weighted normals of the triangles around each vertex.
    """

    def __init__(self, points: npt.ArrayLike, heights: npt.ArrayLike) -> None:
        """
        Triangulate the calibration points.

        Args:
            points: Array of shape (N, 2) with the (x, y) position of every point.
            heights: Array of shape (N,) with the height of every point.

        Raises:
            ValueError: If the shapes do not match, fewer than three points are
                given, or the points are collinear.
        """
        points = np.asarray(points, dtype=np.float64)
        heights = np.asarray(heights, dtype=np.float64)
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError(f"Points must have shape (N, 2), got {points.shape}.")
        if heights.shape != (points.shape[0],):
            raise ValueError(
                f"Expected {points.shape[0]} heights, got array of shape {heights.shape}."
            )
        if points.shape[0] < 3:
            raise ValueError(f"At least 3 points are needed to triangulate, got {points.shape[0]}.")

        try:
            self._delaunay = Delaunay(points)
        except QhullError as e:
            raise ValueError(f"Cannot triangulate the calibration points: {e}") from e

        self.points: npt.NDArray[np.float64] = self._delaunay.points
        self.heights: npt.NDArray[np.float64] = heights
        self.simplices: npt.NDArray[np.int32] = self._delaunay.simplices
        self.neighbors: npt.NDArray[np.int32] = self._delaunay.neighbors

        self._circumcenters, self._circumradii_sq = self._compute_circumcircles()
        self.normals, self.gradients = self._estimate_normals_and_gradients()

        logger.debug(
            f"Triangulated {len(self.points)} points into {len(self.simplices)} triangles."
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(points={len(self.points)}, triangles={len(self.simplices)})"

    @property
    def number_of_triangles(self) -> int:
        return len(self.simplices)

    def _compute_circumcircles(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        a = self.points[self.simplices[:, 0]]
        b = self.points[self.simplices[:, 1]]
        c = self.points[self.simplices[:, 2]]
        d = 2.0 * (
            a[:, 0] * (b[:, 1] - c[:, 1])
            + b[:, 0] * (c[:, 1] - a[:, 1])
            + c[:, 0] * (a[:, 1] - b[:, 1])
        )
        a2 = (a ** 2).sum(axis=1)
        b2 = (b ** 2).sum(axis=1)
        c2 = (c ** 2).sum(axis=1)
        with np.errstate(divide="ignore", invalid="ignore"):
            ux = (a2 * (b[:, 1] - c[:, 1]) + b2 * (c[:, 1] - a[:, 1]) + c2 * (a[:, 1] - b[:, 1])) / d
            uy = (a2 * (c[:, 0] - b[:, 0]) + b2 * (a[:, 0] - c[:, 0]) + c2 * (b[:, 0] - a[:, 0])) / d
        centers = np.column_stack([ux, uy])
        radii_sq = ((a - centers) ** 2).sum(axis=1)
        return centers, radii_sq

    def _estimate_normals_and_gradients(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        # Lift every triangle to 3D, the cross product length is twice its area
        lifted = np.column_stack([self.points, self.heights])
        a = lifted[self.simplices[:, 0]]
        b = lifted[self.simplices[:, 1]]
        c = lifted[self.simplices[:, 2]]
        face_normals = np.cross(b - a, c - a)
        face_normals[face_normals[:, 2] < 0.0] *= -1.0

        vertex_normals = np.zeros_like(lifted)
        for k in range(3):
            np.add.at(vertex_normals, self.simplices[:, k], face_normals)

        lengths = np.linalg.norm(vertex_normals, axis=1)
        lengths[lengths == 0.0] = 1.0
        normals = vertex_normals / lengths[:, None]

        gradients = np.zeros_like(self.points)
        upright = normals[:, 2] > 0.0
        gradients[upright] = -normals[upright, :2] / normals[upright, 2:3]
        return normals, gradients

    def locate(self, point: tuple[float, float]) -> int:
        """Index of the triangle containing `point`, or -1 outside the hull."""
        p = np.asarray(point, dtype=np.float64)
        return int(self._delaunay.find_simplex(p, tol=HULL_TOLERANCE))

    def contains(self, point: tuple[float, float]) -> bool:
        return self.locate(point) >= 0

    def barycentric(self, point: tuple[float, float]) -> tuple[int, npt.NDArray[np.float64]]:
        """
        Locate `point` and return its barycentric coordinates.

        Returns:
            The triangle index and the three weights of its vertices.

        Raises:
            OutOfHullError: If `point` lies outside the triangulation.
        """
        simplex = self.locate(point)
        if simplex < 0:
            raise OutOfHullError(point)
        transform = self._delaunay.transform[simplex]
        b = transform[:2].dot(np.asarray(point, dtype=np.float64) - transform[2])
        return simplex, np.append(b, 1.0 - b.sum())

    def vertex_at(self, point: tuple[float, float]) -> Optional[int]:
        """Index of the data vertex coinciding with `point`, if any."""
        distances = ((self.points - np.asarray(point, dtype=np.float64)) ** 2).sum(axis=1)
        nearest = int(np.argmin(distances))
        if distances[nearest] <= VERTEX_TOLERANCE:
            return nearest
        return None

    def on_boundary(self, point: tuple[float, float]) -> bool:
        """
        Whether `point` lies on an edge of the convex hull.

        Raises:
            OutOfHullError: If `point` lies outside the triangulation.
        """
        simplex, weights = self.barycentric(point)
        for k in range(3):
            # neighbors[s, k] is the triangle across the edge opposite vertex k
            if weights[k] <= HULL_TOLERANCE and self.neighbors[simplex, k] == -1:
                return True
        return False

    def natural_neighbors(self, point: tuple[float, float]) -> tuple[npt.NDArray[np.int64], npt.NDArray[np.float64]]:
        """
        Sibson coordinates of an interior point.

        Inserting `point` into the triangulation steals part of the Voronoi
        cell of each natural neighbour; the weight of a neighbour is the
        stolen area divided by the area of the new cell. The stolen region
        of a neighbour ``v`` is the convex polygon spanned by the circumcenters
        of the two new triangles on ``v`` and the circumcenters of the old
        triangles on ``v`` whose circumcircle contains `point`.

        Args:
            point: Query point strictly inside the hull.

        Returns:
            Indices of the natural neighbours and their weights (summing to 1).

        Raises:
            OutOfHullError: If `point` lies outside the triangulation.
            ValueError: If `point` lies on the hull, where the new cell is unbounded.
        """
        if not self.contains(point):
            raise OutOfHullError(point)
        p = np.asarray(point, dtype=np.float64)

        distances_sq = ((self._circumcenters - p) ** 2).sum(axis=1)
        cavity = np.flatnonzero(distances_sq < self._circumradii_sq)
        if cavity.size == 0:
            # Only possible on the hull, where find_simplex tolerance accepted the point
            raise ValueError(f"Point ({p[0]:.6g}, {p[1]:.6g}) has no natural neighbours.")

        vertices = np.unique(self.simplices[cavity])
        # The cavity is star-shaped around p, so its boundary is ordered by angle
        offsets = self.points[vertices] - p
        vertices = vertices[np.argsort(np.arctan2(offsets[:, 1], offsets[:, 0]))]

        n = len(vertices)
        areas = np.zeros(n)
        for i, vertex in enumerate(vertices):
            previous = self.points[vertices[i - 1]]
            following = self.points[vertices[(i + 1) % n]]
            current = self.points[vertex]
            try:
                polygon = [
                    circumcenter(p, previous, current),
                    circumcenter(p, current, following),
                ]
            except ZeroDivisionError as e:
                raise ValueError(
                    f"Point ({p[0]:.6g}, {p[1]:.6g}) lies on the hull; natural neighbour "
                    "coordinates are not defined there."
                ) from e
            for triangle in cavity:
                if vertex in self.simplices[triangle]:
                    polygon.append(self._circumcenters[triangle])
            try:
                areas[i] = ConvexHull(np.array(polygon)).volume  # 'volume' is the area in 2D
            except QhullError:
                areas[i] = 0.0

        total = areas.sum()
        if total <= 0.0:
            raise ValueError(f"Point ({p[0]:.6g}, {p[1]:.6g}) has a degenerate natural neighbour cell.")
        return vertices.astype(np.int64), areas / total
