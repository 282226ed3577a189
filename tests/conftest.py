# tests/conftest.py

import numpy as np
import pytest

from displaymap.analysis.interpolation import InterpolationMethod
from displaymap.analysis.triangulation import Triangulation
from displaymap.model.spaces import AxisSpace, Space


def linear_field(x, y):
    return 1.0 + 2.0 * x + 3.0 * y


class StubMethod(InterpolationMethod):
    """Interpolates a plain function and records every query point."""
    KEY = "stub"
    NAME = "stub interpolation"

    def __init__(self, fn=linear_field, covered=None):
        super().__init__(triangulation=None)
        self.fn = fn
        self.covered = covered
        self.queries = []

    def covers(self, point):
        return True if self.covered is None else self.covered(point)

    def interpolate(self, point):
        self.queries.append(point)
        return self.fn(point[0], point[1])


@pytest.fixture
def square_triangulation():
    """Square [0, 2] x [0, 2] with a centre point, heights on a plane."""
    points = np.array([[0.0, 0.0], [2.0, 0.0], [0.0, 2.0], [2.0, 2.0], [1.0, 1.0]])
    heights = linear_field(points[:, 0], points[:, 1])
    return Triangulation(points, heights)


@pytest.fixture
def small_physical():
    """10 x 10 physical grid with cells at integer positions 0..9."""
    return Space(name="physical", x=AxisSpace(0.0, 9.0), y=AxisSpace(0.0, 9.0))


@pytest.fixture
def small_virtual():
    return Space(name="virtual", x=AxisSpace(0.0, 2.0), y=AxisSpace(0.0, 2.0))
