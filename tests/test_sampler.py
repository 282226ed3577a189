import numpy as np
import pytest

from displaymap.analysis.interpolation import BarycentricInterpolation
from displaymap.analysis.sampler import GridSampler
from displaymap.analysis.transform import to_physical
from displaymap.analysis.triangulation import OutOfHullError, Triangulation
from displaymap.model.spaces import AxisSpace, Space

from conftest import StubMethod, linear_field


@pytest.fixture
def physical():
    return Space(name="physical", x=AxisSpace(0.0, 4.0, margin=1.05), y=AxisSpace(0.0, 2.0, margin=1.05))


def test_grid_has_one_entry_per_physical_point(physical):
    grid = GridSampler(physical).sample(StubMethod(), label="x")

    assert grid.shape == (3, 5)
    assert grid.values.size == (2 + 1) * (4 + 1)
    assert grid.label == "x"
    assert grid.method == "stub interpolation"


def test_every_query_lies_inside_the_physical_rectangle(physical):
    method = StubMethod()
    GridSampler(physical).sample(method, label="x")
    x_lo, y_lo, x_hi, y_hi = physical.bounds

    assert len(method.queries) == physical.size
    for x, y in method.queries:
        assert x_lo <= x <= x_hi
        assert y_lo <= y <= y_hi


def test_entry_holds_the_value_at_the_transformed_index(physical):
    grid = GridSampler(physical).sample(StubMethod(), label="y")

    for x, y in [(0, 0), (4, 0), (2, 1), (4, 2)]:
        assert grid[y, x] == linear_field(*to_physical((x, y), physical))


def test_floor_values_option(physical):
    grid = GridSampler(physical, floor_values=True).sample(StubMethod(), label="x")

    assert np.array_equal(grid.values, np.floor(grid.values))
    assert grid[1, 1] == np.floor(linear_field(1.05, 1.05))


def test_uncovered_corner_aborts_before_sampling(physical):
    method = StubMethod(covered=lambda point: point[0] < 4.0)

    with pytest.raises(OutOfHullError):
        GridSampler(physical).sample(method, label="x")
    assert method.queries == []


def test_oracle_failure_propagates(physical):
    def failing(x, y):
        if x > 2.0:
            raise OutOfHullError((x, y))
        return 0.0

    with pytest.raises(OutOfHullError):
        GridSampler(physical).sample(StubMethod(fn=failing), label="x")


def test_sampling_a_triangulated_plane(physical):
    points = np.array([[0.0, 0.0], [4.2, 0.0], [0.0, 2.1], [4.2, 2.1]])
    method = BarycentricInterpolation(Triangulation(points, linear_field(points[:, 0], points[:, 1])))

    x_grid, y_grid = GridSampler(physical).sample_axes(method, method)

    assert x_grid.label == "x" and y_grid.label == "y"
    assert x_grid[2, 4] == pytest.approx(linear_field(4.2, 2.1))
    assert x_grid[1, 3] == pytest.approx(linear_field(3.15, 1.05))


def test_sample_grid_is_read_only(physical):
    grid = GridSampler(physical).sample(StubMethod(), label="x")

    assert not grid.values.flags.writeable
    with pytest.raises(ValueError):
        grid.values[0, 0] = 1.0
