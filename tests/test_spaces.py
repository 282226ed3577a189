import pytest

from displaymap.config import REFERENCE_PHYSICAL_SPACE, REFERENCE_VIRTUAL_SPACE
from displaymap.model.spaces import AxisSpace, Space


def test_reference_physical_space_is_120_by_100_with_overscan():
    space = REFERENCE_PHYSICAL_SPACE

    assert space.x.subdivisions == 120
    assert space.y.subdivisions == 100
    assert space.shape == (101, 121)
    assert space.x.scale == pytest.approx(1.05)
    assert space.y.scale == pytest.approx(1.05)
    assert space.x.offset == 0.0
    assert space.bounds == pytest.approx((0.0, 0.0, 126.0, 105.0))


def test_reference_virtual_space_has_unit_scale():
    space = REFERENCE_VIRTUAL_SPACE

    assert space.shape == (17, 33)
    assert space.x.scale == 1.0
    assert space.y.scale == 1.0
    assert space.bounds == (0.0, 0.0, 32.0, 16.0)


def test_axis_rejects_range_that_is_not_whole_increments():
    with pytest.raises(ValueError, match="whole number"):
        AxisSpace(0.0, 10.0, 3.0)


def test_axis_rejects_non_positive_increment_and_inverted_range():
    with pytest.raises(ValueError):
        AxisSpace(0.0, 10.0, 0.0)
    with pytest.raises(ValueError):
        AxisSpace(5.0, 1.0)


def test_axis_tolerates_float_noise_in_subdivisions():
    axis = AxisSpace(0.0, 0.3, 0.1)

    assert axis.subdivisions == 3


def test_zero_width_axis_has_single_point():
    axis = AxisSpace(4.0, 4.0)

    assert axis.subdivisions == 0
    assert axis.scale == 0.0
    assert axis.extent == (4.0, 4.0)


def test_offset_places_index_zero_on_minimum():
    axis = AxisSpace(-5.0, 5.0, 1.0)

    assert axis.offset == 5.0
    assert axis.extent == (-5.0, 5.0)


def test_space_dict_round_trip():
    restored = Space.from_dict(REFERENCE_PHYSICAL_SPACE.to_dict())

    assert restored == REFERENCE_PHYSICAL_SPACE


def test_contains_index_bounds_are_inclusive():
    space = REFERENCE_VIRTUAL_SPACE

    assert space.contains_index(0, 0)
    assert space.contains_index(32, 16)
    assert not space.contains_index(33, 0)
    assert not space.contains_index(0, -1)
