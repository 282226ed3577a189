import numpy as np
import pytest

from displaymap.analysis.resolver import RegionResolver
from displaymap.analysis.triangulation import OutOfHullError
from displaymap.config import MappingConfig
from displaymap.controller.pipeline import generate_tables, resolve_tables
from displaymap.model.calibration import CalibrationSet, reference_calibration
from displaymap.model.spaces import AxisSpace, Space


@pytest.fixture(scope="module")
def config():
    return MappingConfig()


@pytest.fixture(scope="module")
def reference_tables(config):
    return generate_tables(config)


def test_reference_calibration_spans_the_virtual_screen(config):
    x_set, y_set = reference_calibration(config.physical, config.virtual)

    assert len(x_set) == len(y_set) == 25
    assert x_set.heights.min() == pytest.approx(0.0, abs=1e-12)
    assert x_set.heights.max() == pytest.approx(33.0)
    assert y_set.heights.max() == pytest.approx(17.0)
    # Centre of the display maps to the centre of the virtual screen
    centre = np.flatnonzero((x_set.points == [63.0, 52.5]).all(axis=1))
    assert x_set.heights[centre] == pytest.approx([16.5])
    assert y_set.heights[centre] == pytest.approx([8.5])


def test_calibration_set_validates_shapes():
    with pytest.raises(ValueError):
        CalibrationSet(label="x", points=np.zeros((4, 2)), heights=np.zeros(3))


def test_reference_grids_cover_the_physical_space(reference_tables, config):
    assert reference_tables.x_grid.shape == (101, 121)
    assert reference_tables.y_grid.shape == (101, 121)
    assert reference_tables.x_grid.method == "barycentric interpolation"


def test_every_virtual_coordinate_resolves(reference_tables):
    region_map = reference_tables.region_map

    assert len(region_map) == 33 * 17
    assert region_map.missing() == []


def test_centre_resolves_to_the_middle_of_the_display(reference_tables, config):
    box = reference_tables.region_map.box(16, 8)
    x_lo, y_lo, x_hi, y_hi = config.physical.bounds
    cx, cy = box.center

    assert abs(cx - (x_lo + x_hi) / 2.0) <= config.physical.x.scale
    assert abs(cy - (y_lo + y_hi) / 2.0) <= config.physical.y.scale


def test_axis_ranges_move_outwards_with_the_virtual_coordinate(reference_tables, config):
    resolver = RegionResolver(config.virtual, config.physical)

    x_ranges = [resolver.axis_range(reference_tables.x_grid, "x", vx) for vx in range(33)]
    y_ranges = [resolver.axis_range(reference_tables.y_grid, "y", vy) for vy in range(17)]
    assert None not in x_ranges and None not in y_ranges
    assert [low for low, _ in x_ranges] == sorted(low for low, _ in x_ranges)
    assert [low for low, _ in y_ranges] == sorted(low for low, _ in y_ranges)


def test_resolving_again_gives_identical_boxes(reference_tables, config):
    again = resolve_tables(config, reference_tables.x_grid, reference_tables.y_grid)

    assert again.region_map == reference_tables.region_map


def test_physical_grid_outside_calibration_aborts(config):
    smaller = Space(name="physical", x=AxisSpace(0.0, 60.0), y=AxisSpace(0.0, 50.0))
    calibration = reference_calibration(smaller, config.virtual)

    with pytest.raises(OutOfHullError):
        generate_tables(config, calibration)


def test_natural_neighbor_tables_on_a_small_grid():
    physical = Space(name="physical", x=AxisSpace(0.0, 12.0, 2.0, 1.05), y=AxisSpace(0.0, 10.0, 2.0, 1.05))
    virtual = Space(name="virtual", x=AxisSpace(0.0, 4.0), y=AxisSpace(0.0, 2.0))
    config = MappingConfig(physical=physical, virtual=virtual, method="natural-neighbor")

    tables = generate_tables(config)

    assert tables.x_grid.shape == (6, 7)
    assert len(tables.region_map) == 15
    assert tables.region_map == RegionResolver(virtual, physical).resolve(tables.x_grid, tables.y_grid)


def test_resolve_tables_floors_loaded_grids(reference_tables, config):
    floored_config = MappingConfig(floor_values=True)

    tables = resolve_tables(floored_config, reference_tables.x_grid, reference_tables.y_grid)

    assert np.array_equal(tables.x_grid.values, np.floor(reference_tables.x_grid.values))
    assert tables.x_grid.method == reference_tables.x_grid.method
    assert tables.region_map == reference_tables.region_map
