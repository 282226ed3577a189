"""
Table Generation Pipeline
=========================
Runs the offline build step that produces the lookup tables.

Why is this file needed?
------------------------
1. Wiring: the sampler and the resolver only know spaces, methods and grids;
   this module turns a MappingConfig and calibration data into those.
2. Defaults: without explicit calibration data it builds the reference set
   for the configured spaces.
3. Reuse: tables loaded from disk can skip straight to resolution.

Classes:
    MappingTables: Result of a run.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import TYPE_CHECKING, Optional

from displaymap.analysis.interpolation import InterpolationMethod, get_method
from displaymap.analysis.resolver import RegionResolver
from displaymap.analysis.sampler import GridSampler
from displaymap.analysis.triangulation import Triangulation
from displaymap.model.calibration import reference_calibration

if TYPE_CHECKING:
    from displaymap.config import MappingConfig
    from displaymap.model.calibration import CalibrationSet
    from displaymap.model.grid import SampleGrid
    from displaymap.model.regions import RegionMap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MappingTables:
    """Sample grids of both virtual axes and the inverse map built from them."""
    x_grid: SampleGrid
    y_grid: SampleGrid
    region_map: RegionMap


def prepare_method(config: MappingConfig, calibration: CalibrationSet) -> InterpolationMethod:
    """
    Triangulate one calibration set and wrap it in the configured interpolation method.
    """
    logger.info(f"Triangulating {len(calibration)} calibration points of the {calibration.label}-axis...")
    triangulation = Triangulation(calibration.points, calibration.heights)
    return get_method(config.method, triangulation, smoothness=config.smoothness)


def resolve_tables(config: MappingConfig, x_grid: SampleGrid, y_grid: SampleGrid) -> MappingTables:
    """Build the inverse map from existing sample grids, flooring them first if configured."""
    if config.floor_values:
        x_grid, y_grid = x_grid.floored(), y_grid.floored()
    resolver = RegionResolver(config.virtual, config.physical)
    return MappingTables(x_grid=x_grid, y_grid=y_grid, region_map=resolver.resolve(x_grid, y_grid))


def generate_tables(
    config: MappingConfig,
    calibration: Optional[tuple[CalibrationSet, CalibrationSet]] = None,
) -> MappingTables:
    """
    Run the full build: triangulate, sample both axes, resolve the inverse map.

    Args:
        config: Spaces and method settings.
        calibration: Virtual-x and virtual-y calibration sets; the reference
            curved-display data when omitted.

    Raises:
        OutOfHullError: If the physical grid is not covered by the calibration data.
        ValueError: If the calibration data or the method is invalid.
    """
    start = time.perf_counter()
    if calibration is None:
        calibration = reference_calibration(config.physical, config.virtual)
    x_set, y_set = calibration

    x_method = prepare_method(config, x_set)
    y_method = prepare_method(config, y_set)

    sampler = GridSampler(config.physical, floor_values=config.floor_values)
    x_grid, y_grid = sampler.sample_axes(x_method, y_method)

    tables = resolve_tables(config, x_grid, y_grid)
    logger.info(f"Tables generated in {time.perf_counter() - start:.2f} s.")
    return tables
