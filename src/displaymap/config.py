"""
Configuration & Constants
=========================
This module serves as the central registry for the display geometry and the
defaults of a table generation run.

Why is this file needed?
------------------------
1. Single source: the CHIP-8 emulator screen and PineTime display bounds are
   declared once instead of being repeated in every component.
2. Explicit wiring: components never read these globals; the pipeline builds
   a MappingConfig and passes it down, so tests can use synthetic spaces.

Exports:
    REFERENCE_PHYSICAL_SPACE (Space): PineTime display quadrant, 120 x 100.
    REFERENCE_VIRTUAL_SPACE (Space): CHIP-8 emulator screen quadrant, 32 x 16.
    MappingConfig: Settings of one run.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from displaymap.model.spaces import AxisSpace, Space

# Range of Physical (x,y) coordinates, based on PineTime screen resolution
X_PHYSICAL_MIN: float = 0.0
X_PHYSICAL_MAX: float = 120.0
Y_PHYSICAL_MIN: float = 0.0
Y_PHYSICAL_MAX: float = 100.0

# Range of Virtual (x,y) coordinates, based on CHIP-8 emulator resolution
X_VIRTUAL_MIN: float = 0.0
X_VIRTUAL_MAX: float = 32.0
Y_VIRTUAL_MIN: float = 0.0
Y_VIRTUAL_MAX: float = 16.0

# Physical cells are interpolated, and virtual boxes computed, at these steps
X_PHYSICAL_INCREMENT: float = 1.0
Y_PHYSICAL_INCREMENT: float = 1.0
X_VIRTUAL_INCREMENT: float = 1.0
Y_VIRTUAL_INCREMENT: float = 1.0

# The physical display is sampled 5% past its nominal edge
PHYSICAL_MARGIN: float = 1.05
VIRTUAL_MARGIN: float = 1.0

DEFAULT_METHOD: str = "barycentric"
DEFAULT_SMOOTHNESS: float = 1.0

REFERENCE_PHYSICAL_SPACE = Space(
    name="physical",
    x=AxisSpace(X_PHYSICAL_MIN, X_PHYSICAL_MAX, X_PHYSICAL_INCREMENT, PHYSICAL_MARGIN),
    y=AxisSpace(Y_PHYSICAL_MIN, Y_PHYSICAL_MAX, Y_PHYSICAL_INCREMENT, PHYSICAL_MARGIN),
)

REFERENCE_VIRTUAL_SPACE = Space(
    name="virtual",
    x=AxisSpace(X_VIRTUAL_MIN, X_VIRTUAL_MAX, X_VIRTUAL_INCREMENT, VIRTUAL_MARGIN),
    y=AxisSpace(Y_VIRTUAL_MIN, Y_VIRTUAL_MAX, Y_VIRTUAL_INCREMENT, VIRTUAL_MARGIN),
)


@dataclass(frozen=True)
class MappingConfig:
    """
    Settings of a table generation run.

    Attributes:
        physical: Space sampled by the grid sampler.
        virtual: Space walked by the region resolver.
        method: Name of the interpolation method (see ``analysis.interpolation``).
        smoothness: Smoothness factor for Sibson's C1 interpolation.
        floor_values: Store floored instead of raw samples in the grids.
    """
    physical: Space = field(default=REFERENCE_PHYSICAL_SPACE)
    virtual: Space = field(default=REFERENCE_VIRTUAL_SPACE)
    method: str = DEFAULT_METHOD
    smoothness: float = DEFAULT_SMOOTHNESS
    floor_values: bool = False
