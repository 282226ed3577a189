"""
Table Generation Engine
=======================
The numerical part of the mapping.

Why is this package needed?
---------------------------
1. Transform: converts grid indices into real coordinates of either display.
2. Surface: triangulates the calibration points and interpolates over them.
3. Sampling: discretises the interpolated surface over the physical grid.
4. Inversion: turns the sampled tables into virtual -> physical bounding boxes.

Note: This package should be pure Python/NumPy/SciPy and does no I/O.
"""
