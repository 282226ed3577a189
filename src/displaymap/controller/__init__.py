"""
Controllers wire the MODEL and the analysis engine together into a run:
calibration data -> triangulation -> sample grids -> inverse region map.
"""
