"""
Table Input/Output
Formats the generated tables for embedding in firmware and stores the
sample grids in HDF5 files so the inverse map can be rebuilt without
triangulating again.
"""
import json
import logging
from importlib.metadata import version, PackageNotFoundError
from typing import Iterable

import h5py
import numpy as np

from displaymap.model.grid import SampleGrid
from displaymap.model.regions import RegionMap
from displaymap.model.spaces import Space

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("displaymap")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"

# Per language: (declaration template, row opening, row closing)
LITERAL_FORMATS = {
    "rust": ("pub const {name}: [[f64; {cols}]; {rows}] = [", "    [", "],"),
    "c": ("static const double {name}[{rows}][{cols}] = {{", "    {", "},"),
}
LITERAL_CLOSING = {"rust": "];", "c": "};"}

DEGENERATE_MARKER = "****"


class TableWriter:

    @staticmethod
    def format_grid(grid: SampleGrid, name: str, language: str = "rust", precision: int = 3) -> str:
        """
        Render a sample grid as a row-major literal array.

        Args:
            grid: Grid to render, one literal row per physical row.
            name: Identifier of the constant.
            language: "rust" or "c".
            precision: Digits after the decimal point.

        Raises:
            ValueError: If `language` is not supported.
        """
        if language not in LITERAL_FORMATS:
            raise ValueError(
                f"Unsupported language '{language}'. Choose one of: {', '.join(LITERAL_FORMATS)}."
            )
        header, row_open, row_close = LITERAL_FORMATS[language]
        rows, cols = grid.shape
        lines = [header.format(name=name, rows=rows, cols=cols)]
        for row in grid.values:
            values = ", ".join(f"{value:.{precision}f}" for value in row)
            lines.append(f"{row_open}{values}{row_close}")
        lines.append(LITERAL_CLOSING[language])
        return "\n".join(lines)

    @staticmethod
    def format_region_report(region_map: RegionMap) -> str:
        """
        One line per virtual coordinate with its bounding box.

        Boxes that collapsed to a single physical point are prefixed with
        ``****`` so they stand out when scanning the report.
        """
        lines = []
        for entry in region_map.values():
            marker = DEGENERATE_MARKER if entry.degenerate else ""
            box = entry.box.as_tuple() if entry.box is not None else None
            lines.append(
                f"{marker}XVirtual={entry.virtual_position[0]:.0f}, "
                f"YVirtual={entry.virtual_position[1]:.0f}, BoundBox={box}"
            )
        return "\n".join(lines)

    @staticmethod
    def write_text(filepath: str, sections: Iterable[str]) -> None:
        logger.info(f"Writing tables to: {filepath}")
        with open(filepath, "w", encoding="utf-8") as f:
            f.write("\n\n".join(sections))
            f.write("\n")

    @staticmethod
    def save_tables(filepath: str, x_grid: SampleGrid, y_grid: SampleGrid, physical_space: Space) -> None:
        """
        Save both sample grids and the physical space they were sampled on.

        Raises:
            ValueError: If the grids do not fit the physical space.
        """
        for grid in (x_grid, y_grid):
            if grid.shape != physical_space.shape:
                raise ValueError(
                    f"Grid '{grid.label}' has shape {grid.shape}, "
                    f"expected {physical_space.shape}."
                )
        logger.info(f"Saving sample grids to: {filepath}")
        with h5py.File(filepath, "w") as f:
            f.attrs["version"] = APP_VERSION
            f.attrs["physical_space"] = json.dumps(physical_space.to_dict())
            grp = f.create_group("grids")
            for grid in (x_grid, y_grid):
                dataset = grp.create_dataset(grid.label, data=grid.values, compression="gzip")
                if grid.method:
                    dataset.attrs["method"] = grid.method
        logger.debug(f"Saved grids of shape {x_grid.shape}.")

    @staticmethod
    def load_tables(filepath: str) -> tuple[SampleGrid, SampleGrid, Space]:
        """
        Load sample grids written by ``save_tables``.

        Returns:
            The virtual-x grid, the virtual-y grid and their physical space.

        Raises:
            ValueError: If the file lacks one of the grids or the space.
        """
        logger.info(f"Loading sample grids from: {filepath}")
        with h5py.File(filepath, "r") as f:
            if "physical_space" not in f.attrs or "grids" not in f:
                raise ValueError(f"'{filepath}' does not contain sample grids.")
            file_version = f.attrs.get("version", "unknown")
            if file_version != APP_VERSION:
                logger.warning(f"Tables were written by version {file_version}, running {APP_VERSION}.")
            try:
                space = Space.from_dict(json.loads(f.attrs["physical_space"]))
            except (KeyError, TypeError, IndexError) as e:
                raise ValueError(f"'{filepath}' has an invalid physical space: {e}") from e
            grids = []
            for label in ("x", "y"):
                if label not in f["grids"]:
                    raise ValueError(f"'{filepath}' has no '{label}' sample grid.")
                dataset = f["grids"][label]
                method = dataset.attrs.get("method")
                grids.append(SampleGrid(np.asarray(dataset[()]), label=label, method=method))
        logger.debug(f"Loaded grids of shape {grids[0].shape}.")
        return grids[0], grids[1], space
