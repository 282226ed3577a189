"""
Inverse Regions
===============
Result types of the inverse lookup: for each virtual coordinate, the box of
physical coordinates that interpolate onto it.

Classes:
    BoundingBox: Physical rectangle (left, top, right, bottom).
    RegionEntry: One virtual coordinate and its box, if any.
    RegionMap: All entries of a run, in virtual row-major order.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass(frozen=True)
class BoundingBox:
    """Rectangle of physical coordinates, all bounds inclusive and floored to integers."""
    left: int
    top: int
    right: int
    bottom: int

    @property
    def is_degenerate(self) -> bool:
        """The box collapsed to a single physical point."""
        return self.left == self.right and self.top == self.bottom

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def center(self) -> tuple[float, float]:
        return (self.left + self.right) / 2.0, (self.top + self.bottom) / 2.0

    def as_tuple(self) -> tuple[int, int, int, int]:
        return self.left, self.top, self.right, self.bottom


@dataclass(frozen=True)
class RegionEntry:
    """
    Inverse region of one virtual grid coordinate.

    ``box`` is None when no physical cell maps onto the coordinate.
    """
    virtual_index: tuple[int, int]
    virtual_position: tuple[float, float]
    box: Optional[BoundingBox]

    @property
    def found(self) -> bool:
        return self.box is not None

    @property
    def degenerate(self) -> bool:
        return self.box is not None and self.box.is_degenerate


class RegionMap(Mapping):
    """
    Read-only mapping ``(vx, vy) -> RegionEntry``.

    Iteration follows insertion order, which the resolver keeps row-major
    (``vy`` outer, ``vx`` inner).
    """

    def __init__(self, entries: list[RegionEntry]) -> None:
        self._entries: dict[tuple[int, int], RegionEntry] = {
            entry.virtual_index: entry for entry in entries
        }

    def __getitem__(self, key: tuple[int, int]) -> RegionEntry:
        return self._entries[key]

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RegionMap):
            return NotImplemented
        return list(self._entries.items()) == list(other._entries.items())

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(entries={len(self)}, "
            f"missing={len(self.missing())}, degenerate={len(self.degenerate())})"
        )

    def box(self, vx: int, vy: int) -> Optional[BoundingBox]:
        return self._entries[(vx, vy)].box

    def missing(self) -> list[tuple[int, int]]:
        """Virtual coordinates without any physical cell."""
        return [key for key, entry in self._entries.items() if not entry.found]

    def degenerate(self) -> list[tuple[int, int]]:
        """Virtual coordinates whose box is a single physical point."""
        return [key for key, entry in self._entries.items() if entry.degenerate]
