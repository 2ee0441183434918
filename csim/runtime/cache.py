from __future__ import annotations
from typing import Iterator, List

from ..config import DEFAULT_MAX_CACHE_LINES, Geometry
from ..errors import ResourceError
from .cache_set import CacheSet


class Cache:
    """
    The full set-associative cache: `num_sets` independent LRU sets.
    All line storage is allocated up front. A cache that cannot be fully
    built is never returned.
    """
    def __init__(self, geometry: Geometry, max_lines: int | None = DEFAULT_MAX_CACHE_LINES):
        self.geometry = geometry

        if max_lines is not None and geometry.total_lines > max_lines:
            raise ResourceError(
                f"Cache of {geometry.num_sets} sets x {geometry.lines_per_set} lines "
                f"exceeds the limit of {max_lines} lines.")

        try:
            sets = [CacheSet(geometry.lines_per_set) for _ in range(geometry.num_sets)]
        except MemoryError as exc:
            raise ResourceError(
                f"Unable to allocate {geometry.num_sets} sets x {geometry.lines_per_set} lines.") from exc
        self.sets: List[CacheSet] = sets

    def __len__(self) -> int:
        return len(self.sets)

    def __iter__(self) -> Iterator[CacheSet]:
        return iter(self.sets)

    def set(self, set_index: int) -> CacheSet:
        return self.sets[set_index]

    def occupancy(self) -> int:
        """Number of valid lines across all sets."""
        return sum(len(s) for s in self.sets)
