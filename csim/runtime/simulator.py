from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..config import DEFAULT_MAX_CACHE_LINES, Geometry, SimConfig
from ..trace.entry import TraceEntry
from ..trace.op import Operation
from ..utils.logging import get_logger
from .cache import Cache
from .cache_set import CacheSet, InsertOutcome
from .decoder import AddressDecoder

logger = get_logger(__name__)

HIT = "hit"
MISS = "miss"
EVICTION = "eviction"


@dataclass
class SimResult:
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def accesses(self) -> int:
        return self.hits + self.misses

    def to_dict(self) -> Dict[str, int]:
        return {"hits": self.hits, "misses": self.misses, "evictions": self.evictions}


@dataclass
class AccessRecord:
    """Annotation for one simulated trace entry, e.g. ``M 12,1 miss eviction hit``."""
    entry: TraceEntry
    set_index: int
    tag: int
    outcomes: List[str] = field(default_factory=list)

    def format(self) -> str:
        return " ".join([str(self.entry), *self.outcomes])


class Simulator:
    """Replays trace entries against a cache and counts hits, misses and evictions."""

    def __init__(self, geometry: Geometry, max_lines: int | None = DEFAULT_MAX_CACHE_LINES):
        self.geometry = geometry
        self.decoder = AddressDecoder(geometry)
        self.cache = Cache(geometry, max_lines=max_lines)
        self.result = SimResult()
        self.set_stats: Dict[int, SimResult] = {}

    def step(self, entry: TraceEntry) -> Optional[AccessRecord]:
        """Applies one trace entry. Instruction fetches return None and change nothing."""
        if entry.kind == Operation.IGNORE:
            return None

        tag, set_index, _ = self.decoder.decode(entry.address)
        cache_set = self.cache.set(set_index)
        stats = self.set_stats.setdefault(set_index, SimResult())
        record = AccessRecord(entry=entry, set_index=set_index, tag=tag)

        self._access(cache_set, tag, stats, record)

        if entry.kind == Operation.MODIFY:
            # The load above left the line resident, so the store always hits.
            slot = cache_set.lookup(tag)
            cache_set.touch(slot)
            self._count_hit(stats, record)

        return record

    def run(self, entries: Iterable[TraceEntry],
            on_record: Optional[Callable[[AccessRecord], None]] = None) -> SimResult:
        """
        Consumes entries one at a time. Records are handed to `on_record` as
        each entry completes and are not retained.
        """
        for entry in entries:
            record = self.step(entry)
            if record is not None and on_record is not None:
                on_record(record)
        return self.result

    def _access(self, cache_set: CacheSet, tag: int, stats: SimResult, record: AccessRecord):
        slot = cache_set.lookup(tag)
        if slot is not None:
            cache_set.touch(slot)
            self._count_hit(stats, record)
            return

        self.result.misses += 1
        stats.misses += 1
        record.outcomes.append(MISS)
        if cache_set.insert_or_evict(tag) == InsertOutcome.EVICTED:
            self.result.evictions += 1
            stats.evictions += 1
            record.outcomes.append(EVICTION)

    def _count_hit(self, stats: SimResult, record: AccessRecord):
        self.result.hits += 1
        stats.hits += 1
        record.outcomes.append(HIT)


def run(entries: Iterable[TraceEntry], config: SimConfig,
        on_record: Optional[Callable[[AccessRecord], None]] = None) -> Tuple[SimResult, Dict[int, SimResult]]:
    """
    Runs the simulation of a trace for a given configuration.

    This is the main entry point for the runtime simulation. The geometry is
    validated and the cache allocated before the first entry is pulled from
    `entries`, so a lazy trace reader is never opened for a run that cannot start.
    """
    geometry = config.geometry()
    logger.info(f"Running simulation with sets={geometry.num_sets}, lines={geometry.lines_per_set}, "
                f"block_size={geometry.block_size}")

    sim = Simulator(geometry, max_lines=config.max_cache_lines)
    sim.run(entries, on_record)
    return sim.result, sim.set_stats
