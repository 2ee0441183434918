from __future__ import annotations
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class InsertOutcome(str, Enum):
    INSERTED = "inserted"
    EVICTED = "evicted"

    def __str__(self) -> str:
        return self.value


@dataclass
class CacheLine:
    """A single line in a cache set. Only metadata is modelled, never block data."""
    valid: bool = False
    tag: int = 0


class CacheSet:
    """Represents a set of cache lines, implementing LRU replacement.

    Lines live in a fixed arena of `associativity` slots. Recency is tracked
    separately as an ordered collection of slot indices holding valid lines:
    the first entry is the LRU slot, the last is the MRU slot.
    """
    def __init__(self, associativity: int):
        if associativity < 1:
            raise ValueError("Associativity must be positive.")
        self.associativity = associativity
        self.lines: List[CacheLine] = [CacheLine() for _ in range(associativity)]
        self._recency: OrderedDict[int, None] = OrderedDict()

    def __len__(self) -> int:
        return len(self._recency)

    @property
    def is_full(self) -> bool:
        return len(self._recency) == self.associativity

    @property
    def lru_slot(self) -> Optional[int]:
        return next(iter(self._recency), None)

    @property
    def mru_slot(self) -> Optional[int]:
        return next(reversed(self._recency), None)

    def lookup(self, tag: int) -> Optional[int]:
        """Returns the slot holding a valid line with `tag`, or None. Does not update recency."""
        for slot, line in enumerate(self.lines):
            if line.valid and line.tag == tag:
                return slot
        return None

    def touch(self, slot: int):
        """Moves a resident slot to the MRU position."""
        if slot not in self._recency:
            raise ValueError(f"Slot {slot} does not hold a valid line.")
        self._recency.move_to_end(slot)

    def insert_or_evict(self, tag: int) -> InsertOutcome:
        """Installs `tag` as the MRU line, evicting the LRU line when the set is full."""
        free_slot = next((i for i, line in enumerate(self.lines) if not line.valid), None)
        if free_slot is not None:
            line = self.lines[free_slot]
            line.valid = True
            line.tag = tag
            self._recency[free_slot] = None
            return InsertOutcome.INSERTED

        # No write-back: the victim carries no data.
        victim_slot, _ = self._recency.popitem(last=False)
        self.lines[victim_slot].tag = tag
        self._recency[victim_slot] = None
        return InsertOutcome.EVICTED

    def resident_tags(self) -> List[int]:
        """Tags of the valid lines ordered from MRU to LRU."""
        return [self.lines[slot].tag for slot in reversed(self._recency)]
