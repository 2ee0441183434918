from __future__ import annotations
from dataclasses import dataclass

from .op import Operation


@dataclass(frozen=True)
class TraceEntry:
    """A single memory access from a trace."""
    kind: Operation
    address: int
    size: int

    def __str__(self) -> str:
        return f"{self.kind} {self.address:x},{self.size}"
