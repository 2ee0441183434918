from __future__ import annotations
import re
import warnings
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from ..errors import TraceParseError, TraceParseWarning
from ..utils.logging import get_logger
from .entry import TraceEntry
from .op import Operation

logger = get_logger(__name__)

MAX_ADDRESS = (1 << 64) - 1
MAX_SIZE = (1 << 32) - 1

# " L 04f6b868,8" / "I 0400d7d4,8": op letter, hex address (no 0x), decimal size
_LINE_RE = re.compile(r"^\s*(?P<op>\S)\s+(?P<addr>[0-9a-fA-F]+),(?P<size>[0-9]+)\s*$")


def parse_line(line: str) -> Optional[TraceEntry]:
    """
    Parses one trace line into a TraceEntry.
    Returns None for blank lines and raises TraceParseError for anything
    that is not a recognised record.
    """
    if not line.strip():
        return None

    match = _LINE_RE.match(line)
    if match is None:
        raise TraceParseError(f"Unrecognised trace line: {line.rstrip()!r}")

    try:
        kind = Operation(match.group("op"))
    except ValueError:
        raise TraceParseError(f"Unknown operation {match.group('op')!r} in line {line.rstrip()!r}") from None

    address = int(match.group("addr"), 16)
    size = int(match.group("size"))
    if address > MAX_ADDRESS:
        raise TraceParseError(f"Address {match.group('addr')} does not fit in 64 bits")
    if size > MAX_SIZE:
        raise TraceParseError(f"Access size {size} does not fit in 32 bits")

    return TraceEntry(kind, address, size)


def iter_trace(lines: Iterable[str]) -> Iterator[TraceEntry]:
    """Yields entries from trace lines, warning about and skipping malformed ones."""
    for lineno, line in enumerate(lines, start=1):
        try:
            entry = parse_line(line)
        except TraceParseError as exc:
            logger.debug(f"Skipping trace line {lineno}: {exc}")
            warnings.warn(f"line {lineno}: {exc}", TraceParseWarning, stacklevel=2)
            continue
        if entry is not None:
            yield entry


def load_trace(path: str | Path) -> List[TraceEntry]:
    """Reads and parses a whole trace file."""
    with open(path, "r") as f:
        return list(iter_trace(f))
