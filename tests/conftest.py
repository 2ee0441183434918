import pytest
from pathlib import Path

from csim.config import Geometry

TRACES_DIR = Path(__file__).resolve().parent.parent / "traces"


@pytest.fixture
def yi_trace_path() -> Path:
    """The small reference trace shipped with the repository."""
    return TRACES_DIR / "yi.trace"


@pytest.fixture
def write_trace(tmp_path: Path):
    """Writes trace lines to a temporary file and returns its path."""
    def _write(lines, name="test.trace") -> Path:
        path = tmp_path / name
        path.write_text("".join(line + "\n" for line in lines))
        return path
    return _write


@pytest.fixture
def tiny_geometry() -> Geometry:
    """One set, one line, one-byte blocks: every address bit is tag."""
    return Geometry(set_index_bits=0, lines_per_set=1, block_offset_bits=0)
