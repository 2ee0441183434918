import pytest
from pathlib import Path

from create_test_trace import create_trace
from csim.config import SimConfig
from csim.runtime.simulator import run
from csim.trace.op import Operation
from csim.trace.parser import load_trace


@pytest.fixture
def transpose_trace(tmp_path: Path) -> Path:
    path = tmp_path / "trans.trace"
    create_trace(str(path), n=8)
    return path


def test_generated_trace_parses(transpose_trace):
    entries = load_trace(transpose_trace)
    kinds = [e.kind for e in entries]
    assert kinds.count(Operation.LOAD) == 64
    assert kinds.count(Operation.STORE) == 64
    assert kinds.count(Operation.MODIFY) == 1
    assert kinds.count(Operation.IGNORE) == 65


def test_smoke_transpose(transpose_trace):
    entries = load_trace(transpose_trace)
    # 4 sets of 32B blocks: rows of A and B collide in the same sets
    config = SimConfig(set_index_bits=2, lines_per_set=1, block_offset_bits=5)

    records = []
    result, set_stats = run(entries, config, on_record=records.append)

    assert len(records) == 129
    assert result.hits + result.misses == 64 + 64 + 2
    assert 0 < result.evictions <= result.misses
    assert result.hits > 0


def test_associativity_does_not_increase_misses_on_transpose(transpose_trace):
    """For the same number of sets, more ways never hurt this access pattern."""
    entries = load_trace(transpose_trace)
    misses = []
    for ways in (1, 2, 4):
        result, _ = run(entries, SimConfig(set_index_bits=2, lines_per_set=ways, block_offset_bits=4))
        misses.append(result.misses)
    assert misses[0] >= misses[1] >= misses[2]
