from __future__ import annotations

import struct

import pytest
from pytest import approx

from physarum.record import MAGIC, TraceFormatError, TraceRecorder
from physarum.sim.core.engine import SimulationEngine
from physarum.sim.types.snapshot import Snapshot


def _record(engine: SimulationEngine, ticks: int) -> TraceRecorder:
    recorder = TraceRecorder(engine.extent)
    for _ in range(ticks):
        recorder.record(engine)
        engine.step()
    return recorder


def test_snapshot_carries_agents_not_medium():
    engine = SimulationEngine.create((20, 20), agent_count=7, seed=2)
    engine.step()

    snapshot = engine.snapshot()

    assert snapshot.tick == 1
    assert snapshot.extent == (20, 20)
    assert len(snapshot.particles) == 7
    assert not hasattr(snapshot, "medium")


def test_saved_trace_loads_back_in_order(tmp_path):
    engine = SimulationEngine.create((20, 15), agent_count=5, seed=3)
    recorder = _record(engine, 4)
    path = tmp_path / "trace.slm"

    recorder.save(path)
    loaded = TraceRecorder.load(path)

    assert loaded.extent == (20, 15)
    assert [frame.tick for frame in loaded.frames] == [0, 1, 2, 3]
    last_saved = recorder.frames[-1].particles
    last_loaded = loaded.frames[-1].particles
    for saved, restored in zip(last_saved, last_loaded):
        assert tuple(restored.position) == approx(tuple(saved.position))
        assert tuple(restored.origin) == approx(tuple(saved.origin))
        assert restored.heading_components() == approx(saved.heading_components())
        assert restored.age == saved.age


def test_three_dimensional_trace_keeps_quaternions(tmp_path):
    engine = SimulationEngine.create((6, 6, 6), agent_count=3, seed=4)
    recorder = _record(engine, 2)
    path = tmp_path / "volume.slm"

    recorder.save(path)
    loaded = TraceRecorder.load(path)

    assert loaded.dimensions == 3
    restored = loaded.frames[1].particles[0]
    assert restored.heading_components() == approx(recorder.frames[1].particles[0].heading_components())


def test_empty_trace_has_only_header(tmp_path):
    path = tmp_path / "empty.slm"
    TraceRecorder((8, 9)).save(path)

    assert path.read_bytes() == MAGIC + struct.pack("<B2I", 2, 8, 9)
    assert len(TraceRecorder.load(path)) == 0


def test_bad_magic_and_truncation_are_reported(tmp_path):
    bogus = tmp_path / "bogus.slm"
    bogus.write_bytes(b"NOPE" + b"\x00" * 16)
    with pytest.raises(TraceFormatError):
        TraceRecorder.load(bogus)

    engine = SimulationEngine.create((10, 10), agent_count=4, seed=5)
    path = tmp_path / "trace.slm"
    _record(engine, 2).save(path)
    truncated = tmp_path / "truncated.slm"
    truncated.write_bytes(path.read_bytes()[:-5])
    with pytest.raises(TraceFormatError):
        TraceRecorder.load(truncated)


def test_append_rejects_mismatched_extent():
    recorder = TraceRecorder((10, 10))
    with pytest.raises(ValueError):
        recorder.append(Snapshot(tick=0, extent=(10, 11), particles=()))
