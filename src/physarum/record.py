"""Binary trace of per-tick agent snapshots.

Layout (little-endian)::

    b"SLMT"  u8 dimensions  u32 * dimensions extent
    repeated: u64 tick  u32 count  count * particle

A particle is ``position`` (f64 per axis), ``heading`` (2 f64 in 2D, a
w/x/y/z quaternion in 3D), ``origin`` (f64 per axis) and ``age`` (u32).
"""
from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import BinaryIO, List, Sequence, Tuple

from pygame.math import Vector2

from .sim.core.particle import Particle
from .sim.types.snapshot import Snapshot
from .sim.utils.math2d import _make_vector
from .sim.utils.quaternion import Quaternion

logger = logging.getLogger(__name__)

MAGIC = b"SLMT"
_FRAME_HEADER = struct.Struct("<QI")


class TraceFormatError(ValueError):
    """Raised when a trace file is truncated or not a trace at all."""


def _particle_struct(dimensions: int) -> struct.Struct:
    heading_width = 4 if dimensions == 3 else 2
    return struct.Struct(f"<{dimensions}d{heading_width}d{dimensions}dI")


def _pack_particle(packer: struct.Struct, particle: Particle) -> bytes:
    return packer.pack(
        *particle.position,
        *particle.heading_components(),
        *particle.origin,
        particle.age,
    )


def _unpack_particle(dimensions: int, values: Tuple) -> Particle:
    heading_width = 4 if dimensions == 3 else 2
    position = values[:dimensions]
    heading = values[dimensions : dimensions + heading_width]
    origin = values[dimensions + heading_width : 2 * dimensions + heading_width]
    age = values[-1]
    if dimensions == 3:
        heading_value = Quaternion(*heading)
    else:
        heading_value = Vector2(heading[0], heading[1])
    return Particle(position=_make_vector(position), heading=heading_value, origin=_make_vector(origin), age=age)


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise TraceFormatError(f"Truncated trace while reading {what}")
    return data


class TraceRecorder:
    """Appends snapshots in memory and writes them as one trace file."""

    def __init__(self, extent: Sequence[int]):
        self._extent = tuple(int(size) for size in extent)
        if len(self._extent) not in (2, 3):
            raise ValueError(f"extent must have 2 or 3 axes, got {len(self._extent)}")
        self._frames: List[Snapshot] = []

    @property
    def extent(self) -> Tuple[int, ...]:
        return self._extent

    @property
    def dimensions(self) -> int:
        return len(self._extent)

    @property
    def frames(self) -> List[Snapshot]:
        return self._frames

    def __len__(self) -> int:
        return len(self._frames)

    def record(self, engine) -> Snapshot:
        snapshot = engine.snapshot()
        self.append(snapshot)
        return snapshot

    def append(self, snapshot: Snapshot) -> None:
        if tuple(snapshot.extent) != self._extent:
            raise ValueError(f"Snapshot extent {snapshot.extent} does not match trace extent {self._extent}")
        self._frames.append(snapshot)

    def save(self, path: Path) -> None:
        path = Path(path)
        packer = _particle_struct(self.dimensions)
        with path.open("wb") as stream:
            stream.write(MAGIC)
            stream.write(struct.pack(f"<B{self.dimensions}I", self.dimensions, *self._extent))
            for frame in self._frames:
                stream.write(_FRAME_HEADER.pack(frame.tick, len(frame.particles)))
                for particle in frame.particles:
                    stream.write(_pack_particle(packer, particle))
        logger.info("Saved %d frames to %s", len(self._frames), path)

    @classmethod
    def load(cls, path: Path) -> "TraceRecorder":
        path = Path(path)
        with path.open("rb") as stream:
            if stream.read(len(MAGIC)) != MAGIC:
                raise TraceFormatError(f"{path} is not a slime trace")
            (dimensions,) = struct.unpack("<B", _read_exact(stream, 1, "dimensions"))
            if dimensions not in (2, 3):
                raise TraceFormatError(f"Unsupported dimension count {dimensions}")
            extent = struct.unpack(f"<{dimensions}I", _read_exact(stream, 4 * dimensions, "extent"))
            recorder = cls(extent)
            packer = _particle_struct(dimensions)
            while True:
                header = stream.read(_FRAME_HEADER.size)
                if not header:
                    break
                if len(header) != _FRAME_HEADER.size:
                    raise TraceFormatError("Truncated trace while reading frame header")
                tick, count = _FRAME_HEADER.unpack(header)
                payload = _read_exact(stream, packer.size * count, f"frame {tick}")
                particles = tuple(
                    _unpack_particle(dimensions, values) for values in packer.iter_unpack(payload)
                )
                recorder._frames.append(Snapshot(tick=tick, extent=recorder.extent, particles=particles))
        logger.info("Loaded %d frames from %s", len(recorder._frames), path)
        return recorder
