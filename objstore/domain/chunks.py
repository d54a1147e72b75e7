"""Splitting of an upload source into numbered, size-bounded parts."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import BinaryIO, Iterator

from objstore.errors import ChunkReadError


@dataclass(frozen=True, slots=True)
class Chunk:
    """One part of an upload source.

    ``data`` and ``length`` are meaningless when ``error`` is set.
    """

    part_number: int
    length: int = 0
    data: BinaryIO | None = None
    error: ChunkReadError | None = None


def _read_full(source: BinaryIO, size: int) -> bytes:
    buffer = bytearray()
    while len(buffer) < size:
        block = source.read(size - len(buffer))
        if not block:
            break
        buffer.extend(block)
    return bytes(buffer)


def split_parts(source: BinaryIO, part_size: int) -> Iterator[Chunk]:
    """Yield consecutive chunks of at most ``part_size`` bytes from ``source``.

    Part numbers start at 1. An empty source yields a single zero-length
    chunk. A failing read yields one chunk carrying a ChunkReadError and ends
    the iteration.
    """
    if part_size <= 0:
        raise ValueError("part_size must be positive")

    part_number = 1
    while True:
        try:
            payload = _read_full(source, part_size)
        except Exception as exc:
            error = ChunkReadError(f"Failed to read part {part_number}: {exc}")
            error.__cause__ = exc
            yield Chunk(part_number=part_number, error=error)
            return

        if not payload and part_number > 1:
            return
        yield Chunk(
            part_number=part_number,
            length=len(payload),
            data=io.BytesIO(payload),
        )
        if len(payload) < part_size:
            return
        part_number += 1
