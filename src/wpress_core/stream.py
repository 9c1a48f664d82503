from __future__ import annotations

from typing import BinaryIO

from .protocol import CHUNK_SIZE


def read_exact(f: BinaryIO, n: int) -> bytes:
    """Read n bytes, or fewer only if the stream ends first."""
    buf = bytearray()
    while len(buf) < n:
        chunk = f.read(n - len(buf))
        if not chunk:
            break
        buf += chunk
    return bytes(buf)


def copy_exact(src: BinaryIO, dst: BinaryIO | None, size: int, chunk_size: int = CHUNK_SIZE) -> int:
    """Copy up to `size` bytes from src to dst in bounded chunks.

    Returns the number of bytes copied; less than `size` means src ran out.
    With dst=None the bytes are read and discarded.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk size must be positive, got {chunk_size}")
    remaining = size
    while remaining > 0:
        chunk = src.read(min(chunk_size, remaining))
        if not chunk:
            break
        if dst is not None:
            dst.write(chunk)
        remaining -= len(chunk)
    return size - remaining
