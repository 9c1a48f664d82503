"""wpress extractor - sequential record reader.

The archive has no index: each body directly follows its header, so
records are consumed strictly in order from a forward-only stream.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Iterator
from warnings import warn

from wpress_core.errors import ArchiveFilesystemError, DestinationExistsError, TruncatedStreamError
from wpress_core.header import Header
from wpress_core.protocol import CHUNK_SIZE, HEADER_LEN
from wpress_core.stream import copy_exact, read_exact


@dataclass(frozen=True, slots=True)
class Record:
    header: Header
    offset: int

    @property
    def body_offset(self) -> int:
        return self.offset + HEADER_LEN


class ArchiveReader:
    """Forward-only cursor over a .wpress stream.

    Alternates between reading a header and consuming its body. Every
    header returned by next_header() must be followed by exactly one
    copy_body() or skip_body() call.
    """

    def __init__(self, stream: BinaryIO, chunk_size: int = CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError(f"chunk size must be positive, got {chunk_size}")
        self.stream = stream
        self.chunk_size = chunk_size
        self.offset = 0
        self.records = 0
        self._pending: Header | None = None
        self._done = False

    def next_header(self) -> Header | None:
        """Read the next header, or None at end of archive."""
        if self._pending is not None:
            raise RuntimeError(f"body of {self._pending.path} has not been consumed")
        if self._done:
            return None

        start = self.offset
        block = read_exact(self.stream, HEADER_LEN)
        self.offset += len(block)

        # Clean EOF exactly on a record boundary
        if len(block) == 0:
            self._done = True
            return None

        if len(block) < HEADER_LEN:
            raise TruncatedStreamError(HEADER_LEN - len(block), f"header at offset {start}")

        header = Header.from_bytes(block, offset=start)
        if header is None:
            self._done = True
            return None

        self._pending = header
        return header

    def _consume(self, header: Header, dst: BinaryIO | None) -> None:
        if header is not self._pending:
            raise RuntimeError(f"{header.path} is not the current record")
        copied = copy_exact(self.stream, dst, header.size, self.chunk_size)
        self.offset += copied
        if copied != header.size:
            raise TruncatedStreamError(header.size - copied, f"body of {header.path}")
        self._pending = None
        self.records += 1

    def copy_body(self, header: Header, dst: BinaryIO) -> None:
        self._consume(header, dst)

    def skip_body(self, header: Header) -> None:
        self._consume(header, None)

    def __iter__(self) -> Iterator[Record]:
        """Yield each record; bodies left unconsumed are skipped."""
        while True:
            start = self.offset
            header = self.next_header()
            if header is None:
                return
            yield Record(header, start)
            if self._pending is header:
                self.skip_body(header)


def _restore_mtime(path: Path, header: Header) -> None:
    epoch = header.mtime_epoch
    os.utime(path, (epoch, epoch))


def extract_archive(
    stream: BinaryIO,
    dest_root: Path,
    *,
    preserve_mtime: bool = False,
    chunk_size: int = CHUNK_SIZE,
    progress_fn: Callable[[Header], None] | None = None,
) -> list[Path]:
    """Recreate every record of `stream` under dest_root.

    Returns the written file paths in archive order.
    """
    dest_root = Path(dest_root)
    reader = ArchiveReader(stream, chunk_size)
    written: list[Path] = []

    while True:
        header = reader.next_header()
        if header is None:
            break

        target = dest_root.joinpath(*header.parts)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as f:
                reader.copy_body(header, f)
            if preserve_mtime:
                _restore_mtime(target, header)
        except (OSError, OverflowError) as e:
            raise ArchiveFilesystemError(target, getattr(e, "strerror", None) or e) from e

        written.append(target)
        if progress_fn:
            progress_fn(header)

    return written


def _warn_trailing(f: BinaryIO, input_path: Path) -> None:
    # The reader stops at the terminator; only the file owner looks past it
    if f.read(1):
        warn(f"Ignoring data after end of archive in {input_path} at offset {f.tell() - 1}")


def default_output_dir(input_path: Path | str) -> Path:
    """Input file name without its extension, in the current directory."""
    return Path(Path(input_path).stem)


def extract(
    input_path: Path | str,
    output_dir: Path | str | None = None,
    force: bool = False,
    *,
    preserve_mtime: bool = False,
    progress_fn: Callable[[Header], None] | None = None,
) -> list[Path]:
    """Extract a .wpress file.

    Refuses to touch an existing output directory unless `force` is set.
    """
    input_path = Path(input_path)
    output = Path(output_dir) if output_dir is not None else default_output_dir(input_path)

    try:
        f = open(input_path, "rb")
    except OSError as e:
        raise ArchiveFilesystemError(input_path, e.strerror or e) from e

    with f:
        if output.exists() and not force:
            raise DestinationExistsError(output)
        written = extract_archive(
            f,
            output.resolve(),
            preserve_mtime=preserve_mtime,
            progress_fn=progress_fn,
        )
        _warn_trailing(f, input_path)
    return written


def list_archive(input_path: Path | str) -> list[Record]:
    """Read every header of a .wpress file without writing anything."""
    input_path = Path(input_path)
    try:
        f = open(input_path, "rb")
    except OSError as e:
        raise ArchiveFilesystemError(input_path, e.strerror or e) from e
    with f:
        records = list(ArchiveReader(f))
        _warn_trailing(f, input_path)
    return records
