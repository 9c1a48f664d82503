"""wpress record header - fixed-width text fields in a binary block."""
from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath

from .errors import HeaderFieldError, MalformedHeaderError, TruncatedStreamError
from .protocol import (
    ENCODING,
    EOF_BLOCK,
    HEADER_FMT,
    HEADER_LEN,
    MTIME_LEN,
    NAME_LEN,
    PREFIX_LEN,
    SIZE_LEN,
)


def _pad(label: str, raw: bytes, width: int) -> bytes:
    if len(raw) > width:
        raise HeaderFieldError(f"{label} is {len(raw)} bytes, field holds {width}")
    return raw.ljust(width, b"\x00")


def _trim(raw: bytes) -> bytes:
    return raw.rstrip(b"\x00")


def _decimal(label: str, raw: bytes, offset: int | None) -> int:
    text = _trim(raw)
    # int() would also accept signs, underscores and surrounding whitespace
    if not text.isdigit():
        raise MalformedHeaderError(f"{label} field is not a decimal number: {text!r}", offset)
    return int(text)


def _text(label: str, raw: bytes, offset: int | None) -> str:
    try:
        return _trim(raw).decode(ENCODING)
    except UnicodeDecodeError as e:
        raise MalformedHeaderError(f"{label} field is not valid {ENCODING}: {e}", offset) from None


def split_prefix(prefix: str) -> tuple[str, ...]:
    """Split a stored prefix into path components.

    Archives written on Windows hosts use backslashes.
    """
    parts = prefix.replace("\\", "/").split("/")
    return tuple(p for p in parts if p not in ("", "."))


def _encode(label: str, text: str, width: int) -> bytes:
    try:
        raw = text.encode(ENCODING)
    except UnicodeEncodeError as e:
        raise HeaderFieldError(f"{label} {text!r} is not valid {ENCODING}: {e.reason}") from None
    return _pad(label, raw, width)


def _check_name(name: str) -> str | None:
    if not name:
        return "name is empty"
    if "/" in name or "\\" in name or "\x00" in name:
        return f"name {name!r} is not a bare file name"
    if name in (".", ".."):
        return f"name {name!r} is not a file name"
    return None


def _check_prefix(prefix: str) -> str | None:
    if "\x00" in prefix:
        return f"prefix {prefix!r} contains NUL"
    if prefix.startswith(("/", "\\")):
        return f"prefix {prefix!r} is absolute"
    if ".." in split_prefix(prefix):
        return f"prefix {prefix!r} escapes the archive root"
    return None


@dataclass(frozen=True, slots=True)
class Header:
    name: str
    size: int
    mtime_epoch: int
    prefix: str = ""

    @property
    def mtime(self) -> datetime:
        """UTC modification time, clamped to what datetime can represent."""
        try:
            return datetime.fromtimestamp(self.mtime_epoch, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return datetime.max.replace(tzinfo=timezone.utc)

    @property
    def parts(self) -> tuple[str, ...]:
        return split_prefix(self.prefix) + (self.name,)

    @property
    def path(self) -> str:
        """Archive-relative POSIX path of the record."""
        return PurePosixPath(*self.parts).as_posix()

    def to_bytes(self) -> bytes:
        problem = _check_name(self.name) or _check_prefix(self.prefix)
        if problem:
            raise HeaderFieldError(problem)
        # Decoders split prefixes on backslashes too
        if "\\" in self.prefix:
            raise HeaderFieldError(f"prefix {self.prefix!r} contains a backslash")
        if self.size < 0:
            raise HeaderFieldError(f"size {self.size} is negative")
        if self.mtime_epoch < 0:
            raise HeaderFieldError(f"modification time {self.mtime_epoch} predates the epoch")

        return struct.pack(
            HEADER_FMT,
            _encode("name", self.name, NAME_LEN),
            _pad("size", str(self.size).encode("ascii"), SIZE_LEN),
            _pad("mtime", str(self.mtime_epoch).encode("ascii"), MTIME_LEN),
            _encode("prefix", self.prefix, PREFIX_LEN),
        )

    @staticmethod
    def from_bytes(block: bytes, offset: int | None = None) -> "Header | None":
        """Decode one header block.

        Returns None for the all-zero terminator. `offset` is only used to
        locate errors in the archive.
        """
        if len(block) < HEADER_LEN:
            raise TruncatedStreamError(HEADER_LEN - len(block), "record header")
        block = bytes(block[:HEADER_LEN])
        if block == EOF_BLOCK:
            return None

        raw_name, raw_size, raw_mtime, raw_prefix = struct.unpack(HEADER_FMT, block)

        name = _text("name", raw_name, offset)
        size = _decimal("size", raw_size, offset)
        epoch = _decimal("mtime", raw_mtime, offset)
        prefix = _text("prefix", raw_prefix, offset)

        problem = _check_name(name) or _check_prefix(prefix)
        if problem:
            raise MalformedHeaderError(problem, offset)

        return Header(name=name, size=size, mtime_epoch=epoch, prefix=prefix)

    @staticmethod
    def for_file(path: Path, root: Path) -> "Header":
        """Describe a file on disk relative to the archived root."""
        st = os.stat(path)
        rel = PurePosixPath(Path(path).relative_to(root).as_posix())
        prefix = rel.parent.as_posix()
        return Header(
            name=rel.name,
            size=st.st_size,
            mtime_epoch=int(st.st_mtime),
            prefix="" if prefix == "." else prefix,
        )
