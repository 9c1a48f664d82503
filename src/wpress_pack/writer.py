"""wpress packer - serialize a directory tree into a .wpress archive."""
from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import BinaryIO, Callable, Iterable, Iterator
from warnings import warn

from wpress_core.errors import ArchiveFilesystemError, HeaderFieldError
from wpress_core.header import Header
from wpress_core.protocol import ARCHIVE_EXT, CHUNK_SIZE, EOF_BLOCK
from wpress_core.stream import copy_exact


def _raise(err: OSError) -> None:
    raise ArchiveFilesystemError(err.filename or "?", err.strerror or err) from err


def iter_files(root: Path, exclude: Iterable[Path] = ()) -> Iterator[Path]:
    """Yield every regular file under root in lexical order.

    Symlinks and special files are skipped with a warning. Paths in
    `exclude` are compared after resolving.
    """
    root = Path(root)
    skip = {Path(p).resolve() for p in exclude}

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        base = Path(dirpath)
        kept = []
        for d in sorted(dirnames):
            if (base / d).is_symlink():
                warn(f"Skipping symlinked directory {base / d}")
                continue
            kept.append(d)
        dirnames[:] = kept

        for name in sorted(filenames):
            p = base / name
            try:
                st = os.lstat(p)
            except OSError as e:
                raise ArchiveFilesystemError(p, e.strerror or e) from e
            if not stat.S_ISREG(st.st_mode):
                warn(f"Skipping non-regular file {p}")
                continue
            if p.resolve() in skip:
                continue
            yield p


def write_archive(
    root: Path,
    out: BinaryIO,
    *,
    exclude: Iterable[Path] = (),
    chunk_size: int = CHUNK_SIZE,
    progress_fn: Callable[[Header], None] | None = None,
) -> int:
    """Append one record per regular file under root to `out`.

    Returns the number of records written. No terminator is appended.
    """
    root = Path(root).resolve()
    count = 0
    for path in iter_files(root, exclude):
        try:
            header = Header.for_file(path, root)
            with open(path, "rb") as f:
                out.write(header.to_bytes())
                copied = copy_exact(f, out, header.size, chunk_size)
                # The header already promised header.size bytes
                if copied != header.size or f.read(1):
                    raise ArchiveFilesystemError(path, "file changed size while archiving")
        except HeaderFieldError as e:
            raise HeaderFieldError(e.detail, path) from e
        except ValueError as e:
            raise HeaderFieldError(str(e), path) from e
        except OSError as e:
            if isinstance(e, ArchiveFilesystemError):
                raise
            raise ArchiveFilesystemError(path, e.strerror or e) from e

        count += 1
        if progress_fn:
            progress_fn(header)
    return count


def write_terminator(out: BinaryIO) -> None:
    out.write(EOF_BLOCK)


def _discard(output: Path) -> None:
    # The output may be a pre-existing directory that open() refused
    if output.is_file():
        output.unlink()


def default_archive_path(input_dir: Path | str) -> Path:
    """<input dir name>.wpress, in the current directory."""
    name = Path(input_dir).resolve().name
    return Path(name + ARCHIVE_EXT)


def compress(
    input_dir: Path | str,
    output_path: Path | str | None = None,
    *,
    terminator: bool = False,
    chunk_size: int = CHUNK_SIZE,
    progress_fn: Callable[[Header], None] | None = None,
) -> tuple[Path, int]:
    """Pack a directory into a .wpress file.

    Missing parent directories of the output are created. The output is
    excluded from the walk when it lives inside input_dir. A partially
    written output is removed on failure.

    Returns (output path, number of records).
    """
    source = Path(input_dir).resolve()
    if not source.is_dir():
        raise ArchiveFilesystemError(source, "not a directory")

    output = Path(output_path) if output_path is not None else default_archive_path(source)
    output = output.resolve()

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ArchiveFilesystemError(output.parent, e.strerror or e) from e

    try:
        # Opened before the walk so it is excluded even if created inside source
        with output.open("wb") as out:
            count = write_archive(
                source,
                out,
                exclude=[output],
                chunk_size=chunk_size,
                progress_fn=progress_fn,
            )
            if terminator:
                write_terminator(out)
    except OSError as e:
        _discard(output)
        if isinstance(e, ArchiveFilesystemError):
            raise
        raise ArchiveFilesystemError(output, e.strerror or e) from e
    except BaseException:
        _discard(output)
        raise

    return output, count
