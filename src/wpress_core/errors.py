from __future__ import annotations

from pathlib import Path

ERRORS = {
  "E_MALFORMED_HEADER": "Archive header is malformed",
  "E_HEADER_FIELD": "Header field does not fit its fixed width",
  "E_TRUNCATED": "Archive ends before the record is complete",
  "E_FILESYSTEM": "Filesystem operation failed",
  "E_DEST_EXISTS": "Output directory already exists",
}


class WpressError(Exception):
    code = "E_WPRESS"

    def __init__(self, detail: str = ""):
        self.detail = detail
        msg = ERRORS.get(self.code, "wpress error")
        super().__init__(f"{msg}: {detail}" if detail else msg)


class HeaderFieldError(WpressError, ValueError):
    code = "E_HEADER_FIELD"

    def __init__(self, detail: str = "", path: Path | str | None = None):
        self.path = Path(path) if path is not None else None
        if path is not None:
            detail = f"{path}: {detail}"
        super().__init__(detail)


class MalformedHeaderError(WpressError, ValueError):
    code = "E_MALFORMED_HEADER"

    def __init__(self, detail: str = "", offset: int | None = None):
        self.offset = offset
        if offset is not None:
            detail = f"{detail} (header at offset {offset})"
        super().__init__(detail)


class TruncatedStreamError(WpressError):
    code = "E_TRUNCATED"

    def __init__(self, missing: int, where: str):
        self.missing = missing
        self.where = where
        super().__init__(f"{missing} byte(s) missing in {where}")


class ArchiveFilesystemError(WpressError, OSError):
    code = "E_FILESYSTEM"

    def __init__(self, path: Path | str, cause: BaseException | str):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{path}: {cause}")


class DestinationExistsError(WpressError):
    code = "E_DEST_EXISTS"

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(str(path))
