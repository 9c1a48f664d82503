"""wpress packer - directory tree to archive."""
from .writer import compress, default_archive_path, iter_files, write_archive, write_terminator

__all__ = ["compress", "default_archive_path", "iter_files", "write_archive", "write_terminator"]
