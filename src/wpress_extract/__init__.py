"""wpress extractor - archive to directory tree."""
from .reader import ArchiveReader, Record, default_output_dir, extract, extract_archive, list_archive

__all__ = ["ArchiveReader", "Record", "default_output_dir", "extract", "extract_archive", "list_archive"]
