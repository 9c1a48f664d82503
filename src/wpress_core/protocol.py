"""wpress archive protocol constants.

Single source of truth for the on-disk record layout.
Keep this file stable. Packer and extractor must remain synchronized.
"""

# Header: [Name(255) | Size(14) | MTime(12) | Prefix(4096)] = 4377 bytes
# Every field is NUL-padded text; Size and MTime are decimal ASCII.
HEADER_FMT = "<255s14s12s4096s"
HEADER_LEN = 4377

NAME_LEN = 255
SIZE_LEN = 14
MTIME_LEN = 12
PREFIX_LEN = 4096

NAME_OFF = 0
SIZE_OFF = NAME_OFF + NAME_LEN
MTIME_OFF = SIZE_OFF + SIZE_LEN
PREFIX_OFF = MTIME_OFF + MTIME_LEN

# End-of-archive marker: one full header of zero bytes
EOF_BLOCK = bytes(HEADER_LEN)

ENCODING = "utf-8"
ARCHIVE_EXT = ".wpress"

# Body copy granularity, not part of the format
CHUNK_SIZE = 512
