"""Tabular index of a .wpress archive, written as Parquet."""
from __future__ import annotations

from pathlib import Path

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from .reader import list_archive

# Parquet stores no second-resolution timestamps; ms is what lands on disk
INDEX_SCHEMA = pa.schema(
    [
        ("path", pa.string()),
        ("prefix", pa.string()),
        ("name", pa.string()),
        ("size", pa.int64()),
        ("mtime", pa.timestamp("ms", tz="UTC")),
        ("offset", pa.int64()),
        ("body_offset", pa.int64()),
    ]
)


def build_table(input_path: Path | str) -> pa.Table:
    rows = [
        {
            "path": rec.header.path,
            "prefix": rec.header.prefix,
            "name": rec.header.name,
            "size": rec.header.size,
            # Raw epoch, so mtimes past pandas' nanosecond range still fit
            "mtime": rec.header.mtime_epoch * 1000,
            "offset": rec.offset,
            "body_offset": rec.body_offset,
        }
        for rec in list_archive(input_path)
    ]
    return pa.Table.from_pylist(rows, schema=INDEX_SCHEMA)


def build_index(input_path: Path | str) -> pd.DataFrame:
    return build_table(input_path).to_pandas()


def write_index(input_path: Path | str, out_path: Path | str) -> int:
    """Write one row per record to out_path. Returns the row count."""
    table = build_table(input_path)
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    pq.write_table(table, out_path)
    return table.num_rows
