import pyarrow as pa
import pyarrow.parquet as pq

from wpress_core.header import Header
from wpress_core.protocol import HEADER_LEN
from wpress_extract.index import INDEX_SCHEMA, build_index, write_index
from wpress_pack.writer import compress


def test_index_rows(site, tmp_path):
    out, _ = compress(site, tmp_path / "site.wpress")
    df = build_index(out).set_index("path")
    assert set(df.index) == {"file.txt", "sub/file2.txt"}
    assert df.loc["sub/file2.txt", "size"] == 5
    assert df.loc["sub/file2.txt", "prefix"] == "sub"
    assert (df["body_offset"] - df["offset"] == HEADER_LEN).all()


def test_write_index(site, tmp_path):
    out, _ = compress(site, tmp_path / "site.wpress")
    n = write_index(out, tmp_path / "idx" / "site.parquet")
    assert n == 2

    table = pq.read_table(tmp_path / "idx" / "site.parquet")
    assert table.schema.equals(INDEX_SCHEMA, check_metadata=False)
    assert sorted(table.column("path").to_pylist()) == ["file.txt", "sub/file2.txt"]


def test_empty_archive_index(tmp_path):
    empty = tmp_path / "empty.wpress"
    empty.write_bytes(b"")
    assert write_index(empty, tmp_path / "empty.parquet") == 0
    assert pq.read_table(tmp_path / "empty.parquet").num_rows == 0


def test_far_future_mtime_index(tmp_path):
    archive = tmp_path / "future.wpress"
    archive.write_bytes(Header(name="a.txt", size=0, mtime_epoch=999999999999).to_bytes())
    write_index(archive, tmp_path / "future.parquet")
    table = pq.read_table(tmp_path / "future.parquet")
    assert table.column("mtime").cast(pa.int64()).to_pylist() == [999999999999 * 1000]
