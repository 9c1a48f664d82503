"""Query an archive index - largest files under a directory prefix."""
from __future__ import annotations

import sys
from pathlib import Path

import duckdb


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python query.py <index.parquet> [prefix] [limit]")
        print("Example: python query.py site.parquet wp-content/uploads 20")
        sys.exit(1)

    index = Path(sys.argv[1])
    prefix = sys.argv[2] if len(sys.argv) > 2 else ""
    limit = int(sys.argv[3]) if len(sys.argv) > 3 else 20

    con = duckdb.connect(":memory:")
    con.execute(f"CREATE VIEW records AS SELECT * FROM '{index}'")

    sql = """
    SELECT path, size, mtime, offset
    FROM records
    WHERE ? = '' OR prefix = ? OR prefix LIKE ? || '/%'
    ORDER BY size DESC, path
    LIMIT ?
    """

    print(f"--- Largest files under '{prefix or '/'}' ---\n")

    df = con.execute(sql, [prefix, prefix, prefix, limit]).fetchdf()
    if df.empty:
        print("No records found.")
        return

    for _, row in df.iterrows():
        print(f"{row['size']:>12}  {row['mtime']}  {row['path']}")

    total = con.execute(
        "SELECT count(*), coalesce(sum(size), 0) FROM records WHERE ? = '' OR prefix = ? OR prefix LIKE ? || '/%'",
        [prefix, prefix, prefix],
    ).fetchone()
    print(f"\n{total[0]} file(s), {total[1]} byte(s) total")


if __name__ == "__main__":
    main()
