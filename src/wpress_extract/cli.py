import json
from pathlib import Path

import click

from wpress_core.errors import WpressError
from .index import write_index
from .reader import extract, list_archive


def _fail(e: Exception) -> None:
    click.echo(f"FATAL: {e}", err=True)
    raise SystemExit(1)


@click.group()
def main():
    pass


@main.command("extract")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--out", "output", type=click.Path(file_okay=False, path_type=Path),
              help="Output directory (default: archive name without extension)")
@click.option("--force", is_flag=True, help="Extract even if the output directory exists")
@click.option("--preserve-mtime", is_flag=True, help="Apply archived modification times")
def extract_cmd(input_path: Path, output: Path | None, force: bool, preserve_mtime: bool):
    try:
        paths = extract(input_path, output, force, preserve_mtime=preserve_mtime)
    except (WpressError, OSError) as e:
        _fail(e)
    click.echo(f"Extracted {len(paths)} file(s)")


@main.command("list")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="One JSON object per record")
def list_cmd(input_path: Path, as_json: bool):
    try:
        records = list_archive(input_path)
    except (WpressError, OSError) as e:
        _fail(e)
    for rec in records:
        h = rec.header
        if as_json:
            row = {"path": h.path, "size": h.size, "mtime": h.mtime_epoch, "offset": rec.offset}
            click.echo(json.dumps(row, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
        else:
            click.echo(f"{h.size:>12}  {h.mtime.strftime('%Y-%m-%d %H:%M:%S')}  {h.path}")


@main.command("index")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("out", type=click.Path(dir_okay=False, path_type=Path))
def index_cmd(input_path: Path, out: Path):
    try:
        n = write_index(input_path, out)
    except (WpressError, OSError) as e:
        _fail(e)
    click.echo(f"Indexed {n} record(s) into {out}")


if __name__ == "__main__":
    main()
