"""wpress packer - directory to .wpress archive."""
from __future__ import annotations

from pathlib import Path

import click

from wpress_core.errors import WpressError
from wpress_pack.writer import compress


@click.command()
@click.argument("input_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("-o", "--out", "output", type=click.Path(dir_okay=False, path_type=Path),
              help="Archive to create (default: <INPUT_DIR name>.wpress)")
@click.option("--terminator", is_flag=True, help="Append an explicit all-zero end-of-archive block")
@click.option("-v", "--verbose", is_flag=True, help="Print each archived path")
def main(input_dir: Path, output: Path | None, terminator: bool, verbose: bool) -> None:
    """Pack INPUT_DIR into a .wpress archive."""
    print(f"Packing directory: {input_dir}")

    def progress(header):
        if verbose:
            click.echo(f"  {header.size:>12}  {header.path}")

    try:
        out, count = compress(input_dir, output, terminator=terminator, progress_fn=progress)
    except (WpressError, OSError) as e:
        # Fail closed with a single-line reason.
        click.echo(f"FATAL: {e}", err=True)
        raise SystemExit(1)

    print(f"PASS: Archive written to {out}")
    print(f"  Records: {count}")


if __name__ == "__main__":
    main()
