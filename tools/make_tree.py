"""Generate a sample WordPress-like site tree for packing tests.

Usage:
    python tools/make_tree.py OUT_DIR [--files N] [--seed S]
"""
import os
import random
from pathlib import Path

DIRS = [
    "",
    "wp-content",
    "wp-content/uploads/2023/01",
    "wp-content/plugins/hello-dolly",
    "wp-content/themes/twentytwentythree/parts",
]

# 2023-01-01T00:00:00Z
BASE_MTIME = 1672531200


def generate_tree(output_dir: str, files: int = 12, seed: int = 0) -> Path:
    rng = random.Random(seed)
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    for i in range(files):
        sub = out / DIRS[i % len(DIRS)]
        sub.mkdir(parents=True, exist_ok=True)
        ext = rng.choice([".php", ".css", ".txt", ".jpg"])
        p = sub / f"file-{i:03d}{ext}"
        size = rng.choice([0, 1, 511, 512, 513, rng.randint(1, 64 * 1024)])
        p.write_bytes(rng.randbytes(size))

        mtime = BASE_MTIME + rng.randint(0, 365 * 86400)
        os.utime(p, (mtime, mtime))

    # An empty directory produces no record
    (out / "wp-content" / "upgrade").mkdir(parents=True, exist_ok=True)

    print(f"GENERATED: {out}")
    return out


if __name__ == "__main__":
    import sys

    args = [a for a in sys.argv[1:] if a]

    def pop_opt(arg_list: list[str], flag: str, default: int) -> tuple[int, list[str]]:
        """Remove an integer option from an argv-style list."""
        if flag not in arg_list:
            return default, arg_list
        i = arg_list.index(flag)
        if i + 1 >= len(arg_list):
            raise SystemExit(f"{flag} requires a value")
        return int(arg_list[i + 1]), arg_list[:i] + arg_list[i + 2:]

    files, args = pop_opt(args, "--files", 12)
    seed, args = pop_opt(args, "--seed", 0)

    out = args[0] if len(args) > 0 else "sample_site"
    generate_tree(out, files=files, seed=seed)
