import sys
from pathlib import Path

def main():
    if len(sys.argv) != 3:
        print("Usage: truncate_archive.py <file> <bytes-to-drop>")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    drop = int(sys.argv[2])
    b = p.read_bytes()
    if drop <= 0 or drop > len(b):
        print(f"Cannot drop {drop} byte(s) from a {len(b)} byte file.")
        raise SystemExit(2)

    # Cutting the tail leaves the last record short: the reader must
    # report the missing bytes instead of writing a short file.
    p.write_bytes(b[:-drop])
    print(f"Truncated {p} from {len(b)} to {len(b) - drop} bytes")

if __name__ == "__main__":
    main()
