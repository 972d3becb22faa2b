#!/usr/bin/env python3
# Example usage of embedded_data_segment
# Keeps a small counter in the data segment of this demo script's copy.

import logging
from embedded_data_segment import OffsetFile, find_marker, read_segment

DEMO = "demo_script.py"

def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    # A script with no data segment yet; opening it appends the marker line
    with open(DEMO, "w") as f:
        f.write("print('hello')")

    with OffsetFile.open(DEMO) as fh:
        print("tell after open:", fh.tell())
        fh.puts("counter=1")

    # Scoped form: the file is closed when the callable returns or raises
    def bump(fh):
        value = int(fh.read().decode().split("=")[1]) + 1
        fh.truncate(0)
        fh.puts(f"counter={value}")
        return value

    print("counter now:", OffsetFile.open(DEMO, "r", bump))
    print("segment:", read_segment(DEMO))
    print("segment starts at byte", find_marker(DEMO))

    # Raw file primitives are not reachable through the adapter
    with OffsetFile.open(DEMO) as fh:
        print("has fileno:", hasattr(fh, "fileno"))

if __name__ == "__main__":
    main()
