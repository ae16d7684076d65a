#!/usr/bin/env python3
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List
import numpy as np
from rich.logging import RichHandler
from tqdm import tqdm
from protein_reader import READER_FORMATS, ProteinFileReader, create_reader

logger = logging.getLogger("protein_scan")


def setup_logging() -> None:
    level = os.getenv("PROTEIN_READER_LOGLEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(name)s | %(message)s",
        handlers=[RichHandler(rich_tracebacks=True, markup=False, show_path=False)],
        force=True,
    )


def delimiter_arg(value: str) -> str:
    # Shells make a literal tab awkward to pass
    if value in ("tab", "\\t"):
        return "\t"
    if len(value) != 1:
        raise argparse.ArgumentTypeError(f"delimiter must be one character: {value!r}")
    return value


def arguments(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="Scan a FASTA or delimited protein file and summarize its entries"
    )
    ap.add_argument("-i", "--input", required=True)
    ap.add_argument("-o", "--output", required=True)
    ap.add_argument("--format", default="auto", choices=list(READER_FORMATS.keys()))
    # Delimited files only
    ap.add_argument("--delimiter", type=delimiter_arg, default=None)
    ap.add_argument("--skip_first_line", action="store_true")
    # Only collect names/descriptions, do not keep sequences in memory
    ap.add_argument("--discard_residues", action="store_true")
    ap.add_argument("--no_progress", action="store_true")
    return ap.parse_args(argv)


def scan(reader: ProteinFileReader, out: Path, show_progress: bool = True) -> np.ndarray:
    """
    Read every entry, writing one TSV row (name, length, description) per entry.

    Returns the array of sequence lengths.
    """
    lengths: List[int] = []
    with open(out, "w", encoding="utf-8") as f, \
            tqdm(total=100.0, unit="%", disable=not show_progress,
                 bar_format="{l_bar}{bar}| {n:.2f}/{total:.0f}%") as bar:
        f.write("name\tlength\tdescription\n")
        while reader.read_next_entry():
            L = len(reader.sequence)
            lengths.append(L)
            # Replace tabs in descriptions so the TSV stays well-formed
            desc = reader.description.replace("\t", " ")
            f.write(f"{reader.name}\t{L}\t{desc}\n")
            bar.update(reader.percent_file_processed() - bar.n)
        bar.update(reader.percent_file_processed() - bar.n)
    return np.asarray(lengths, dtype=np.int64)


def main(argv=None) -> int:
    setup_logging()
    args = arguments(argv)

    reader = create_reader(
        args.input,
        file_format=args.format,
        delimiter=args.delimiter,
        skip_first_line=args.skip_first_line,
        discard_residues=args.discard_residues
    )
    if not reader.is_open:
        logger.error("Could not open %s", args.input)
        return 1

    with reader:
        lengths = scan(reader, Path(args.output), show_progress=not args.no_progress)
        skipped = reader.line_skip_count
        lines = reader.lines_read

    print(f"Entries:       {lengths.size}")
    print(f"Lines read:    {lines}")
    print(f"Lines skipped: {skipped}")
    if not args.discard_residues:
        print(f"Residues:      {int(lengths.sum())}")
        if lengths.size:
            print(f"Length mean:   {float(np.mean(lengths)):.1f}")
            print(f"Length median: {float(np.median(lengths)):.1f}")
            print(f"Length max:    {int(lengths.max())}")
    print(f"[Summary] {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
