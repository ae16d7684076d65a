from __future__ import annotations
import math
from dataclasses import dataclass

# Compressed files are treated as if they were, on average, twice their size
# on disk. This is an empirical estimate; progress over gzip input is approximate.
GZIP_PROGRESS_FACTOR = 0.5

# Assumed line terminator length added to every line read
LINE_TERMINATOR_BYTES = 2


@dataclass
class StreamAccounting:
    """
    Byte and line counters for one open file, used for progress reporting.

    bytes_read is an estimate of the on-disk size consumed so far:
    every non-blank line adds its length plus an assumed 2-byte terminator.
    It does not measure real offsets in the (possibly decompressed) stream.
    """
    file_size_bytes: int = 0
    is_compressed: bool = False
    bytes_read: int = 0
    lines_read: int = 0
    line_skip_count: int = 0
    gzip_factor: float = GZIP_PROGRESS_FACTOR

    def reset(self, file_size_bytes: int = 0, is_compressed: bool = False) -> None:
        self.file_size_bytes = file_size_bytes
        self.is_compressed = is_compressed
        self.bytes_read = 0
        self.lines_read = 0
        self.line_skip_count = 0

    @property
    def factor(self) -> float:
        return self.gzip_factor if self.is_compressed else 1.0

    def record_line(self, line: str) -> None:
        # Blank lines are consumed but not counted
        if not line.strip():
            return
        self.bytes_read += len(line) + LINE_TERMINATOR_BYTES
        self.lines_read += 1

    def record_skip(self) -> None:
        self.line_skip_count += 1

    def mark_exhausted(self) -> None:
        """
        Force bytes_read to the 100% equivalent once the input is used up.
        For compressed input the target is size / factor, which cancels the
        scaling in percent_processed(). Never lowers bytes_read.
        """
        if self.file_size_bytes <= 0:
            return
        if self.is_compressed:
            target = self.file_size_bytes / self.factor
        else:
            target = self.file_size_bytes
        self.bytes_read = max(self.bytes_read, math.ceil(target))

    def percent_processed(self, is_open: bool = True) -> float:
        if not is_open or self.file_size_bytes <= 0:
            return 0.0
        pct = round(self.factor * self.bytes_read / self.file_size_bytes * 100, 2)
        # The +2 terminator estimate can overshoot files with 1-byte newlines
        return min(max(pct, 0.0), 100.0)
