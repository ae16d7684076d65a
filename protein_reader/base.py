from __future__ import annotations
import gzip
import logging
import os
import zlib
from abc import ABC, abstractmethod
from typing import IO, Iterator, Optional
from .accounting import GZIP_PROGRESS_FACTOR, StreamAccounting
from .entry import ProteinEntry
from .utils import is_gzip_path

logger = logging.getLogger(__name__)

# Errors that can surface while pulling lines from a plain or gzip stream
READ_ERRORS = (OSError, EOFError, zlib.error)


class ProteinFileReader(ABC):
    """
    Base class for single-pass, pull-based readers of protein files.

    Usage:
      with FastaFileReader("db.fasta.gz") as reader:
          while reader.read_next_entry():
              print(reader.name, len(reader.sequence))

    The accessors project the reader's current entry, which is overwritten by
    every read_next_entry() call. Copy values out (or iterate the reader, which
    yields snapshots) if they are needed after the next read.

    One reader serves one consumer; it is not safe to share across threads.
    """
    def __init__(self, gzip_factor: float = GZIP_PROGRESS_FACTOR):
        self.entry = ProteinEntry()
        self.stats = StreamAccounting(gzip_factor=gzip_factor)
        self._stream: Optional[IO[str]] = None
        self._file_open = False
        self._file_path: Optional[str] = None
        self._eof = False
        self._failed = False

    # -- lifecycle ---------------------------------------------------------

    def open(self, path: str) -> bool:
        """
        Open a plain text or gzip-compressed (.gz) file for reading.
        Returns False if the file cannot be opened; never raises for I/O errors.
        """
        if not self.close():
            return False
        self.entry.clear()
        path = os.fspath(path)
        try:
            size = os.path.getsize(path) # size on disk, before any decompression
            compressed = is_gzip_path(path)
            if compressed:
                stream = gzip.open(path, "rt", encoding="utf-8", errors="replace")
            else:
                stream = open(path, "r", encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning("Could not open %s: %s", path, e)
            return False

        self._stream = stream
        self._file_open = True
        self._file_path = path
        self._eof = False
        self._failed = False
        self.stats.reset(size, compressed)
        self._on_open(path)
        logger.debug("Opened %s (%d bytes%s)", path, size, ", gzip" if compressed else "")
        return True

    def close(self) -> bool:
        """Release the underlying stream. Safe to call when nothing is open."""
        try:
            if self._stream is not None:
                self._stream.close()
        except OSError as e:
            logger.warning("Error closing %s: %s", self._file_path, e)
            return False
        finally:
            self._stream = None
        self._file_open = False
        self.stats.bytes_read = 0
        self.stats.lines_read = 0
        return True

    def _on_open(self, path: str) -> None:
        """Hook for subclasses to reset per-file parsing state."""

    def __enter__(self) -> "ProteinFileReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._file_open:
            self.close()

    # -- reading -----------------------------------------------------------

    def read_next_entry(self) -> bool:
        """
        Look for the next entry and load it into the current entry.

        Returns True if an entry was found. On False the current entry is
        cleared; this covers a clean end of file, a file with only skipped
        lines, and a read error (after which the reader stays at "not found"
        until open() is called again).
        """
        self.entry.clear()
        if self._stream is None or self._failed:
            return False
        try:
            found = self._read_entry()
        except READ_ERRORS as e:
            logger.error(
                "Error reading %s after %d lines: %s",
                self._file_path, self.stats.lines_read, e
            )
            self._failed = True
            found = False

        if not found:
            self.entry.clear()
            if self._eof:
                self.stats.mark_exhausted()
                logger.debug(
                    "Finished %s: %d lines read, %d skipped",
                    self._file_path, self.stats.lines_read, self.stats.line_skip_count
                )
        return found

    @abstractmethod
    def _read_entry(self) -> bool:
        """Format-specific parsing; populate self.entry and return True if found."""

    def _read_line(self) -> Optional[str]:
        """
        Pull one physical line without its terminator, or None at end of file.
        Non-blank lines are added to the byte/line counters.
        """
        line = self._stream.readline()
        if line == "":
            self._eof = True
            return None
        line = line.rstrip("\r\n")
        self.stats.record_line(line)
        return line

    def __iter__(self) -> Iterator[ProteinEntry]:
        # Snapshots, so callers may keep them after the next read
        while self.read_next_entry():
            yield self.entry.copy()

    # -- accessors ---------------------------------------------------------

    def percent_file_processed(self) -> float:
        """Estimated percent of the file read so far, between 0 and 100."""
        return self.stats.percent_processed(self._file_open)

    @property
    def is_open(self) -> bool:
        return self._file_open

    @property
    def file_path(self) -> Optional[str]:
        return self._file_path

    @property
    def name(self) -> str:
        return self.entry.name

    @property
    def description(self) -> str:
        return self.entry.description

    @property
    def sequence(self) -> str:
        return self.entry.sequence

    @property
    def unique_id(self) -> int:
        return self.entry.unique_id

    @property
    def mass(self) -> float:
        return self.entry.mass

    @property
    def net(self) -> float:
        return self.entry.net

    @property
    def net_stdev(self) -> float:
        return self.entry.net_stdev

    @property
    def discriminant_score(self) -> float:
        return self.entry.discriminant_score

    @property
    def header_line(self) -> str:
        return self.entry.header_line

    @property
    def lines_read(self) -> int:
        return self.stats.lines_read

    @property
    def line_skip_count(self) -> int:
        """Lines skipped because they did not fit the expected format."""
        return self.stats.line_skip_count

    @property
    def bytes_read(self) -> int:
        return self.stats.bytes_read

    @property
    def file_size_bytes(self) -> int:
        return self.stats.file_size_bytes

    @property
    def is_compressed(self) -> bool:
        return self.stats.is_compressed
