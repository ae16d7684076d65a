from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple
from .accounting import GZIP_PROGRESS_FACTOR
from .base import ProteinFileReader

logger = logging.getLogger(__name__)

PROTEIN_LINE_START_CHAR = ">"
PROTEIN_LINE_ACCESSION_TERMINATOR = " "
# Seen in the wild in place of the space after the accession
EXTRA_ACCESSION_TERMINATORS = ("\t", "\u00a0", "\ufffd")


def _check_char(name: str, value: str) -> None:
    if not isinstance(value, str) or len(value) != 1:
        raise ValueError(f"{name} must be a single character, got {value!r}")


@dataclass
class FastaParams:
    """
    Configuration for FASTA parsing.

    - start_char: first character of every header line.
    - accession_end_char: the character separating the accession name from the
      description.
    - extra_accession_terminators: other characters accepted in its place; a
      header split on one of these is logged but otherwise parsed normally.
    - discard_residues: consume sequence lines without storing them (only the
      header metadata is needed).
    """
    start_char: str = PROTEIN_LINE_START_CHAR
    accession_end_char: str = PROTEIN_LINE_ACCESSION_TERMINATOR
    extra_accession_terminators: Tuple[str, ...] = EXTRA_ACCESSION_TERMINATORS
    discard_residues: bool = False

    def __post_init__(self):
        _check_char("start_char", self.start_char)
        _check_char("accession_end_char", self.accession_end_char)
        for c in self.extra_accession_terminators:
            _check_char("extra_accession_terminators", c)
        self.extra_accession_terminators = tuple(self.extra_accession_terminators)


class FastaFileReader(ProteinFileReader):
    """
    Reader for FASTA files:
      >header line (accession name, space, description)
      SEQUENCE....
      SEQUENCE....

    Each entry is a header line plus every following non-blank line up to the
    next header. Reading one line past the end of an entry is unavoidable, so
    that next header is held in a single pending slot and used to start the
    following entry without being read (or counted) again.
    """
    def __init__(
        self,
        path: Optional[str] = None,
        params: Optional[FastaParams] = None,
        gzip_factor: float = GZIP_PROGRESS_FACTOR
    ):
        super().__init__(gzip_factor=gzip_factor)
        self.p = params if params is not None else FastaParams()
        self._pending_header: Optional[str] = None
        self.irregular_terminator_count = 0
        if path is not None:
            self.open(path)

    def _on_open(self, path: str) -> None:
        self._pending_header = None
        self.irregular_terminator_count = 0

    @property
    def header_line(self) -> str:
        """Header line (protein name and description), without the start character."""
        return self.get_header_line(include_start_char=False)

    def get_header_line(self, include_start_char: bool = False) -> str:
        header = self.entry.header_line
        if not include_start_char and header.startswith(self.p.start_char):
            return header.lstrip(self.p.start_char).strip()
        return header

    def _is_header(self, line: str) -> bool:
        return line.startswith(self.p.start_char)

    def _read_entry(self) -> bool:
        # SEEKING_HEADER: the pending slot is served before the stream
        header = self._pending_header
        self._pending_header = None
        while header is None:
            line = self._read_line()
            if line is None:
                return False
            line = line.strip()
            if not line:
                continue
            if self._is_header(line):
                header = line
            else:
                # Sequence data with no header to attach it to
                self.stats.record_skip()

        self.entry.header_line = header
        self.entry.name, self.entry.description = self._split_header(header)

        # ACCUMULATING_SEQUENCE: until the next header or end of file
        chunks: List[str] = []
        while True:
            line = self._read_line()
            if line is None:
                break
            line = line.strip()
            if not line:
                continue
            if self._is_header(line):
                self._pending_header = line
                break
            if not self.p.discard_residues:
                chunks.append(line)
        self.entry.sequence = "".join(chunks)
        return True

    def _split_header(self, header: str) -> Tuple[str, str]:
        """
        Split a header line into (accession name, description).

        All leading start characters are removed; the name ends at the first
        accession terminator. Without a terminator the whole text is the name.
        """
        text = header.lstrip(self.p.start_char).strip()
        loc = text.find(self.p.accession_end_char)
        extra_loc = -1
        for c in self.p.extra_accession_terminators:
            i = text.find(c)
            if i > 0 and (extra_loc < 0 or i < extra_loc):
                extra_loc = i

        if extra_loc > 0 and (loc <= 0 or extra_loc < loc):
            self._note_irregular_terminator(text, text[extra_loc])
            loc = extra_loc
        if loc > 0:
            return text[:loc].strip(), text[loc + 1:].strip()
        return text, ""

    def _note_irregular_terminator(self, text: str, terminator: str) -> None:
        self.irregular_terminator_count += 1
        level = logging.WARNING if self.irregular_terminator_count == 1 else logging.DEBUG
        logger.log(
            level,
            "Accession in %s ends with %r instead of %r (line %d): %s",
            self.file_path, terminator, self.p.accession_end_char,
            self.stats.lines_read, text[:80]
        )
