from __future__ import annotations
import csv
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, List, Optional, Tuple
from .accounting import GZIP_PROGRESS_FACTOR
from .base import ProteinFileReader
from .utils import is_number, parse_double, parse_float32, parse_int32, split_fields

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = "\t"
CSV_DELIMITER = ","


class DelimitedFileFormat(IntEnum):
    """Columns present in a delimited protein or peptide file."""
    SequenceOnly = 0
    ProteinName_Sequence = 1
    ProteinName_Description_Sequence = 2
    UniqueID_Sequence = 3
    ProteinName_PeptideSequence_UniqueID = 4
    ProteinName_PeptideSequence_UniqueID_Mass_NET = 5
    ProteinName_PeptideSequence_UniqueID_Mass_NET_NETStDev_DiscriminantScore = 6
    UniqueID_Sequence_Mass_NET = 7
    ProteinName_Description_Hash_Sequence = 8


# Header line reconstruction styles
HEADER_ROW = "row"
HEADER_NAME = "name"
HEADER_NAME_DESCRIPTION = "name_description"
HEADER_UNIQUE_ID = "unique_id"
HEADER_NAME_UNIQUE_ID = "name_unique_id"


@dataclass(frozen=True)
class OptionalColumn:
    field: str # ProteinEntry attribute
    index: int
    parse: Callable[[str], Optional[float]]
    min_columns: int # parsed only when the row has at least this many columns


@dataclass(frozen=True)
class ColumnLayout:
    """
    Static description of one delimited format.

    numeric_columns must parse as numbers and sequence_col must not; rows
    failing either test are header or junk rows and are skipped.
    """
    min_columns: int
    sequence_col: int
    name_col: Optional[int] = None
    description_col: Optional[int] = None
    id_col: Optional[int] = None
    numeric_columns: Tuple[int, ...] = ()
    optional: Tuple[OptionalColumn, ...] = ()
    header_style: str = HEADER_ROW

    def is_valid_row(self, fields: List[str]) -> bool:
        if len(fields) < self.min_columns:
            return False
        if is_number(fields[self.sequence_col]):
            return False
        return all(is_number(fields[i]) for i in self.numeric_columns)


_MASS_NET_AFTER_ID = (
    OptionalColumn("mass", 2, parse_double, 4),
    OptionalColumn("net", 3, parse_float32, 4),
)

_MASS_NET_AFTER_NAME_SEQ_ID = (
    OptionalColumn("mass", 3, parse_double, 5),
    OptionalColumn("net", 4, parse_float32, 5),
    OptionalColumn("net_stdev", 5, parse_float32, 7),
    OptionalColumn("discriminant_score", 6, parse_float32, 7),
)

_ID_SEQUENCE = ColumnLayout(
    min_columns=2,
    sequence_col=1,
    id_col=0,
    numeric_columns=(0,),
    optional=_MASS_NET_AFTER_ID,
    header_style=HEADER_UNIQUE_ID,
)

_NAME_SEQUENCE_ID = ColumnLayout(
    min_columns=3,
    sequence_col=1,
    name_col=0,
    id_col=2,
    numeric_columns=(2,),
    optional=_MASS_NET_AFTER_NAME_SEQ_ID,
    header_style=HEADER_NAME_UNIQUE_ID,
)

LAYOUTS: Dict[DelimitedFileFormat, ColumnLayout] = {
    DelimitedFileFormat.SequenceOnly: ColumnLayout(
        min_columns=1,
        sequence_col=0,
        header_style=HEADER_ROW,
    ),
    DelimitedFileFormat.ProteinName_Sequence: ColumnLayout(
        min_columns=2,
        sequence_col=1,
        name_col=0,
        header_style=HEADER_NAME,
    ),
    DelimitedFileFormat.ProteinName_Description_Sequence: ColumnLayout(
        min_columns=3,
        sequence_col=2,
        name_col=0,
        description_col=1,
        header_style=HEADER_NAME_DESCRIPTION,
    ),
    DelimitedFileFormat.ProteinName_Description_Hash_Sequence: ColumnLayout(
        min_columns=4,
        sequence_col=3,
        name_col=0,
        description_col=1,
        header_style=HEADER_NAME_DESCRIPTION,
    ),
    DelimitedFileFormat.UniqueID_Sequence: _ID_SEQUENCE,
    DelimitedFileFormat.UniqueID_Sequence_Mass_NET: _ID_SEQUENCE,
    DelimitedFileFormat.ProteinName_PeptideSequence_UniqueID: _NAME_SEQUENCE_ID,
    DelimitedFileFormat.ProteinName_PeptideSequence_UniqueID_Mass_NET: _NAME_SEQUENCE_ID,
    DelimitedFileFormat.ProteinName_PeptideSequence_UniqueID_Mass_NET_NETStDev_DiscriminantScore: _NAME_SEQUENCE_ID,
}


def get_layout(file_format) -> ColumnLayout:
    try:
        return LAYOUTS[DelimitedFileFormat(file_format)]
    except (ValueError, KeyError):
        raise ValueError(f"Unknown delimited file format: {file_format!r}") from None


@dataclass
class DelimitedParams:
    """
    Configuration for delimited protein/peptide files.

    - delimiter: column separator; None means tab, or comma for .csv files.
    - file_format: which columns the file has (see DelimitedFileFormat).
    - skip_first_line: always drop the first physical line (a header row).
    - discard_residues: do not store sequences.
    - quote_char: quote character for fields containing the delimiter;
      None disables quote handling.
    """
    delimiter: Optional[str] = None
    file_format: DelimitedFileFormat = DelimitedFileFormat.ProteinName_Description_Sequence
    skip_first_line: bool = False
    discard_residues: bool = False
    quote_char: Optional[str] = '"'

    def __post_init__(self):
        if self.delimiter is not None and len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {self.delimiter!r}")
        if self.quote_char is not None and len(self.quote_char) != 1:
            raise ValueError(f"quote_char must be a single character, got {self.quote_char!r}")


class DelimitedFileReader(ProteinFileReader):
    """
    Reader for tab (or comma) delimited protein and peptide files, one entry
    per line.

    Header rows do not need to be flagged: a row whose sequence column looks
    like a number, or whose ID column does not, is skipped and counted in
    line_skip_count (see ColumnLayout).
    """
    def __init__(
        self,
        path: Optional[str] = None,
        params: Optional[DelimitedParams] = None,
        gzip_factor: float = GZIP_PROGRESS_FACTOR
    ):
        super().__init__(gzip_factor=gzip_factor)
        self.p = params if params is not None else DelimitedParams()
        self.delimiter = self.p.delimiter or DEFAULT_DELIMITER
        self._first_line_skipped = False
        if path is not None:
            self.open(path)

    @property
    def file_format(self) -> DelimitedFileFormat:
        return self.p.file_format

    def _on_open(self, path: str) -> None:
        self._first_line_skipped = False
        if self.p.delimiter is None:
            name = path.lower()
            if name.endswith(".csv") or name.endswith(".csv.gz"):
                self.delimiter = CSV_DELIMITER
            else:
                self.delimiter = DEFAULT_DELIMITER
        else:
            self.delimiter = self.p.delimiter

    def _split(self, line: str) -> Optional[List[str]]:
        try:
            return split_fields(line, self.delimiter, self.p.quote_char)
        except csv.Error as e:
            logger.debug("Unsplittable line %d: %s", self.stats.lines_read, e)
            return None

    def _read_entry(self) -> bool:
        layout = get_layout(self.p.file_format)

        if self.p.skip_first_line and not self._first_line_skipped:
            self._first_line_skipped = True
            if self._read_line() is None:
                return False

        while True:
            line = self._read_line()
            if line is None:
                return False
            line = line.strip()
            if not line:
                continue
            fields = self._split(line)
            if fields and any(fields) and layout.is_valid_row(fields):
                self._load(line, fields, layout)
                return True
            self.stats.record_skip()

    def _load(self, line: str, fields: List[str], layout: ColumnLayout) -> None:
        e = self.entry
        e.header_line = line
        if layout.name_col is not None:
            e.name = fields[layout.name_col]
        if layout.description_col is not None:
            e.description = fields[layout.description_col]
        if not self.p.discard_residues:
            e.sequence = fields[layout.sequence_col]
        if layout.id_col is not None:
            value = parse_int32(fields[layout.id_col])
            if value is not None:
                e.unique_id = value
        # Best effort: a column that does not parse stays at 0
        for col in layout.optional:
            if len(fields) < col.min_columns:
                continue
            value = col.parse(fields[col.index])
            if value is not None:
                setattr(e, col.field, value)

    @property
    def header_line(self) -> str:
        """
        Entry header rebuilt for the file format, e.g. name and unique ID for
        peptide formats; the whole row for SequenceOnly files. Formats with a
        unique ID but no name column return the ID as text (the name is
        always "" there).
        """
        e = self.entry
        if not e.header_line:
            return ""
        style = get_layout(self.p.file_format).header_style
        if style == HEADER_NAME:
            return e.name
        if style == HEADER_NAME_DESCRIPTION:
            if e.description.strip():
                return e.name + self.delimiter + e.description
            return e.name
        if style == HEADER_UNIQUE_ID:
            # No name column, so the ID text stands in for it
            return str(e.unique_id)
        if style == HEADER_NAME_UNIQUE_ID:
            return e.name + self.delimiter + str(e.unique_id)
        return e.header_line
