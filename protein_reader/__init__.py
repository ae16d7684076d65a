# Protein file reader package
from typing import Optional, Union
from .accounting import GZIP_PROGRESS_FACTOR, StreamAccounting
from .base import ProteinFileReader
from .delimited import (
    DelimitedFileFormat,
    DelimitedFileReader,
    DelimitedParams,
    ColumnLayout,
    LAYOUTS,
)
from .entry import ProteinEntry
from .fasta import FastaFileReader, FastaParams


READER_FORMATS = {
    "auto": "Choose by file extension",
    "fasta": "FASTA",
    **{f.name: f"Delimited ({f.name})" for f in DelimitedFileFormat},
}

FASTA_EXTENSIONS = (".fasta", ".fa", ".faa", ".fas")


def is_fasta_path(path: str) -> bool:
    name = str(path).lower()
    if name.endswith(".gz"):
        name = name[:-3]
    return name.endswith(FASTA_EXTENSIONS)


def create_reader(
    path: Optional[str] = None,
    file_format: Union[str, DelimitedFileFormat] = "auto",
    delimiter: Optional[str] = None,
    skip_first_line: bool = False,
    discard_residues: bool = False
) -> ProteinFileReader:
    """
    Build the reader for a format name from READER_FORMATS (or a
    DelimitedFileFormat), opening path when given.

    "auto" picks FASTA for .fasta/.fa/.faa/.fas (optionally .gz) files and the
    default delimited layout (name, description, sequence) for anything else.
    """
    if isinstance(file_format, str) and file_format not in READER_FORMATS:
        raise ValueError(f"Unknown file format: {file_format}")
    if file_format == "auto":
        file_format = "fasta" if path is not None and is_fasta_path(path) \
            else DelimitedFileFormat.ProteinName_Description_Sequence
    if file_format == "fasta":
        return FastaFileReader(path, FastaParams(discard_residues=discard_residues))
    if isinstance(file_format, str):
        file_format = DelimitedFileFormat[file_format]
    params = DelimitedParams(
        delimiter=delimiter,
        file_format=file_format,
        skip_first_line=skip_first_line,
        discard_residues=discard_residues
    )
    return DelimitedFileReader(path, params)
