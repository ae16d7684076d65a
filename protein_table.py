from dataclasses import dataclass
from typing import Iterator, Optional, Union
from protein_reader import DelimitedFileFormat, DelimitedFileReader, DelimitedParams


@dataclass
class PeptideRecord:
    """
    One row of a delimited protein or peptide table.

    Columns absent from the file format keep their defaults
    ("" for text, 0 for numbers).
    """
    name: str
    seq: str
    description: str = ""
    unique_id: int = 0
    mass: float = 0.0
    net: float = 0.0 # normalized elution time
    net_stdev: float = 0.0
    discriminant_score: float = 0.0


def iter_table(
    path: str,
    file_format: Union[DelimitedFileFormat, int] = DelimitedFileFormat.ProteinName_Description_Sequence,
    delimiter: Optional[str] = None,
    skip_first_line: bool = False,
    discard_residues: bool = False
) -> Iterator[PeptideRecord]:
    """
    Stream the valid rows of a delimited file (plain or .gz) as records.
    Header and malformed rows are skipped.
    """
    params = DelimitedParams(
        delimiter=delimiter,
        file_format=DelimitedFileFormat(file_format),
        skip_first_line=skip_first_line,
        discard_residues=discard_residues
    )
    with DelimitedFileReader(params=params) as reader:
        if not reader.open(path):
            raise FileNotFoundError(f"Cannot open delimited file: {path}")
        for e in reader:
            yield PeptideRecord(
                name=e.name,
                seq=e.sequence,
                description=e.description,
                unique_id=e.unique_id,
                mass=e.mass,
                net=e.net,
                net_stdev=e.net_stdev,
                discriminant_score=e.discriminant_score
            )
