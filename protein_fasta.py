from dataclasses import dataclass
from typing import Iterator
from protein_reader import FastaFileReader, FastaParams


@dataclass
class FastaRecord:
    """
    Simple container for one FASTA entry.

    FASTA format:
      >header line (metadata)
      SEQUENCE....
      SEQUENCE....
    """
    header: str # full header line, including the leading ">"
    seq: str # sequence string (concatenated, no whitespace)
    name: str = "" # text before the first space of the header
    description: str = "" # text after it

    @property
    def id(self) -> str:
        """
        Extract a stable identifier from the FASTA header.

        Common UniProt-style headers look like:
          >sp|P12345|PROT_HUMAN Some description...
          >tr|A0A0B4J2D5|SOME_NAME ...
        In that case we return the accession (the 2nd pipe-separated field),
        e.g. "P12345" or "A0A0B4J2D5".

        Otherwise the accession name parsed by the reader is used.
        """
        parts = self.name.split("|")
        # UniProt headers: parts[1] is the accession
        if len(parts) >= 2 and parts[1]:
            return parts[1].strip()
        return self.name


def iter_fasta(path: str, discard_residues: bool = False) -> Iterator[FastaRecord]:
    """
    Stream a FASTA file (plain or .gz) record-by-record (generator).

    - Reads the file line by line (memory-friendly).
    - Sequence lines are concatenated into a single string, or dropped
      when discard_residues is set.
    - A file that cannot be opened raises FileNotFoundError.
    """
    with FastaFileReader(params=FastaParams(discard_residues=discard_residues)) as reader:
        if not reader.open(path):
            raise FileNotFoundError(f"Cannot open FASTA file: {path}")
        while reader.read_next_entry():
            yield FastaRecord(
                header=reader.get_header_line(include_start_char=True),
                seq=reader.sequence,
                name=reader.name,
                description=reader.description
            )
