from __future__ import annotations
from dataclasses import dataclass, replace


@dataclass
class ProteinEntry:
    """
    The current protein (or peptide) entry of a reader.

    One instance is owned by each reader and overwritten in place on every
    read; copy() it (or iterate the reader) to keep values past the next read.
    Only peptides from delimited files use unique_id, mass and the NET fields.
    """
    header_line: str = "" # FASTA: raw header incl. start char; delimited: the row text
    name: str = "" # accession name
    description: str = ""
    sequence: str = ""
    unique_id: int = 0
    mass: float = 0.0
    net: float = 0.0 # normalized elution time
    net_stdev: float = 0.0
    discriminant_score: float = 0.0

    def clear(self) -> None:
        self.header_line = ""
        self.name = ""
        self.description = ""
        self.sequence = ""
        self.unique_id = 0
        self.mass = 0.0
        self.net = 0.0
        self.net_stdev = 0.0
        self.discriminant_score = 0.0

    def copy(self) -> "ProteinEntry":
        return replace(self)

    def __str__(self) -> str:
        return self.name
