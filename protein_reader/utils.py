from __future__ import annotations
import csv
import math
from typing import List, Optional
import numpy as np

INT32_MIN = int(np.iinfo(np.int32).min)
INT32_MAX = int(np.iinfo(np.int32).max)


def is_gzip_path(path: str) -> bool:
    # Compression is detected by extension only, never by sniffing content
    return str(path).lower().endswith(".gz")


def _to_float(text: str) -> Optional[float]:
    text = text.strip()
    if not text or "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    # "NaN" / "Inf" are valid residue strings (e.g. peptide NAN), not numbers
    if not math.isfinite(value):
        return None
    return value


def is_number(text: str) -> bool:
    """
    Numeric sniffing: True when the field parses as a finite decimal number.
    Used to tell data rows from header rows and junk rows.
    """
    return _to_float(text) is not None


def parse_int32(text: str) -> Optional[int]:
    text = text.strip()
    if not text or "_" in text:
        return None
    try:
        value = int(text)
    except ValueError:
        return None
    if value < INT32_MIN or value > INT32_MAX:
        return None
    return value


def parse_double(text: str) -> Optional[float]:
    return _to_float(text)


def parse_float32(text: str) -> Optional[float]:
    value = _to_float(text)
    if value is None:
        return None
    # Keep single precision semantics for NET-like columns
    with np.errstate(over="ignore"):
        result = float(np.float32(value))
    # Too large for float32
    if not math.isfinite(result):
        return None
    return result


def split_fields(
    line: str,
    delimiter: str,
    quote_char: Optional[str] = '"'
) -> List[str]:
    """
    Split one physical line into fields.

    Quoted fields may contain the delimiter; with quote_char=None every quote
    character is kept literally. Lines without a quote character are split
    directly, so field length is not bound by the csv module limit.
    """
    if quote_char is None or quote_char not in line:
        return [field.strip() for field in line.split(delimiter)]
    reader = csv.reader([line], delimiter=delimiter, quotechar=quote_char)
    for row in reader:
        return [field.strip() for field in row]
    return []
