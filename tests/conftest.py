import gzip
from pathlib import Path

import pytest


@pytest.fixture
def write_file(tmp_path):
    """Write text to tmp_path/name (gzip-compressed for .gz names) and return the path."""
    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        if name.endswith(".gz"):
            with gzip.open(path, "wt", encoding="utf-8", newline="") as f:
                f.write(text)
        else:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(text)
        return path
    return _write
