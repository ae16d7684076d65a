import logging

import pytest

from protein_reader import FastaFileReader, FastaParams

SCENARIO = ">P1 desc one\nABCDE\nFGHIJ\n>P2\nKLMNO\n"


def read_all(reader):
    entries = []
    while reader.read_next_entry():
        entries.append((reader.name, reader.description, reader.sequence))
    return entries


def test_two_entry_scenario(write_file):
    path = write_file("scenario.fasta", SCENARIO)
    reader = FastaFileReader(str(path))
    entries = read_all(reader)
    assert entries == [("P1", "desc one", "ABCDEFGHIJ"), ("P2", "", "KLMNO")]
    assert sum(len(seq) for _, _, seq in entries) == 15
    reader.close()


def test_header_line_accessors(write_file):
    path = write_file("scenario.fasta", SCENARIO)
    with FastaFileReader(str(path)) as reader:
        assert reader.read_next_entry()
        assert reader.header_line == "P1 desc one"
        assert reader.get_header_line(include_start_char=True) == ">P1 desc one"
        assert reader.entry.header_line == ">P1 desc one"
        assert str(reader.entry) == "P1"


def test_lookahead_does_not_double_count_lines(write_file):
    path = write_file("scenario.fasta", SCENARIO)
    with FastaFileReader(str(path)) as reader:
        assert reader.read_next_entry()
        # the next header has been read ahead, but only once
        assert reader.lines_read == 4
        assert reader.read_next_entry()
        assert reader.lines_read == 5
        assert ">" not in reader.sequence
        assert not reader.read_next_entry()
        assert reader.lines_read == 5


def test_blank_lines_and_whitespace_are_trimmed(write_file):
    path = write_file("blank.fasta", "\n\n  >P1  desc  \n  AB C \n\n  DE\n\n")
    with FastaFileReader(str(path)) as reader:
        assert reader.read_next_entry()
        assert reader.name == "P1"
        assert reader.description == "desc"
        assert reader.sequence == "AB CDE"
        assert reader.lines_read == 3
        assert reader.line_skip_count == 0
        assert not reader.read_next_entry()


def test_sequence_before_first_header_is_skipped(write_file):
    path = write_file("orphan.fasta", "ABC\nXYZ\n>P1\nDEF\n")
    with FastaFileReader(str(path)) as reader:
        assert read_all(reader) == [("P1", "", "DEF")]
        assert reader.line_skip_count == 2


def test_consecutive_and_trailing_headers(write_file):
    path = write_file("headers.fasta", ">A\n>B first\nCC\n>C\n")
    with FastaFileReader(str(path)) as reader:
        assert read_all(reader) == [("A", "", ""), ("B", "first", "CC"), ("C", "", "")]


def test_repeated_start_chars_are_removed(write_file):
    path = write_file("double.fasta", ">>P1 two markers\nMK\n")
    with FastaFileReader(str(path)) as reader:
        assert reader.read_next_entry()
        assert reader.name == "P1"
        assert reader.description == "two markers"


def test_no_header_returns_false(write_file):
    path = write_file("noheader.fasta", "ACDEFG\nHIKLMN\n")
    with FastaFileReader(str(path)) as reader:
        assert not reader.read_next_entry()
        assert reader.name == ""
        assert reader.percent_file_processed() == 100.0


def test_empty_file(write_file):
    path = write_file("empty.fasta", "")
    with FastaFileReader(str(path)) as reader:
        assert reader.is_open
        assert not reader.read_next_entry()
        assert reader.percent_file_processed() == 0.0


def test_fields_cleared_after_failed_read(write_file):
    path = write_file("scenario.fasta", SCENARIO)
    with FastaFileReader(str(path)) as reader:
        read_all(reader)
        assert reader.name == ""
        assert reader.description == ""
        assert reader.sequence == ""
        assert reader.header_line == ""


def test_discard_residues(write_file):
    path = write_file("scenario.fasta", SCENARIO)
    reader = FastaFileReader(str(path), FastaParams(discard_residues=True))
    entries = read_all(reader)
    assert entries == [("P1", "desc one", ""), ("P2", "", "")]
    assert reader.lines_read == 5
    reader.close()


def test_irregular_terminators_are_logged(write_file, caplog):
    path = write_file(
        "irregular.fasta",
        ">P1\tdesc tab\nAAA\n>P2\u00a0nbsp desc\nCC\n>P3 normal\nD\n"
    )
    with caplog.at_level(logging.WARNING, logger="protein_reader.fasta"):
        with FastaFileReader(str(path)) as reader:
            entries = read_all(reader)
            assert reader.irregular_terminator_count == 2
    assert entries == [
        ("P1", "desc tab", "AAA"),
        ("P2", "nbsp desc", "CC"),
        ("P3", "normal", "D"),
    ]
    warnings = [r for r in caplog.records
                if r.name == "protein_reader.fasta" and r.levelno == logging.WARNING]
    assert len(warnings) == 1


def test_custom_start_and_terminator_chars(write_file):
    path = write_file("custom.txt", "@P1|first protein\nMKV\n@P2|second\nLL\n")
    params = FastaParams(start_char="@", accession_end_char="|")
    with FastaFileReader(str(path), params) as reader:
        assert read_all(reader) == [("P1", "first protein", "MKV"), ("P2", "second", "LL")]


def test_invalid_params():
    with pytest.raises(ValueError):
        FastaParams(start_char="")
    with pytest.raises(ValueError):
        FastaParams(accession_end_char="ab")


def test_missing_file_returns_false(tmp_path):
    reader = FastaFileReader()
    assert not reader.open(str(tmp_path / "missing.fasta"))
    assert not reader.is_open
    assert not reader.read_next_entry()
    assert reader.percent_file_processed() == 0.0


def test_constructor_with_missing_path_does_not_raise(tmp_path):
    reader = FastaFileReader(str(tmp_path / "missing.fasta"))
    assert not reader.is_open


def test_close_and_reopen_is_repeatable(write_file):
    path = write_file("scenario.fasta", SCENARIO)
    reader = FastaFileReader(str(path))
    first = read_all(reader)
    assert reader.close()
    assert not reader.is_open
    assert reader.lines_read == 0
    assert reader.bytes_read == 0
    assert not reader.read_next_entry()
    assert reader.open(str(path))
    assert read_all(reader) == first
    reader.close()


def test_reopen_discards_pending_header(write_file):
    first = write_file("a.fasta", ">A1\nAA\n>A2\nAA\n")
    second = write_file("b.fasta", ">B1\nBB\n")
    reader = FastaFileReader(str(first))
    assert reader.read_next_entry()
    assert reader.open(str(second))
    assert read_all(reader) == [("B1", "", "BB")]
    reader.close()


def test_context_manager_closes(write_file):
    path = write_file("scenario.fasta", SCENARIO)
    with FastaFileReader(str(path)) as reader:
        assert reader.read_next_entry()
    assert not reader.is_open


def test_iteration_yields_snapshots(write_file):
    path = write_file("scenario.fasta", SCENARIO)
    with FastaFileReader(str(path)) as reader:
        entries = list(reader)
    assert [e.name for e in entries] == ["P1", "P2"]
    assert entries[0].sequence == "ABCDEFGHIJ"
    assert entries[0] is not entries[1]


def test_counts_match_headers_and_residues(write_file):
    lines = []
    expected_residues = 0
    for i in range(25):
        lines.append(f">PROT_{i} protein number {i}")
        for width in (60, 60, i + 1):
            chunk = "ACDEFGHIKLMNPQRSTVWY" * 3
            lines.append(chunk[:width])
            expected_residues += len(chunk[:width])
        if i % 3 == 0:
            lines.append("")
    path = write_file("many.fasta", "\n".join(lines) + "\n")
    with FastaFileReader(str(path)) as reader:
        entries = read_all(reader)
    assert len(entries) == 25
    assert sum(len(seq) for _, _, seq in entries) == expected_residues
    assert entries[7] == ("PROT_7", "protein number 7", ("ACDEFGHIKLMNPQRSTVWY" * 3)[:60] * 2 + ("ACDEFGHIKLMNPQRSTVWY" * 3)[:8])


def test_progress_is_monotonic_and_reaches_100(write_file):
    path = write_file("crlf.fasta", SCENARIO.replace("\n", "\r\n"))
    with FastaFileReader(str(path)) as reader:
        assert reader.file_size_bytes == 40
        assert reader.percent_file_processed() == 0.0
        assert reader.read_next_entry()
        assert reader.bytes_read == 33
        assert reader.percent_file_processed() == 82.5
        assert reader.read_next_entry()
        assert reader.percent_file_processed() == 100.0
        assert not reader.read_next_entry()
        assert reader.percent_file_processed() == 100.0


def test_gzip_fasta_reaches_100(write_file):
    path = write_file("scenario.fasta.gz", SCENARIO)
    with FastaFileReader(str(path)) as reader:
        assert reader.is_compressed
        size = reader.file_size_bytes
        assert reader.read_next_entry()
        assert reader.name == "P1"
        expected = min(round(0.5 * reader.bytes_read / size * 100, 2), 100.0)
        assert reader.percent_file_processed() == expected
        previous = reader.percent_file_processed()
        assert reader.read_next_entry()
        assert reader.sequence == "KLMNO"
        assert reader.percent_file_processed() >= previous
        assert not reader.read_next_entry()
        assert reader.percent_file_processed() == 100.0


def test_corrupt_gzip_is_terminal(tmp_path, caplog):
    path = tmp_path / "broken.fasta.gz"
    path.write_bytes(b">P1 not really gzip\nMKV\n")
    reader = FastaFileReader()
    assert reader.open(str(path))
    with caplog.at_level(logging.ERROR, logger="protein_reader.base"):
        assert not reader.read_next_entry()
    assert any(r.levelno == logging.ERROR for r in caplog.records)
    assert not reader.read_next_entry()
    assert reader.close()
