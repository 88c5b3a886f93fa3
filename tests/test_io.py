from pathlib import Path

import pytest

from pgcrud.io import read_delimited

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def test_read_sample_books():
    header, rows = read_delimited(FIXTURES / "sample_books.txt", ";")
    assert header == ["title", "author", "isbn"]
    assert len(rows) == 4
    assert rows[0] == ["The Last Wish", "Andrzej Sapkowski", "978-0-316-02918-3"]
    assert all(len(row) == len(header) for row in rows)


def test_blank_lines_and_whitespace(tmp_path):
    path = tmp_path / "books.txt"
    path.write_text("title ; isbn\n\n Solaris ;1\n   \nEden; 2\n", encoding="utf-8")
    header, rows = read_delimited(path)
    assert header == ["title", "isbn"]
    assert rows == [["Solaris", "1"], ["Eden", "2"]]


def test_other_delimiter(tmp_path):
    path = tmp_path / "books.csv"
    path.write_text("title,isbn\nSolaris,1\n", encoding="utf-8")
    assert read_delimited(path, ",") == (["title", "isbn"], [["Solaris", "1"]])


def test_ragged_row_names_line(tmp_path):
    path = tmp_path / "books.txt"
    path.write_text("title;isbn\nSolaris;1\nEden\n", encoding="utf-8")
    with pytest.raises(ValueError, match=r"books.txt:3: expected 2 fields, got 1"):
        read_delimited(path)


def test_empty_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ValueError, match="no header"):
        read_delimited(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_delimited(tmp_path / "nope.txt")


def test_byte_order_mark_is_dropped(tmp_path):
    path = tmp_path / "bom.txt"
    path.write_text("title;isbn\nSolaris;1\n", encoding="utf-8-sig")
    header, rows = read_delimited(path)
    assert header == ["title", "isbn"]
    assert rows == [["Solaris", "1"]]
