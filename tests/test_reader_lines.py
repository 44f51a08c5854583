"""
Line reading tests - no comments, no includes

Tests sources of every kind, iteration, pushback, positions and exhaustion.
"""

import gzip
import io

import pytest

from entryreader.lib.reader import EntryReader, reader_open
from entryreader.models import CommentFormat, EntryFormat, PushbackError, ExhaustedInputError


def reader_fromText(text: str, name: str = "test") -> EntryReader:
    return EntryReader.reader_createFromText(text, name, EntryFormat.DEFAULT, CommentFormat.NONE)


class TestBasicLineReading:
    """Test plain line-by-line reading"""

    def test_lines_in_order(self):
        """Lines come back in order without terminators"""
        with reader_fromText("line1\nline2\nline3\n") as reader:
            assert reader.read_line() == "line1"
            assert reader.read_line() == "line2"
            assert reader.read_line() == "line3"
            assert reader.read_line() is None

    def test_last_line_without_newline(self):
        """A final line without terminator is still a line"""
        with reader_fromText("a\nb") as reader:
            assert list(reader) == ["a", "b"]

    def test_blank_lines_are_returned(self):
        """Blank lines are lines too when comments are off"""
        with reader_fromText("a\n\n  \nb\n") as reader:
            assert list(reader) == ["a", "", "  ", "b"]

    def test_crlf_terminators(self):
        """\\r\\n and \\r terminate lines like \\n"""
        with reader_fromText("a\r\nb\rc\n") as reader:
            assert list(reader) == ["a", "b", "c"]

    def test_empty_input(self):
        """Empty input has no lines and no entries"""
        with reader_fromText("") as reader:
            assert reader.read_line() is None
            assert list(reader) == []
            assert reader.get_entry() is None

    def test_exhaustion_is_stable(self):
        """Once read_line returns None it keeps returning None"""
        with reader_fromText("only\n") as reader:
            assert reader.read_line() == "only"
            for _ in range(3):
                assert reader.read_line() is None


class TestSourceKinds:
    """Test the different things a reader can be opened on"""

    def test_binary_stream(self):
        """Binary streams are decoded as UTF-8"""
        stream = io.BytesIO("line1\nlíne2\n".encode("utf-8"))
        with EntryReader(stream, "test") as reader:
            assert reader.read_line() == "line1"
            assert reader.read_line() == "líne2"
            assert reader.read_line() is None

    def test_text_stream_default_name(self):
        """A stream without a name gets a placeholder name"""
        with EntryReader(io.StringIO("x\n")) as reader:
            assert reader.read_line() == "x"
            assert reader.current_source_name() == "(stream)"

    def test_path(self, tmp_path):
        """Files are opened by path, str or Path"""
        test_file = tmp_path / "test.txt"
        test_file.write_text("line1\nline2\nline3\n", encoding="utf-8")

        with EntryReader(test_file) as reader:
            assert list(reader) == ["line1", "line2", "line3"]
        with reader_open(str(test_file)) as reader:
            assert reader.read_line() == "line1"
            assert reader.current_source_name() == str(test_file)

    def test_gzip_file(self, tmp_path):
        """.gz files are decompressed transparently"""
        test_file = tmp_path / "test.txt.gz"
        with gzip.open(test_file, "wt", encoding="utf-8") as f:
            f.write("alpha\nbeta\n")

        with reader_open(test_file) as reader:
            assert list(reader) == ["alpha", "beta"]

    def test_missing_file(self, tmp_path):
        """Opening a missing file raises the OSError from open()"""
        with pytest.raises(FileNotFoundError):
            reader_open(tmp_path / "absent.txt")

    def test_text_source_default_name(self):
        """Text buffers without a name get a placeholder name"""
        with EntryReader.reader_createFromText("x\n") as reader:
            reader.read_line()
            assert reader.current_source_name() == "(string)"


class TestIteration:
    """Test the one-shot line iterator"""

    def test_iterates_all_lines(self):
        with reader_fromText("line1\nline2\nline3\n") as reader:
            assert [line for line in reader] == ["line1", "line2", "line3"]

    def test_iterator_is_shared(self):
        """iter() always returns the same iterator"""
        with reader_fromText("line1\n") as reader:
            assert iter(reader) is iter(reader)
            assert reader.lines() is iter(reader)

    def test_iterator_does_not_restart(self):
        """A second loop continues where the first stopped"""
        with reader_fromText("a\nb\nc\n") as reader:
            for line in reader:
                if line == "a":
                    break
            assert list(reader) == ["b", "c"]
            assert list(reader) == []

    def test_next_after_end(self):
        """next() keeps raising StopIteration once exhausted"""
        with reader_fromText("line1\n") as reader:
            lines = iter(reader)
            assert next(lines) == "line1"
            with pytest.raises(StopIteration):
                next(lines)
            with pytest.raises(StopIteration):
                next(lines)


class TestPushback:
    """Test the one-line pushback"""

    def test_putback_is_reread(self):
        with reader_fromText("line1\nline2\nline3\n") as reader:
            line1 = reader.read_line()
            reader.putback(line1)
            assert reader.read_line() == "line1"
            assert reader.read_line() == "line2"

    def test_putback_any_text(self):
        """Any string can be put back, not only the last line read"""
        with reader_fromText("a\n") as reader:
            reader.putback("inserted")
            assert reader.read_line() == "inserted"
            assert reader.read_line() == "a"

    def test_putback_twice_fails(self):
        with reader_fromText("line1\nline2\n") as reader:
            reader.putback(reader.read_line())
            with pytest.raises(PushbackError, match="already put back"):
                reader.putback("line2")

    def test_putback_after_end(self):
        """A pushed-back line is delivered even after end of input"""
        with reader_fromText("a\n") as reader:
            assert reader.read_line() == "a"
            assert reader.read_line() is None
            reader.putback("a")
            assert reader.read_line() == "a"
            assert reader.read_line() is None

    def test_putback_seen_by_iterator(self):
        with reader_fromText("a\nb\n") as reader:
            reader.putback(reader.read_line())
            assert list(reader) == ["a", "b"]


class TestPositions:
    """Test source names and line numbers"""

    def test_line_numbers(self):
        with reader_fromText("line1\nline2\nline3\n") as reader:
            reader.read_line()
            assert reader.current_line_number() == 1
            reader.read_line()
            assert reader.current_line_number() == 2
            reader.read_line()
            assert reader.current_line_number() == 3

    def test_line_number_before_reading(self):
        with reader_fromText("line1\n") as reader:
            assert reader.current_line_number() == 0

    def test_set_line_number(self):
        with reader_fromText("line1\nline2\n") as reader:
            reader.read_line()
            reader.lineNumber_set(10)
            assert reader.current_line_number() == 10
            reader.read_line()
            assert reader.current_line_number() == 11

    def test_source_name(self):
        with reader_fromText("line1\n", name="myfile.txt") as reader:
            assert reader.current_source_name() == "myfile.txt"

    def test_position_after_end_fails(self):
        with reader_fromText("line1\n") as reader:
            reader.read_line()
            assert reader.read_line() is None
            with pytest.raises(ExhaustedInputError):
                reader.current_source_name()
            with pytest.raises(ExhaustedInputError):
                reader.current_line_number()
            with pytest.raises(ExhaustedInputError):
                reader.lineNumber_set(1)


class TestClosing:
    """Test that the reader releases its sources"""

    def test_file_closed_at_end(self, tmp_path):
        test_file = tmp_path / "test.txt"
        test_file.write_text("a\n", encoding="utf-8")
        reader = reader_open(test_file)
        source = reader.stack.current()
        assert list(reader) == ["a"]
        assert source.closed
        assert len(reader.stack) == 0

    def test_file_closed_on_early_exit(self, tmp_path):
        test_file = tmp_path / "test.txt"
        test_file.write_text("a\nb\nc\n", encoding="utf-8")
        with reader_open(test_file) as reader:
            source = reader.stack.current()
            assert reader.read_line() == "a"
        assert source.closed
        assert source.stream.closed

    def test_file_closed_on_error(self, tmp_path):
        test_file = tmp_path / "test.txt"
        test_file.write_text("a\n<!-- never closed\n", encoding="utf-8")
        with pytest.raises(SyntaxError):
            with reader_open(test_file, comment_format=CommentFormat.HTML) as reader:
                source = reader.stack.current()
                list(reader)
        assert source.closed
