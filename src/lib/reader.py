"""
EntryReader: lines and entries from text with comments and includes

EntryReader reads a file (or stream, or string) and hands out either lines
or entries:

- read_line() / iteration: lines with comments removed and include
  directives replaced by the lines of the included file.
- get_entry() / entries(): paragraphs separated by blank lines, or records
  delimited by start and stop patterns.

Comment syntax, entry boundaries and the include directive are all
configurable; with no CommentFormat and no include pattern the reader simply
returns the lines of its input.

The reader owns every file it opens. Files are closed as soon as they are
exhausted; use the reader as a context manager (or call close()) so that
anything still open is released when reading stops early.

Example:
    >>> with EntryReader.reader_createFromText("a # note\\nb\\n", "demo",
    ...                                        comment_format=CommentFormat.SHELL) as reader:
    ...     list(reader)
    ['a ', 'b']
"""

from dataclasses import replace
import re
from typing import Iterator, Optional, Union

from ..config import appsettings
from ..models.errors import ExhaustedInputError
from ..models.formats import CommentFormat, EntryFormat
from ..models.reader import Entry
from .comments import CommentFilter
from .includes import IncludeResolver
from .log import LOG
from .segmenter import EntrySegmenter
from .sequencer import LineIterator, LineSequencer
from .sources import Source, SourceLike, SourceStack, source_open

RegexLike = Union[str, re.Pattern[str], None]


class EntryReader:
    """
    Reads lines and entries from nested sources

    Attributes:
        entry_format: How lines group into entries
        comment_format: Which text is stripped as comment
        stack: Open sources, innermost include first
        sequencer: Filtered line engine
        segmenter: Entry engine
    """

    def __init__(
        self,
        source: SourceLike,
        name: Optional[str] = None,
        entry_format: Optional[EntryFormat] = None,
        comment_format: Optional[CommentFormat] = None,
        include_regex: RegexLike = None,
        encoding: Optional[str] = None,
    ) -> None:
        """
        Open a reader on a path or stream

        Args:
            source: Path (str or os.PathLike), open text or binary stream, or Source
            name: Display name for diagnostics; defaults to the path or stream name
            entry_format: Entry boundaries (EntryFormat.DEFAULT if omitted)
            comment_format: Comment syntax (CommentFormat.NONE if omitted)
            include_regex: Include directive pattern whose group 1 is the file
                           name, or None to disable includes
            encoding: Encoding for files and binary streams

        Raises:
            ConfigurationError: If the include pattern is malformed
            OSError: If source is a path that cannot be opened
        """
        self.entry_format = entry_format if entry_format is not None else EntryFormat.DEFAULT
        self.comment_format = comment_format if comment_format is not None else CommentFormat.NONE

        # configuration is checked before anything is opened
        includes = IncludeResolver(include_regex, encoding)
        comments = CommentFilter(self.comment_format, self.fenceMarker_resolve(self.entry_format))

        self.stack = SourceStack(source_open(source, name, encoding))
        self.sequencer = LineSequencer(self.stack, comments, includes)
        self.segmenter = EntrySegmenter(self.sequencer, self.entry_format)
        self.iterator = LineIterator(self.sequencer)
        LOG(f"Reader opened on {self.stack.position().name}", level=2)

    @classmethod
    def reader_createFromText(
        cls,
        text: str,
        name: Optional[str] = None,
        entry_format: Optional[EntryFormat] = None,
        comment_format: Optional[CommentFormat] = None,
        include_regex: RegexLike = None,
    ) -> "EntryReader":
        """
        Open a reader on an in-memory string

        Relative includes are resolved against the directory part of name
        (the current directory if name has none).
        """
        return cls(
            Source.source_createFromText(text, name),
            entry_format=entry_format,
            comment_format=comment_format,
            include_regex=include_regex,
        )

    @staticmethod
    def fenceMarker_resolve(entry_format: EntryFormat) -> Optional[str]:
        if not entry_format.fenced_code_blocks:
            return None
        return entry_format.fence_marker or appsettings.fence_marker

    def __enter__(self) -> "EntryReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Close every source that is still open"""
        self.stack.close()

    def __iter__(self) -> LineIterator:
        """
        The reader's line iterator

        Always the same one-shot iterator: a second loop continues where the
        first one stopped.
        """
        return self.iterator

    def lines(self) -> LineIterator:
        return self.iterator

    def entries(self) -> Iterator[Entry]:
        """Yield entries until get_entry() returns None"""
        entry = self.get_entry()
        while entry is not None:
            yield entry
            entry = self.get_entry()

    def read_line(self) -> Optional[str]:
        """
        Read a line, ignoring comments and processing includes

        Returns:
            The next line, or None at end of input
        """
        return self.sequencer.read_line()

    def get_entry(self) -> Optional[Entry]:
        """
        Read the next entry

        Returns:
            The next Entry, or None when only blank lines (or nothing) remain
        """
        return self.segmenter.get_entry()

    def putback(self, line: str) -> None:
        """
        Push one line back; the next read returns it

        Raises:
            PushbackError: If a line is already pending
        """
        self.sequencer.putback(line)

    def current_source_name(self) -> str:
        """
        Name of the source currently being read

        Raises:
            ExhaustedInputError: After end of input
        """
        return self.sequencer.current_position().name

    def current_line_number(self) -> int:
        """
        Line number of the last line read from the current source

        Raises:
            ExhaustedInputError: After end of input
        """
        return self.sequencer.current_position().line_number

    def lineNumber_set(self, line_number: int) -> None:
        """Overwrite the line counter of the current source"""
        source = self.stack.current()
        if source is None:
            raise ExhaustedInputError("Past end of input: no current source")
        source.line_number = line_number

    def entryStartStop_set(self, start: RegexLike, stop: RegexLike = None) -> None:
        """
        Change the patterns delimiting long entries

        Args:
            start: Pattern starting a long entry
            stop: Pattern ending a long entry (never matches if None)

        Raises:
            ConfigurationError: If a pattern is malformed, or stop is given without start
        """
        self.entry_format = replace(self.entry_format, start=start, stop=stop)
        self.segmenter.format = self.entry_format


def reader_open(
    source: SourceLike,
    entry_format: Optional[EntryFormat] = None,
    comment_format: Optional[CommentFormat] = None,
    include_regex: RegexLike = None,
    name: Optional[str] = None,
    encoding: Optional[str] = None,
) -> EntryReader:
    """
    Open an EntryReader on a path or stream

    Example:
        with reader_open("notes.txt", comment_format=CommentFormat.SHELL) as reader:
            for line in reader:
                ...
    """
    return EntryReader(
        source,
        name=name,
        entry_format=entry_format,
        comment_format=comment_format,
        include_regex=include_regex,
        encoding=encoding,
    )
