"""
Named text sources and the include stack

A Source is one open text stream with a display name and a line counter.
SourceStack keeps the Sources that are currently open, innermost include
first, and makes the boundaries between them invisible to rawLine_next().

The stack owns every Source pushed onto it: a Source is closed the moment it
reports end of input, and close() (or leaving a ``with`` block) releases
whatever is still open.

Example:
    >>> stack = SourceStack(Source.source_createFromText("a\\nb\\n", "demo"))
    >>> stack.rawLine_next(), stack.position().line_number
    ('a', 1)
"""

import gzip
import io
import os
from pathlib import Path
from typing import IO, List, Optional, Union

from ..config import appsettings
from ..models.errors import ExhaustedInputError
from ..models.reader import SourcePosition
from .log import LOG

SourceLike = Union[str, os.PathLike, IO]


class Source:
    """
    One open text stream with a name and a 1-based line counter

    Attributes:
        stream: Text stream lines are read from
        name: Display name used in diagnostics and for resolving relative includes
        line_number: Number of lines read so far (0 before the first read)
        closed: True once close() has been called
    """

    def __init__(self, stream: IO[str], name: str) -> None:
        self.stream = stream
        self.name = name
        self.line_number = 0
        self.closed = False

    def __repr__(self) -> str:
        return f"Source({self.name!r}, line={self.line_number})"

    @classmethod
    def source_createFromText(cls, text: str, name: Optional[str] = None) -> "Source":
        """Wrap an in-memory text buffer"""
        # newline=None: \r\n and \r read back as \n
        return cls(io.StringIO(text, newline=None), name or appsettings.text_source_name)

    @classmethod
    def source_createFromPath(cls, path: Union[str, os.PathLike], encoding: Optional[str] = None) -> "Source":
        """
        Open a file by path

        Files whose name ends in .gz are decompressed transparently unless
        ENTRYREADER_GZIP_TRANSPARENT is off. Errors from opening (missing
        file, permissions) propagate to the caller.
        """
        encoding = encoding or appsettings.encoding
        path = Path(path)
        if appsettings.gzip_transparent and path.suffix == ".gz":
            stream = gzip.open(path, "rt", encoding=encoding)
        else:
            stream = open(path, "r", encoding=encoding)
        LOG(f"Opened {path}", level=2)
        return cls(stream, str(path))

    @classmethod
    def source_createFromStream(
        cls, stream: IO, name: Optional[str] = None, encoding: Optional[str] = None
    ) -> "Source":
        """
        Wrap an already-open stream

        Binary streams are decoded with the given (or configured) encoding;
        text streams are used as they are.
        """
        if name is None:
            name = appsettings.sourceName_forStream(stream)
        mode = getattr(stream, "mode", "")
        if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)) or (isinstance(mode, str) and "b" in mode):
            stream = io.TextIOWrapper(stream, encoding=encoding or appsettings.encoding)
        return cls(stream, name)

    def line_read(self) -> Optional[str]:
        """
        Read one line without its terminator

        Returns:
            The line, or None at end of input
        """
        line = self.stream.readline()
        if not line:
            return None
        self.line_number += 1
        if line.endswith("\r\n"):
            return line[:-2]
        if line.endswith(("\n", "\r")):
            return line[:-1]
        return line

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.stream.close()


def source_open(source: SourceLike, name: Optional[str] = None, encoding: Optional[str] = None) -> Source:
    """
    Create a Source from a path or an open stream

    Args:
        source: Path (str or os.PathLike) or open text/binary stream
        name: Display name; defaults to the path or the stream's name
        encoding: Decoding for files and binary streams

    Returns:
        Open Source
    """
    if isinstance(source, Source):
        return source
    if isinstance(source, (str, os.PathLike)):
        opened = Source.source_createFromPath(source, encoding)
        if name is not None:
            opened.name = name
        return opened
    if hasattr(source, "readline"):
        return Source.source_createFromStream(source, name, encoding)
    raise TypeError(f"Cannot read from {type(source).__name__}; expected a path or a stream")


class SourceStack:
    """
    Stack of open Sources, innermost include first

    The stack is never empty while input remains and becomes empty exactly at
    end of input. Use it as a context manager to guarantee every Source is
    closed, including when reading stops early or raises.
    """

    def __init__(self, outermost: Optional[Source] = None) -> None:
        self.sources: List[Source] = []
        if outermost is not None:
            self.push(outermost)

    def __enter__(self) -> "SourceStack":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self.sources)

    def current(self) -> Optional[Source]:
        """Innermost open Source, or None once input is exhausted"""
        if not self.sources:
            return None
        return self.sources[-1]

    def push(self, source: Source) -> None:
        self.sources.append(source)
        LOG(f"Reading {source.name} (include depth {len(self.sources) - 1})", level=3)

    def pop_andClose(self) -> None:
        """
        Close and discard the innermost Source

        Close failures are logged and otherwise ignored.
        """
        source = self.sources.pop()
        try:
            source.close()
        except OSError as e:
            LOG(f"Ignoring error closing {source.name}: {e}", level=2)
        LOG(f"Finished {source.name} after {source.line_number} lines", level=3)

    def rawLine_next(self) -> Optional[str]:
        """
        Read the next raw line, popping exhausted Sources as needed

        Returns:
            Line without terminator, or None when no Source is left
        """
        while self.sources:
            line = self.sources[-1].line_read()
            if line is not None:
                return line
            self.pop_andClose()
        return None

    def position(self) -> SourcePosition:
        """
        Name and line number of the innermost Source

        Raises:
            ExhaustedInputError: If all input has been consumed
        """
        source = self.current()
        if source is None:
            raise ExhaustedInputError("Past end of input: no current source")
        return SourcePosition(source.name, source.line_number)

    def close(self) -> None:
        """Close every remaining Source, innermost first"""
        while self.sources:
            self.pop_andClose()
