"""
Entry segmentation

EntrySegmenter groups the lines of a LineSequencer into entries. Which kind
of entry is read is decided by the first non-blank line:

- Long entry: the EntryFormat's start pattern matches the first line. The
  entry runs until a line matching the stop pattern (consumed), the next
  line matching the start pattern (put back), the end of the current source,
  or the end of input.
- Short entry: anything else. The entry runs until a blank line (or two
  consecutive blank lines in two-blank-line mode), the end of the current
  source, or the end of input.

Lines inside a fenced code block never end an entry.

Example:
    Input "l1\\nl2\\n\\nl3\\n" with EntryFormat.DEFAULT yields two entries,
    with bodies "l1\\nl2\\n" and "l3\\n".
"""

from typing import List, Optional

from ..config import appsettings
from ..models.formats import EntryFormat
from ..models.reader import Entry
from .log import LOG
from .sequencer import LineSequencer
from .sources import Source


def blank_is(line: str) -> bool:
    return not line.strip()


class EntrySegmenter:
    """
    Reads entries (paragraphs or start/stop delimited records)

    Attributes:
        lines: Sequencer supplying filtered lines
        format: Entry boundaries
        line_separator: Appended after each line of an entry body
    """

    def __init__(self, lines: LineSequencer, entry_format: Optional[EntryFormat] = None,
                 line_separator: Optional[str] = None) -> None:
        self.lines = lines
        self.format = entry_format if entry_format is not None else EntryFormat.DEFAULT
        self.line_separator = appsettings.line_separator if line_separator is None else line_separator

    def get_entry(self) -> Optional[Entry]:
        """
        Read the next entry

        Leading blank lines are skipped.

        Returns:
            The next Entry, or None when no non-blank line remains
        """
        line = self.lines.read_line()
        while line is not None and blank_is(line):
            line = self.lines.read_line()
        if line is None:
            return None

        source = self.lines.stack.current()
        position = self.lines.current_position()

        start = self.format.start
        match = None
        if start is not None and not self.lines.line_fenced:
            match = start.search(line)

        if match is not None:
            entry = self.longEntry_read(line, match, source, position.name, position.line_number)
        else:
            entry = self.shortEntry_read(line, source, position.name, position.line_number)
        LOG(f"Entry at {entry.source_name}:{entry.line_number}: {entry.first_line!r}", level=3)
        return entry

    def sourceChanged_is(self, source: Optional[Source]) -> bool:
        return self.lines.stack.current() is not source

    def longEntry_read(self, line: str, match, source: Optional[Source], name: str, line_number: int) -> Entry:
        """
        Read an entry delimited by the start and stop patterns

        The start match in the first line is replaced by its first group (or
        removed when the pattern has none).
        """
        replacement = (match.group(1) or "") if match.re.groups else ""
        first_line = line[:match.start()] + replacement + line[match.end():]
        body: List[str] = [first_line]

        if self.format.stop.search(first_line) is None:
            while True:
                line = self.lines.read_line()
                if line is None:
                    break
                if self.sourceChanged_is(source):
                    self.lines.putback(line)
                    break
                if not self.lines.line_fenced:
                    if self.format.start.search(line):
                        self.lines.putback(line)
                        break
                    if self.format.stop.search(line):
                        break
                body.append(line)

        return Entry(
            first_line=first_line,
            body=self.body_join(body),
            source_name=name,
            line_number=line_number,
            short_entry=False,
        )

    def shortEntry_read(self, line: str, source: Optional[Source], name: str, line_number: int) -> Entry:
        """
        Read a blank-line separated entry

        In two-blank-line mode a single blank line is held back and becomes
        part of the body only if a non-blank line of the same source follows
        it. A held-back blank line at end of input or at a source boundary is
        dropped.
        """
        first_line = line
        body: List[str] = [line]
        held_blank: Optional[str] = None

        while True:
            line = self.lines.read_line()
            if line is None:
                break
            if self.sourceChanged_is(source):
                self.lines.putback(line)
                break
            if self.lines.line_fenced or not blank_is(line):
                if held_blank is not None:
                    body.append(held_blank)
                    held_blank = None
                body.append(line)
                continue
            # unfenced blank line
            if not self.format.two_blank_lines or held_blank is not None:
                break
            held_blank = line

        return Entry(
            first_line=first_line,
            body=self.body_join(body),
            source_name=name,
            line_number=line_number,
            short_entry=True,
        )

    def body_join(self, lines: List[str]) -> str:
        return "".join(line + self.line_separator for line in lines)
