"""
entryreader - Line and entry reader with comments, includes and fenced blocks

Reads text from nested sources into filtered lines or paragraph/record entries.
"""

__version__ = "1.0.0"

from .reader import EntryReader, reader_open
from .sources import Source, SourceStack
from .log import LOG, state_connectToLogger

__all__ = ["EntryReader", "reader_open", "Source", "SourceStack", "LOG", "state_connectToLogger", "__version__"]
