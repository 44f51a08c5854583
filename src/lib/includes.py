"""
Include directives

A line that matches the include pattern in full names another file whose
lines are read in its place. The first capturing group of the pattern is the
file name; relative names are resolved against the directory of the file
that contains the directive, not the top-level file.
"""

import os
from pathlib import Path
import re
from typing import Optional, Union

from ..config import appsettings
from ..models.errors import ConfigurationError
from ..models.formats import pattern_compile
from .log import LOG
from .sources import Source, SourceStack


class IncludeResolver:
    """
    Recognises include directives and pushes the included file

    Attributes:
        pattern: Compiled include pattern with at least one capturing group,
                 or None when includes are disabled
        encoding: Encoding used to open included files
    """

    def __init__(self, pattern: Union[str, re.Pattern[str], None] = None, encoding: Optional[str] = None) -> None:
        self.pattern = pattern_compile(pattern, "include", groups=1)
        self.encoding = encoding or appsettings.encoding

    @property
    def enabled(self) -> bool:
        return self.pattern is not None

    def filename_match(self, line: str) -> Optional[str]:
        """
        Extract the included file name if line is an include directive

        Returns:
            The captured file name, or None if line is not a directive

        Raises:
            ConfigurationError: If the pattern matched but group 1 did not take part
        """
        if not self.enabled:
            return None
        m = self.pattern.fullmatch(line)
        if m is None:
            return None
        filename = m.group(1)
        if filename is None:
            raise ConfigurationError(
                f"Include regex {self.pattern.pattern!r} does not capture group 1 in {line!r}"
            )
        return filename

    def path_resolve(self, filename: str, including: str) -> Path:
        """
        Resolve an include file name

        A leading ~ is expanded; a relative name is taken relative to the
        directory of the including source. The result is absolute.

        Example:
            >>> IncludeResolver(r"@(.*)").path_resolve("b.txt", "/data/a.txt")
            PosixPath('/data/b.txt')
        """
        path = Path(os.path.expanduser(filename))
        if not path.is_absolute():
            path = Path(including).parent / path
        return path.absolute()

    def include_resolve(self, line: str, stack: SourceStack) -> bool:
        """
        Push the file named by an include directive

        Args:
            line: Filtered line to examine
            stack: Source stack; the include is resolved against its innermost Source

        Returns:
            True if line was a directive and the file was pushed, False otherwise

        Raises:
            OSError: If the included file cannot be opened
        """
        filename = self.filename_match(line)
        if filename is None:
            return False
        path = self.path_resolve(filename, stack.position().name)
        LOG(f"Including {path} from {stack.position()}", level=2)
        stack.push(Source.source_createFromPath(path, self.encoding))
        return True
