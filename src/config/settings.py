"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use ENTRYREADER_ prefix (e.g., ENTRYREADER_FENCE_MARKER="~~~").

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use ENTRYREADER_ prefix.

    Examples:
        ENTRYREADER_FENCE_MARKER=~~~
        ENTRYREADER_ENCODING=latin-1
        ENTRYREADER_GZIP_TRANSPARENT=false
    """

    model_config = SettingsConfigDict(
        env_prefix="ENTRYREADER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Reader configuration
    fence_marker: str = Field(
        default="```",
        description="Line prefix (after leading whitespace) that opens or closes a fenced code block",
    )

    encoding: str = Field(
        default="utf-8",
        description="Character encoding used to decode files and binary streams",
    )

    line_separator: str = Field(
        default="\n",
        description="Separator appended after every line of an entry body",
    )

    gzip_transparent: bool = Field(
        default=True,
        description="Open files ending in .gz through gzip",
    )

    # Diagnostic names for sources without a path
    text_source_name: str = Field(
        default="(string)",
        description="Display name for sources created from an in-memory text buffer",
    )

    stream_source_name: str = Field(
        default="(stream)",
        description="Display name for sources created from an open stream with no name",
    )

    debug_mode: bool = Field(
        default=False,
        description="Log every LOG() call when no ProgramState is connected",
    )

    def sourceName_forStream(self, stream: object) -> str:
        """
        Pick a display name for an already-open stream.

        Uses the stream's ``name`` attribute when it is a string (regular
        files opened with ``open()`` carry one), otherwise falls back to
        ``stream_source_name``.

        Example:
            >>> settings = AppSettings()
            >>> import io
            >>> settings.sourceName_forStream(io.StringIO("x"))
            '(stream)'
        """
        name = getattr(stream, "name", None)
        if isinstance(name, str) and name:
            return name
        return self.stream_source_name


# Singleton instance - import this in your code
appsettings = AppSettings()
