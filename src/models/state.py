"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern used by
the command line tool, and the pipeline() helper for composing stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field

from .formats import CommentFormat, EntryFormat


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the command line pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, the regex options
        - env_check: inputSourceFile, listingFile, envOK
        - formats_compile: commentFormat, entryFormat
        - source_read: listing, readResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the input file
        outputdir: Directory the listing is written to
        verbosity: Logging verbosity level (1-3)
        inputFile: Input filename (relative to inputdir)
        commentRegex: Single-line comment pattern
        includeRegex: Include directive pattern (group 1 = file name)
        entryStartRegex: Pattern starting a long entry
        entryStopRegex: Pattern ending a long entry
        twoBlankLines: Short entries are separated by two blank lines
        fencedCodeBlocks: Recognise fenced code blocks
        entries: List entries instead of lines
        outputFile: Listing filename (relative to outputdir)
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the input file
        listingFile: Resolved path to the listing
        commentFormat: Compiled comment configuration
        entryFormat: Compiled entry configuration
        listing: Formatted "source:line: text" records
        readResult: Summary (lines or entries read, sources seen)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    commentRegex: Optional[str] = field(default=None)
    includeRegex: Optional[str] = field(default=None)
    entryStartRegex: Optional[str] = field(default=None)
    entryStopRegex: Optional[str] = field(default=None)
    twoBlankLines: bool = field(default=False)
    fencedCodeBlocks: bool = field(default=False)
    entries: bool = field(default=False)
    outputFile: str = field(default="listing.txt")

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    listingFile: Path = field(default=Path("/"))
    commentFormat: Optional[CommentFormat] = field(default=None)
    entryFormat: Optional[EntryFormat] = field(default=None)
    listing: List[str] = field(default_factory=list)
    readResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments
            inputdir: Directory containing the input file
            outputdir: Directory for the listing

        Returns:
            ProgramState instance with all recognised CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Namespace may carry options ProgramState does not know about
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": Path(inputdir), "outputdir": Path(outputdir)}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(initial_state, env_check, formats_compile, source_read, results_report)

    is equivalent to results_report(source_read(formats_compile(env_check(initial_state)))).
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
