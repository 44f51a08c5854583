#!/usr/bin/env python3
"""
entryreader - Line and entry reader with comments, includes and fenced blocks

Reads a text file the way EntryReader sees it and lists the result, one
record per line, as ``source:line: text``. Useful for checking what a
comment or include configuration actually does to a file.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Usage:
    entryreader inputdir/ outputdir/ --inputFile notes.txt [--commentRegex REGEX] [--includeRegex REGEX]

    The listing is printed to stdout and written to outputdir/ (see --outputFile).

Examples:
    # Shell-style comments
    entryreader . out/ --inputFile config.txt --commentRegex '#.*'

    # LaTeX-style includes
    entryreader . out/ --inputFile main.tex --commentRegex '%.*' --includeRegex '\\\\include\\{(.*)\\}'

    # Paragraphs instead of lines
    entryreader . out/ --inputFile notes.txt --entries --twoBlankLines
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .lib import EntryReader, __version__, LOG, state_connectToLogger
from .models import (
    CommentFormat,
    EntryFormat,
    ProgramState,
    pipeline,
    ConfigurationError,
    CommentSyntaxError,
)
from .models.formats import pattern_compile


# Define CLI arguments
parser = ArgumentParser(
    description="entryreader - list the lines or entries of a file after comment and include processing",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input text file (relative to inputdir)"
)

parser.add_argument(
    "--commentRegex", default=None, type=str, help="Regex matching single-line comments (e.g. '#.*')"
)

parser.add_argument(
    "--includeRegex",
    default=None,
    type=str,
    help="Regex matching include directives; group 1 is the included file name",
)

parser.add_argument(
    "--entryStartRegex", default=None, type=str, help="Regex starting a long entry (with --entries)"
)

parser.add_argument(
    "--entryStopRegex", default=None, type=str, help="Regex ending a long entry (with --entries)"
)

parser.add_argument(
    "--twoBlankLines",
    action="store_true",
    help="Short entries are separated by two blank lines instead of one",
)

parser.add_argument(
    "--fencedCodeBlocks",
    action="store_true",
    help="Keep comments and blank lines inside ``` fenced code blocks",
)

parser.add_argument(
    "--entries", action="store_true", help="List entries (first line of each) instead of lines"
)

parser.add_argument(
    "--outputFile", default="listing.txt", type=str, help="Listing filename (relative to outputdir)"
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve file paths.

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the input file
            - listingFile: Path of the listing inside outputdir
            - envOK: True if environment is valid

    Exits:
        1 if the input file is not found
    """
    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    state.listingFile = state.outputdir / state.outputFile
    LOG(f"Listing file: {state.listingFile}", level=2)

    state.envOK = True
    return state


def formats_compile(inputstate: ProgramState) -> ProgramState:
    """
    Validate the regex options and build the reader configuration.

    Returns:
        ProgramState with added fields:
            - commentFormat: CommentFormat for --commentRegex
            - entryFormat: EntryFormat for the entry options

    Exits:
        1 if any regex is malformed or the options are inconsistent
    """
    state = inputstate.copy()

    LOG("Compiling reader configuration...", level=2)
    try:
        state.commentFormat = CommentFormat(state.commentRegex)
        state.entryFormat = EntryFormat(
            start=state.entryStartRegex,
            stop=state.entryStopRegex,
            two_blank_lines=state.twoBlankLines,
            fenced_code_blocks=state.fencedCodeBlocks,
        )
        pattern_compile(state.includeRegex, "include", groups=1)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the input file and build the listing.

    Each record is ``source:line: text``: one per line, or with --entries
    one per entry showing its first line.

    Returns:
        ProgramState with added fields:
            - listing: Formatted records
            - readResult: Dict with 'records' and 'sources' counts

    Exits:
        1 on read errors (including missing include files) and malformed comments
    """
    state = inputstate.copy()

    LOG(f"Reading {state.inputSourceFile}...", level=1)

    listing = []
    sources = set()
    try:
        with EntryReader(
            state.inputSourceFile,
            entry_format=state.entryFormat,
            comment_format=state.commentFormat,
            include_regex=state.includeRegex,
        ) as reader:
            if state.entries:
                for entry in reader.entries():
                    sources.add(entry.source_name)
                    listing.append(f"{entry.source_name}:{entry.line_number}: {entry.first_line}")
            else:
                for line in reader:
                    name = reader.current_source_name()
                    sources.add(name)
                    listing.append(f"{name}:{reader.current_line_number()}: {line}")
    except (OSError, CommentSyntaxError, ConfigurationError) as e:
        print(f"Error reading {state.inputSourceFile}: {e}", file=sys.stderr)
        sys.exit(1)

    state.listing = listing
    state.readResult = {
        "records": len(listing),
        "sources": len(sources),
        "kind": "entries" if state.entries else "lines",
    }
    LOG(f"Read {len(listing)} {state.readResult['kind']} from {len(sources)} source(s)", level=2)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Print the listing and write it to the listing file.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if readResult is None
    """
    state: ProgramState = inputstate.copy()
    if state.readResult is None:
        print("Error: Nothing was read", file=sys.stderr)
        sys.exit(1)

    for record in state.listing:
        print(record)

    state.listingFile.write_text(
        "".join(record + "\n" for record in state.listing), encoding="utf-8"
    )
    LOG(f"\n✓ {state.readResult['records']} {state.readResult['kind']} listed", level=1)
    LOG(f"  Output: {state.listingFile}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="entryreader - line and entry reader",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - list the lines or entries of inputdir/inputFile.

    Orchestrates the pipeline:
        1. env_check: Validate paths
        2. formats_compile: Validate regexes, build formats
        3. source_read: Read the file through EntryReader
        4. results_report: Print and save the listing

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, formats_compile, source_read, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
