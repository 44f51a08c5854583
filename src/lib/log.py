"""
Centralized logging using Loguru with context-aware verbosity.

The reader components call LOG() freely; whether anything is printed depends
on the verbosity of the ProgramState connected to the current context. Used
as a library (no state connected) the reader is silent unless
ENTRYREADER_DEBUG_MODE is set.

Usage:
    from entryreader.lib.log import LOG, state_connectToLogger

    # At start of pipeline function:
    state_connectToLogger(state)

    # Anywhere in that context:
    LOG("Reading notes.txt", level=1)
    LOG("Opened include other.txt", level=2)
    LOG("Popped source other.txt at line 12", level=3)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

from ..config import appsettings

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Call this once at the start of the CLI pipeline so that LOG() calls made
    inside the reader pick up the requested verbosity.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=trace)
        **kwargs: Additional loguru metadata

    Example:
        LOG("Read 42 lines", level=2)
        LOG("Multi-line comment opened at notes.txt:7", level=3)
    """
    state = _program_state.get()

    if state is None:
        if appsettings.debug_mode:
            logger.opt(depth=1).debug(message, **kwargs)
        return
    if hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)
