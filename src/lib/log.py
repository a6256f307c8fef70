"""
Centralized logging using Loguru with context-aware verbosity.

LOG() respects the verbosity of the ProgramState connected to the current
context, and every record carries the name of the component being
converted (set with component_context), so interleaved messages from a
multi-file run stay attributable without passing names around.

Usage:
    from vuetsx.lib.log import LOG, WARN, component_context, state_connectToLogger

    state_connectToLogger(state)
    with component_context("Card"):
        LOG("Extracted 3 macros", level=2)     # shown with -v
        WARN("Scoped styles detected")          # always shown
"""

from loguru import logger
from typing import Any, Iterator, Optional
from contextlib import contextmanager
from contextvars import ContextVar
import sys

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

# Component currently being converted ("-" outside a conversion)
_component: ContextVar[str] = ContextVar('component', default='-')

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<magenta>{extra[component]: <16}</magenta> │ "
    "<level>{message}</level>"
)

logger_formatDebug = (
    "<green>{time:HH:mm:ss.SSS}</green> │ "
    "<level>{level: <7}</level> │ "
    "<magenta>{extra[component]: <16}</magenta> │ "
    "<cyan>{name}:{function}:{line}</cyan> ║ "
    "<level>{message}</level>"
)


def logger_configure(debug: bool = False, sink: Any = sys.stderr) -> None:
    """
    (Re)install the vuetsx handler.

    Args:
        debug: Use the detailed format with module, function and line
        sink: Where records go (stderr by default)
    """
    logger.remove()
    logger.configure(extra={'component': '-'})
    logger.add(sink, format=logger_formatDebug if debug else logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


@contextmanager
def component_context(name: str) -> Iterator[None]:
    """Tag every record logged inside the block with a component name"""
    token = _component.set(name)
    try:
        yield
    finally:
        _component.reset(token)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Verbosity levels:
        1 = Normal output (default)
        2 = Verbose (-v)
        3 = Debug (-vv or higher)

    Nothing is logged when no state is connected (library use).
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).bind(component=_component.get()).debug(message, **kwargs)


def WARN(message: str, **kwargs: Any) -> None:
    """
    Report a warning regardless of verbosity.

    Used for conditions the caller recovers from but the user should see,
    such as conversion warnings or a failed remote fallback request.
    """
    logger.opt(depth=1).bind(component=_component.get()).warning(message, **kwargs)


logger_configure()
