"""
vuetsx - Vue single-file component to Vue TSX converter

Deterministic conversion of .vue files into defineComponent TSX modules.
"""

__version__ = "1.0.0"

from .parser import Parser
from .compiler import Compiler, convert, convert_async
from .directives import DirectiveRegistry
from .log import LOG, WARN, component_context, logger_configure, state_connectToLogger

__all__ = [
    "Parser",
    "Compiler",
    "convert",
    "convert_async",
    "DirectiveRegistry",
    "LOG",
    "WARN",
    "component_context",
    "logger_configure",
    "state_connectToLogger",
    "__version__",
]
