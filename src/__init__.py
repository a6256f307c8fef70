"""
vuetsx - Vue single-file component to Vue TSX converter

Deterministic conversion of .vue files into defineComponent TSX modules.
"""

__version__ = "1.0.0"

from .lib import Parser, Compiler, convert, convert_async, DirectiveRegistry, LOG, state_connectToLogger

__all__ = [
    "Parser",
    "Compiler",
    "convert",
    "convert_async",
    "DirectiveRegistry",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
