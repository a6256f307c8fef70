"""
Models package for vuetsx

Contains data structures and type definitions for the conversion pipeline.
"""

from .state import ProgramState, pipeline
from .directives import DirectiveSpec, DirectiveResult
from .conversion import ConvertResult, ConvertWarning, FallbackItem, JsxContext
from .sfc import ParsedSFC, ScriptBlock, StyleBlock, StyleResult

__all__ = [
    "ProgramState",
    "pipeline",
    "DirectiveSpec",
    "DirectiveResult",
    "ConvertResult",
    "ConvertWarning",
    "FallbackItem",
    "JsxContext",
    "ParsedSFC",
    "ScriptBlock",
    "StyleBlock",
    "StyleResult",
]
