"""
Single-file component data models

Interface types between the front-end parser, the stylesheet stage and the
conversion core.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .template import RootNode


@dataclass
class ScriptBlock:
    """
    A <script> or <script setup> block

    Attributes:
        content: Raw script text between the tags
        lang: Value of the lang attribute ("ts", "tsx", ...) if present
        setup: True for <script setup>
    """
    content: str
    lang: Optional[str] = None
    setup: bool = False


@dataclass
class StyleBlock:
    """
    A <style> block

    Attributes:
        content: Raw stylesheet text
        scoped: Block carried the scoped attribute
        lang: Preprocessor language ("scss", "less", ...) if present
    """
    content: str
    scoped: bool = False
    lang: Optional[str] = None


@dataclass
class ParsedSFC:
    """
    Parsed single-file component

    Attributes:
        template_ast: Parsed template tree, None when there is no <template>
        template_source: Raw template text
        script_setup: The <script setup> block, if any
        script: The plain <script> block, if any
        styles: All <style> blocks in source order
        errors: Parse error messages; non-empty means no usable output
    """
    template_ast: Optional[RootNode] = None
    template_source: Optional[str] = None
    script_setup: Optional[ScriptBlock] = None
    script: Optional[ScriptBlock] = None
    styles: List[StyleBlock] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@dataclass
class StyleResult:
    """
    Output of the stylesheet stage

    Attributes:
        css: Companion stylesheet text
        class_map: Original class name -> output reference expression
                   (e.g. {"text-danger": 'styles["text-danger"]'}); empty unless
                   CSS modules are enabled
        filename: Companion file name (e.g. "Card.css", "Card.module.scss")
        lang: Preprocessor language of the combined blocks
        warnings: Advisory messages
    """
    css: str
    class_map: Dict[str, str] = field(default_factory=dict)
    filename: str = ""
    lang: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
