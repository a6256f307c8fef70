"""
Conversion data models

Results, diagnostics and the per-call context threaded through the template
walker.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set


@dataclass
class ConvertWarning:
    """
    Advisory diagnostic produced during conversion

    Attributes:
        message: Human-readable message
        line: Source line, if known
        column: Source column, if known
    """
    message: str
    line: Optional[int] = None
    column: Optional[int] = None


@dataclass
class FallbackItem:
    """
    A template construct that could not be converted deterministically

    Attributes:
        source: Original template snippet (e.g. 'v-focus:arg.mod="value"')
        reason: Why it was not converted
        line: Source line, if known
        column: Source column, if known
    """
    source: str
    reason: str
    line: Optional[int] = None
    column: Optional[int] = None


@dataclass
class ConvertResult:
    """
    Result of converting one .vue file

    Attributes:
        tsx: Generated module text ("" when parsing failed)
        css: Companion stylesheet text, None without style blocks
        css_filename: Companion stylesheet file name, None without style blocks
        warnings: Diagnostics (parse errors, style and template advisories)
        fallbacks: Constructs left as placeholders (or resolved remotely)
    """
    tsx: str
    css: Optional[str] = None
    css_filename: Optional[str] = None
    warnings: List[ConvertWarning] = field(default_factory=list)
    fallbacks: List[FallbackItem] = field(default_factory=list)


@dataclass
class JsxContext:
    """
    Mutable state for a single conversion call

    Created fresh per call and discarded afterwards, so one conversion never
    observes another.

    Attributes:
        class_map: Class name -> stylesheet reference expression
        component_name: Name of the component being converted
        ref_identifiers: Names that need .value in JSX
        prop_identifiers: Names that need a props. prefix in JSX
        warnings: Accumulated advisory diagnostics
        fallbacks: Accumulated fallback items
        used_context_members: Setup context members referenced by the template
                              ("slots", "emit", "attrs")
        has_v_for: The iteration helper must be emitted
        used_builtins: Framework built-in components referenced by the template
    """
    class_map: Dict[str, str] = field(default_factory=dict)
    component_name: str = "Component"
    ref_identifiers: Set[str] = field(default_factory=set)
    prop_identifiers: Set[str] = field(default_factory=set)
    warnings: List[ConvertWarning] = field(default_factory=list)
    fallbacks: List[FallbackItem] = field(default_factory=list)
    used_context_members: Set[str] = field(default_factory=set)
    has_v_for: bool = False
    used_builtins: Set[str] = field(default_factory=set)


@dataclass
class AttributeResult:
    """
    JSX attributes generated for one element

    Attributes:
        attrs: Attribute and spread strings in source order
               (e.g. ['class="card"', 'onClick={save}', '{...attrs}'])
        placeholders: Fallback placeholder comments emitted before the element
        skip_children: Children must be emitted as literal text (v-pre)
    """
    attrs: List[str] = field(default_factory=list)
    placeholders: List[str] = field(default_factory=list)
    skip_children: bool = False


@dataclass
class SlotEntry:
    """
    One slot passed to a component

    Attributes:
        name: Slot name ("default", "header", or the expression of a dynamic name)
        params: Slot parameter pattern as written (e.g. "{ item }"), "" if none
        content: Rendered JSX of the slot body
        dynamic: The name is an expression (#[name])
    """
    name: str
    params: str = ""
    content: str = ""
    dynamic: bool = False
