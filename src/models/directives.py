"""
Template directive specification models

Defines the structure of the template directives handled by the directive
registry, and the set of directives the walker consumes itself.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set


@dataclass
class DirectiveResult:
    """
    Outcome of mapping one directive

    A result with no attr, no placeholder and no flag set means the
    directive produces no output (v-cloak, v-once).

    Attributes:
        attr: JSX attribute name (if converted to an attribute)
        value: JSX attribute value expression (if converted to an attribute)
        placeholder: Comment emitted before the element for a fallback item
        skip_children: Children must be emitted as literal text (v-pre)
    """
    attr: Optional[str] = None
    value: Optional[str] = None
    placeholder: Optional[str] = None
    skip_children: bool = False


@dataclass
class DirectiveSpec:
    """
    Specification for a template directive

    Attributes:
        name: Directive name (without the v- prefix)
        description: Human-readable description
        handler: Mapping function (directive, element, ctx) -> DirectiveResult
        aliases: Alternative names for the directive
    """
    name: str
    description: str
    handler: Callable
    aliases: List[str] = field(default_factory=list)


# Directives owned by the walker itself rather than the attribute mapper
WALKER_DIRECTIVES: Set[str] = {
    'if',
    'else-if',
    'else',
    'for',
    'slot',
}


def walkerOwned_is(directive_name: str) -> bool:
    """Check if a directive is consumed by the walker (control flow, slots)"""
    return directive_name in WALKER_DIRECTIVES
