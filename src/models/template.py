"""
Template tree data models

A parsed template is a closed family of node dataclasses. Every node carries a
NodeType tag so the walker can dispatch exhaustively on the kind of node it is
looking at. The tree is produced once by the front-end parser and only read
afterwards.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional, Union


class NodeType(Enum):
    """Kinds of template nodes"""
    ROOT = "root"
    ELEMENT = "element"
    TEXT = "text"
    INTERPOLATION = "interpolation"
    COMMENT = "comment"


@dataclass
class SourceLocation:
    """
    Position of a node in the original .vue file

    Attributes:
        line: 1-based line number
        column: 1-based column number
        offset: 0-based character offset
        source: Raw source text of the node
    """
    line: int
    column: int
    offset: int
    source: str = ""


@dataclass
class AttributeNode:
    """
    Static attribute (e.g. class="card", disabled)

    Attributes:
        name: Attribute name as written
        value: Literal value, or None for a boolean attribute
    """
    name: str
    value: Optional[str] = None
    loc: Optional[SourceLocation] = None


@dataclass
class DirectiveNode:
    """
    Directive attribute (v-if, :prop, @event, #slot, v-custom:arg.mod="x")

    Attributes:
        name: Directive name without the v- prefix ("bind", "on", "if", ...)
        arg: Argument name (e.g. "click" for @click), None if absent
        exp: Bound expression text, None if absent
        modifiers: Ordered modifier tokens (e.g. ["stop", "prevent"])
        arg_static: False for a dynamic argument written as v-bind:[key]
        raw: Attribute exactly as written in the template
    """
    name: str
    arg: Optional[str] = None
    exp: Optional[str] = None
    modifiers: List[str] = field(default_factory=list)
    arg_static: bool = True
    raw: str = ""
    loc: Optional[SourceLocation] = None


Prop = Union[AttributeNode, DirectiveNode]


@dataclass
class TextNode:
    """Literal text between tags"""
    content: str
    loc: Optional[SourceLocation] = None
    type: NodeType = field(default=NodeType.TEXT, init=False)


@dataclass
class InterpolationNode:
    """Mustache interpolation {{ expr }} (content is the trimmed expression)"""
    content: str
    loc: Optional[SourceLocation] = None
    type: NodeType = field(default=NodeType.INTERPOLATION, init=False)


@dataclass
class CommentNode:
    """HTML comment <!-- content -->"""
    content: str
    loc: Optional[SourceLocation] = None
    type: NodeType = field(default=NodeType.COMMENT, init=False)


@dataclass
class ElementNode:
    """
    Element with its attributes, directives and children

    Attributes:
        tag: Tag name as written (case preserved for components)
        props: Attributes and directives in source order
        children: Child nodes in source order
        self_closing: Written as <tag /> in the source
        inner_source: Raw source between the start and end tags
    """
    tag: str
    props: List[Prop] = field(default_factory=list)
    children: List["TemplateChildNode"] = field(default_factory=list)
    self_closing: bool = False
    inner_source: str = ""
    loc: Optional[SourceLocation] = None
    type: NodeType = field(default=NodeType.ELEMENT, init=False)

    def directive_find(self, name: str) -> Optional[DirectiveNode]:
        """Return the first directive with the given name, or None"""
        for prop in self.props:
            if isinstance(prop, DirectiveNode) and prop.name == name:
                return prop
        return None

    def attribute_find(self, name: str) -> Optional[AttributeNode]:
        """Return the first static attribute with the given name, or None"""
        for prop in self.props:
            if isinstance(prop, AttributeNode) and prop.name == name:
                return prop
        return None

    def binding_find(self, arg: str) -> Optional[DirectiveNode]:
        """Return the v-bind directive bound to the given argument, or None"""
        for prop in self.props:
            if isinstance(prop, DirectiveNode) and prop.name == "bind" and prop.arg == arg:
                return prop
        return None


TemplateChildNode = Union[ElementNode, TextNode, InterpolationNode, CommentNode]


@dataclass
class RootNode:
    """Root of a template tree"""
    children: List[TemplateChildNode] = field(default_factory=list)
    loc: Optional[SourceLocation] = None
    type: NodeType = field(default=NodeType.ROOT, init=False)


def whitespaceText_is(node: TemplateChildNode) -> bool:
    """Check whether a node is a whitespace-only text node"""
    return isinstance(node, TextNode) and not node.content.strip()
