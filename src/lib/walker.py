"""
Template walker: template tree -> JSX text

Walks a parsed template and emits the JSX returned by the render function.
Each sibling list is walked left to right; an element may consume several
siblings (a v-if chain), so dispatch returns the JSX together with the
number of nodes consumed.

Element dispatch, in order of precedence:
    1. <slot> outlet
    2. v-for (a v-if on the same element moves inside the iteration)
    3. v-if chain
    4. plain element (fragments, dynamic components, built-ins, slot content)

All per-call state lives on the JsxContext handed in by the caller.
"""

from typing import Sequence, Tuple

from ..models.conversion import JsxContext
from ..models.template import (
    CommentNode,
    ElementNode,
    InterpolationNode,
    RootNode,
    TemplateChildNode,
    TextNode,
)
from .attributes import attributes_format, attributes_generate, placeholders_format
from .controlflow import conditionalChain_process, units_count, vFor_process
from .log import LOG
from .rewriter import expression_rewrite
from .slots import slotContent_has, slotContent_process, slotEntries_format, slotOutlet_process
from .text import SELF_CLOSING_TAGS, component_is, jsxText_escape


BUILTIN_COMPONENTS = {
    'teleport': 'Teleport',
    'keep-alive': 'KeepAlive',
    'keepalive': 'KeepAlive',
    'transition': 'Transition',
    'transition-group': 'TransitionGroup',
    'transitiongroup': 'TransitionGroup',
    'suspense': 'Suspense',
}


def text_render(node: TextNode) -> str:
    """
    Render a text node.

    Whitespace-only text collapses to one space on a single line and
    disappears when it spans lines (indentation between tags).
    """
    if node.content.strip():
        return jsxText_escape(node.content)
    if '\n' in node.content:
        return ''
    return ' '


def comment_render(node: CommentNode) -> str:
    """Render an HTML comment as a JSX comment"""
    return '{/* ' + node.content.strip().replace('*/', '* /') + ' */}'


def children_walk(children: Sequence[TemplateChildNode], ctx: JsxContext) -> str:
    """
    Walk a sibling list and concatenate the JSX of every node.

    Args:
        children: Sibling nodes (not modified)
        ctx: Conversion context

    Returns:
        JSX text (not trimmed)
    """
    parts = []
    index = 0

    while index < len(children):
        node = children[index]

        if isinstance(node, TextNode):
            parts.append(text_render(node))
            index += 1
        elif isinstance(node, InterpolationNode):
            parts.append('{' + expression_rewrite(node.content, ctx) + '}')
            index += 1
        elif isinstance(node, CommentNode):
            parts.append(comment_render(node))
            index += 1
        elif isinstance(node, ElementNode):
            jsx, consumed = element_dispatch(children, index, ctx)
            parts.append(jsx)
            index += consumed
        else:
            index += 1

    return ''.join(parts)


def element_dispatch(siblings: Sequence[TemplateChildNode], index: int, ctx: JsxContext) -> Tuple[str, int]:
    """
    Convert the element at siblings[index].

    Returns:
        Tuple of (JSX, number of siblings consumed)
    """
    node = siblings[index]

    if node.tag == 'slot':
        return slotOutlet_process(node, ctx, children_walk), 1

    if node.directive_find('for'):
        return vFor_process(node, ctx, element_renderExpression), 1

    if node.directive_find('if'):
        return conditionalChain_process(siblings, index, ctx, element_renderExpression)

    return element_render(node, ctx), 1


def element_renderExpression(node: ElementNode, ctx: JsxContext) -> str:
    """Render an element where exactly one JSX expression is allowed"""
    return element_render(node, ctx, expression=True)


def tag_resolve(node: ElementNode, ctx: JsxContext) -> str:
    """
    Resolve the JSX tag name of an element.

    <component :is="x"> uses the bound expression, <component is="div"> the
    literal name; built-in components are recorded for import.
    """
    if node.tag == 'component':
        binding = node.binding_find('is')
        if binding and binding.exp:
            return expression_rewrite(binding.exp, ctx)
        static = node.attribute_find('is')
        if static and static.value:
            return static.value
        return 'undefined'

    builtin = BUILTIN_COMPONENTS.get(node.tag.lower())
    if builtin:
        ctx.used_builtins.add(builtin)
        return builtin

    return node.tag


def element_render(node: ElementNode, ctx: JsxContext, expression: bool = False) -> str:
    """
    Render one element with its attributes and children.

    Control-flow directives on the element are ignored here; the caller has
    already dealt with them.

    Args:
        node: Element to render
        ctx: Conversion context
        expression: The result must be a single JSX expression (fallback
                    placeholders are then folded into a fragment)

    Returns:
        JSX text
    """
    if node.tag == 'template':
        children = children_walk(node.children, ctx).strip()
        return f'<>{children}</>' if children else '<></>'

    tag = tag_resolve(node, ctx)
    attrs = attributes_generate(node, ctx, skip=('is',) if node.tag == 'component' else ())
    attr_text = attributes_format(attrs.attrs)

    if attrs.skip_children:
        children = jsxText_escape(node.inner_source) if node.inner_source.strip() else ''
    elif node.children and (component_is(tag) or node.tag == 'component') and slotContent_has(node):
        children = slotEntries_format(slotContent_process(node, ctx, children_walk))
    else:
        children = children_walk(node.children, ctx)

    if node.tag in SELF_CLOSING_TAGS or not children.strip():
        jsx = f'<{tag}{attr_text} />'
    else:
        jsx = f'<{tag}{attr_text}>{children}</{tag}>'

    if not attrs.placeholders:
        return jsx

    LOG(f"<{node.tag}> carries {len(attrs.placeholders)} fallback placeholder(s)", level=3)
    prefix = placeholders_format(attrs.placeholders)
    if expression:
        return f'<>\n{prefix}{jsx}\n</>'
    return prefix + jsx


def template_toJsx(root: RootNode, ctx: JsxContext) -> str:
    """
    Convert a whole template tree.

    Args:
        root: Parsed template
        ctx: Fresh conversion context for this call

    Returns:
        JSX text: the single root unit as-is, several root units inside a
        fragment, "<></>" for an empty template

    Example:
        >>> template_toJsx(Parser("<template><a/><b/></template>").parse().template_ast, JsxContext())
        '<><a /><b /></>'
    """
    jsx = children_walk(root.children, ctx).strip()
    if not jsx:
        return '<></>'

    units = units_count(root.children)
    LOG(f"Template root has {units} unit(s)", level=3)
    if units > 1:
        return f'<>{jsx}</>'
    return jsx
