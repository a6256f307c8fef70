"""
Control-flow reconstruction: v-if chains and v-for

A v-if / v-else-if / v-else chain is spread across sibling elements in the
template but is a single expression in JSX:

    <p v-if="a">A</p>
    <p v-else-if="b">B</p>        ->    {a ? <p>A</p> : b ? <p>B</p> : <p>C</p>}
    <p v-else>C</p>

The chain is collected by a small state machine over the (read-only)
sibling list. Whitespace-only text between branches is consumed with the
chain; any other node ends it.

v-for becomes a call of the iteration helper emitted into setup():

    <li v-for="(item, i) in items" :key="item.id">   ->
    {_renderList(items, (item, i) => (<li key={item.id}>...</li>))}
"""

import re
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from ..config.settings import appsettings
from ..models.conversion import JsxContext
from ..models.template import ElementNode, TemplateChildNode, whitespaceText_is
from .log import LOG
from .rewriter import expression_rewrite, identifiers_shadowed


FOR_EXPRESSION_RE = re.compile(r'^\s*(.+?)\s+(?:in|of)\s+(.+?)\s*$', re.DOTALL)

RenderFn = Callable[[ElementNode, JsxContext], str]


class ChainState(Enum):
    """States of the conditional chain collector"""
    SEED = "seed"      # expecting the v-if element
    EXTEND = "extend"  # expecting v-else-if / v-else (or whitespace)
    DONE = "done"      # chain closed


def condition_get(node: ElementNode, name: str, ctx: JsxContext) -> str:
    """Rewritten condition of a v-if / v-else-if directive ("true" if empty)"""
    directive = node.directive_find(name)
    if directive is None or not directive.exp:
        return 'true'
    return expression_rewrite(directive.exp, ctx)


def conditionalChain_collect(
    siblings: Sequence[TemplateChildNode], index: int
) -> Tuple[List[Tuple[Optional[str], ElementNode]], int]:
    """
    Collect the branches of the chain starting at siblings[index].

    Args:
        siblings: Sibling nodes (not modified)
        index: Position of the v-if element

    Returns:
        Tuple of (branches, consumed). Each branch is (directive name or None
        for v-else, element). consumed counts every sibling taken, including
        whitespace text between branches; trailing whitespace after the last
        branch is not consumed.
    """
    branches: List[Tuple[Optional[str], ElementNode]] = []
    state = ChainState.SEED
    consumed = 0
    pending_whitespace = 0
    pos = index

    while state != ChainState.DONE and pos < len(siblings):
        node = siblings[pos]

        if state == ChainState.SEED:
            branches.append(('if', node))
            consumed = 1
            state = ChainState.EXTEND
            pos += 1
            continue

        if whitespaceText_is(node):
            pending_whitespace += 1
            pos += 1
            continue

        if not isinstance(node, ElementNode):
            state = ChainState.DONE
            continue

        if node.directive_find('else-if'):
            branches.append(('else-if', node))
        elif node.directive_find('else'):
            branches.append((None, node))
            state = ChainState.DONE
        else:
            state = ChainState.DONE
            continue

        consumed += pending_whitespace + 1
        pending_whitespace = 0
        pos += 1

    return branches, consumed


def conditionalChain_process(
    siblings: Sequence[TemplateChildNode], index: int, ctx: JsxContext, render: RenderFn
) -> Tuple[str, int]:
    """
    Convert a v-if chain into one conditional JSX expression.

    Args:
        siblings: Sibling nodes containing the chain
        index: Position of the v-if element
        ctx: Conversion context
        render: Renders one branch element (without its control directives)

    Returns:
        Tuple of (JSX expression container, number of siblings consumed)

    Example:
        {ok ? <b>yes</b> : <i>no</i>}
    """
    branches, consumed = conditionalChain_collect(siblings, index)

    parts: List[str] = []
    has_else = False
    for name, node in branches:
        rendered = render(node, ctx)
        if name is None:
            parts.append(rendered)
            has_else = True
        else:
            parts.append(f'{condition_get(node, name, ctx)} ? {rendered}')

    if not has_else:
        parts.append('null')

    LOG(f"Conditional chain of {len(branches)} branch(es) at <{branches[0][1].tag}>", level=3)
    return '{' + ' : '.join(parts) + '}', consumed


def forExpression_parse(expr: str) -> Tuple[str, str]:
    """
    Split a v-for expression into (alias, source).

    Example:
        >>> forExpression_parse("(item, index) in items")
        ('(item, index)', 'items')
        >>> forExpression_parse("items")
        ('_item', 'items')
    """
    match = FOR_EXPRESSION_RE.match(expr)
    if not match:
        return '_item', expr.strip()
    return match.group(1).strip(), match.group(2).strip()


def vFor_process(node: ElementNode, ctx: JsxContext, render: RenderFn) -> str:
    """
    Convert an element carrying v-for into an iteration helper call.

    A v-if on the same element is evaluated per item, inside the body (the
    alias is in scope for it).

    Args:
        node: Element with the v-for directive
        ctx: Conversion context (has_v_for is set)
        render: Renders the element itself

    Returns:
        JSX expression container
    """
    directive = node.directive_find('for')
    alias, source = forExpression_parse(directive.exp if directive and directive.exp else '')
    source = expression_rewrite(source, ctx)

    with identifiers_shadowed(ctx, alias):
        body = render(node, ctx)
        if node.directive_find('if'):
            body = f'{condition_get(node, "if", ctx)} ? {body} : null'

    params = alias if alias.startswith('(') else f'({alias})'
    ctx.has_v_for = True

    return f'{{{appsettings.render_list_helper}({source}, {params} => ({body}))}}'


def units_count(children: Sequence[TemplateChildNode]) -> int:
    """
    Count the JSX outputs a sibling list produces.

    A v-if chain counts once; whitespace-only text counts nothing; every
    other element, non-blank text, interpolation and comment counts once.
    """
    count = 0
    pos = 0
    while pos < len(children):
        node = children[pos]
        if whitespaceText_is(node):
            pos += 1
            continue
        count += 1
        if isinstance(node, ElementNode) and node.directive_find('if') and not node.directive_find('for'):
            _, consumed = conditionalChain_collect(children, pos)
            pos += consumed
            continue
        pos += 1
    return count
