"""
Slot outlets and slot content

Outlets (<slot> in the component's own template) call the slot function
from the setup context:

    <slot />                               -> {slots.default?.()}
    <slot name="row" :item="r" />          -> {slots.row?.({ item: r })}
    <slot :name="which" />                 -> {slots[which]?.()}
    <slot>Nothing here</slot>              -> {slots.default?.() ?? <>Nothing here</>}

Slot content (what a parent passes to a child component) becomes the slots
object the JSX transform accepts as the only child:

    <Card>
      <template #header>Title</template>   ->   <Card>{{
      <p>Body</p>                                   header: () => <>Title</>,
    </Card>                                         default: () => <p>Body</p>
                                                  }}</Card>

A lone default slot without parameters is passed as plain children.
"""

import json
import re
from typing import Callable, List, Optional, Sequence

from ..models.conversion import JsxContext, SlotEntry
from ..models.template import (
    AttributeNode,
    DirectiveNode,
    ElementNode,
    TemplateChildNode,
    whitespaceText_is,
)
from .controlflow import units_count
from .rewriter import expression_rewrite, identifiers_shadowed
from .text import camel_case


WalkFn = Callable[[Sequence[TemplateChildNode], JsxContext], str]

IDENTIFIER_RE = re.compile(r'^[A-Za-z_$][\w$]*$')


def propertyKey_make(name: str) -> str:
    """Object key for a name, quoted when it is not a valid identifier"""
    return name if IDENTIFIER_RE.match(name) else f"'{name}'"


def slotAccess_make(name: str, dynamic: bool = False) -> str:
    """
    Expression reading a slot function from the setup context.

    Example:
        >>> slotAccess_make("header")
        'slots.header'
        >>> slotAccess_make("item-row")
        "slots['item-row']"
    """
    if dynamic:
        return f'slots[{name}]'
    if IDENTIFIER_RE.match(name):
        return f'slots.{name}'
    return f"slots['{name}']"


def slotOutlet_process(node: ElementNode, ctx: JsxContext, walk: WalkFn) -> str:
    """
    Convert a <slot> outlet into a slot function call.

    Static attributes other than name are passed as string props, bound
    attributes as expressions and v-bind="obj" as a spread.

    Args:
        node: The <slot> element
        ctx: Conversion context (records the "slots" context member)
        walk: Renders the fallback children

    Returns:
        JSX expression container
    """
    name = 'default'
    dynamic = False
    props: List[str] = []

    for prop in node.props:
        if isinstance(prop, AttributeNode):
            if prop.name == 'name':
                name = prop.value or 'default'
            elif prop.value is not None:
                props.append(f'{propertyKey_make(prop.name)}: {json.dumps(prop.value)}')
            else:
                props.append(f'{propertyKey_make(prop.name)}: true')
            continue

        if not isinstance(prop, DirectiveNode) or prop.name != 'bind':
            continue

        if not prop.arg:
            expr = expression_rewrite(prop.exp, ctx)
            if expr:
                props.append(f'...{expr}')
        elif not prop.arg_static:
            props.append(f'[{expression_rewrite(prop.arg, ctx)}]: {expression_rewrite(prop.exp, ctx)}')
        elif prop.arg == 'name':
            name = expression_rewrite(prop.exp, ctx)
            dynamic = True
        else:
            expr = expression_rewrite(prop.exp or camel_case(prop.arg), ctx)
            props.append(f'{propertyKey_make(prop.arg)}: {expr}')

    ctx.used_context_members.add('slots')

    args = f'{{ {", ".join(props)} }}' if props else ''
    call = f'{slotAccess_make(name, dynamic)}?.({args})'

    fallback = walk(node.children, ctx).strip()
    if fallback:
        return f'{{{call} ?? <>{fallback}</>}}'
    return f'{{{call}}}'


def slotDirective_find(node: ElementNode) -> Optional[DirectiveNode]:
    """Return the v-slot directive of an element, or None"""
    return node.directive_find('slot')


def slotContent_has(node: ElementNode) -> bool:
    """Check whether a component receives slot content through v-slot"""
    if slotDirective_find(node):
        return True
    return any(
        isinstance(child, ElementNode) and child.tag == 'template' and slotDirective_find(child)
        for child in node.children
    )


def slotBody_render(
    children: Sequence[TemplateChildNode], params: str, ctx: JsxContext, walk: WalkFn
) -> str:
    """
    Render slot children as one JSX expression.

    Slot parameters shadow props and refs of the same name.
    """
    with identifiers_shadowed(ctx, params):
        content = walk(children, ctx).strip()

    if not content:
        return '<></>'
    if units_count(children) == 1 and content.startswith('<'):
        return content
    return f'<>{content}</>'


def slotEntry_make(
    directive: DirectiveNode, children: Sequence[TemplateChildNode], ctx: JsxContext, walk: WalkFn
) -> SlotEntry:
    """Build the entry for a v-slot directive and its content"""
    params = (directive.exp or '').strip()
    dynamic = bool(directive.arg) and not directive.arg_static
    name = directive.arg or 'default'
    if dynamic:
        name = expression_rewrite(name, ctx)
    return SlotEntry(
        name=name,
        params=params,
        content=slotBody_render(children, params, ctx, walk),
        dynamic=dynamic,
    )


def slotContent_process(node: ElementNode, ctx: JsxContext, walk: WalkFn) -> List[SlotEntry]:
    """
    Collect the slots a component receives.

    v-slot on the component makes all children one slot. Otherwise each
    <template v-slot:name> child is a slot and the remaining children form
    the default slot (unless a template already declared it).

    Args:
        node: Component element
        ctx: Conversion context
        walk: Renders child node lists

    Returns:
        Slot entries in source order, the default slot last when implicit
    """
    own = slotDirective_find(node)
    if own:
        return [slotEntry_make(own, node.children, ctx, walk)]

    entries: List[SlotEntry] = []
    rest: List[TemplateChildNode] = []
    for child in node.children:
        directive = slotDirective_find(child) if isinstance(child, ElementNode) and child.tag == 'template' else None
        if directive:
            entries.append(slotEntry_make(directive, child.children, ctx, walk))
        else:
            rest.append(child)

    if any(not whitespaceText_is(child) for child in rest):
        if not any(entry.name == 'default' and not entry.dynamic for entry in entries):
            entries.append(SlotEntry(name='default', content=slotBody_render(rest, '', ctx, walk)))

    return entries


def slotEntries_format(entries: List[SlotEntry]) -> str:
    """
    Format slot entries as element children.

    Example:
        >>> print(slotEntries_format([SlotEntry("header", "", "<h2>Hi</h2>"),
        ...                           SlotEntry("row", "{ item }", "<td>{item}</td>")]))
        {{
          header: () => <h2>Hi</h2>,
          row: ({ item }) => <td>{item}</td>,
        }}
    """
    if not entries:
        return ''

    if len(entries) == 1 and entries[0].name == 'default' and not entries[0].params:
        content = entries[0].content
        if content.startswith('<>') and content.endswith('</>'):
            return content[2:-3]
        return content

    lines = []
    for entry in entries:
        key = f'[{entry.name}]' if entry.dynamic else propertyKey_make(entry.name)
        params = f'({entry.params})' if entry.params else '()'
        lines.append(f'  {key}: {params} => {entry.content},')

    return '{{\n' + '\n'.join(lines) + '\n}}'
