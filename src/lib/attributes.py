"""
Attribute and directive mapper

Turns the props of an element into JSX attribute strings, in source order:

    class="card active"        -> class="card active"  (or styles refs with a class map)
    :title="heading"           -> title={props.heading}
    v-bind="extra"             -> {...extra}
    :[key]="value"             -> {...{ [key]: value }}
    ref="input"                -> ref={input}
    @click.stop="toggle"       -> onClick={withModifiers(toggle, ['stop'])}
    v-show="open"              -> v-show={open.value}

Directives consumed by the walker (v-if, v-else-if, v-else, v-for, v-slot)
are skipped. Every other directive is looked up in the directive registry;
directives without a JSX form become fallback placeholders.
"""

import json
import re
from typing import Collection, List, Optional

from ..models.conversion import AttributeResult, JsxContext
from ..models.directives import walkerOwned_is
from ..models.template import AttributeNode, DirectiveNode, ElementNode
from .directives import directives, fallback_record
from .events import event_process
from .rewriter import expression_rewrite
from .scanner import braces_strip, topLevel_split
from .text import camel_case


QUOTED_KEY_RE = re.compile(r'''^(['"])(.*)\1$''')


def staticClass_map(value: str, ctx: JsxContext) -> str:
    """
    Build a static class attribute, routing known classes through the class map.

    Example:
        >>> ctx = JsxContext(class_map={"card": "styles.card"})
        >>> staticClass_map("card shadow", ctx)
        'class={`${styles.card} shadow`}'
    """
    classes = value.split()
    if not ctx.class_map or not any(c in ctx.class_map for c in classes):
        return f'class="{value}"'

    if len(classes) == 1:
        return f'class={{{ctx.class_map[classes[0]]}}}'

    parts = [f'${{{ctx.class_map[c]}}}' if c in ctx.class_map else c for c in classes]
    return 'class={`' + ' '.join(parts) + '`}'


def staticAttribute_generate(attr: AttributeNode, ctx: JsxContext) -> str:
    """Map a static attribute"""
    if attr.name == 'ref':
        return f'ref={{{attr.value}}}' if attr.value else 'ref={undefined}'

    if attr.value is None:
        return attr.name

    if attr.name == 'class':
        return staticClass_map(attr.value, ctx)

    if '"' in attr.value:
        return f'{attr.name}={{{json.dumps(attr.value)}}}'
    return f'{attr.name}="{attr.value}"'


def dynamicClass_map(expr: str, ctx: JsxContext) -> str:
    """
    Rewrite the keys of an object-literal class binding through the class map.

    Only object literals are rewritten; arrays and other expressions are
    passed through.

    Example:
        >>> ctx = JsxContext(class_map={"is-open": 'styles["is-open"]'})
        >>> dynamicClass_map("{ 'is-open': open, wide }", ctx)
        'class={{[styles["is-open"]]: open, wide}}'
    """
    trimmed = expr.strip()
    if not ctx.class_map or not (trimmed.startswith('{') and trimmed.endswith('}')):
        return f'class={{{expr}}}'

    entries: List[str] = []
    for entry in topLevel_split(braces_strip(trimmed), ','):
        key, sep, value = entry.partition(':')
        key = key.strip()
        quoted = QUOTED_KEY_RE.match(key)
        name = quoted.group(2) if quoted else key
        mapped = ctx.class_map.get(name)

        if mapped and sep:
            entries.append(f'[{mapped}]: {value.strip()}')
        elif mapped and not quoted and re.match(r'^[A-Za-z_$][\w$]*$', key):
            entries.append(f'[{mapped}]: {key}')
        else:
            entries.append(entry)

    return 'class={{' + ', '.join(entries) + '}}'


def bindDirective_generate(directive: DirectiveNode, ctx: JsxContext) -> Optional[str]:
    """Map a v-bind directive to an attribute or spread"""
    arg = directive.arg

    if not arg:
        expr = expression_rewrite(directive.exp, ctx)
        return f'{{...{expr}}}' if expr else None

    if not directive.arg_static:
        key = expression_rewrite(arg, ctx)
        expr = expression_rewrite(directive.exp, ctx) or 'undefined'
        return f'{{...{{ [{key}]: {expr} }}}}'

    # :foo with no value binds the same-named variable
    exp = directive.exp if directive.exp else camel_case(arg)

    if arg == 'ref':
        return f'ref={{{expression_rewrite(exp, ctx, unwrap_refs=False)}}}'

    expr = expression_rewrite(exp, ctx)
    if arg == 'class':
        return dynamicClass_map(expr, ctx)
    if arg in ('style', 'key'):
        return f'{arg}={{{expr}}}'

    name = camel_case(arg) if 'camel' in directive.modifiers else arg
    return f'{name}={{{expr}}}'


def onDirective_generate(
    directive: DirectiveNode, element: ElementNode, ctx: JsxContext, result: AttributeResult
) -> None:
    """Map a v-on directive, falling back when the event name is not static"""
    processed = event_process(directive, ctx)
    if processed is None:
        fallback = fallback_record(
            directive, element, ctx,
            reason='Event binding without a static event name cannot be deterministically converted to JSX',
        )
        result.placeholders.append(fallback.placeholder)
        return

    name, handler = processed
    result.attrs.append(f'{name}={{{handler}}}')


def attributes_generate(
    element: ElementNode, ctx: JsxContext, skip: Collection[str] = ()
) -> AttributeResult:
    """
    Generate the JSX attributes of an element.

    Args:
        element: Element whose props are mapped
        ctx: Conversion context
        skip: Attribute / bound argument names handled by the caller
              (e.g. "is" on <component>, "name" on <slot>)

    Returns:
        AttributeResult with attributes in source order, fallback
        placeholders and the skip_children flag
    """
    result = AttributeResult()

    for prop in element.props:
        if isinstance(prop, AttributeNode):
            if prop.name not in skip:
                result.attrs.append(staticAttribute_generate(prop, ctx))
            continue

        if walkerOwned_is(prop.name):
            continue

        if prop.name == 'bind':
            if prop.arg in skip and prop.arg_static:
                continue
            attr = bindDirective_generate(prop, ctx)
            if attr:
                result.attrs.append(attr)
            continue

        if prop.name == 'on':
            onDirective_generate(prop, element, ctx, result)
            continue

        mapped = directives.directive_apply(prop, element, ctx)
        if mapped.placeholder:
            result.placeholders.append(mapped.placeholder)
        if mapped.skip_children:
            result.skip_children = True
        if mapped.attr:
            result.attrs.append(f'{mapped.attr}={{{mapped.value}}}')

    return result


def attributes_format(attrs: List[str]) -> str:
    """
    Join attribute strings for an opening tag.

    Returns:
        Attributes with a leading space, or "" when there are none
    """
    if not attrs:
        return ''
    return ' ' + ' '.join(attrs)


def placeholders_format(placeholders: List[str]) -> str:
    """Join fallback placeholders, one per line, with a trailing newline"""
    if not placeholders:
        return ''
    return '\n'.join(placeholders) + '\n'
