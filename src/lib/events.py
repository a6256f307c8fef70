"""
Event mapper: v-on / @event -> onEvent handler props

    @click="save"                 -> onClick={save}
    @update:modelValue="set"      -> onUpdate:modelValue={set}
    @click.capture="track"        -> onClickCapture={track}
    @submit.prevent="send(form)"  -> onSubmit={withModifiers(() => send(form), ['prevent'])}
    @input="value = $event"       -> onInput={($event) => value = $event}

Modifiers the DOM understands natively (capture, once, passive) become
suffixes of the prop name; every other modifier goes through withModifiers().
"""

import re
from typing import List, Optional, Tuple

from .rewriter import expression_rewrite
from .text import camel_case
from ..models.conversion import JsxContext
from ..models.template import DirectiveNode


NATIVE_MODIFIERS = {
    'capture': 'Capture',
    'once': 'Once',
    'passive': 'Passive',
}

SIMPLE_HANDLER_RE = re.compile(r'^[A-Za-z_$][\w$]*(?:\??\.[A-Za-z_$][\w$]*)*$')
FUNCTION_LITERAL_RE = re.compile(
    r'^(?:async\s+)?(?:function\b|\([^()]*\)\s*(?::\s*[^=]+)?=>|[A-Za-z_$][\w$]*\s*=>)'
)


def eventName_build(event: str, modifiers: List[str]) -> str:
    """
    Build the JSX prop name for an event.

    The part before the first ":" is camel-cased and capitalized; anything
    after it (the update:modelValue form) is kept verbatim.

    Example:
        >>> eventName_build("update:modelValue", [])
        'onUpdate:modelValue'
        >>> eventName_build("key-down", ["capture"])
        'onKeyDownCapture'
    """
    base, sep, rest = event.partition(':')
    base = camel_case(base)
    name = 'on' + base[:1].upper() + base[1:] + sep + rest
    for modifier in modifiers:
        suffix = NATIVE_MODIFIERS.get(modifier)
        if suffix:
            name += suffix
    return name


def handler_is(expr: str) -> bool:
    """Check whether an expression can be passed as the handler unchanged"""
    return bool(SIMPLE_HANDLER_RE.match(expr) or FUNCTION_LITERAL_RE.match(expr))


def handler_build(expr: Optional[str], ctx: JsxContext) -> str:
    """
    Turn an event expression into a handler expression.

    Identifiers, member chains and function literals are used as-is. Any
    other expression becomes an arrow function, taking $event when the
    expression refers to it. Several statements get a block body.
    """
    raw = (expr or '').strip()
    if not raw:
        return '() => {}'

    rewritten = expression_rewrite(raw, ctx)
    if handler_is(raw):
        return rewritten

    params = '($event)' if re.search(r'(?<![\w$])\$event(?![\w$])', raw) else '()'
    body = rewritten.rstrip(';').strip()
    if ';' in body or '\n' in body:
        return f'{params} => {{ {body} }}'
    return f'{params} => {body}'


def event_process(directive: DirectiveNode, ctx: JsxContext) -> Optional[Tuple[str, str]]:
    """
    Map a static v-on directive to a (prop name, handler expression) pair.

    Args:
        directive: The v-on directive (with a static argument)
        ctx: Conversion context

    Returns:
        Tuple of (prop name, handler), or None when the directive has no
        static event name
    """
    if not directive.arg or not directive.arg_static:
        return None

    name = eventName_build(directive.arg, directive.modifiers)
    handler = handler_build(directive.exp, ctx)

    wrapped = [m for m in directive.modifiers if m not in NATIVE_MODIFIERS]
    if wrapped:
        modifiers = ', '.join(f"'{m}'" for m in wrapped)
        handler = f'withModifiers({handler}, [{modifiers}])'

    return name, handler
