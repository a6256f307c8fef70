"""
Identifier rewriter for template expressions

Template expressions run with auto-unwrapped refs, implicit props and the
$attrs/$slots/$emit/$props globals in scope. A JSX render function inside
setup() has none of that, so every expression taken from the template goes
through expression_rewrite() before it is emitted:

1. $attrs, $slots, $emit, $props -> attrs, slots, emit, props
   (the setup context members used are recorded on the JsxContext)
2. $t, $route, $router, $i18n, $refs -> one warning per name, left as-is
3. prop identifiers -> props.<name>
4. ref identifiers -> <name>.value

The expression is scanned once into identifier tokens. String literals are
never touched (the ${...} parts of template literals are code and are
rewritten). An identifier is standalone when it is not a member access
(preceded by "."). Object keys are left alone and object shorthand members
are expanded, so `{ y }` becomes `{ y: props.y }`.

Example:
    >>> ctx = JsxContext(ref_identifiers={"count"}, prop_identifiers={"title"})
    >>> expression_rewrite("title + ': ' + count", ctx)
    "props.title + ': ' + count.value"
"""

import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Set

from .scanner import literal_skip
from ..models.conversion import ConvertWarning, JsxContext


TEMPLATE_GLOBALS = {
    '$attrs': 'attrs',
    '$slots': 'slots',
    '$emit': 'emit',
    '$props': 'props',
}

WARN_GLOBALS = ['$t', '$route', '$router', '$i18n', '$refs']

IDENT_START_RE = re.compile(r'[A-Za-z_$]')
IDENT_RE = re.compile(r'[A-Za-z_$][\w$]*')
NUMBER_RE = re.compile(r'\d[\w.]*')

BRACKET_PAIRS = {'}': '{', ')': '(', ']': '['}


@dataclass
class IdentifierToken:
    """
    One identifier occurrence in an expression

    Attributes:
        name: Identifier text
        start: Offset of the first character
        end: Offset just past the last character
        member: Preceded by "." (property access, not a spread)
        key: Sits in object-key position ({ name: ... })
        shorthand: Object shorthand member ({ name } or { a, name })
        called: Directly followed by "("
        suffixed: Already followed by ".value"
    """
    name: str
    start: int
    end: int
    member: bool = False
    key: bool = False
    shorthand: bool = False
    called: bool = False
    suffixed: bool = False


def previousChar_get(expr: str, pos: int) -> str:
    """Return the nearest non-whitespace character before pos ("" if none)"""
    pos -= 1
    while pos >= 0 and expr[pos].isspace():
        pos -= 1
    return expr[pos] if pos >= 0 else ''


def nextChar_get(expr: str, pos: int) -> str:
    """Return the nearest non-whitespace character at or after pos ("" if none)"""
    while pos < len(expr) and expr[pos].isspace():
        pos += 1
    return expr[pos] if pos < len(expr) else ''


def identifierTokens_scan(expr: str) -> List[IdentifierToken]:
    """
    Scan an expression into identifier tokens, skipping string literals.

    A stack of open brackets is kept while scanning, so object-key position
    can be decided from the innermost open bracket: a name is a key when the
    innermost bracket is "{", it follows "{" or "," and it is followed by ":".

    Args:
        expr: Expression text

    Returns:
        Identifier tokens in order of appearance
    """
    tokens: List[IdentifierToken] = []
    stack: List[str] = []
    pos = 0

    while pos < len(expr):
        top = stack[-1] if stack else ''

        if top == '`':
            ch = expr[pos]
            if ch == '\\':
                pos += 2
            elif ch == '`':
                stack.pop()
                pos += 1
            elif expr.startswith('${', pos):
                stack.append('${')
                pos += 2
            else:
                pos += 1
            continue

        ch = expr[pos]

        if ch in ('"', "'"):
            pos = literal_skip(expr, pos)
            continue
        if ch == '`':
            stack.append('`')
            pos += 1
            continue
        if ch in '{([':
            stack.append(ch)
            pos += 1
            continue
        if ch == '}' and top == '${':
            stack.pop()
            pos += 1
            continue
        if ch in BRACKET_PAIRS:
            if top == BRACKET_PAIRS[ch]:
                stack.pop()
            pos += 1
            continue
        if ch.isdigit():
            pos = NUMBER_RE.match(expr, pos).end()
            continue

        if IDENT_START_RE.match(ch):
            match = IDENT_RE.match(expr, pos)
            start, end = match.start(), match.end()

            is_member = start > 0 and expr[start - 1] == '.' and not expr.startswith('...', max(start - 3, 0))
            in_object = top == '{'
            before = previousChar_get(expr, start)
            after = nextChar_get(expr, end)
            member_slot = in_object and before in ('{', ',') and not is_member

            tokens.append(IdentifierToken(
                name=match.group(0),
                start=start,
                end=end,
                member=is_member,
                key=member_slot and after == ':',
                shorthand=member_slot and after in (',', '}'),
                called=end < len(expr) and expr[end] == '(',
                suffixed=bool(re.match(r'\.value\b', expr[end:])),
            ))
            pos = end
            continue

        pos += 1

    return tokens


def tokens_replace(expr: str, replace: Callable[[IdentifierToken], Optional[str]]) -> str:
    """
    Rebuild an expression, substituting identifier tokens.

    Args:
        expr: Expression text
        replace: Callback returning replacement text for a token, or None to
                 keep it unchanged

    Returns:
        Rewritten expression
    """
    pieces: List[str] = []
    cursor = 0
    for token in identifierTokens_scan(expr):
        replacement = replace(token)
        if replacement is None:
            continue
        pieces.append(expr[cursor:token.start])
        pieces.append(replacement)
        cursor = token.end
    pieces.append(expr[cursor:])
    return ''.join(pieces)


def templateGlobals_rewrite(expr: str, ctx: JsxContext) -> str:
    """
    Replace $attrs/$slots/$emit/$props and warn about unsupported globals.

    Records the setup context members used (except props, which is always a
    setup parameter) on ctx.used_context_members. Each unsupported global is
    reported once per conversion.
    """
    def global_replace(token: IdentifierToken) -> Optional[str]:
        if token.member or token.key:
            return None
        replacement = TEMPLATE_GLOBALS.get(token.name)
        if replacement is None:
            return None
        if replacement != 'props':
            ctx.used_context_members.add(replacement)
        if token.shorthand:
            return f'{token.name}: {replacement}'
        return replacement

    result = tokens_replace(expr, global_replace)

    seen = {t.name for t in identifierTokens_scan(expr) if not t.member}
    for name in WARN_GLOBALS:
        if name not in seen:
            continue
        if any(f"'{name}'" in w.message for w in ctx.warnings):
            continue
        ctx.warnings.append(ConvertWarning(
            message=(
                f"Template global '{name}' detected. You may need to add the "
                f"equivalent Composition API call to your setup function."
            )
        ))

    return result


def props_prefix(expr: str, props: Set[str]) -> str:
    """
    Prefix standalone prop identifiers with props.

    Example:
        >>> props_prefix("{ a: title, title }", {"title"})
        '{ a: props.title, title: props.title }'
    """
    def prop_replace(token: IdentifierToken) -> Optional[str]:
        if token.name not in props or token.member or token.key:
            return None
        if token.shorthand:
            return f'{token.name}: props.{token.name}'
        return f'props.{token.name}'

    return tokens_replace(expr, prop_replace)


def refs_suffix(expr: str, refs: Set[str]) -> str:
    """
    Append .value to standalone ref identifiers.

    Calls (name(...)) and names already followed by .value are left alone.

    Example:
        >>> refs_suffix("count + count.value", {"count"})
        'count.value + count.value'
    """
    def ref_replace(token: IdentifierToken) -> Optional[str]:
        if token.name not in refs or token.member or token.key:
            return None
        if token.suffixed or token.called:
            return None
        if token.shorthand:
            return f'{token.name}: {token.name}.value'
        return f'{token.name}.value'

    return tokens_replace(expr, ref_replace)


def expression_rewrite(expr: Optional[str], ctx: JsxContext, unwrap_refs: bool = True) -> str:
    """
    Rewrite a template expression for use inside a JSX render function.

    Args:
        expr: Raw expression text from the template (None is treated as "")
        ctx: Conversion context carrying the identifier sets
        unwrap_refs: Append .value to ref identifiers (False for ref="..."
                     bindings, which must receive the ref object itself)

    Returns:
        Rewritten expression text
    """
    if not expr:
        return ''

    result = templateGlobals_rewrite(expr, ctx)
    if ctx.prop_identifiers:
        result = props_prefix(result, ctx.prop_identifiers)
    if unwrap_refs and ctx.ref_identifiers:
        result = refs_suffix(result, ctx.ref_identifiers)
    return result


@contextmanager
def identifiers_shadowed(ctx: JsxContext, binding: str) -> Iterator[None]:
    """
    Hide prop and ref names re-bound by a scope (v-for alias, slot params).

    Inside the block, names declared by the binding pattern are neither
    prefixed with props. nor suffixed with .value. Object keys of a
    destructuring pattern ({ item: row }) are not bindings and stay visible.

    Example:
        >>> ctx = JsxContext(prop_identifiers={"item", "items"})
        >>> with identifiers_shadowed(ctx, "(item, index)"):
        ...     expression_rewrite("item.id + items.length", ctx)
        'item.id + props.items.length'
    """
    names = {
        token.name for token in identifierTokens_scan(binding)
        if not token.member and not token.key
    }
    hidden_props = ctx.prop_identifiers & names
    hidden_refs = ctx.ref_identifiers & names
    ctx.prop_identifiers -= hidden_props
    ctx.ref_identifiers -= hidden_refs
    try:
        yield
    finally:
        ctx.prop_identifiers |= hidden_props
        ctx.ref_identifiers |= hidden_refs
