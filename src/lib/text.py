"""
Text helpers shared by the template converters

Case conversion, JSX text escaping, indentation and tag classification.
"""

import re
from typing import Set


SELF_CLOSING_TAGS: Set[str] = {
    'area',
    'base',
    'br',
    'col',
    'embed',
    'hr',
    'img',
    'input',
    'link',
    'meta',
    'param',
    'source',
    'track',
    'wbr',
}

JSX_TEXT_ESCAPES = {
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '{': '&#123;',
    '}': '&#125;',
}


def camel_case(name: str) -> str:
    """
    Convert kebab-case to camelCase.

    Example:
        >>> camel_case("model-value")
        'modelValue'
    """
    return re.sub(r'-([a-z])', lambda m: m.group(1).upper(), name)


def pascal_case(name: str) -> str:
    """
    Convert kebab-case (or snake_case) to PascalCase.

    Example:
        >>> pascal_case("keep-alive")
        'KeepAlive'
        >>> pascal_case("my_card")
        'MyCard'
    """
    camel = camel_case(name.replace('_', '-'))
    return camel[:1].upper() + camel[1:]


def jsxText_escape(text: str) -> str:
    """Entity-escape the characters JSX text cannot contain literally"""
    return ''.join(JSX_TEXT_ESCAPES.get(ch, ch) for ch in text)


def indent_apply(text: str, spaces: int) -> str:
    """
    Indent every non-blank line of text.

    Blank lines are kept empty so generated output carries no trailing
    whitespace.
    """
    pad = ' ' * spaces
    return '\n'.join(pad + line if line.strip() else line for line in text.split('\n'))


def component_is(tag: str) -> bool:
    """
    Check whether a tag names a component rather than a plain HTML element.

    PascalCase, dotted (namespaced) and hyphenated tags are components.
    """
    return bool(re.match(r'^[A-Z]', tag)) or '.' in tag or '-' in tag
