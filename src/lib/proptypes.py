"""
Type-to-runtime conversion for props and emits

defineComponent needs runtime declarations, while <script setup> usually
declares props and emits with TypeScript type literals. This module turns
those literals into runtime option text:

    defineProps<{ title: string; items?: Item[] }>()
        ->
    {
        title: { type: String, required: true },
        items: { type: Array as PropType<Item[]>, required: false }
      }

    defineEmits<{ (e: 'close'): void; (e: 'save', id: number): void }>()
        ->
    ['close', 'save']
"""

import re
from typing import Dict, List, Optional, Tuple

from .scanner import braces_strip, topLevel_split
from ..models.script import MacroDecl, ModelMacro, PropInfo, RuntimeType


TS_TO_RUNTIME: Dict[str, str] = {
    'string': 'String',
    'number': 'Number',
    'boolean': 'Boolean',
    'symbol': 'Symbol',
}

PROP_MEMBER_RE = re.compile(r'^\s*(\w+)\s*(\?)?\s*:\s*(.+)$', re.DOTALL)
EMIT_SIGNATURE_RE = re.compile(r'''\(\s*e\s*:\s*['"]([\w\-:]+)['"]''')
EMIT_SHORTHAND_RE = re.compile(r'''(?:["']([\w\-:]+)["']|(\w+))\s*:''')


def propTypes_parse(type_literal: str) -> List[PropInfo]:
    """
    Split a props type literal into its top-level members.

    Members are separated by ";" or newlines at depth zero over { } ( ) < >,
    so nested object types and generics stay attached to their member.

    Args:
        type_literal: Type literal text, with or without its outer braces

    Returns:
        PropInfo list in declaration order

    Example:
        >>> propTypes_parse("{ title: string; size?: 'sm' | 'lg' }")
        [PropInfo(name='title', type='string', optional=False),
         PropInfo(name='size', type="'sm' | 'lg'", optional=True)]
    """
    body = braces_strip(type_literal)
    if not body:
        return []

    props: List[PropInfo] = []
    for member in topLevel_split(body, ';\n', openers='{(<', closers='})>'):
        member = member.rstrip(';').strip()
        match = PROP_MEMBER_RE.match(member)
        if match:
            props.append(PropInfo(
                name=match.group(1),
                type=match.group(3).strip().rstrip(',').strip(),
                optional=match.group(2) == '?',
            ))
    return props


def tsType_toRuntime(ts_type: str) -> RuntimeType:
    """
    Map a TypeScript type to a runtime prop constructor expression.

    Args:
        ts_type: Type text (e.g. "string", "Item[]", "(id: number) => void")

    Returns:
        RuntimeType; needs_prop_type is set for the "X as PropType<T>" forms

    Example:
        >>> tsType_toRuntime("number").expr
        'Number'
        >>> tsType_toRuntime("Array<string>").expr
        'Array as PropType<Array<string>>'
    """
    t = ts_type.strip()
    simple = TS_TO_RUNTIME.get(t)
    if simple:
        return RuntimeType(expr=simple)

    if t.endswith('[]') or t.startswith('Array<'):
        return RuntimeType(expr=f'Array as PropType<{t}>', needs_prop_type=True)

    if t == 'Function' or '=>' in t:
        return RuntimeType(expr=f'Function as PropType<{t}>', needs_prop_type=True)

    return RuntimeType(expr=f'Object as PropType<{t}>', needs_prop_type=True)


def defaults_parse(defaults: Optional[str]) -> Dict[str, str]:
    """
    Parse the withDefaults defaults literal into name -> expression.

    Example:
        >>> defaults_parse("{ size: 'md', items: () => [] }")
        {'size': "'md'", 'items': '() => []'}
    """
    if not defaults:
        return {}

    parsed: Dict[str, str] = {}
    for member in topLevel_split(braces_strip(defaults), ','):
        match = re.match(r'^(\w+)\s*:\s*(.+)$', member, re.DOTALL)
        if match:
            parsed[match.group(1)] = match.group(2).strip()
    return parsed


def modelEntry_build(model: ModelMacro) -> Tuple[str, bool]:
    """
    Build the prop declaration for a defineModel binding.

    Returns:
        Tuple of (entry text, needs PropType import)
    """
    parts: List[str] = []
    needs_prop_type = False
    if model.type:
        runtime = tsType_toRuntime(model.type)
        parts.append(f'type: {runtime.expr}')
        needs_prop_type = runtime.needs_prop_type
    if model.options:
        options = braces_strip(model.options)
        if options:
            parts.append(options.rstrip(',').strip())
    body = f'{{ {", ".join(parts)} }}' if parts else '{}'
    return f'    {model.prop_name}: {body}', needs_prop_type


def literalMembers_append(literal: str, members: List[str]) -> str:
    """
    Append members to an object or array literal.

    Example:
        >>> literalMembers_append("['change']", ["'update:open'"])
        "['change', 'update:open']"
    """
    text = literal.strip()
    inner = text[1:-1].strip().rstrip(',').strip()
    items = ([inner] if inner else []) + [m.strip() for m in members]
    if text[0] == '[':
        return f'[{", ".join(items)}]'
    return f'{{ {", ".join(items)} }}'


def propsOption_build(
    props: Optional[MacroDecl], models: Optional[List[ModelMacro]] = None
) -> Tuple[Optional[str], bool]:
    """
    Build the props: option of defineComponent.

    A runtime argument is used verbatim. A type literal is converted member by
    member: withDefaults values become "default:", otherwise optional members
    get "required: false" and the rest "required: true". Every defineModel
    binding contributes its own prop.

    Args:
        props: defineProps / withDefaults declaration, or None
        models: defineModel bindings

    Returns:
        Tuple of (option text or None, needs PropType import)
    """
    models = models or []
    needs_prop_type = False
    model_entries: List[str] = []
    for model in models:
        entry, needs = modelEntry_build(model)
        model_entries.append(entry)
        needs_prop_type = needs_prop_type or needs

    if props and props.runtime:
        runtime = props.runtime.strip()
        if not model_entries:
            return runtime, needs_prop_type
        if runtime.startswith('['):
            names = [f"'{m.prop_name}'" for m in models]
            return literalMembers_append(runtime, names), False
        if runtime.startswith('{') and runtime.endswith('}'):
            return literalMembers_append(runtime, model_entries), needs_prop_type
        return runtime, needs_prop_type

    entries: List[str] = []
    if props and props.type:
        defaults = defaults_parse(props.defaults)
        for prop in propTypes_parse(props.type):
            runtime = tsType_toRuntime(prop.type)
            needs_prop_type = needs_prop_type or runtime.needs_prop_type

            parts = [f'type: {runtime.expr}']
            if prop.name in defaults:
                parts.append(f'default: {defaults[prop.name]}')
            elif prop.optional:
                parts.append('required: false')
            else:
                parts.append('required: true')
            entries.append(f'    {prop.name}: {{ {", ".join(parts)} }}')

    entries.extend(model_entries)
    if not entries:
        return None, False

    return '{\n' + ',\n'.join(entries) + '\n  }', needs_prop_type


def emitTypes_parse(type_literal: str) -> List[str]:
    """
    Read event names from a defineEmits type literal.

    Call-signature form takes precedence:
        { (e: 'change', id: number): void; (e: 'close'): void }
    otherwise the property-shorthand form is scanned at depth zero only, so
    object types inside a payload tuple are not mistaken for events:
        { change: [id: number]; 'update:open': [value: boolean] }

    Returns:
        Event names in declaration order
    """
    names = EMIT_SIGNATURE_RE.findall(type_literal)
    if names:
        return names

    body = re.sub(r'^\s*\{', '', type_literal)
    body = re.sub(r'\}\s*$', '', body)

    depth = 0
    pos = 0
    while pos < len(body):
        ch = body[pos]
        if ch in '{[(':
            depth += 1
        elif ch in '}])':
            depth -= 1
        elif depth == 0:
            match = EMIT_SHORTHAND_RE.match(body, pos)
            if match:
                names.append(match.group(1) or match.group(2))
                pos = match.end()
                continue
        pos += 1

    return names


def emitsOption_build(
    emits: Optional[MacroDecl], models: Optional[List[ModelMacro]] = None
) -> Optional[str]:
    """
    Build the emits: option of defineComponent.

    Args:
        emits: defineEmits declaration, or None
        models: defineModel bindings (each adds an update:<name> event)

    Returns:
        Option text, or None when nothing is declared
    """
    model_events = [f"'update:{m.prop_name}'" for m in (models or [])]

    if emits and emits.runtime:
        runtime = emits.runtime.strip()
        if not model_events:
            return runtime
        if runtime.startswith('['):
            return literalMembers_append(runtime, model_events)
        if runtime.startswith('{') and runtime.endswith('}'):
            members = [f'{event}: null' for event in model_events]
            return literalMembers_append(runtime, members)
        return runtime

    names: List[str] = []
    if emits and emits.type:
        names = [f"'{name}'" for name in emitTypes_parse(emits.type)]

    for event in model_events:
        if event not in names:
            names.append(event)

    if not names:
        return None
    return f'[{", ".join(names)}]'
