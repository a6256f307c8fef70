"""
Macro extractor for <script setup> blocks

Locates and removes compiler macros (defineProps, defineEmits, defineSlots,
defineExpose, defineOptions, withDefaults, defineModel) from free-form script
text, then hoists import and export statements out of the residual body.

The extractor works in three phases:
1. Imports: structured import statements are parsed into ImportInfo records
2. Macros: each macro is located by regex anchor and its <...> and (...)
   arguments are consumed with balanced scans
3. Residual: side-effect imports and top-level export statements are cut from
   what remains

All removals are recorded as (start, end) ranges over an unchanged text and
applied in one step, so the input string is never edited in place.

Failure policy: an unbalanced scan makes the macro count as absent. Nothing in
this module raises on malformed script text.

Example:
    >>> macros = macros_extract('const props = defineProps<{ title: string }>()\\nconst n = ref(0)')
    >>> macros.props.type
    '{ title: string }'
    >>> macros.body
    'const n = ref(0)'
"""

import re
from typing import List, Optional, Tuple

from .log import LOG
from .scanner import balanced_match, typeArgs_match
from ..models.script import (
    ExtractedMacros,
    ImportInfo,
    MacroDecl,
    MacroMatch,
    ModelMacro,
    NamedImport,
)


Range = Tuple[int, int]

BINDING_PREFIX = r'(?:(?:const|let|var)\s+\w+\s*=\s*)?'

IMPORT_START_RE = re.compile(r'^[ \t]*import\s+', re.MULTILINE)
SIDE_EFFECT_IMPORT_RE = re.compile(r'''^[ \t]*import\s+(['"])(.+?)\1\s*;?[ \t]*$''', re.MULTILINE)
EXPORT_START_RE = re.compile(r'^[ \t]*export\s+', re.MULTILINE)
FROM_CLAUSE_RE = re.compile(r'''^from\s+(['"])(.+?)\1\s*;?''')


def statementEnd_find(text: str, pos: int) -> int:
    """
    Advance past trailing blanks, an optional semicolon and one newline.

    Args:
        text: Script text
        pos: Index just after the closing parenthesis of a call

    Returns:
        Index where the statement ends
    """
    end = pos
    while end < len(text) and text[end] in ' \t':
        end += 1
    if end < len(text) and text[end] == ';':
        end += 1
    if end < len(text) and text[end] == '\n':
        end += 1
    return end


def lineStart_find(text: str, pos: int) -> int:
    """Return the index of the first character of the line containing pos"""
    return text.rfind('\n', 0, pos) + 1


def ranges_remove(text: str, ranges: List[Range]) -> str:
    """
    Build a copy of text with every (start, end) range cut out.

    Overlapping and adjacent ranges are merged first, so callers may record
    ranges found by independent scans over the same text.

    Args:
        text: Original text (not modified)
        ranges: Half-open ranges to drop

    Returns:
        Text with the ranges removed
    """
    if not ranges:
        return text

    merged: List[List[int]] = []
    for start, end in sorted(ranges):
        if merged and start <= merged[-1][1]:
            merged[-1][1] = max(merged[-1][1], end)
        else:
            merged.append([start, end])

    pieces = []
    cursor = 0
    for start, end in merged:
        pieces.append(text[cursor:start])
        cursor = end
    pieces.append(text[cursor:])
    return ''.join(pieces)


def namedImports_parse(clause: str) -> List[NamedImport]:
    """
    Parse the inside of an import's {...} list.

    Per-item "type" markers and "a as b" aliases are kept.

    Example:
        >>> namedImports_parse(" ref, type Ref, computed as c ")
        [NamedImport(imported='ref', local='ref', type_only=False), NamedImport(imported='Ref', local='Ref', type_only=True),
         NamedImport(imported='computed', local='c', type_only=False)]
    """
    named: List[NamedImport] = []
    for part in clause.split(','):
        item = part.strip()
        if not item:
            continue
        marker = re.match(r'^type\s+(?=\S)(?!as\b)', item)
        if marker:
            item = item[marker.end():]
        alias = re.match(r'^(\S+)\s+as\s+(\S+)$', item)
        if alias:
            named.append(NamedImport(alias.group(1), alias.group(2), bool(marker)))
        else:
            named.append(NamedImport(item, item, bool(marker)))
    return named


def imports_parse(content: str) -> Tuple[List[ImportInfo], List[Range]]:
    """
    Parse every structured import statement in script text.

    Handles default-only, named-only, default + named, multi-line named lists,
    namespace imports, aliases, per-item type markers and statement-level
    "import type". Side-effect imports (import 'x') are left for the residual
    pass.

    Args:
        content: Script text

    Returns:
        Tuple of (import records in source order, ranges they occupy)
    """
    imports: List[ImportInfo] = []
    ranges: List[Range] = []

    pos_search = 0
    while True:
        m = IMPORT_START_RE.search(content, pos_search)
        if not m:
            break
        stmt_start = m.start()
        pos = m.end()
        pos_search = pos

        type_only = False
        type_match = re.match(r'type\s+', content[pos:])
        if type_match:
            type_only = True
            pos += type_match.end()

        if pos < len(content) and content[pos] in ('"', "'"):
            continue

        rest = content[pos:]

        ns_match = re.match(r'''\*\s+as\s+(\w+)\s+from\s+(['"])(.+?)\2\s*;?''', rest)
        if ns_match:
            end = pos + ns_match.end()
            imports.append(ImportInfo(
                source=ns_match.group(3),
                namespace_import=ns_match.group(1),
                type_only=type_only,
            ))
            ranges.append((stmt_start, end))
            pos_search = end
            continue

        brace_idx = rest.find('{')
        first_from = re.search(r'''\bfrom\s+['"]''', rest)

        if brace_idx != -1 and (not first_from or brace_idx < first_from.start()):
            braces = balanced_match(content, pos + brace_idx, '{', '}')
            if not braces:
                continue
            after_brace = braces.end + 1
            from_match = re.match(r'''\s*from\s+(['"])(.+?)\1\s*;?''', content[after_brace:])
            if not from_match:
                continue
            end = after_brace + from_match.end()

            info = ImportInfo(source=from_match.group(2), type_only=type_only)
            before_brace = content[pos:pos + brace_idx].strip().rstrip(',').strip()
            if before_brace:
                info.default_import = before_brace
            info.named_imports = namedImports_parse(braces.content)
        else:
            simple = re.match(r'''(.+?)\s+from\s+(['"])(.+?)\2\s*;?''', rest)
            if not simple:
                continue
            end = pos + simple.end()
            info = ImportInfo(
                source=simple.group(3),
                default_import=simple.group(1).strip(),
                type_only=type_only,
            )

        imports.append(info)
        ranges.append((stmt_start, end))
        pos_search = end

    return imports, ranges


def macro_find(content: str, macro_name: str) -> Optional[MacroMatch]:
    """
    Locate the first well-formed call of a macro.

    The call may be bound (const x = defineEmits(...)). An optional <...> type
    argument is consumed first, then the (...) runtime argument. The runtime
    argument is only reported when no type argument was given.

    Args:
        content: Script text
        macro_name: Macro identifier (e.g. "defineEmits")

    Returns:
        MacroMatch spanning the whole statement line(s), or None when no
        occurrence has balanced delimiters

    Example:
        For "const emit = defineEmits<{ (e: 'close'): void }>();\\n":
        MacroMatch(start=0, end=52, type_param="{ (e: 'close'): void }")
    """
    pattern = re.compile(BINDING_PREFIX + r'\b' + re.escape(macro_name) + r'\b')

    for m in pattern.finditer(content):
        pos = m.end()
        type_param = None

        if pos < len(content) and content[pos] == '<':
            type_args = typeArgs_match(content, pos)
            if type_args:
                type_param = type_args.content
                pos = type_args.end + 1

        if pos >= len(content) or content[pos] != '(':
            continue

        parens = balanced_match(content, pos, '(', ')')
        if not parens:
            LOG(f"Unbalanced arguments for {macro_name} at offset {pos}", level=3)
            continue

        arg = parens.content.strip()
        runtime_arg = arg if arg and type_param is None else None

        return MacroMatch(
            start=lineStart_find(content, m.start()),
            end=statementEnd_find(content, parens.end + 1),
            type_param=type_param,
            runtime_arg=runtime_arg,
        )

    return None


def withDefaults_find(content: str) -> Optional[MacroMatch]:
    """
    Locate withDefaults(defineProps<T>(), { ...defaults }).

    The type argument belongs to the inner defineProps call and the defaults
    literal to the outer withDefaults call. Calls without a type argument or
    without a defaults argument are ignored.

    Returns:
        MacroMatch with type_param and defaults set, or None
    """
    pattern = re.compile(BINDING_PREFIX + r'\bwithDefaults\s*(?=\()')

    for m in pattern.finditer(content):
        outer = balanced_match(content, m.end(), '(', ')')
        if not outer:
            continue

        inner = outer.content
        dp_match = re.search(r'defineProps\s*', inner)
        if not dp_match:
            continue

        pos = dp_match.end()
        type_param = None
        if pos < len(inner) and inner[pos] == '<':
            type_args = typeArgs_match(inner, pos)
            if type_args:
                type_param = type_args.content
                pos = type_args.end + 1

        if pos < len(inner) and inner[pos] == '(':
            parens = balanced_match(inner, pos, '(', ')')
            if parens:
                pos = parens.end + 1

        if type_param is None:
            continue

        comma = inner.find(',', pos)
        if comma == -1:
            continue

        return MacroMatch(
            start=lineStart_find(content, m.start()),
            end=statementEnd_find(content, outer.end + 1),
            type_param=type_param,
            defaults=inner[comma + 1:].strip(),
        )

    return None


def defineModels_find(content: str) -> List[Tuple[MacroMatch, ModelMacro]]:
    """
    Locate every NAME = defineModel<T>(...) binding.

    The first runtime argument is the public model name when it starts with a
    quote; an options literal may follow after a comma. A leading { means the
    argument is the options literal of the default model.

    Returns:
        (statement range, model) pairs in source order

    Example:
        For 'const visible = defineModel<boolean>("visible", { default: false })':
        ModelMacro(variable_name="visible", name="visible", type="boolean",
                   options="{ default: false }")
    """
    results: List[Tuple[MacroMatch, ModelMacro]] = []

    for m in re.finditer(r'(?:const|let|var)\s+(\w+)\s*=\s*defineModel\b', content):
        pos = m.end()
        model_type = None

        if pos < len(content) and content[pos] == '<':
            type_args = typeArgs_match(content, pos)
            if type_args:
                model_type = type_args.content
                pos = type_args.end + 1

        if pos >= len(content) or content[pos] != '(':
            continue
        parens = balanced_match(content, pos, '(', ')')
        if not parens:
            continue

        arg = parens.content.strip()
        name = None
        options = None
        if arg:
            quoted = re.match(r'''^(['"])(.*?)\1''', arg)
            if quoted:
                name = quoted.group(2)
                after = arg[quoted.end():].strip()
                if after.startswith(','):
                    options = after[1:].strip() or None
            elif arg.startswith('{'):
                options = arg

        span = MacroMatch(
            start=lineStart_find(content, m.start()),
            end=statementEnd_find(content, parens.end + 1),
        )
        results.append((span, ModelMacro(
            variable_name=m.group(1),
            name=name,
            type=model_type,
            options=options,
        )))

    return results


def sideEffectImports_find(body: str) -> List[Tuple[Range, str]]:
    """Find bare import 'x' statements, returning (range, trimmed statement)"""
    return [
        ((m.start(), m.end()), m.group(0).strip())
        for m in SIDE_EFFECT_IMPORT_RE.finditer(body)
    ]


def exportEnd_find(body: str, pos: int) -> int:
    """
    Scan forward from just after an export keyword to the end of its statement.

    A parameter list is skipped whole, so object types inside it do not
    count as the body. A braced body ends the statement when depth returns
    to zero; a following from '...' clause (re-export) or semicolon is
    absorbed. Outside braces the statement ends at a semicolon, or at a
    newline unless the next line continues a union or intersection type
    (starts with | or &).

    Args:
        body: Residual script text
        pos: Index just after "export "

    Returns:
        Index where the export statement ends
    """
    depth = 0
    found_brace = False

    while pos < len(body):
        ch = body[pos]
        if ch == '(' and depth == 0 and not found_brace:
            params = balanced_match(body, pos, '(', ')')
            if params is not None:
                pos = params.end + 1
                continue
        elif ch == '{':
            depth += 1
            found_brace = True
        elif ch == '}':
            depth -= 1
            if found_brace and depth == 0:
                pos += 1
                while pos < len(body) and body[pos] in ' \t':
                    pos += 1
                from_match = FROM_CLAUSE_RE.match(body[pos:])
                if from_match:
                    pos += from_match.end()
                elif pos < len(body) and body[pos] == ';':
                    pos += 1
                return pos
        elif ch == ';' and depth == 0:
            return pos + 1
        elif ch == '\n' and depth == 0 and not found_brace:
            next_line = body[pos + 1:].split('\n', 1)[0].lstrip(' \t')
            if next_line.startswith('|') or next_line.startswith('&'):
                pos += 1
                continue
            return pos
        pos += 1

    return len(body)


def exports_find(body: str) -> List[Tuple[Range, str]]:
    """
    Find every top-level export statement in the residual body.

    Returns:
        (range, trimmed statement) pairs in source order
    """
    found: List[Tuple[Range, str]] = []
    search = 0
    while True:
        m = EXPORT_START_RE.search(body, search)
        if not m:
            break
        end = exportEnd_find(body, m.end())
        found.append(((m.start(), end), body[m.start():end].strip()))
        search = max(end, m.end())
    return found


def macros_extract(content: str) -> ExtractedMacros:
    """
    Extract macros, imports and exports from <script setup> text.

    Args:
        content: Raw script setup text

    Returns:
        ExtractedMacros with the residual body trimmed

    Example:
        >>> m = macros_extract("import { ref } from 'vue'\\nexport type Size = 'sm' | 'lg'\\nconst a = ref(1)")
        >>> m.imports[0].source, m.raw_exports, m.body
        ('vue', ["export type Size = 'sm' | 'lg'"], 'const a = ref(1)')
    """
    result = ExtractedMacros()
    removals: List[Range] = []

    imports, import_ranges = imports_parse(content)
    result.imports = imports
    removals.extend(import_ranges)

    with_defaults = withDefaults_find(content)
    if with_defaults:
        result.props = MacroDecl(type=with_defaults.type_param, defaults=with_defaults.defaults)
        removals.append((with_defaults.start, with_defaults.end))
    else:
        define_props = macro_find(content, 'defineProps')
        if define_props:
            result.props = MacroDecl(type=define_props.type_param, runtime=define_props.runtime_arg)
            removals.append((define_props.start, define_props.end))

    define_emits = macro_find(content, 'defineEmits')
    if define_emits:
        result.emits = MacroDecl(type=define_emits.type_param, runtime=define_emits.runtime_arg)
        removals.append((define_emits.start, define_emits.end))

    define_slots = macro_find(content, 'defineSlots')
    if define_slots:
        result.slots = MacroDecl(type=define_slots.type_param)
        removals.append((define_slots.start, define_slots.end))

    define_expose = macro_find(content, 'defineExpose')
    if define_expose:
        result.expose = MacroDecl(runtime=define_expose.runtime_arg)
        removals.append((define_expose.start, define_expose.end))

    define_options = macro_find(content, 'defineOptions')
    if define_options:
        result.options = MacroDecl(runtime=define_options.runtime_arg)
        removals.append((define_options.start, define_options.end))

    for span, model in defineModels_find(content):
        result.models.append(model)
        removals.append((span.start, span.end))

    residual = ranges_remove(content, removals)

    residual_removals: List[Range] = []
    for span, statement in sideEffectImports_find(residual):
        result.raw_imports.append(statement)
        residual_removals.append(span)
    for span, statement in exports_find(residual):
        result.raw_exports.append(statement)
        residual_removals.append(span)

    result.body = ranges_remove(residual, residual_removals).strip()

    LOG(
        f"Extracted {len(result.imports)} imports, {len(result.models)} models, "
        f"{len(result.raw_exports)} exports",
        level=3,
    )
    return result
