"""
Import merging, generation and auto-detection

Import statements of the generated module are built from three sources: the
structured imports of the <script setup> block, the framework names the
converter itself needs (defineComponent, computed, withModifiers, built-in
components) and names used without an import (auto imports).

Output rules:
- one statement per source module; the merged record is type-only only if
  every contributing record is
- the framework module first, all other sources alphabetical
- default binding before the named list; bare side-effect form when neither
- "type" precedes the whole clause of a type-only record, or a single item
  of a value record
- .vue suffixes are stripped (TSX modules import components without them)
"""

import re
from typing import Dict, Iterable, List, Optional

from ..config.settings import appsettings
from ..models.script import ImportInfo, NamedImport
from .scanner import literal_skip


AUTO_IMPORTS: Dict[str, str] = {
    # Reactivity
    'ref': 'vue',
    'computed': 'vue',
    'reactive': 'vue',
    'readonly': 'vue',
    'watch': 'vue',
    'watchEffect': 'vue',
    'watchPostEffect': 'vue',
    'watchSyncEffect': 'vue',
    # Refs
    'toRef': 'vue',
    'toRefs': 'vue',
    'isRef': 'vue',
    'unref': 'vue',
    'shallowRef': 'vue',
    'triggerRef': 'vue',
    'customRef': 'vue',
    'shallowReactive': 'vue',
    'shallowReadonly': 'vue',
    'toRaw': 'vue',
    'markRaw': 'vue',
    'isReactive': 'vue',
    'isReadonly': 'vue',
    'isProxy': 'vue',
    # Lifecycle
    'onMounted': 'vue',
    'onUpdated': 'vue',
    'onUnmounted': 'vue',
    'onBeforeMount': 'vue',
    'onBeforeUpdate': 'vue',
    'onBeforeUnmount': 'vue',
    'onActivated': 'vue',
    'onDeactivated': 'vue',
    'onErrorCaptured': 'vue',
    'onServerPrefetch': 'vue',
    # Dependency injection
    'provide': 'vue',
    'inject': 'vue',
    # Utilities
    'nextTick': 'vue',
    'h': 'vue',
    'defineAsyncComponent': 'vue',
    'withModifiers': 'vue',
    # Types used as values
    'PropType': 'vue',
    # Router
    'useRoute': 'vue-router',
    'useRouter': 'vue-router',
}

# Compiler macros are compiled away and must never be imported
MACRO_NAMES = {
    'defineProps',
    'defineEmits',
    'defineSlots',
    'defineExpose',
    'defineOptions',
    'defineModel',
    'withDefaults',
}


def imports_merge(*groups: Iterable[ImportInfo]) -> List[ImportInfo]:
    """
    Merge import records so there is exactly one per source module.

    The first default and namespace bindings win; named imports are
    deduplicated by imported name in first-seen order; the result is
    type-only only if every contributor is type-only. Input records are not
    modified.

    Args:
        *groups: Any number of ImportInfo iterables, merged in order

    Returns:
        Merged records in first-seen source order

    Example:
        >>> merged = imports_merge(
        ...     [ImportInfo("vue", named_imports=[NamedImport("ref", "ref")])],
        ...     [ImportInfo("vue", named_imports=[NamedImport("PropType", "PropType")], type_only=True)],
        ... )
        >>> [n.imported for n in merged[0].named_imports], merged[0].type_only
        (['ref', 'PropType'], False)
    """
    merged: Dict[str, ImportInfo] = {}

    for group in groups:
        for imp in group:
            current = merged.get(imp.source)
            if current is None:
                merged[imp.source] = imp.copy()
                continue

            if imp.default_import and not current.default_import:
                current.default_import = imp.default_import
            if imp.namespace_import and not current.namespace_import:
                current.namespace_import = imp.namespace_import

            known = {n.imported for n in current.named_imports}
            for named in imp.named_imports:
                if named.imported not in known:
                    current.named_imports.append(NamedImport(named.imported, named.local, named.type_only))
                    known.add(named.imported)

            if not imp.type_only:
                current.type_only = False

    return list(merged.values())


def importSource_normalize(source: str) -> str:
    """Strip a trailing .vue extension from a module specifier"""
    return re.sub(r'\.vue$', '', source)


def namedImport_render(named: NamedImport, statement_type_only: bool = False) -> str:
    """Render one item of a named list; "type" is kept unless the whole statement is type-only"""
    text = named.imported if named.imported == named.local else f'{named.imported} as {named.local}'
    if named.type_only and not statement_type_only:
        return f'type {text}'
    return text


def importStatements_generate(imports: List[ImportInfo], framework: Optional[str] = None) -> str:
    """
    Render import records as statements, one per line.

    Args:
        imports: Records to render (normally already merged)
        framework: Module sorted first (defaults to the configured framework)

    Returns:
        Newline-joined statements (single quotes, no semicolons)

    Example:
        >>> importStatements_generate([
        ...     ImportInfo("./Card.vue", default_import="Card"),
        ...     ImportInfo("vue", named_imports=[NamedImport("ref", "ref")]),
        ... ])
        "import { ref } from 'vue'\\nimport Card from './Card'"
    """
    framework = framework or appsettings.framework_module
    ordered = sorted(imports, key=lambda imp: (imp.source != framework, imp.source))

    lines: List[str] = []
    for imp in ordered:
        type_prefix = 'type ' if imp.type_only else ''
        source = importSource_normalize(imp.source)

        if imp.namespace_import:
            lines.append(f"import {type_prefix}* as {imp.namespace_import} from '{source}'")
            continue

        parts: List[str] = []
        if imp.default_import:
            parts.append(imp.default_import)
        if imp.named_imports:
            names = [namedImport_render(n, imp.type_only) for n in imp.named_imports]
            parts.append('{ ' + ', '.join(names) + ' }')

        if parts:
            lines.append(f"import {type_prefix}{', '.join(parts)} from '{source}'")
        else:
            lines.append(f"import '{source}'")

    return '\n'.join(lines)


def vueImport_add(imports: List[ImportInfo], name: str, type_only: bool = False) -> None:
    """
    Ensure a named framework import exists, adding it to the list in place.

    A type-only request goes to a type-only framework record, so it does not
    make value imports type-only (or the reverse) before merging.

    Args:
        imports: Import list to update
        name: Name to import (e.g. "computed", "PropType")
        type_only: Import as a type
    """
    framework = appsettings.framework_module
    record = next(
        (i for i in imports if i.source == framework and i.type_only == type_only and not i.namespace_import),
        None,
    )
    if record is None:
        record = ImportInfo(source=framework, type_only=type_only)
        imports.append(record)

    if not any(n.imported == name for n in record.named_imports):
        record.named_imports.append(NamedImport(name, name))


def macroImports_strip(imports: List[ImportInfo]) -> None:
    """
    Remove compiler macro names from framework imports, in place.

    A framework record left without any binding is dropped rather than
    turned into a side-effect import.
    """
    framework = appsettings.framework_module
    kept: List[ImportInfo] = []
    for imp in imports:
        if imp.source == framework and imp.named_imports:
            imp.named_imports = [n for n in imp.named_imports if n.imported not in MACRO_NAMES]
            if not (imp.named_imports or imp.default_import or imp.namespace_import):
                continue
        kept.append(imp)
    imports[:] = kept


def jsxCode_extract(jsx: str) -> str:
    """
    Collect the code parts of generated JSX.

    Expression containers, attribute values and spreads are kept (template
    literals included); tag names, attribute names, text, quoted strings and
    comments are dropped. JSX nested inside an expression (ternary branches,
    slot functions, list items) is scanned the same way.

    Example:
        >>> jsxCode_extract('<p ref={el} title="watch">{n ? <b>ref</b> : h(x)}</p>')
        'el n ?  : h(x) '
    """
    parts: List[str] = []
    # Each frame is [kind, count]: open elements for "markup", nested
    # braces for "code", 1 for a closing tag in "tag"
    frames: List[list] = [['markup', 0]]
    i, n = 0, len(jsx)

    while i < n:
        kind = frames[-1][0]
        ch = jsx[i]

        if kind == 'code':
            if ch in "'\"" or jsx.startswith('/*', i) or jsx.startswith('//', i):
                i = literal_skip(jsx, i)
                continue
            if ch == '`':
                end = literal_skip(jsx, i)
                parts.append(jsx[i:end])
                i = end
                continue
            if ch == '<' and i + 1 < n and (jsx[i + 1].isalpha() or jsx[i + 1] == '>'):
                frames.append(['markup', 0])
                continue
            if ch == '}':
                if frames[-1][1] == 0:
                    frames.pop()
                    parts.append(' ')
                    i += 1
                    continue
                frames[-1][1] -= 1
            elif ch == '{':
                frames[-1][1] += 1
            parts.append(ch)
            i += 1
            continue

        if kind == 'tag':
            if ch == '"':
                i = literal_skip(jsx, i)
                continue
            if ch == '{':
                frames.append(['code', 0])
            elif ch == '>':
                closing = frames.pop()[1]
                markup = frames[-1]
                if closing:
                    markup[1] -= 1
                elif jsx[i - 1] != '/':
                    markup[1] += 1
                if markup[1] <= 0 and len(frames) > 1:
                    frames.pop()
            i += 1
            continue

        # markup: text between tags
        if ch == '{':
            frames.append(['code', 0])
        elif ch == '<':
            closing = jsx.startswith('</', i)
            frames.append(['tag', 1 if closing else 0])
        i += 1

    return ''.join(parts)


def autoImports_detect(
    script_body: str, template_jsx: str, existing: Iterable[ImportInfo]
) -> List[ImportInfo]:
    """
    Find known framework names that are used but never imported.

    Args:
        script_body: Residual script text (plus any runtime option text)
        template_jsx: Generated JSX
        existing: Imports already present

    Returns:
        One ImportInfo per source module holding the missing names, in the
        order of the auto-import table

    Example:
        >>> [n.imported for n in autoImports_detect("const a = ref(0)", "", [])[0].named_imports]
        ['ref']
    """
    already = set()
    for imp in existing:
        already |= imp.locals_get()

    combined = script_body + '\n' + jsxCode_extract(template_jsx)
    missing: Dict[str, List[str]] = {}

    for name, source in AUTO_IMPORTS.items():
        if name in already:
            continue
        if re.search(r'(?<![\w$.])' + re.escape(name) + r'(?![\w$])', combined):
            missing.setdefault(source, []).append(name)

    return [
        ImportInfo(source=source, named_imports=[NamedImport(n, n) for n in names])
        for source, names in missing.items()
    ]
