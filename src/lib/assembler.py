"""
Module assembler: macros + JSX + imports -> .tsx module text

Three shapes of input produce three shapes of output:

    <script setup>      export default defineComponent({ props, emits, setup() {...} })
    <script> (classic)  export default defineComponent({ ...options, setup() {...} })
    template only       export default defineComponent({ setup() {...} })

The setup() body is the residual script, preceded by the iteration helper
(when the template uses v-for) and the computed wrappers of defineModel
bindings, followed by expose() and the render function. Hoisted export
statements are written after the closing "})".
"""

import re
from typing import List, Optional, Set

from ..config.settings import appsettings
from ..models.script import ExtractedMacros, ImportInfo
from ..models.sfc import ScriptBlock
from .imports import (
    autoImports_detect,
    importStatements_generate,
    imports_merge,
    macroImports_strip,
    vueImport_add,
)
from .log import LOG
from .macros import imports_parse, ranges_remove
from .proptypes import emitsOption_build, propsOption_build
from .text import indent_apply


RENDER_LIST_TEMPLATE = """function {name}(source: any, renderItem: (...args: any[]) => any): any[] {{
  if (Array.isArray(source)) return source.map(renderItem as any)
  if (typeof source === 'number') return Array.from({{ length: source }}, (_, i) => (renderItem as any)(i + 1, i))
  if (typeof source === 'object' && source) return Object.keys(source).map((key, index) => (renderItem as any)((source as any)[key], key, index))
  return []
}}"""

CONTEXT_MEMBER_ORDER = ['slots', 'emit', 'expose', 'attrs']

EXPORT_DEFAULT_RE = re.compile(r'export\s+default\s+')


def renderListHelper_get() -> str:
    """Source of the iteration helper used by converted v-for loops"""
    return RENDER_LIST_TEMPLATE.format(name=appsettings.render_list_helper)


def jsxReturn_ensure(jsx: str) -> str:
    """
    Make the JSX body valid as the operand of "return () => (...)".

    Anything that does not start with a tag (a bare {expression}, text or a
    placeholder comment) is wrapped in a fragment.

    Example:
        >>> jsxReturn_ensure("{ok ? <a /> : null}")
        '<>{ok ? <a /> : null}</>'
    """
    trimmed = jsx.strip()
    if trimmed.startswith('<'):
        return trimmed
    return f'<>{trimmed}</>'


def renderFunction_build(jsx: str) -> List[str]:
    """Lines of the returned render function (unindented)"""
    return [
        'return () => (',
        indent_apply(jsxReturn_ensure(jsx), 2),
        ')',
    ]


def setupSignature_build(props_param: Optional[str], members: List[str]) -> str:
    """
    Build the setup() signature.

    Example:
        >>> setupSignature_build("props", ["emit"])
        'setup(props, { emit })'
        >>> setupSignature_build(None, ["slots"])
        'setup(_props, { slots })'
    """
    if members:
        return f'setup({props_param or "_props"}, {{ {", ".join(members)} }})'
    if props_param:
        return f'setup({props_param})'
    return 'setup()'


def contextMembers_order(members: Set[str]) -> List[str]:
    """Order setup context members as slots, emit, expose, attrs"""
    return [m for m in CONTEXT_MEMBER_ORDER if m in members]


def modelComputed_build(macros: ExtractedMacros) -> List[str]:
    """
    Computed wrappers replacing defineModel bindings.

    Example:
        const open = computed<boolean>({
          get: () => props.open,
          set: (val) => emit('update:open', val)
        })
    """
    lines: List[str] = []
    for model in macros.models:
        type_arg = f'<{model.type}>' if model.type else ''
        lines.append(f'const {model.variable_name} = computed{type_arg}({{')
        lines.append(f'  get: () => props.{model.prop_name},')
        lines.append(f"  set: (val) => emit('update:{model.prop_name}', val)")
        lines.append('})')
    return lines


def rawImports_normalize(raw_imports: List[str]) -> List[str]:
    """Strip .vue suffixes from verbatim import statements"""
    return [re.sub(r'''\.vue(['"])''', r'\1', statement) for statement in raw_imports]


def styleImport_make(css_filename: Optional[str], css_modules: bool) -> List[ImportInfo]:
    """
    Import of the companion stylesheet.

    Plain stylesheets are imported for their side effect; CSS modules bind
    the default export to "styles".
    """
    if not css_filename:
        return []
    if css_modules:
        return [ImportInfo(source=f'./{css_filename}', default_import='styles')]
    return [ImportInfo(source=f'./{css_filename}')]


def builtinImports_make(builtins: Set[str]) -> List[ImportInfo]:
    """Framework imports for built-in components used by the template"""
    imports: List[ImportInfo] = []
    for name in sorted(builtins):
        vueImport_add(imports, name)
    return imports


def module_fromScriptSetup(
    macros: ExtractedMacros,
    jsx: str,
    extra_imports: List[ImportInfo],
    context_members: Set[str],
    has_v_for: bool = False,
) -> str:
    """
    Assemble the module for a <script setup> component.

    Args:
        macros: Extracted macros and residual body
        jsx: Template JSX
        extra_imports: Stylesheet and built-in component imports
        context_members: Setup context members the template uses
        has_v_for: Emit the iteration helper

    Returns:
        Module text
    """
    imports: List[ImportInfo] = [imp.copy() for imp in macros.imports]

    options: List[str] = []
    props_option, needs_prop_type = propsOption_build(macros.props, macros.models)
    if props_option:
        options.append(f'  props: {props_option},')
    emits_option = emitsOption_build(macros.emits, macros.models)
    if emits_option:
        options.append(f'  emits: {emits_option},')
    if macros.options and macros.options.runtime:
        options.append(f'  ...{macros.options.runtime.strip()},')

    scan_sources = '\n'.join(filter(None, [
        macros.body,
        macros.props.runtime if macros.props else None,
        macros.emits.runtime if macros.emits else None,
        macros.options.runtime if macros.options else None,
    ]))
    imports.extend(autoImports_detect(scan_sources, jsx, imports))

    vueImport_add(imports, 'defineComponent')
    if macros.models:
        vueImport_add(imports, 'computed')
    if needs_prop_type:
        vueImport_add(imports, 'PropType', type_only=True)

    merged = imports_merge(imports, extra_imports)
    macroImports_strip(merged)

    has_props = macros.props is not None or bool(macros.models)
    members = set(context_members)
    if macros.emits is not None or macros.models:
        members.add('emit')
    if macros.slots is not None:
        members.add('slots')
    if macros.expose is not None:
        members.add('expose')
    props_param = 'props' if has_props or re.search(r'\bprops\b', jsx) else None
    signature = setupSignature_build(props_param, contextMembers_order(members))

    body: List[str] = []
    if has_v_for:
        body.extend([renderListHelper_get(), ''])
    body.extend(modelComputed_build(macros))
    if macros.body:
        body.append(macros.body)
    if macros.expose is not None:
        body.extend(['', f'expose({(macros.expose.runtime or "").strip()})'])
    body.append('')
    body.extend(renderFunction_build(jsx))

    lines: List[str] = []
    statements = importStatements_generate(merged)
    if statements:
        lines.append(statements)
    if macros.raw_imports:
        lines.extend(rawImports_normalize(macros.raw_imports))
    if lines:
        lines.append('')

    lines.append('export default defineComponent({')
    lines.extend(options)
    lines.append(f'  {signature} {{')
    lines.append(indent_apply('\n'.join(body), 4))
    lines.append('  }')
    lines.append('})')

    if macros.raw_exports:
        lines.append('')
        lines.append('\n'.join(macros.raw_exports))

    LOG(f"Assembled script-setup module with {len(merged)} import statement(s)", level=2)
    return '\n'.join(lines) + '\n'


def module_fromScript(
    script: ScriptBlock,
    jsx: str,
    extra_imports: List[ImportInfo],
    context_members: Set[str],
    has_v_for: bool = False,
) -> str:
    """
    Assemble the module for a classic <script> component.

    The exported options object is spread into defineComponent and a
    setup() returning the render function is added. Statements before the
    export are kept; a script without "export default" is returned as-is.
    """
    content = script.content.strip()
    match = EXPORT_DEFAULT_RE.search(content)
    if not match:
        LOG("Classic script has no default export, left unchanged", level=2)
        return content + '\n'

    imports, ranges = imports_parse(content[:match.start()])
    preamble = ranges_remove(content[:match.start()], ranges).strip()
    options = content[match.end():].strip().rstrip(';').strip()

    imports = [imp.copy() for imp in imports]
    imports.extend(autoImports_detect(preamble + '\n' + options, jsx, imports))
    vueImport_add(imports, 'defineComponent')
    merged = imports_merge(imports, extra_imports)

    members = contextMembers_order(set(context_members))
    props_param = 'props' if re.search(r'\bprops\b', jsx) else None
    signature = setupSignature_build(props_param, members)

    body: List[str] = []
    if has_v_for:
        body.extend([renderListHelper_get(), ''])
    body.extend(renderFunction_build(jsx))

    lines = [importStatements_generate(merged)]
    if preamble:
        lines.extend(['', preamble])
    lines.append('')
    lines.append('export default defineComponent({')
    lines.append(f'  ...{options},')
    lines.append(f'  {signature} {{')
    lines.append(indent_apply('\n'.join(body), 4))
    lines.append('  }')
    lines.append('})')

    LOG("Assembled classic-script module", level=2)
    return '\n'.join(lines) + '\n'


def module_fromTemplate(
    jsx: str,
    extra_imports: List[ImportInfo],
    context_members: Set[str],
    has_v_for: bool = False,
) -> str:
    """Assemble the module for a component without any script block"""
    imports: List[ImportInfo] = []
    vueImport_add(imports, 'defineComponent')
    imports.extend(autoImports_detect('', jsx, imports))
    merged = imports_merge(imports, extra_imports)

    props_param = 'props' if re.search(r'\bprops\b', jsx) else None
    signature = setupSignature_build(props_param, contextMembers_order(set(context_members)))

    body: List[str] = []
    if has_v_for:
        body.extend([renderListHelper_get(), ''])
    body.extend(renderFunction_build(jsx))

    lines = [
        importStatements_generate(merged),
        '',
        'export default defineComponent({',
        f'  {signature} {{',
        indent_apply('\n'.join(body), 4),
        '  }',
        '})',
    ]

    LOG("Assembled template-only module", level=2)
    return '\n'.join(lines) + '\n'

