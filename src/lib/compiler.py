"""
Compiler for Vue single-file components to Vue TSX

Orchestrates the conversion of one .vue source into a .tsx module and a
companion stylesheet.
"""

from typing import List, Optional, Any

from ..config.settings import appsettings
from ..models.conversion import ConvertResult, ConvertWarning, JsxContext
from ..models.script import ExtractedMacros, ImportInfo
from ..models.sfc import ParsedSFC, StyleResult
from .assembler import (
    builtinImports_make,
    module_fromScript,
    module_fromScriptSetup,
    module_fromTemplate,
    styleImport_make,
)
from .fallback import fallbacks_resolve, replacements_apply
from .identifiers import identifierSets_build
from .log import LOG, WARN, component_context
from .macros import macros_extract
from .parser import Parser
from .styles import styles_extract
from .walker import template_toJsx


class Compiler:
    """
    Converts one Vue single-file component

    Responsibilities:
    - Parse the SFC into blocks and a template tree
    - Combine style blocks (and build the CSS module class map)
    - Extract script setup macros and classify identifiers
    - Walk the template into JSX
    - Assemble the defineComponent module
    - Optionally resolve fallback items remotely
    """

    def __init__(
        self,
        source: str,
        component_name: str = "Component",
        css_modules: Optional[bool] = None,
        llm: bool = False,
        llm_model: Optional[str] = None,
        client: Optional[Any] = None,
    ) -> None:
        """
        Initialize compiler

        Args:
            source: Content of the .vue file
            component_name: Component name (used for the stylesheet file name)
            css_modules: Emit a CSS module with class rewriting (defaults to settings)
            llm: Resolve fallback items through the remote model
            llm_model: Remote model name (defaults to settings)
            client: Anthropic client used for fallback resolution
        """
        self.source = source
        self.component_name = component_name
        self.css_modules = appsettings.css_modules if css_modules is None else css_modules
        self.llm = llm
        self.llm_model = llm_model
        self.client = client

    def compile(self) -> ConvertResult:
        """
        Run the deterministic conversion.

        Returns:
            ConvertResult; on parse errors tsx is "" and the errors are the
            warnings
        """
        with component_context(self.component_name):
            return self.sfc_convert()

    def sfc_convert(self) -> ConvertResult:
        """Parse, walk and assemble (log records are tagged by compile)"""
        LOG("Converting...", level=2)

        parsed = Parser(self.source, debug=appsettings.debug_mode).parse()
        if parsed.errors:
            LOG(f"{len(parsed.errors)} parse error(s)", level=1)
            return ConvertResult(
                tsx="",
                warnings=[ConvertWarning(message=error) for error in parsed.errors],
            )

        style = styles_extract(parsed.styles, self.component_name, self.css_modules)
        macros = macros_extract(parsed.script_setup.content) if parsed.script_setup else None
        ctx = self.context_create(style, macros)

        jsx = "<></>"
        if parsed.template_ast is not None:
            jsx = template_toJsx(parsed.template_ast, ctx)

        extra_imports = self.extraImports_build(style, ctx)
        tsx = self.module_assemble(parsed, macros, jsx, extra_imports, ctx)

        warnings: List[ConvertWarning] = []
        if style:
            warnings.extend(ConvertWarning(message=message) for message in style.warnings)
        warnings.extend(ctx.warnings)
        if parsed.script_setup and parsed.script:
            warnings.append(ConvertWarning(
                message="Both <script> and <script setup> found; only <script setup> was converted."
            ))

        LOG(f"{len(warnings)} warning(s), {len(ctx.fallbacks)} fallback item(s)", level=2)

        return ConvertResult(
            tsx=tsx,
            css=style.css if style else None,
            css_filename=style.filename if style else None,
            warnings=warnings,
            fallbacks=list(ctx.fallbacks),
        )

    def context_create(self, style: Optional[StyleResult], macros: Optional[ExtractedMacros]) -> JsxContext:
        """Create the fresh per-call conversion context"""
        identifiers = identifierSets_build(macros)
        LOG(
            f"Identifiers: refs={sorted(identifiers.refs)} props={sorted(identifiers.props)}",
            level=3,
        )
        return JsxContext(
            class_map=dict(style.class_map) if style else {},
            component_name=self.component_name,
            ref_identifiers=set(identifiers.refs),
            prop_identifiers=set(identifiers.props),
        )

    def extraImports_build(self, style: Optional[StyleResult], ctx: JsxContext) -> List[ImportInfo]:
        """Imports the template and stylesheet add to the module"""
        imports = styleImport_make(style.filename if style else None, self.css_modules)
        imports.extend(builtinImports_make(ctx.used_builtins))
        return imports

    def module_assemble(
        self,
        parsed: ParsedSFC,
        macros: Optional[ExtractedMacros],
        jsx: str,
        extra_imports: List[ImportInfo],
        ctx: JsxContext,
    ) -> str:
        """Pick the module form from the script blocks present"""
        if macros is not None:
            return module_fromScriptSetup(macros, jsx, extra_imports, ctx.used_context_members, ctx.has_v_for)
        if parsed.script is not None:
            return module_fromScript(parsed.script, jsx, extra_imports, ctx.used_context_members, ctx.has_v_for)
        return module_fromTemplate(jsx, extra_imports, ctx.used_context_members, ctx.has_v_for)

    async def fallbacks_resolve(self, result: ConvertResult) -> ConvertResult:
        """
        Resolve the fallback items of a result and substitute the replacements.

        Args:
            result: Deterministic conversion result

        Returns:
            The same result with resolved placeholders replaced in tsx
        """
        if not result.fallbacks:
            return result

        with component_context(self.component_name):
            replacements = await fallbacks_resolve(
                result.fallbacks, self.component_name, model=self.llm_model, client=self.client
            )
            if replacements:
                result.tsx = replacements_apply(result.tsx, result.fallbacks, replacements)
                LOG(f"Resolved {len(replacements)} of {len(result.fallbacks)} fallback item(s)", level=1)
            remaining = appsettings.placeHolder_sourceExtract(result.tsx)
            if remaining:
                WARN(f"{len(remaining)} placeholder(s) left for manual conversion: {', '.join(remaining)}")
        return result

    async def convert_async(self) -> ConvertResult:
        """Convert, then resolve fallback items remotely when enabled"""
        result = self.compile()
        if self.llm:
            result = await self.fallbacks_resolve(result)
        return result


def convert(source: str, component_name: str = "Component", css_modules: Optional[bool] = None) -> ConvertResult:
    """
    Convert a .vue source deterministically.

    Args:
        source: Content of the .vue file
        component_name: Component name
        css_modules: Emit a CSS module with class rewriting (defaults to settings)

    Returns:
        ConvertResult

    Example:
        >>> result = convert("<template><p>{{ msg }}</p></template>", "Hello")
        >>> print(result.tsx)
        import { defineComponent } from 'vue'
        <BLANKLINE>
        export default defineComponent({
          setup() {
            return () => (
              <p>{msg}</p>
            )
          }
        })
    """
    return Compiler(source, component_name, css_modules=css_modules).compile()


async def convert_async(
    source: str,
    component_name: str = "Component",
    css_modules: Optional[bool] = None,
    llm: bool = False,
    llm_model: Optional[str] = None,
    client: Optional[Any] = None,
) -> ConvertResult:
    """Convert a .vue source, optionally resolving fallback items remotely"""
    compiler = Compiler(
        source, component_name, css_modules=css_modules, llm=llm, llm_model=llm_model, client=client
    )
    return await compiler.convert_async()
