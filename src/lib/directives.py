"""
Directive registry for template directives

Maps the single-purpose template directives to JSX attributes. Each directive
is described by a DirectiveSpec (metadata plus a handler), so the attribute
mapper only has to look a directive up and apply the DirectiveResult.

Directives owned by the walker (v-if, v-else-if, v-else, v-for, v-slot) and
the attribute-shaped ones (v-bind, v-on) never reach the registry. Anything
without a spec (v-memo and custom directives) is recorded as a fallback item.
"""

from typing import Callable, Dict, Optional

from ..config.settings import appsettings
from ..models.conversion import FallbackItem, JsxContext
from ..models.directives import DirectiveResult, DirectiveSpec
from ..models.template import DirectiveNode, ElementNode
from .log import LOG
from .rewriter import expression_rewrite


def directiveSource_build(directive: DirectiveNode) -> str:
    """
    Rebuild the v- form of a directive for placeholder comments.

    Example:
        >>> directiveSource_build(DirectiveNode("focus", arg="x", modifiers=["lazy"], exp="on"))
        'v-focus:x.lazy="on"'
    """
    source = f'v-{directive.name}'
    if directive.arg:
        source += f':{directive.arg}' if directive.arg_static else f':[{directive.arg}]'
    for modifier in directive.modifiers:
        source += f'.{modifier}'
    if directive.exp is not None:
        source += f'="{directive.exp}"'
    return source


def fallback_record(
    directive: DirectiveNode, element: ElementNode, ctx: JsxContext, reason: Optional[str] = None
) -> DirectiveResult:
    """
    Record a directive that has no deterministic JSX form.

    Args:
        directive: The unconvertible directive
        element: Element carrying it (position fallback)
        ctx: Conversion context receiving the FallbackItem
        reason: Reason text (defaults to the generic directive reason)

    Returns:
        DirectiveResult carrying the placeholder comment text
    """
    source = directiveSource_build(directive)
    reason = reason or f'Directive v-{directive.name} cannot be deterministically converted to JSX'
    loc = directive.loc or element.loc

    ctx.fallbacks.append(FallbackItem(
        source=source,
        reason=reason,
        line=loc.line if loc else None,
        column=loc.column if loc else None,
    ))
    LOG(f"Fallback recorded for {source} on <{element.tag}>", level=2)

    return DirectiveResult(placeholder=appsettings.placeHolder_make(reason, source))


class DirectiveRegistry:
    """
    Registry of directive specifications and handlers

    Maps directive names to DirectiveSpec objects whose handlers turn a
    directive into a DirectiveResult.
    """

    def __init__(self) -> None:
        """Initialize the registry and register all built-in directives"""
        self.specs: Dict[str, DirectiveSpec] = {}
        self.renderDirectives_register()
        self.bindingDirectives_register()
        self.compileHints_register()

    def register(self, spec: DirectiveSpec) -> None:
        """Register a directive specification"""
        self.specs[spec.name] = spec
        for alias in spec.aliases:
            self.specs[alias] = spec

    def get(self, name: str) -> Optional[Callable[..., DirectiveResult]]:
        """
        Get directive handler by name

        Args:
            name: Directive name without the v- prefix

        Returns:
            Handler function or None if the directive is not registered
        """
        spec = self.specs.get(name)
        return spec.handler if spec else None

    def directive_apply(
        self, directive: DirectiveNode, element: ElementNode, ctx: JsxContext
    ) -> DirectiveResult:
        """
        Map one directive, recording a fallback item when it has no spec.

        Args:
            directive: Directive to map
            element: Element carrying the directive
            ctx: Conversion context

        Returns:
            DirectiveResult describing the JSX output
        """
        handler = self.get(directive.name)
        if handler is None:
            return fallback_record(directive, element, ctx)
        return handler(directive, element, ctx)

    def renderDirectives_register(self) -> None:
        """Register directives that control what an element renders"""

        def show_handler(directive: DirectiveNode, element: ElementNode, ctx: JsxContext) -> DirectiveResult:
            """Handle v-show - the JSX transform keeps it as a directive prop"""
            return DirectiveResult(attr='v-show', value=expression_rewrite(directive.exp, ctx) or 'true')

        def html_handler(directive: DirectiveNode, element: ElementNode, ctx: JsxContext) -> DirectiveResult:
            """Handle v-html - bind innerHTML"""
            return DirectiveResult(attr='innerHTML', value=expression_rewrite(directive.exp, ctx) or "''")

        def text_handler(directive: DirectiveNode, element: ElementNode, ctx: JsxContext) -> DirectiveResult:
            """Handle v-text - bind textContent"""
            return DirectiveResult(attr='textContent', value=expression_rewrite(directive.exp, ctx) or "''")

        self.register(DirectiveSpec(
            name='show',
            description='Toggle display without removing the element',
            handler=show_handler,
        ))
        self.register(DirectiveSpec(
            name='html',
            description='Set raw inner HTML',
            handler=html_handler,
        ))
        self.register(DirectiveSpec(
            name='text',
            description='Set text content',
            handler=text_handler,
        ))

    def bindingDirectives_register(self) -> None:
        """Register two-way binding directives"""

        def model_handler(directive: DirectiveNode, element: ElementNode, ctx: JsxContext) -> DirectiveResult:
            """
            Handle v-model[:arg][.mods].

            Modifiers switch to the array form the JSX transform expects:
            v-model={[value, ['trim']]}.
            """
            if directive.arg and not directive.arg_static:
                return fallback_record(
                    directive, element, ctx,
                    reason='v-model with a dynamic argument cannot be deterministically converted to JSX',
                )

            value = expression_rewrite(directive.exp, ctx)
            attr = f'v-model:{directive.arg}' if directive.arg else 'v-model'
            if directive.modifiers:
                modifiers = ', '.join(f"'{m}'" for m in directive.modifiers)
                value = f'[{value}, [{modifiers}]]'
            return DirectiveResult(attr=attr, value=value)

        self.register(DirectiveSpec(
            name='model',
            description='Two-way binding to a form input or component model',
            handler=model_handler,
        ))

    def compileHints_register(self) -> None:
        """Register compile-time hints"""

        def pre_handler(directive: DirectiveNode, element: ElementNode, ctx: JsxContext) -> DirectiveResult:
            """Handle v-pre - children are emitted as literal text"""
            return DirectiveResult(skip_children=True)

        def omit_handler(directive: DirectiveNode, element: ElementNode, ctx: JsxContext) -> DirectiveResult:
            """Handle v-cloak and v-once - nothing to emit"""
            return DirectiveResult()

        self.register(DirectiveSpec(
            name='pre',
            description='Skip compilation of the element children',
            handler=pre_handler,
        ))
        self.register(DirectiveSpec(
            name='cloak',
            description='Hide until compiled (no render-function equivalent)',
            handler=omit_handler,
            aliases=['once'],
        ))


# Shared registry - import this in your code
directives = DirectiveRegistry()
