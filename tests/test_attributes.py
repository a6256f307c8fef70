"""
Attribute and directive mapping tests

Tests the directive registry and the mapping of element props to JSX
attribute strings, including fallback placeholders for directives without
a deterministic JSX form.
"""

from vuetsx.config.settings import appsettings
from vuetsx.lib.attributes import attributes_generate, dynamicClass_map, staticClass_map
from vuetsx.lib.directives import DirectiveRegistry, directiveSource_build, directives
from vuetsx.lib.parser import Parser
from vuetsx.models.conversion import JsxContext
from vuetsx.models.template import DirectiveNode


def element_parse(markup: str):
    """Parse one element"""
    return Parser(f"<template>{markup}</template>").parse().template_ast.children[0]


def attrs_get(markup: str, ctx=None):
    """Attribute strings generated for one element"""
    return attributes_generate(element_parse(markup), ctx or JsxContext()).attrs


class TestRegistry:
    """Test the directive registry"""

    def test_builtin_directives_registered(self):
        """Render, binding and compile-hint directives have specs"""
        registry = DirectiveRegistry()
        for name in ("show", "html", "text", "model", "pre", "cloak", "once"):
            assert registry.get(name) is not None

    def test_alias_shares_handler(self):
        """v-once is handled by the v-cloak handler"""
        registry = DirectiveRegistry()
        assert registry.get("once") is registry.get("cloak")

    def test_unknown_has_no_handler(self):
        """Custom directives are not registered"""
        assert directives.get("focus") is None

    def test_directive_source(self):
        """The v- form is rebuilt for placeholders"""
        directive = DirectiveNode("focus", arg="x", modifiers=["lazy"], exp="on")
        assert directiveSource_build(directive) == 'v-focus:x.lazy="on"'
        assert directiveSource_build(DirectiveNode("memo", arg="k", arg_static=False)) == "v-memo:[k]"


class TestStaticAttributes:
    """Test static attribute mapping"""

    def test_plain_and_boolean(self):
        """Values are quoted, boolean attributes bare"""
        assert attrs_get('<input type="text" disabled>') == ['type="text"', "disabled"]

    def test_ref_is_expression(self):
        """ref="input" refers to the binding"""
        assert attrs_get('<input ref="inputEl">') == ["ref={inputEl}"]

    def test_double_quote_value(self):
        """A value containing a double quote becomes a JS string"""
        assert attrs_get("<p title='say \"hi\"' />") == ['title={"say \\"hi\\""}']

    def test_class_map_single(self):
        """A mapped class becomes its reference"""
        ctx = JsxContext(class_map={"card": "styles.card"})
        assert staticClass_map("card", ctx) == "class={styles.card}"

    def test_class_map_mixed(self):
        """Mapped and unmapped classes share a template literal"""
        ctx = JsxContext(class_map={"card": "styles.card"})
        assert staticClass_map("card shadow", ctx) == "class={`${styles.card} shadow`}"

    def test_class_without_map(self):
        """Without a class map the attribute is unchanged"""
        assert staticClass_map("a b", JsxContext()) == 'class="a b"'


class TestBindings:
    """Test v-bind mapping"""

    def test_bound_prop(self):
        """:title binds an expression with props rewritten"""
        ctx = JsxContext(prop_identifiers={"heading"})
        assert attrs_get('<p :title="heading" />', ctx) == ["title={props.heading}"]

    def test_same_name_shorthand(self):
        """:id with no value binds the same-named variable"""
        assert attrs_get("<p :aria-label />") == ["aria-label={ariaLabel}"]

    def test_spread(self):
        """v-bind without an argument spreads"""
        assert attrs_get('<p v-bind="extra" />') == ["{...extra}"]

    def test_dynamic_argument(self):
        """:[key] becomes a computed-key spread"""
        assert attrs_get('<p :[name]="value" />') == ["{...{ [name]: value }}"]

    def test_ref_binding_not_unwrapped(self):
        """:ref receives the ref object"""
        ctx = JsxContext(ref_identifiers={"el"})
        assert attrs_get('<p :ref="el" />', ctx) == ["ref={el}"]

    def test_camel_modifier(self):
        """.camel converts the attribute name"""
        assert attrs_get('<svg :view-box.camel="box" />') == ["viewBox={box}"]

    def test_style_and_key(self):
        """style and key bind directly"""
        assert attrs_get('<li :key="id" :style="{ color: c }" />') == ["key={id}", "style={{ color: c }}"]

    def test_dynamic_class_keys_mapped(self):
        """Object-literal keys go through the class map"""
        ctx = JsxContext(class_map={"is-open": 'styles["is-open"]', "wide": "styles.wide"})
        assert dynamicClass_map("{ 'is-open': open, wide }", ctx) == (
            'class={{[styles["is-open"]]: open, [styles.wide]: wide}}'
        )

    def test_dynamic_class_array_untouched(self):
        """Array class bindings are passed through"""
        ctx = JsxContext(class_map={"a": "styles.a"})
        assert dynamicClass_map("[a, b]", ctx) == "class={[a, b]}"


class TestDirectiveMapping:
    """Test registry-backed directives on elements"""

    def test_show(self):
        """v-show stays a directive prop"""
        ctx = JsxContext(ref_identifiers={"open"})
        assert attrs_get('<p v-show="open" />', ctx) == ["v-show={open.value}"]

    def test_html_and_text(self):
        """v-html / v-text bind innerHTML / textContent"""
        assert attrs_get('<div v-html="markup" />') == ["innerHTML={markup}"]
        assert attrs_get('<div v-text="label" />') == ["textContent={label}"]

    def test_model(self):
        """v-model keeps its argument"""
        ctx = JsxContext(ref_identifiers={"name"})
        assert attrs_get('<input v-model="name">', ctx) == ["v-model={name.value}"]
        assert attrs_get('<Dialog v-model:open="shown" />') == ["v-model:open={shown}"]

    def test_model_modifiers(self):
        """Modifiers switch to the array form"""
        assert attrs_get('<input v-model.trim.lazy="name">') == ["v-model={[name, ['trim', 'lazy']]}"]

    def test_cloak_and_once_omitted(self):
        """Compile hints produce nothing"""
        assert attrs_get("<p v-cloak v-once />") == []

    def test_pre_sets_skip_children(self):
        """v-pre asks for literal children"""
        assert attributes_generate(element_parse("<p v-pre>{{ x }}</p>"), JsxContext()).skip_children is True

    def test_walker_directives_skipped(self):
        """Control-flow and slot directives are not attributes"""
        assert attrs_get('<p v-if="a" v-for="i in n" class="x" />') == ['class="x"']

    def test_event(self):
        """@click maps to onClick"""
        assert attrs_get('<button @click.stop="toggle" />') == ["onClick={withModifiers(toggle, ['stop'])}"]

    def test_source_order(self):
        """Attributes keep their written order"""
        assert attrs_get('<a href="#" :title="t" @click="go" />') == ['href="#"', "title={t}", "onClick={go}"]

    def test_skip_names(self):
        """Names handled by the caller are skipped"""
        element = element_parse('<component is="div" :is="x" class="c" />')
        assert attributes_generate(element, JsxContext(), skip=("is",)).attrs == ['class="c"']


class TestFallbacks:
    """Test placeholders for directives without a JSX form"""

    def test_custom_directive(self):
        """A custom directive becomes a placeholder and a fallback item"""
        ctx = JsxContext()
        result = attributes_generate(element_parse('<input v-focus:x.lazy="on">'), ctx)

        source = 'v-focus:x.lazy="on"'
        reason = "Directive v-focus cannot be deterministically converted to JSX"
        assert result.attrs == []
        assert result.placeholders == [appsettings.placeHolder_make(reason, source)]
        assert len(ctx.fallbacks) == 1
        assert ctx.fallbacks[0].source == source
        assert ctx.fallbacks[0].reason == reason
        assert ctx.fallbacks[0].line == 1

    def test_memo(self):
        """v-memo falls back"""
        ctx = JsxContext()
        attributes_generate(element_parse('<div v-memo="[a]" />'), ctx)
        assert ctx.fallbacks[0].source == 'v-memo="[a]"'

    def test_dynamic_event(self):
        """@[evt] falls back with its own reason"""
        ctx = JsxContext()
        result = attributes_generate(element_parse('<p @[evt]="fn" />'), ctx)
        assert result.attrs == []
        assert "static event name" in ctx.fallbacks[0].reason
        assert ctx.fallbacks[0].source == 'v-on:[evt]="fn"'

    def test_dynamic_model_argument(self):
        """v-model:[arg] falls back"""
        ctx = JsxContext()
        attributes_generate(element_parse('<C v-model:[which]="v" />'), ctx)
        assert "dynamic argument" in ctx.fallbacks[0].reason

    def test_placeholder_format(self):
        """Placeholder comments name the tool, the reason and the original"""
        text = appsettings.placeHolder_make("Why", "v-x")
        assert text == "{/* TODO: vue-to-tsx - Why */}\n{/* Original: v-x */}"
        assert appsettings.placeHolder_sourceExtract(text) == ["v-x"]
