"""
Parser tests - block splitting and template tokenizing

Tests how a .vue source is split into template, script and style blocks,
how the template is turned into a node tree, and how malformed input is
reported.
"""

import pytest

from vuetsx.lib.parser import Parser
from vuetsx.models.template import (
    AttributeNode,
    CommentNode,
    DirectiveNode,
    ElementNode,
    InterpolationNode,
    TextNode,
)


def template_parse(markup: str):
    """Parse a bare template and return its root children"""
    sfc = Parser(f"<template>{markup}</template>").parse()
    assert sfc.errors == []
    return sfc.template_ast.children


class TestBlockSplitting:
    """Test locating the top-level blocks"""

    def test_empty_source(self):
        """Empty source has no blocks and no errors"""
        sfc = Parser("").parse()
        assert sfc.template_ast is None
        assert sfc.script is None
        assert sfc.script_setup is None
        assert sfc.styles == []
        assert sfc.errors == []

    def test_all_blocks(self):
        """Template, both scripts and several styles are found"""
        source = """
<script>
export default { name: 'Card' }
</script>

<script setup lang="ts">
const n = ref(0)
</script>

<template>
  <div>{{ n }}</div>
</template>

<style scoped>
.a { color: red }
</style>
<style lang="scss">
.b { color: blue }
</style>
"""
        sfc = Parser(source).parse()

        assert sfc.errors == []
        assert sfc.script.setup is False
        assert "export default" in sfc.script.content
        assert sfc.script_setup.setup is True
        assert sfc.script_setup.lang == "ts"
        assert sfc.script_setup.content.strip() == "const n = ref(0)"
        assert len(sfc.styles) == 2
        assert sfc.styles[0].scoped is True
        assert sfc.styles[0].lang is None
        assert sfc.styles[1].lang == "scss"
        assert sfc.template_ast is not None

    def test_nested_template_does_not_close_block(self):
        """A nested <template> must not end the top-level template block"""
        source = '<template><Card><template #header>Hi</template><p>Body</p></Card></template>'
        sfc = Parser(source).parse()

        assert sfc.errors == []
        card = sfc.template_ast.children[0]
        assert card.tag == "Card"
        assert [c.tag for c in card.children] == ["template", "p"]

    def test_custom_blocks_skipped(self):
        """Unknown top-level blocks are ignored"""
        sfc = Parser('<i18n>{ "en": {} }</i18n><template><p/></template>').parse()
        assert sfc.errors == []
        assert sfc.template_ast.children[0].tag == "p"

    def test_duplicate_template_is_error(self):
        """Two top-level templates are rejected"""
        sfc = Parser("<template><a/></template><template><b/></template>").parse()
        assert sfc.template_ast is None
        assert "only one <template>" in sfc.errors[0]


class TestTemplateNodes:
    """Test the node kinds produced for template content"""

    def test_element_text_interpolation(self):
        """Elements hold text and trimmed interpolation content"""
        nodes = template_parse("<p>Hello {{  name  }}!</p>")
        p = nodes[0]

        assert isinstance(p, ElementNode)
        assert isinstance(p.children[0], TextNode)
        assert p.children[0].content == "Hello "
        assert isinstance(p.children[1], InterpolationNode)
        assert p.children[1].content == "name"
        assert p.children[2].content == "!"

    def test_comment(self):
        """Comments keep their raw content"""
        nodes = template_parse("<!-- note -->")
        assert isinstance(nodes[0], CommentNode)
        assert nodes[0].content == " note "

    def test_void_and_self_closing(self):
        """Void elements and <x /> have no children and need no end tag"""
        nodes = template_parse('<div><input type="text"><br><Icon /></div>')
        div = nodes[0]

        assert [c.tag for c in div.children] == ["input", "br", "Icon"]
        assert div.children[2].self_closing is True

    def test_entities_decoded_and_whitespace_condensed(self):
        """Text entities are decoded and runs of whitespace condensed"""
        nodes = template_parse("<p>a &amp;\n   b</p>")
        assert nodes[0].children[0].content == "a & b"

    def test_inner_source_recorded(self):
        """inner_source is the raw text between start and end tag"""
        nodes = template_parse("<pre v-pre>{{ raw }}</pre>")
        assert nodes[0].inner_source == "{{ raw }}"

    def test_locations(self):
        """Locations are 1-based and relative to the whole file"""
        sfc = Parser("<template>\n  <p>x</p>\n</template>").parse()
        p = sfc.template_ast.children[1]
        assert p.loc.line == 2
        assert p.loc.column == 3


class TestDirectives:
    """Test directive syntax, shorthands, arguments and modifiers"""

    def test_static_attribute(self):
        """Plain attributes stay static; bare ones have no value"""
        props = template_parse('<input class="x" disabled>')[0].props

        assert props[0] == AttributeNode(name="class", value="x", loc=props[0].loc)
        assert props[1].name == "disabled"
        assert props[1].value is None

    def test_bind_shorthand(self):
        """:title is v-bind with an argument"""
        directive = template_parse('<p :title="heading" />')[0].props[0]

        assert isinstance(directive, DirectiveNode)
        assert directive.name == "bind"
        assert directive.arg == "title"
        assert directive.exp == "heading"

    def test_prop_shorthand(self):
        """.value is v-bind with the prop modifier"""
        directive = template_parse('<input .value="text" />')[0].props[0]
        assert directive.name == "bind"
        assert directive.arg == "value"
        assert directive.modifiers == ["prop"]

    def test_on_with_modifiers(self):
        """@click.stop.prevent keeps modifiers in order"""
        directive = template_parse('<a @click.stop.prevent="go" />')[0].props[0]

        assert directive.name == "on"
        assert directive.arg == "click"
        assert directive.modifiers == ["stop", "prevent"]

    def test_slot_shorthand(self):
        """#header="{ title }" is v-slot"""
        directive = template_parse('<template #header="{ title }"></template>')[0].props[0]
        assert directive.name == "slot"
        assert directive.arg == "header"
        assert directive.exp == "{ title }"

    def test_dynamic_argument(self):
        """v-bind:[key] has a dynamic argument"""
        directive = template_parse('<p v-bind:[key]="v" />')[0].props[0]
        assert directive.arg == "key"
        assert directive.arg_static is False

    def test_update_event_argument(self):
        """@update:modelValue keeps the colon in the argument"""
        directive = template_parse('<C @update:modelValue="set" />')[0].props[0]
        assert directive.arg == "update:modelValue"

    def test_directive_without_value(self):
        """v-else has no expression"""
        nodes = template_parse('<a v-if="x" /><b v-else />')
        directive = nodes[1].directive_find("else")
        assert directive is not None
        assert directive.exp is None

    def test_pre_keeps_content_static(self):
        """Inside v-pre nothing is a directive or interpolation"""
        pre = template_parse('<div v-pre><p :x="y">{{ z }}</p></div>')[0]
        p = pre.children[0]

        assert isinstance(p.props[0], AttributeNode)
        assert p.props[0].name == ":x"
        assert isinstance(p.children[0], TextNode)


class TestErrors:
    """Test that malformed input is reported, never raised"""

    def test_missing_end_tag(self):
        """An unclosed element is a parse error"""
        sfc = Parser("<template><div></template>").parse()
        assert sfc.template_ast is None
        assert sfc.errors[0].splitlines()[0] == "Element <div> is missing end tag"

    def test_mismatched_end_tag(self):
        """A wrong end tag is a parse error"""
        sfc = Parser("<template><div></span></template>").parse()
        assert sfc.errors
        assert "Line" in sfc.errors[0]

    def test_unterminated_interpolation(self):
        """A mustache without its end sign is a parse error"""
        sfc = Parser("<template><p>{{ x</p></template>").parse()
        assert "Interpolation end sign was not found" in sfc.errors[0]

    def test_unterminated_block(self):
        """A block without its end tag is a parse error"""
        sfc = Parser("<template><p/>").parse()
        assert sfc.errors


@pytest.mark.parametrize("markup,tag", [
    ("<my-card />", "my-card"),
    ("<Ui.Button />", "Ui.Button"),
    ("<svg:rect />", "svg:rect"),
])
def test_tag_names_preserved(markup, tag):
    """Component and namespaced tag names are kept as written"""
    assert template_parse(markup)[0].tag == tag
