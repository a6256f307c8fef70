"""
Event mapping tests

Tests v-on / @event conversion to onEvent handler props.
"""

import pytest

from vuetsx.lib.events import event_process, eventName_build, handler_build
from vuetsx.models.conversion import JsxContext
from vuetsx.models.template import DirectiveNode


def on(arg, exp=None, modifiers=None, arg_static=True):
    """Build a v-on directive"""
    return DirectiveNode("on", arg=arg, exp=exp, modifiers=modifiers or [], arg_static=arg_static)


class TestEventNames:
    """Test prop names built from event names"""

    @pytest.mark.parametrize("event,modifiers,expected", [
        ("click", [], "onClick"),
        ("key-down", [], "onKeyDown"),
        ("update:modelValue", [], "onUpdate:modelValue"),
        ("click", ["capture"], "onClickCapture"),
        ("scroll", ["passive", "once"], "onScrollPassiveOnce"),
        ("click", ["stop"], "onClick"),
    ])
    def test_event_names(self, event, modifiers, expected):
        """Camel-cased, capitalized, native modifiers as suffixes"""
        assert eventName_build(event, modifiers) == expected


class TestHandlers:
    """Test handler expressions"""

    def test_identifier_passed_through(self):
        """A method name is the handler"""
        assert handler_build("save", JsxContext()) == "save"

    def test_member_chain_passed_through(self):
        """A member chain is the handler"""
        assert handler_build("store.save", JsxContext()) == "store.save"

    def test_arrow_passed_through(self):
        """An arrow function literal is the handler"""
        assert handler_build("(e) => log(e)", JsxContext()) == "(e) => log(e)"

    def test_call_wrapped(self):
        """A call becomes an arrow function"""
        assert handler_build("send(form)", JsxContext()) == "() => send(form)"

    def test_event_parameter(self):
        """$event in the expression becomes the arrow parameter"""
        ctx = JsxContext(ref_identifiers={"value"})
        assert handler_build("value = $event", ctx) == "($event) => value.value = $event"

    def test_statements_get_block_body(self):
        """Several statements are wrapped in braces"""
        ctx = JsxContext(ref_identifiers={"a"})
        assert handler_build("a++; done()", ctx) == "() => { a.value++; done() }"

    def test_empty_handler(self):
        """No expression gives a no-op"""
        assert handler_build(None, JsxContext()) == "() => {}"

    def test_emit_global(self):
        """$emit calls use the setup context emit"""
        ctx = JsxContext()
        assert handler_build("$emit('close')", ctx) == "() => emit('close')"
        assert "emit" in ctx.used_context_members


class TestEventProcess:
    """Test full directive processing"""

    def test_simple(self):
        """@click="toggle" -> onClick={toggle}"""
        assert event_process(on("click", "toggle"), JsxContext()) == ("onClick", "toggle")

    def test_with_modifiers(self):
        """Non-native modifiers go through withModifiers"""
        name, handler = event_process(on("submit", "send(form)", ["prevent", "capture"]), JsxContext())
        assert name == "onSubmitCapture"
        assert handler == "withModifiers(() => send(form), ['prevent'])"

    def test_dynamic_event_not_processed(self):
        """A dynamic event name is left to the fallback"""
        assert event_process(on("evt", "fn", arg_static=False), JsxContext()) is None

    def test_no_event_not_processed(self):
        """v-on without an argument is left to the fallback"""
        assert event_process(on(None, "handlers"), JsxContext()) is None
