"""
Remote fallback resolution tests

Tests prompt construction, reply parsing, placeholder substitution and the
batched request, using a stub client in place of the Anthropic SDK client.
"""

import asyncio
from types import SimpleNamespace

import anthropic
import httpx

from vuetsx.config.settings import appsettings
from vuetsx.lib.fallback import (
    fallbacks_resolve,
    prompt_build,
    replacements_apply,
    response_parse,
)
from vuetsx.models.conversion import FallbackItem


ITEMS = [
    FallbackItem(source='v-focus', reason='Directive v-focus cannot be deterministically converted to JSX'),
    FallbackItem(source='v-memo="[a]"', reason='Directive v-memo cannot be deterministically converted to JSX'),
]


class StubMessages:
    """messages endpoint returning a canned reply (or raising)"""

    def __init__(self, text: str = "", error: Exception = None):
        self.text = text
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(content=[
            SimpleNamespace(type="text", text=self.text),
            SimpleNamespace(type="tool_use", name="ignored"),
        ])


class StubClient:
    """Client exposing the messages endpoint"""

    def __init__(self, text: str = "", error: Exception = None):
        self.messages = StubMessages(text, error)


class TestPrompt:
    """Test the batched prompt"""

    def test_items_numbered(self):
        """Each item appears with its reason and source"""
        prompt = prompt_build(ITEMS, "Card")

        assert '"Card"' in prompt
        assert "[1] Reason: Directive v-focus" in prompt
        assert '[2] Reason: Directive v-memo' in prompt
        assert 'Source: v-memo="[a]"' in prompt
        assert "JSON array" in prompt


class TestResponse:
    """Test parsing of the model reply"""

    def test_first_array_used(self):
        """Replacements are matched to items by position"""
        text = 'Here you go:\n["<input ref={el} />", "<div />"]\nDone.'
        assert response_parse(text, ITEMS) == {
            "v-focus": "<input ref={el} />",
            'v-memo="[a]"': "<div />",
        }

    def test_blank_entries_skipped(self):
        """Blank and non-string entries are ignored"""
        assert response_parse('["", 3]', ITEMS) == {}

    def test_no_array(self):
        """A reply without an array gives nothing"""
        assert response_parse("Sorry, I cannot help.", ITEMS) == {}

    def test_invalid_json(self):
        """A malformed array gives nothing"""
        assert response_parse("[not json]", ITEMS) == {}


class TestReplacement:
    """Test substitution of placeholders"""

    def test_placeholders_replaced(self):
        """Each resolved placeholder is replaced once"""
        first = appsettings.placeHolder_make(ITEMS[0].reason, ITEMS[0].source)
        second = appsettings.placeHolder_make(ITEMS[1].reason, ITEMS[1].source)
        tsx = f"<div>{first}\n<input />{second}\n<div /></div>"

        result = replacements_apply(tsx, ITEMS, {"v-focus": "{/* focused */}"})

        assert first not in result
        assert "{/* focused */}" in result
        assert second in result


class TestResolve:
    """Test the batched request"""

    def test_one_request(self):
        """All items go out in one request and come back mapped"""
        client = StubClient('["<input />", "<div />"]')
        result = asyncio.run(fallbacks_resolve(ITEMS, "Card", model="test-model", client=client))

        assert result == {"v-focus": "<input />", 'v-memo="[a]"': "<div />"}
        assert len(client.messages.calls) == 1
        call = client.messages.calls[0]
        assert call["model"] == "test-model"
        assert call["max_tokens"] == appsettings.llm_max_tokens
        assert call["messages"][0]["role"] == "user"

    def test_nothing_to_resolve(self):
        """No items means no request"""
        client = StubClient("[]")
        assert asyncio.run(fallbacks_resolve([], "Card", client=client)) == {}
        assert client.messages.calls == []

    def test_api_error(self):
        """An API error leaves everything unresolved"""
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        client = StubClient(error=anthropic.APIConnectionError(request=request))
        assert asyncio.run(fallbacks_resolve(ITEMS, "Card", client=client)) == {}

    def test_no_api_key(self, monkeypatch):
        """Without a key and without a client nothing is sent"""
        monkeypatch.setattr(appsettings, "anthropic_api_key", "")
        assert asyncio.run(fallbacks_resolve(ITEMS, "Card")) == {}

    def test_multiline_snippet_indented(self):
        """A snippet spanning lines is found after the block is indented"""
        item = FallbackItem(source='v-x="{\n  a: 1\n}"', reason="Unsupported")
        placeholder = appsettings.placeHolder_make(item.reason, item.source)
        tsx = "      <>" + placeholder.replace("\n", "\n      ") + "</>"

        result = replacements_apply(tsx, [item], {item.source: "<i />"})

        assert result == "      <><i /></>"

    def test_same_pattern_as_extraction(self):
        """Snippets found by extraction are the ones substitution replaces"""
        first = appsettings.placeHolder_make(ITEMS[0].reason, ITEMS[0].source)
        tsx = "<div>\n    " + first.replace("\n", "\n    ") + "\n</div>"

        assert appsettings.placeHolder_sourceExtract(tsx) == [ITEMS[0].source]
        assert appsettings.placeHolder_sourceExtract(
            replacements_apply(tsx, ITEMS, {ITEMS[0].source: "<b />"})
        ) == []
