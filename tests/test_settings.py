"""
Settings, logging and highlighting tests
"""

from loguru import logger
from pygments.lexers import TextLexer

from vuetsx.config.settings import AppSettings, appsettings
from vuetsx.lib.highlight import lexer_get, text_highlight
from vuetsx.lib.log import LOG, WARN, component_context, state_connectToLogger
from vuetsx.models import ProgramState


class TestSettings:
    """Test environment configuration"""

    def test_defaults(self, monkeypatch):
        """Defaults apply without environment"""
        monkeypatch.delenv("VUETSX_CSS_MODULES", raising=False)
        settings = AppSettings()

        assert settings.framework_module == "vue"
        assert settings.render_list_helper == "_renderList"
        assert settings.css_modules is False

    def test_env_override(self, monkeypatch):
        """VUETSX_ variables override defaults"""
        monkeypatch.setenv("VUETSX_CSS_MODULES", "true")
        monkeypatch.setenv("VUETSX_LLM_MAX_TOKENS", "1024")
        settings = AppSettings()

        assert settings.css_modules is True
        assert settings.llm_max_tokens == 1024

    def test_api_key_aliases(self, monkeypatch):
        """The plain ANTHROPIC_API_KEY variable is accepted"""
        monkeypatch.delenv("VUETSX_ANTHROPIC_API_KEY", raising=False)
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
        assert AppSettings().apiKey_get() == "sk-test"

    def test_api_key_unset(self, monkeypatch):
        """An empty key reads as None"""
        monkeypatch.delenv("VUETSX_ANTHROPIC_API_KEY", raising=False)
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        assert AppSettings(_env_file=None).apiKey_get() is None


class TestPlaceholders:
    """Test placeholder text"""

    def test_format(self):
        """Two comment lines name the reason and the snippet"""
        assert appsettings.placeHolder_make("Unsupported", "v-foo") == (
            "{/* TODO: vue-to-tsx - Unsupported */}\n{/* Original: v-foo */}"
        )

    def test_extract(self):
        """Snippets are recovered, also from indented output"""
        text = (
            "<div>\n"
            + appsettings.placeHolder_make("A", "v-a")
            + "\n    "
            + appsettings.placeHolder_make("B", 'v-b="x"').replace("\n", "\n    ")
            + "\n</div>"
        )
        assert appsettings.placeHolder_sourceExtract(text) == ["v-a", 'v-b="x"']

    def test_custom_tool_name(self):
        """The tool name is configurable"""
        settings = AppSettings(fallback_tool_name="converter")
        assert settings.placeHolder_make("r", "s").startswith("{/* TODO: converter - r */}")


class TestLogging:
    """Test verbosity gating"""

    def test_levels(self):
        """LOG respects verbosity, WARN always logs"""
        messages = []
        sink = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
        try:
            state_connectToLogger(ProgramState(verbosity=1))
            LOG("normal", level=1)
            LOG("verbose", level=2)
            WARN("careful")
        finally:
            logger.remove(sink)

        assert messages == ["normal", "careful"]

    def test_component_tag(self):
        """Records inside a component context carry its name"""
        components = []
        sink = logger.add(lambda m: components.append(m.record["extra"]["component"]), level="DEBUG")
        try:
            with component_context("Card"):
                WARN("inside")
            WARN("outside")
        finally:
            logger.remove(sink)

        assert components == ["Card", "-"]


class TestHighlight:
    """Test terminal highlighting of generated files"""

    def test_lexers(self):
        """File names select the lexer"""
        assert lexer_get("Card.tsx").name == "TypeScript"
        assert lexer_get("Card.scss").name == "SCSS"
        assert isinstance(lexer_get("README"), TextLexer)

    def test_highlight(self):
        """Output keeps the text"""
        assert "defineComponent" in text_highlight("export default defineComponent({})\n", "Card.tsx")
