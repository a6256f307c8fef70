"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use VUETSX_ prefix (e.g., VUETSX_CSS_MODULES=true).

Settings can also be loaded from a .env file in the project root.
"""

import re
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use VUETSX_ prefix.

    Examples:
        VUETSX_FRAMEWORK_MODULE=vue
        VUETSX_CSS_MODULES=true
        VUETSX_LLM_MODEL=claude-sonnet-4-5
    """

    model_config = SettingsConfigDict(
        env_prefix="VUETSX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Module assembly configuration
    framework_module: str = Field(
        default="vue",
        description="Import source treated as the implicit framework module (sorted first)",
    )

    render_list_helper: str = Field(
        default="_renderList",
        description="Name of the list-iteration helper emitted into setup() when v-for is used",
    )

    # Fallback configuration
    fallback_tool_name: str = Field(
        default="vue-to-tsx",
        description="Tool name written into fallback placeholder comments",
    )

    # Stylesheet configuration
    css_modules: bool = Field(
        default=False,
        description="Emit <Name>.module.<ext> and rewrite class names through a styles import",
    )

    # Remote fallback configuration
    llm_model: str = Field(
        default="claude-sonnet-4-5",
        description="Model used to resolve fallback items",
    )

    llm_max_tokens: int = Field(
        default=4096,
        description="Maximum tokens in the fallback resolution response",
    )

    anthropic_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("VUETSX_ANTHROPIC_API_KEY", "ANTHROPIC_API_KEY"),
        description="API key for the remote fallback resolver",
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug output during conversion",
    )

    def placeHolder_make(self, reason: str, source: str) -> str:
        """
        Generate the placeholder emitted for a construct that needs the fallback.

        Args:
            reason: Human-readable reason the construct was not converted
            source: Original template snippet

        Returns:
            Two JSX block comments separated by a newline

        Example:
            >>> settings = AppSettings()
            >>> print(settings.placeHolder_make("Directive v-focus ...", "v-focus"))
            {/* TODO: vue-to-tsx - Directive v-focus ... */}
            {/* Original: v-focus */}
        """
        return (
            f"{{/* TODO: {self.fallback_tool_name} - {reason} */}}\n"
            f"{{/* Original: {source} */}}"
        )

    def placeHolder_pattern(self, reason: Optional[str] = None, source: Optional[str] = None) -> 're.Pattern[str]':
        """
        Compile a pattern matching placeholders, whatever their line indentation.

        Args:
            reason: Match only this reason (any single-line reason when None)
            source: Match only this snippet (any single-line snippet when None)

        Returns:
            Pattern with "reason" and "source" groups
        """
        def part(text: Optional[str]) -> str:
            if text is None:
                return '.*?'
            return r'\n[ \t]*'.join(re.escape(line) for line in text.split('\n'))

        return re.compile(
            r'\{/\* TODO: ' + re.escape(self.fallback_tool_name)
            + r' - (?P<reason>' + part(reason) + r') \*/\}\n[ \t]*'
            r'\{/\* Original: (?P<source>' + part(source) + r') \*/\}'
        )

    def placeHolder_sourceExtract(self, text: str) -> list[str]:
        """
        Recover the original snippets of every placeholder found in text.

        Args:
            text: Generated module text

        Returns:
            Snippets in order of appearance (empty list if none)
        """
        return [match.group('source') for match in self.placeHolder_pattern().finditer(text)]

    def apiKey_get(self) -> Optional[str]:
        """Return the configured API key, or None when unset"""
        return self.anthropic_api_key or None


# Singleton instance - import this in your code
appsettings = AppSettings()
