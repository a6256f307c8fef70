"""
Stylesheet stage tests

Tests combining style blocks, unwrapping scoping pseudo-selectors, file
naming and the CSS module class map.
"""

import pytest

from vuetsx.lib.styles import (
    SCOPED_WARNING,
    classNames_collect,
    classReference_make,
    pseudoSelectors_strip,
    styleFilename_get,
    styles_extract,
)
from vuetsx.models.sfc import StyleBlock


class TestPseudoSelectors:
    """Test unwrapping of scoping pseudo-selectors"""

    @pytest.mark.parametrize("css,expected", [
        (".a :deep(.b) { }", ".a .b { }"),
        (".a ::v-deep(.b) { }", ".a .b { }"),
        ("::v-deep .b { }", ".b { }"),
        (":slotted(.item) { }", ".item { }"),
        ("::v-slotted(.item) { }", ".item { }"),
        (":global(.app) .x { }", ".app .x { }"),
    ])
    def test_unwrapped(self, css, expected):
        """Each form is reduced to the selector it wraps"""
        assert pseudoSelectors_strip(css) == expected


class TestFilenames:
    """Test stylesheet naming"""

    def test_plain(self):
        """Plain CSS uses the component name"""
        assert styleFilename_get("Card") == "Card.css"

    def test_preprocessor(self):
        """The lang attribute sets the extension"""
        assert styleFilename_get("Card", "scss") == "Card.scss"

    def test_module(self):
        """CSS modules get the .module infix"""
        assert styleFilename_get("Card", "less", css_modules=True) == "Card.module.less"


class TestClassNames:
    """Test class collection for the class map"""

    def test_selectors_only(self):
        """Declaration values are not mistaken for classes"""
        css = ".card { margin: 1.5em; background: url(img/bg.png) }\n.card-title, .active > .x { }"
        assert classNames_collect(css) == ["card", "card-title", "active", "x"]

    def test_comments_and_at_rules_ignored(self):
        """Comments and at-rule preludes are skipped"""
        css = "/* .ghost { } */\n@media (min-width: 1.5em) { .wide { } }"
        assert classNames_collect(css) == ["wide"]

    def test_references(self):
        """Identifiers use dot access, others brackets"""
        assert classReference_make("card") == "styles.card"
        assert classReference_make("is-open") == 'styles["is-open"]'


class TestExtract:
    """Test combining the style blocks of a component"""

    def test_no_blocks(self):
        """No style blocks give no stylesheet"""
        assert styles_extract([], "Card") is None

    def test_blocks_joined(self):
        """Blocks are joined, scoped styles warn"""
        result = styles_extract(
            [StyleBlock(".a { }\n", scoped=True), StyleBlock("\n.b :deep(.c) { }", lang="scss")],
            "Card",
            css_modules=False,
        )

        assert result.css == ".a { }\n\n.b .c { }"
        assert result.filename == "Card.scss"
        assert result.lang == "scss"
        assert result.class_map == {}
        assert result.warnings == [SCOPED_WARNING]

    def test_css_modules_class_map(self):
        """CSS modules build the class map"""
        result = styles_extract([StyleBlock(".card { } .is-open { }")], "Card", css_modules=True)

        assert result.filename == "Card.module.css"
        assert result.class_map == {"card": "styles.card", "is-open": 'styles["is-open"]'}
        assert result.warnings == []
