"""
Stylesheet stage

Combines the <style> blocks of a component into one companion stylesheet.
Framework scoping pseudo-selectors have no meaning outside a compiled SFC,
so they are unwrapped to the selector they contain:

    .list :deep(.item)      -> .list .item
    ::v-deep .item          -> .item
    :slotted(.item)         -> .item
    :global(.app)           -> .app

Preprocessor sources (scss, less, ...) are kept as written; the bundler
compiles them.

With CSS modules enabled the stylesheet becomes <Name>.module.<ext> and every
class selector found in it is entered into the class map, which the attribute
mapper uses to turn class="card" into class={styles.card}.
"""

import re
from typing import Dict, List, Optional

from ..config.settings import appsettings
from ..models.sfc import StyleBlock, StyleResult
from .log import LOG


PSEUDO_SELECTOR_PATTERNS = [
    (re.compile(r'::v-deep\(([^)]+)\)'), r'\1'),
    (re.compile(r'::v-deep\s+'), ''),
    (re.compile(r':deep\(([^)]+)\)'), r'\1'),
    (re.compile(r'::v-slotted\(([^)]+)\)'), r'\1'),
    (re.compile(r':slotted\(([^)]+)\)'), r'\1'),
    (re.compile(r':global\(([^)]+)\)'), r'\1'),
]

CLASS_SELECTOR_RE = re.compile(r'\.(-?[_a-zA-Z][\w-]*)')
NOISE_RE = re.compile(r'/\*.*?\*/|"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\'|url\([^)]*\)', re.DOTALL)
SELECTOR_PRELUDE_RE = re.compile(r'([^{};]*)\{')

SCOPED_WARNING = (
    "Scoped styles detected. The output uses plain CSS (no scoping). "
    "Review class usage to ensure styles are applied correctly."
)


def pseudoSelectors_strip(css: str) -> str:
    """
    Unwrap framework scoping pseudo-selectors.

    Example:
        >>> pseudoSelectors_strip(".a :deep(.b) { color: red }")
        '.a .b { color: red }'
    """
    for pattern, replacement in PSEUDO_SELECTOR_PATTERNS:
        css = pattern.sub(replacement, css)
    return css


def styleFilename_get(component_name: str, lang: Optional[str] = None, css_modules: bool = False) -> str:
    """
    Name of the companion stylesheet.

    Example:
        >>> styleFilename_get("Card", "scss", css_modules=True)
        'Card.module.scss'
    """
    ext = lang or 'css'
    if css_modules:
        return f'{component_name}.module.{ext}'
    return f'{component_name}.{ext}'


def classReference_make(class_name: str) -> str:
    """Reference expression for a class exported by a CSS module"""
    if re.match(r'^[A-Za-z_$][\w$]*$', class_name):
        return f'styles.{class_name}'
    return f'styles["{class_name}"]'


def classNames_collect(css: str) -> List[str]:
    """
    Collect class names used in selectors, in first-seen order.

    Only rule preludes (the text right before "{") are searched, so
    declaration values such as "1.5em" or "file.png" are never taken for
    classes. Comments, strings, url() values and at-rules are ignored.
    """
    text = NOISE_RE.sub(' ', css)

    names: List[str] = []
    for prelude in SELECTOR_PRELUDE_RE.findall(text):
        if prelude.strip().startswith('@'):
            continue
        for match in CLASS_SELECTOR_RE.finditer(prelude):
            if match.group(1) not in names:
                names.append(match.group(1))
    return names


def styles_extract(
    styles: List[StyleBlock], component_name: str, css_modules: Optional[bool] = None
) -> Optional[StyleResult]:
    """
    Combine the style blocks of a component.

    Args:
        styles: Style blocks in source order
        component_name: Component name used for the file name
        css_modules: Emit a CSS module with a class map (defaults to settings)

    Returns:
        StyleResult, or None when the component has no style blocks
    """
    if not styles:
        return None

    if css_modules is None:
        css_modules = appsettings.css_modules

    warnings: List[str] = []
    if any(block.scoped for block in styles):
        warnings.append(SCOPED_WARNING)

    lang = next((block.lang for block in styles if block.lang), None)
    css = pseudoSelectors_strip('\n\n'.join(block.content.strip() for block in styles))

    class_map: Dict[str, str] = {}
    if css_modules:
        class_map = {name: classReference_make(name) for name in classNames_collect(css)}

    LOG(f"Styles: {len(styles)} block(s), lang={lang or 'css'}, {len(class_map)} mapped class(es)", level=2)

    return StyleResult(
        css=css,
        class_map=class_map,
        filename=styleFilename_get(component_name, lang, css_modules),
        lang=lang,
        warnings=warnings,
    )
