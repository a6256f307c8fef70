"""
Terminal syntax highlighting for generated output

Used by the CLI dry run to print generated modules and stylesheets.
"""

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound


def lexer_get(filename: str) -> Lexer:
    """
    Pick a lexer from a generated file name.

    .tsx modules use the TypeScript lexer; stylesheets use their
    preprocessor lexer (css, scss, less, ...). Unknown kinds fall back to
    plain text.
    """
    language = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
    if language in ('tsx', 'ts'):
        language = 'typescript'
    try:
        return get_lexer_by_name(language)
    except ClassNotFound:
        return TextLexer()


def text_highlight(text: str, filename: str) -> str:
    """
    Highlight generated text for terminal output.

    Args:
        text: Generated module or stylesheet text
        filename: Output file name (selects the lexer)

    Returns:
        Text with ANSI color sequences
    """
    return highlight(text, lexer_get(filename), TerminalFormatter())
