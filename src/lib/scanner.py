"""
Balanced-delimiter scanning primitives

Script text is never parsed with a full grammar. Statement boundaries and
argument lists are found by scanning forward from a known opening delimiter
until nesting depth returns to zero. String literals and comments are skipped
so that delimiters inside them do not count.

Two scanners are provided:
- balanced_match(): one delimiter pair, e.g. ( ) or { }
- typeArgs_match(): a <...> type-argument region, tracking < > ( ) { } [ ]
  together and ignoring the > of an arrow (=>)

Example:
    >>> balanced_match("defineProps({ a: String })", 11, "(", ")").content
    '{ a: String }'
    >>> typeArgs_match("defineProps<{ f: () => void }>()", 11).content
    '{ f: () => void }'
"""

from typing import Optional

from ..models.script import BalancedMatch


QUOTES = ("'", '"', '`')

OPENERS = {'<': '>', '(': ')', '{': '}', '[': ']'}
CLOSERS = {v: k for k, v in OPENERS.items()}


def literal_skip(text: str, pos: int) -> int:
    """
    Skip a string literal or comment starting at pos.

    Args:
        text: Text being scanned
        pos: Index of a quote character or of "//" / "/*"

    Returns:
        Index just past the literal or comment, or pos unchanged when nothing
        skippable starts there. An unterminated literal runs to end of text.
    """
    ch = text[pos]
    if ch in QUOTES:
        i = pos + 1
        while i < len(text):
            if text[i] == '\\':
                i += 2
                continue
            if text[i] == ch:
                return i + 1
            i += 1
        return len(text)

    if text.startswith('//', pos):
        newline = text.find('\n', pos)
        return len(text) if newline == -1 else newline

    if text.startswith('/*', pos):
        close = text.find('*/', pos + 2)
        return len(text) if close == -1 else close + 2

    return pos


def balanced_match(text: str, start: int, open_char: str, close_char: str) -> Optional[BalancedMatch]:
    """
    Find the close delimiter matching the open delimiter at start.

    Scans forward from start, tracking nesting depth of one delimiter pair.
    Increments depth on open_char, decrements on close_char and returns when
    depth reaches 0. String literals and comments are skipped.

    Args:
        text: Text to scan
        start: Index of the opening delimiter
        open_char: Opening delimiter (e.g. "(")
        close_char: Closing delimiter (e.g. ")")

    Returns:
        BalancedMatch with the inner content and the index of the matching
        close delimiter, or None if text[start] is not open_char or the text
        ends before depth returns to 0

    Example:
        For text "f(a, (b)) + 1" at index 1:
        Returns BalancedMatch(content="a, (b)", end=8)

        Depth tracking: (1 a, (2 b )1 )0
    """
    if start >= len(text) or text[start] != open_char:
        return None

    depth = 1
    pos = start + 1

    while pos < len(text):
        skipped = literal_skip(text, pos)
        if skipped != pos:
            pos = skipped
            continue

        ch = text[pos]
        if ch == open_char:
            depth += 1
        elif ch == close_char:
            depth -= 1
            if depth == 0:
                return BalancedMatch(content=text[start + 1:pos], end=pos)
        pos += 1

    return None


def typeArgs_match(text: str, start: int) -> Optional[BalancedMatch]:
    """
    Find the > closing a type-argument region that opens at start.

    All four bracket kinds share one depth counter so that a > nested inside
    braces or parentheses cannot close the region early. The > of an arrow
    (=>) is never treated as a delimiter.

    Args:
        text: Text to scan
        start: Index of the opening "<"

    Returns:
        BalancedMatch for the region, or None when it is unbalanced

    Example:
        For text "<{ onClick: (e: MouseEvent) => void }>()" at index 0:
        Returns BalancedMatch(content="{ onClick: (e: MouseEvent) => void }", end=37)
    """
    if start >= len(text) or text[start] != '<':
        return None

    stack = ['<']
    pos = start + 1

    while pos < len(text):
        skipped = literal_skip(text, pos)
        if skipped != pos:
            pos = skipped
            continue

        ch = text[pos]
        if ch in OPENERS:
            stack.append(ch)
        elif ch in CLOSERS:
            if ch == '>' and text[pos - 1] == '=':
                pos += 1
                continue
            if stack[-1] != CLOSERS[ch]:
                # Mismatched close (e.g. a stray ">" comparison); ignore it
                if ch == '>':
                    pos += 1
                    continue
                return None
            stack.pop()
            if not stack:
                return BalancedMatch(content=text[start + 1:pos], end=pos)
        pos += 1

    return None


def topLevel_split(text: str, separators: str, openers: str = "{([", closers: str = "})]") -> list[str]:
    """
    Split text on separator characters that sit at nesting depth zero.

    Args:
        text: Text to split
        separators: Characters that split at depth zero (e.g. "," or ";\\n")
        openers: Characters that increase depth
        closers: Characters that decrease depth

    Returns:
        Stripped, non-empty pieces in order

    Example:
        >>> topLevel_split("a: 1, b: { c: 2, d: 3 }", ",")
        ['a: 1', 'b: { c: 2, d: 3 }']
    """
    pieces: list[str] = []
    depth = 0
    current_start = 0
    pos = 0

    while pos < len(text):
        skipped = literal_skip(text, pos) if text[pos] in QUOTES else pos
        if skipped != pos:
            pos = skipped
            continue

        ch = text[pos]
        if ch in openers:
            depth += 1
        elif ch in closers:
            if ch == '>' and pos > 0 and text[pos - 1] == '=':
                pos += 1
                continue
            depth -= 1
        elif depth == 0 and ch in separators:
            piece = text[current_start:pos].strip()
            if piece:
                pieces.append(piece)
            current_start = pos + 1
        pos += 1

    last = text[current_start:].strip()
    if last:
        pieces.append(last)
    return pieces


def braces_strip(text: str, open_char: str = '{', close_char: str = '}') -> str:
    """Remove one pair of enclosing delimiters (if present) and trim"""
    body = text.strip()
    if body.startswith(open_char):
        body = body[1:]
    if body.endswith(close_char):
        body = body[:-1]
    return body.strip()
