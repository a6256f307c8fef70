"""
Parser for Vue single-file components

Splits a .vue source into its blocks and tokenizes the <template> block into
a tree of template nodes.

The parser operates in two phases:
1. Blocks: locate top-level <template>, <script>, <script setup> and <style>
   blocks (other custom blocks are skipped)
2. Template: scan the template content into elements, text, interpolations
   and comments with a stack of open elements

Key features:
- Directive shorthands (:prop, .prop, @event, #slot) and dynamic [args]
- Modifier extraction (@click.stop.prevent)
- Void elements and self-closing tags
- Entity decoding and whitespace condensing in text
- Line/column tracking relative to the whole file for error reporting

Errors never escape parse(): they are collected into ParsedSFC.errors.

Example:
    >>> sfc = Parser('<template><p v-if="ok">{{ msg }}</p></template>').parse()
    >>> sfc.template_ast.children[0].tag
    'p'
    >>> sfc.template_ast.children[0].directive_find("if").exp
    'ok'
"""

import re
import html
from bisect import bisect_right
from typing import List, Optional, Tuple

from .log import LOG
from .text import SELF_CLOSING_TAGS
from ..models.sfc import ParsedSFC, ScriptBlock, StyleBlock
from ..models.template import (
    AttributeNode,
    CommentNode,
    DirectiveNode,
    ElementNode,
    InterpolationNode,
    Prop,
    RootNode,
    SourceLocation,
    TemplateChildNode,
    TextNode,
)


TAG_NAME_RE = re.compile(r'[A-Za-z][\w\-.:]*')
ATTR_NAME_RE = re.compile(r'''[^\s"'<>/=]+''')
BLOCK_ATTR_RE = re.compile(r'''([^\s"'<>/=]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s>]+)))?''')
DIRECTIVE_RE = re.compile(r'^v-([A-Za-z0-9\-]+)(.*)$', re.DOTALL)

SHORTHANDS = {
    ':': 'bind',
    '.': 'bind',
    '@': 'on',
    '#': 'slot',
}


class Parser:
    """
    Parser for .vue single-file components

    Handles:
    - Block splitting (template, script, script setup, style)
    - Nested elements, including nested <template> tags
    - Directives with arguments and modifiers
    - Error reporting with line numbers and a context caret
    """

    def __init__(self, source: str, debug: bool = False):
        """
        Initialize parser with source text

        Args:
            source: Raw .vue file contents
            debug: Enable debug output for parser operations

        Attributes:
            source: Source text being parsed
            debug: Debug mode flag
            position: Current character position in source (for errors)
            line_starts: Offsets of the first character of every line
            template_offset: Offset of the template content within source
        """
        self.source = source
        self.debug = debug
        self.position = 0
        self.line_starts = [0] + [m.end() for m in re.finditer(r'\n', source)]
        self.template_offset = 0

    def parse(self) -> ParsedSFC:
        """
        Parse source text into a ParsedSFC

        Main entry point. Splits the blocks and parses the template. A syntax
        error anywhere is recorded in errors and the template tree is left
        empty, since a partial tree would produce partial output.

        Returns:
            ParsedSFC (errors is non-empty when the source is malformed)

        Example:
            >>> sfc = Parser("<template><div></template>").parse()
            >>> sfc.errors[0].splitlines()[0]
            'Element <div> is missing end tag'
        """
        result = ParsedSFC()
        try:
            self.blocks_split(result)
            if result.template_source is not None:
                result.template_ast = self.template_parse(result.template_source, self.template_offset)
        except SyntaxError as exc:
            result.template_ast = None
            result.errors.append(str(exc).strip())
            LOG(f"Parse error: {str(exc).strip().splitlines()[0]}", level=2)
        return result

    def location_get(self, offset: int, source: str = "") -> SourceLocation:
        """
        Compute a 1-based line/column location for an absolute offset

        Args:
            offset: Character offset into the whole file
            source: Raw source text of the located node
        """
        line_index = bisect_right(self.line_starts, offset) - 1
        return SourceLocation(
            line=line_index + 1,
            column=offset - self.line_starts[line_index] + 1,
            offset=offset,
            source=source,
        )

    def blocks_split(self, result: ParsedSFC) -> None:
        """
        Locate the top-level blocks and store them on result

        Raises:
            SyntaxError: On unterminated blocks or duplicate template/script
        """
        source = self.source
        pos = 0

        while True:
            start = source.find('<', pos)
            if start == -1:
                break
            self.position = start

            if source.startswith('<!--', start):
                close = source.find('-->', start + 4)
                if close == -1:
                    self.error("Unterminated comment")
                pos = close + 3
                continue

            match = TAG_NAME_RE.match(source, start + 1)
            if not match:
                pos = start + 1
                continue

            tag = match.group(0).lower()
            tag_end = self.startTag_findEnd(source, match.end())
            attrs_text = source[match.end():tag_end]
            attrs = self.blockAttributes_parse(attrs_text)
            content_start = tag_end + 1

            if attrs_text.rstrip().endswith('/'):
                pos = content_start
                continue

            if tag == 'template':
                close_start = self.templateClose_find(source, content_start)
            else:
                close_match = re.compile(r'</' + re.escape(tag) + r'\s*>', re.IGNORECASE).search(source, content_start)
                close_start = close_match.start() if close_match else -1
            if close_start == -1:
                self.error(f"Element <{tag}> is missing end tag")

            content = source[content_start:close_start]
            pos = source.find('>', close_start) + 1

            if tag == 'template':
                if result.template_source is not None:
                    self.error("Single file component can contain only one <template> element")
                result.template_source = content
                self.template_offset = content_start
            elif tag == 'script':
                block = ScriptBlock(content=content, lang=attrs.get('lang'), setup='setup' in attrs)
                if block.setup:
                    if result.script_setup is not None:
                        self.error("Single file component can contain only one <script setup> element")
                    result.script_setup = block
                else:
                    if result.script is not None:
                        self.error("Single file component can contain only one <script> element")
                    result.script = block
            elif tag == 'style':
                result.styles.append(StyleBlock(
                    content=content,
                    scoped='scoped' in attrs,
                    lang=attrs.get('lang'),
                ))
            else:
                LOG(f"Skipping custom block <{tag}>", level=3)

    def blockAttributes_parse(self, text: str) -> dict:
        """Parse the attributes of a block start tag into name -> value ("" if bare)"""
        attrs = {}
        for m in BLOCK_ATTR_RE.finditer(text.rstrip('/')):
            value = m.group(2) if m.group(2) is not None else m.group(3) if m.group(3) is not None else m.group(4)
            attrs[m.group(1).lower()] = value if value is not None else ""
        return attrs

    def startTag_findEnd(self, source: str, pos: int) -> int:
        """
        Find the ">" closing a start tag, skipping quoted attribute values

        Raises:
            SyntaxError: If the start tag is never closed
        """
        quote = None
        while pos < len(source):
            ch = source[pos]
            if quote:
                if ch == quote:
                    quote = None
            elif ch in ('"', "'"):
                quote = ch
            elif ch == '>':
                return pos
            pos += 1
        self.error("Unterminated start tag")
        return -1

    def templateClose_find(self, source: str, pos: int) -> int:
        """
        Find the </template> matching a top-level <template>

        Nested <template> elements (slots, fragments) are counted so their
        close tags are not mistaken for the block end.

        Returns:
            Offset of the matching "</template", or -1 if absent
        """
        depth = 1
        tag_re = re.compile(r'<(/?)template\b', re.IGNORECASE)
        while True:
            m = tag_re.search(source, pos)
            if not m:
                return -1
            if m.group(1):
                depth -= 1
                if depth == 0:
                    return m.start()
                pos = m.end()
                continue
            tag_end = self.startTag_findEnd(source, m.end())
            if not source[m.end():tag_end].rstrip().endswith('/'):
                depth += 1
            pos = tag_end + 1

    def template_parse(self, content: str, base_offset: int = 0) -> RootNode:
        """
        Parse template content into a RootNode

        Args:
            content: Text between <template> and </template>
            base_offset: Offset of content within the whole file

        Returns:
            RootNode with the top-level children

        Raises:
            SyntaxError: On unterminated comments, interpolations or tags, and
                         on mismatched end tags
        """
        root = RootNode(loc=self.location_get(base_offset, content))
        stack: List[Tuple[ElementNode, int]] = []
        pre_depth = 0
        pos = 0

        def children_get() -> List[TemplateChildNode]:
            return stack[-1][0].children if stack else root.children

        while pos < len(content):
            self.position = base_offset + pos

            if content.startswith('<!--', pos):
                close = content.find('-->', pos + 4)
                if close == -1:
                    self.error("Unterminated comment")
                node = CommentNode(
                    content=content[pos + 4:close],
                    loc=self.location_get(base_offset + pos, content[pos:close + 3]),
                )
                children_get().append(node)
                pos = close + 3
                continue

            if content.startswith('</', pos):
                match = TAG_NAME_RE.match(content, pos + 2)
                if not match:
                    self.error("Invalid end tag")
                tag = match.group(0)
                close = content.find('>', match.end())
                if close == -1:
                    self.error(f"Unterminated end tag </{tag}>")
                if not stack:
                    self.error(f"Invalid end tag </{tag}>")
                element, inner_start = stack[-1]
                if element.tag != tag:
                    self.error(f"Element <{element.tag}> is missing end tag")
                stack.pop()
                element.inner_source = content[inner_start:pos]
                start_offset = element.loc.offset - base_offset
                element.loc.source = content[start_offset:close + 1]
                if pre_depth and element.directive_find('pre') is not None and pre_depth == len(stack) + 1:
                    pre_depth = 0
                pos = close + 1
                continue

            if content[pos] == '<' and pos + 1 < len(content) and content[pos + 1].isalpha():
                element, pos = self.startTag_parse(content, pos, base_offset, in_pre=bool(pre_depth))
                children_get().append(element)
                if not element.self_closing and element.tag.lower() not in SELF_CLOSING_TAGS:
                    stack.append((element, pos))
                    if not pre_depth and element.directive_find('pre') is not None:
                        pre_depth = len(stack)
                continue

            if content.startswith('{{', pos) and not pre_depth:
                close = content.find('}}', pos + 2)
                if close == -1:
                    self.error("Interpolation end sign was not found")
                children_get().append(InterpolationNode(
                    content=content[pos + 2:close].strip(),
                    loc=self.location_get(base_offset + pos, content[pos:close + 2]),
                ))
                pos = close + 2
                continue

            end = self.textEnd_find(content, pos, in_pre=bool(pre_depth))
            raw = content[pos:end]
            children_get().append(TextNode(
                content=self.text_normalize(raw),
                loc=self.location_get(base_offset + pos, raw),
            ))
            pos = end

        if stack:
            element = stack[-1][0]
            self.position = element.loc.offset
            self.error(f"Element <{element.tag}> is missing end tag")

        return root

    def textEnd_find(self, content: str, pos: int, in_pre: bool = False) -> int:
        """Return the offset where a text run starting at pos ends"""
        end = pos + 1
        while end < len(content):
            if content[end] == '<' and (content.startswith('</', end) or content.startswith('<!--', end)
                                        or (end + 1 < len(content) and content[end + 1].isalpha())):
                break
            if not in_pre and content.startswith('{{', end):
                break
            end += 1
        return end

    def text_normalize(self, raw: str) -> str:
        """
        Decode entities and condense whitespace in a text run

        Whitespace-only runs are returned unchanged; the walker decides
        whether they survive.
        """
        if not raw.strip():
            return raw
        return re.sub(r'\s+', ' ', html.unescape(raw))

    def startTag_parse(
        self, content: str, pos: int, base_offset: int, in_pre: bool = False
    ) -> Tuple[ElementNode, int]:
        """
        Parse a start tag beginning at pos

        Args:
            content: Template content
            pos: Offset of "<"
            base_offset: Offset of content within the whole file
            in_pre: Inside a v-pre subtree (attributes stay static)

        Returns:
            Tuple of (element without children, offset just past the tag)
        """
        match = TAG_NAME_RE.match(content, pos + 1)
        tag = match.group(0)
        element = ElementNode(tag=tag, loc=self.location_get(base_offset + pos))
        cursor = match.end()

        while True:
            while cursor < len(content) and content[cursor].isspace():
                cursor += 1
            self.position = base_offset + cursor
            if cursor >= len(content):
                self.error(f"Unterminated start tag <{tag}>")
            if content.startswith('/>', cursor):
                element.self_closing = True
                cursor += 2
                break
            if content[cursor] == '>':
                cursor += 1
                break

            name_match = ATTR_NAME_RE.match(content, cursor)
            if not name_match:
                self.error(f"Invalid attribute in <{tag}>")
            attr_start = cursor
            name = name_match.group(0)
            cursor = name_match.end()
            value = None

            lookahead = cursor
            while lookahead < len(content) and content[lookahead].isspace():
                lookahead += 1
            if lookahead < len(content) and content[lookahead] == '=':
                cursor = lookahead + 1
                while cursor < len(content) and content[cursor].isspace():
                    cursor += 1
                if cursor < len(content) and content[cursor] in ('"', "'"):
                    quote = content[cursor]
                    close = content.find(quote, cursor + 1)
                    if close == -1:
                        self.error(f"Unterminated attribute value in <{tag}>")
                    value = content[cursor + 1:close]
                    cursor = close + 1
                else:
                    value_match = re.compile(r'[^\s>]+').match(content, cursor)
                    value = value_match.group(0) if value_match else ""
                    cursor = value_match.end() if value_match else cursor

            raw = content[attr_start:cursor]
            loc = self.location_get(base_offset + attr_start, raw)
            element.props.append(self.attribute_make(name, value, raw, loc, in_pre))

        if element.self_closing or tag.lower() in SELF_CLOSING_TAGS:
            element.loc.source = content[pos:cursor]
        return element, cursor

    def attribute_make(
        self, name: str, value: Optional[str], raw: str, loc: SourceLocation, in_pre: bool = False
    ) -> Prop:
        """
        Build an AttributeNode or DirectiveNode from one written attribute

        Args:
            name: Attribute name as written (e.g. "@click.stop", ":[key]", "v-model.trim")
            value: Attribute value, None for a bare attribute
            raw: Attribute text as written
            loc: Location of the attribute
            in_pre: Inside a v-pre subtree (everything is static)

        Returns:
            DirectiveNode for v-*, :, ., @ and # attributes, otherwise AttributeNode

        Example:
            "@click.stop.prevent" with value "save" ->
            DirectiveNode(name="on", arg="click", modifiers=["stop", "prevent"], exp="save")
        """
        directive_name = None
        rest = ""

        if not in_pre or name == 'v-pre':
            match = DIRECTIVE_RE.match(name)
            if match:
                directive_name = match.group(1)
                rest = match.group(2)
                if rest and rest[0] not in ':.':
                    directive_name = None
            elif name[0] in SHORTHANDS and len(name) > 1:
                directive_name = SHORTHANDS[name[0]]
                rest = (':' + name[1:]) if name[0] != '.' else (':' + name[1:] + '.prop')

        if directive_name is None:
            return AttributeNode(
                name=name,
                value=html.unescape(value) if value is not None else None,
                loc=loc,
            )

        arg = None
        arg_static = True
        modifiers: List[str] = []

        if rest.startswith(':'):
            rest = rest[1:]
            if rest.startswith('['):
                close = rest.find(']')
                if close == -1:
                    self.error(f"Unterminated dynamic argument in '{name}'")
                arg = rest[1:close]
                arg_static = False
                rest = rest[close + 1:]
            else:
                dot = rest.find('.')
                arg = rest if dot == -1 else rest[:dot]
                rest = '' if dot == -1 else rest[dot:]
            if arg == '':
                arg = None

        if rest.startswith('.'):
            modifiers = [m for m in rest[1:].split('.') if m]

        exp = value.strip() if value is not None else None
        return DirectiveNode(
            name=directive_name,
            arg=arg,
            exp=exp if exp else None,
            modifiers=modifiers,
            arg_static=arg_static,
            raw=raw,
            loc=loc,
        )

    def error(self, message: str) -> None:
        """
        Report parser error with source context

        Raises SyntaxError with detailed error message including:
        - Custom error message
        - Line and column of the current position
        - Source context (±40 characters around error)
        - Caret indicator pointing to error position

        Args:
            message: Human-readable error description

        Raises:
            SyntaxError: Always (this is an error reporting function)

        Example output:
            Element <div> is missing end tag
            Line 3, column 5
            Context: ...<template>\\n  <div>\\n...
                                  ^
        """
        loc = self.location_get(min(self.position, len(self.source)))
        context_start = max(0, self.position - 40)
        context_end = min(len(self.source), self.position + 40)
        context = self.source[context_start:context_end].replace('\n', '\\n')
        caret_offset = len(self.source[context_start:self.position].replace('\n', '\\n'))

        raise SyntaxError(
            f"{message}\n"
            f"Line {loc.line}, column {loc.column}\n"
            f"Context: ...{context}...\n"
            f"            {' ' * caret_offset}^"
        )
