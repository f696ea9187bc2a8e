"""Parser for ``.orbit`` component files.

A component file holds up to three top-level sections::

    <template>
      <button class="primary" on:click="press">{{ label }}</button>
    </template>

    <script>
    component Button

    props {
        label: String
        disabled?: bool
    }

    state {
        pressed: bool = false
    }

    pub fn press(&mut self) {}
    </script>

    <style>
    .primary { color: blue; }
    </style>

Only the template section is mandatory. The resulting tree is immutable so
it can be shared freely between rules and worker threads.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from html.parser import HTMLParser
from typing import Iterator, List, Optional, Tuple, Union

from .errors import ParserError

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)

SECTION_OPEN = re.compile(r"<(template|script|style)(?:\s[^>]*)?>", re.IGNORECASE)
TEMPLATE_TAG = re.compile(r"<(/?)template\b[^>]*>", re.IGNORECASE)
EXPRESSION = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
TAG_NAME = re.compile(r"<\s*([^\s/>]+)")

COMPONENT_DECL = re.compile(r"^component\s+(?P<name>[^\s;{]+)\s*;?$")
BLOCK_OPEN = re.compile(r"^(?P<kind>props|state)\s*\{(?P<rest>.*)$")
PROP_ENTRY = re.compile(r"^(?P<name>[A-Za-z_]\w*)(?P<optional>\?)?\s*(?::\s*(?P<type>.*))?$")
STATE_ENTRY = re.compile(
    r"^(?P<name>[A-Za-z_]\w*)\s*(?::\s*(?P<type>[^=]*?))?\s*(?:=\s*(?P<initial>.+))?$"
)
OPTION_TYPE = re.compile(r"^Option\s*<\s*(?P<inner>.+?)\s*>$")
PUBLIC_METHOD = re.compile(r"\bpub\s+fn\s+(?P<name>[A-Za-z_]\w*)\s*[(<]")


# ----------------------------------------------------------------------
# Tree
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Text:
    content: str
    line: int = 1
    column: int = 1

    def is_empty(self) -> bool:
        return False


@dataclass(frozen=True)
class Expression:
    """A ``{{ ... }}`` interpolation."""

    source: str
    line: int = 1
    column: int = 1

    def is_empty(self) -> bool:
        return False


@dataclass(frozen=True)
class Element:
    tag: str
    attributes: Tuple[Tuple[str, Optional[str]], ...] = ()
    children: Tuple["TemplateNode", ...] = ()
    line: int = 1
    column: int = 1

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def is_empty(self) -> bool:
        return not self.children

    def get(self, name: str) -> Optional[str]:
        """Return the value of attribute ``name`` (case-insensitive)."""

        lowered = name.lower()
        for key, value in self.attributes:
            if key.lower() == lowered:
                return value
        return None


TemplateNode = Union[Element, Text, Expression]


def walk(node: TemplateNode) -> Iterator[TemplateNode]:
    """Yield ``node`` and its descendants in document order."""

    yield node
    if isinstance(node, Element):
        for child in node.children:
            yield from walk(child)


@dataclass(frozen=True)
class PropDef:
    name: str
    type_name: str = ""
    required: bool = True
    line: int = 1
    column: int = 1


@dataclass(frozen=True)
class StateVar:
    name: str
    type_name: str = ""
    initial: Optional[str] = None
    line: int = 1
    column: int = 1


@dataclass(frozen=True)
class ScriptNode:
    component_name: str = ""
    props: Tuple[PropDef, ...] = ()
    state: Tuple[StateVar, ...] = ()
    methods: Tuple[str, ...] = ()
    line: int = 1
    column: int = 1
    name_line: int = 1
    name_column: int = 1


@dataclass(frozen=True)
class StyleNode:
    content: str = ""
    line: int = 1
    column: int = 1


@dataclass(frozen=True)
class OrbitFile:
    template: TemplateNode
    script: ScriptNode
    style: Optional[StyleNode] = None


# ----------------------------------------------------------------------
# Sections
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class _Section:
    name: str
    body: str
    line: int
    column: int


def _position(content: str, index: int) -> Tuple[int, int]:
    line = content.count("\n", 0, index) + 1
    column = index - (content.rfind("\n", 0, index) + 1) + 1
    return line, column


def _offset_position(base_line: int, base_column: int, line: int, offset: int) -> Tuple[int, int]:
    """Translate a 1-based ``line`` / 0-based ``offset`` inside a section body."""

    if line == 1:
        return base_line, base_column + offset
    return base_line + line - 1, offset + 1


def _find_section_end(content: str, name: str, start: int) -> Optional[re.Match[str]]:
    if name == "template":
        depth = 1
        for match in TEMPLATE_TAG.finditer(content, start):
            if match.group(1):
                depth -= 1
                if depth == 0:
                    return match
            else:
                depth += 1
        return None
    return re.compile(rf"</{name}\s*>", re.IGNORECASE).search(content, start)


def _split_sections(content: str, file_path: str) -> dict[str, _Section]:
    sections: dict[str, _Section] = {}
    pos = 0
    while True:
        match = SECTION_OPEN.search(content, pos)
        if match is None:
            break
        name = match.group(1).lower()
        open_line, _ = _position(content, match.start())
        if name in sections:
            raise ParserError(f"Duplicate <{name}> section", file_path=file_path, line=open_line)
        end = _find_section_end(content, name, match.end())
        if end is None:
            raise ParserError(f"Unclosed <{name}> section", file_path=file_path, line=open_line)
        line, column = _position(content, match.end())
        sections[name] = _Section(name, content[match.end() : end.start()], line, column)
        pos = end.end()
    return sections


# ----------------------------------------------------------------------
# Template
# ----------------------------------------------------------------------
class _TemplateBuilder(HTMLParser):
    """Collect template markup into immutable nodes."""

    def __init__(self, section: _Section, file_path: str) -> None:
        super().__init__(convert_charrefs=True)
        self._section = section
        self._file_path = file_path
        self._roots: List[TemplateNode] = []
        # (tag, attributes, line, column, children)
        self._stack: List[Tuple[str, Tuple[Tuple[str, Optional[str]], ...], int, int, List[TemplateNode]]] = []
        # HTMLParser splits text at a bare "<"; chunks are joined until the next tag.
        self._pending: List[str] = []
        self._pending_position = (1, 1)

    def build(self) -> List[TemplateNode]:
        self.feed(self._section.body)
        self.close()
        self._flush_text()
        if self._stack:
            tag, _, line, _, _ = self._stack[-1]
            raise ParserError(f"Unclosed <{tag}> element", file_path=self._file_path, line=line)
        return self._roots

    def _here(self) -> Tuple[int, int]:
        line, offset = self.getpos()
        return _offset_position(self._section.line, self._section.column, line, offset)

    def _append(self, node: TemplateNode) -> None:
        if self._stack:
            self._stack[-1][4].append(node)
        else:
            self._roots.append(node)

    def _tag_name(self, fallback: str) -> str:
        match = TAG_NAME.match(self.get_starttag_text() or "")
        return match.group(1) if match else fallback

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        self._flush_text()
        line, column = self._here()
        name = self._tag_name(tag)
        if tag in VOID_ELEMENTS:
            self._append(Element(name, tuple(attrs), (), line, column))
            return
        self._stack.append((name, tuple(attrs), line, column, []))

    def handle_startendtag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        self._flush_text()
        line, column = self._here()
        self._append(Element(self._tag_name(tag), tuple(attrs), (), line, column))

    def handle_endtag(self, tag: str) -> None:
        self._flush_text()
        if tag in VOID_ELEMENTS:
            return
        line, _ = self._here()
        if not self._stack:
            raise ParserError(f"Unexpected closing tag </{tag}>", file_path=self._file_path, line=line)
        name, attrs, open_line, open_column, children = self._stack[-1]
        if name.lower() != tag:
            raise ParserError(
                f"Closing tag </{tag}> does not match <{name}> opened on line {open_line}",
                file_path=self._file_path,
                line=line,
            )
        self._stack.pop()
        self._append(Element(name, attrs, tuple(children), open_line, open_column))

    def handle_comment(self, data: str) -> None:
        self._flush_text()

    def handle_data(self, data: str) -> None:
        if not self._pending:
            self._pending_position = self._here()
        self._pending.append(data)

    def _flush_text(self) -> None:
        if not self._pending:
            return
        data = "".join(self._pending)
        self._pending = []
        line, column = self._pending_position
        cursor = 0
        for match in EXPRESSION.finditer(data):
            self._add_text(data[cursor : match.start()], data, cursor, line, column)
            expr_line, expr_column = _advance(data, match.start(), line, column)
            self._append(Expression(match.group(1).strip(), expr_line, expr_column))
            cursor = match.end()
        self._add_text(data[cursor:], data, cursor, line, column)

    def _add_text(self, chunk: str, data: str, start: int, line: int, column: int) -> None:
        if not chunk.strip():
            return
        leading = len(chunk) - len(chunk.lstrip())
        text_line, text_column = _advance(data, start + leading, line, column)
        self._append(Text(chunk.strip(), text_line, text_column))


def _advance(data: str, index: int, line: int, column: int) -> Tuple[int, int]:
    """Return the position of ``data[index]`` given the position of ``data[0]``."""

    newlines = data.count("\n", 0, index)
    if not newlines:
        return line, column + index
    return line + newlines, index - data.rfind("\n", 0, index)


def _parse_template(section: _Section, file_path: str) -> TemplateNode:
    roots = _TemplateBuilder(section, file_path).build()
    if len(roots) == 1:
        return roots[0]
    return Element("template", (), tuple(roots), section.line, section.column)


# ----------------------------------------------------------------------
# Script
# ----------------------------------------------------------------------
def _split_entries(text: str) -> List[Tuple[int, str]]:
    """Split on ``,`` / ``;`` outside brackets and quotes.

    Returns ``(offset, entry)`` pairs with surrounding whitespace removed.
    """

    entries: List[Tuple[int, str]] = []
    depth = 0
    quote: Optional[str] = None
    start = 0
    for index, char in enumerate(text):
        if quote:
            if char == quote and text[index - 1] != "\\":
                quote = None
            continue
        if char == '"':
            quote = char
        elif char in "([{<":
            depth += 1
        elif char in ")]}>":
            depth = max(depth - 1, 0)
        elif char in ",;" and depth == 0:
            entries.append((start, text[start:index]))
            start = index + 1
    entries.append((start, text[start:]))
    result = []
    for offset, entry in entries:
        stripped = entry.strip()
        if stripped:
            result.append((offset + len(entry) - len(entry.lstrip()), stripped))
    return result


def _strip_comment(line: str) -> str:
    """Drop a trailing ``//`` comment that is not inside a string literal."""

    in_string = False
    for index, char in enumerate(line):
        if in_string:
            if char == '"' and line[index - 1] != "\\":
                in_string = False
        elif char == '"':
            in_string = True
        elif line.startswith("//", index):
            return line[:index]
    return line


def _parse_prop(entry: str, file_path: str, line: int, column: int) -> PropDef:
    match = PROP_ENTRY.match(entry)
    if match is None:
        raise ParserError(f"Invalid prop declaration '{entry}'", file_path=file_path, line=line)
    type_name = (match.group("type") or "").strip()
    required = match.group("optional") is None
    option = OPTION_TYPE.match(type_name)
    if option:
        type_name = option.group("inner")
        required = False
    return PropDef(match.group("name"), type_name, required, line, column)


def _parse_state(entry: str, file_path: str, line: int, column: int) -> StateVar:
    match = STATE_ENTRY.match(entry)
    if match is None:
        raise ParserError(f"Invalid state declaration '{entry}'", file_path=file_path, line=line)
    initial = match.group("initial")
    return StateVar(
        match.group("name"),
        (match.group("type") or "").strip(),
        initial.strip() if initial is not None else None,
        line,
        column,
    )


class _ScriptReader:
    def __init__(self, section: _Section, file_path: str) -> None:
        self._section = section
        self._file_path = file_path
        self.component_name = ""
        self.name_position = (section.line, section.column)
        self.props: List[PropDef] = []
        self.state: List[StateVar] = []
        self.methods: List[str] = []
        self._seen_blocks: set[str] = set()

    def read(self) -> ScriptNode:
        lines = [_strip_comment(raw) for raw in self._section.body.split("\n")]
        index = 0
        while index < len(lines):
            index = self._read_line(lines, index)
        return ScriptNode(
            component_name=self.component_name,
            props=tuple(self.props),
            state=tuple(self.state),
            methods=tuple(self.methods),
            line=self._section.line,
            column=self._section.column,
            name_line=self.name_position[0],
            name_column=self.name_position[1],
        )

    def _where(self, index: int, offset: int) -> Tuple[int, int]:
        return _offset_position(self._section.line, self._section.column, index + 1, offset)

    def _read_line(self, lines: List[str], index: int) -> int:
        raw = lines[index]
        stripped = raw.strip()
        indent = len(raw) - len(raw.lstrip())
        line, _ = self._where(index, 0)

        declaration = COMPONENT_DECL.match(stripped)
        if declaration:
            if self.component_name:
                raise ParserError("Duplicate component declaration", file_path=self._file_path, line=line)
            self.component_name = declaration.group("name")
            self.name_position = self._where(index, indent + declaration.start("name"))
            return index + 1

        block = BLOCK_OPEN.match(stripped)
        if block:
            return self._read_block(block.group("kind"), block.group("rest"), lines, index, indent)

        for match in PUBLIC_METHOD.finditer(raw):
            self.methods.append(match.group("name"))
        return index + 1

    def _read_block(self, kind: str, rest: str, lines: List[str], index: int, indent: int) -> int:
        open_line, _ = self._where(index, 0)
        if kind in self._seen_blocks:
            raise ParserError(f"Duplicate {kind} block", file_path=self._file_path, line=open_line)
        self._seen_blocks.add(kind)

        # (line index, column offset, text)
        chunks: List[Tuple[int, int, str]] = []
        rest_offset = indent + len(lines[index].strip()) - len(rest)
        if rest.rstrip().endswith("}"):
            body = rest.rstrip()[:-1]
            chunks.append((index, rest_offset, body))
            self._add_entries(kind, chunks)
            return index + 1

        chunks.append((index, rest_offset, rest))
        cursor = index + 1
        while cursor < len(lines):
            raw = lines[cursor]
            stripped = raw.strip()
            if stripped.startswith("}"):
                if stripped[1:].strip() not in ("", ";", ","):
                    line, _ = self._where(cursor, 0)
                    raise ParserError(f"Unexpected text after {kind} block", file_path=self._file_path, line=line)
                self._add_entries(kind, chunks)
                return cursor + 1
            chunks.append((cursor, 0, raw))
            cursor += 1
        raise ParserError(f"Unterminated {kind} block", file_path=self._file_path, line=open_line)

    def _add_entries(self, kind: str, chunks: List[Tuple[int, int, str]]) -> None:
        seen = {item.name for item in (self.props if kind == "props" else self.state)}
        for index, base, text in chunks:
            for offset, entry in _split_entries(text):
                line, column = self._where(index, base + offset)
                if kind == "props":
                    item: Union[PropDef, StateVar] = _parse_prop(entry, self._file_path, line, column)
                else:
                    item = _parse_state(entry, self._file_path, line, column)
                if item.name in seen:
                    raise ParserError(
                        f"Duplicate {kind} entry '{item.name}'", file_path=self._file_path, line=line
                    )
                seen.add(item.name)
                if isinstance(item, PropDef):
                    self.props.append(item)
                else:
                    self.state.append(item)


# ----------------------------------------------------------------------
# Entry point
# ----------------------------------------------------------------------
def parse_orbit_file(content: str, file_path: str = "<string>") -> OrbitFile:
    """Parse component source text into an :class:`OrbitFile` tree."""

    sections = _split_sections(content, file_path)
    template_section = sections.get("template")
    if template_section is None:
        raise ParserError("Missing <template> section", file_path=file_path)

    template = _parse_template(template_section, file_path)

    script_section = sections.get("script")
    script = _ScriptReader(script_section, file_path).read() if script_section else ScriptNode()

    style_section = sections.get("style")
    style = None
    if style_section is not None:
        style = StyleNode(style_section.body, style_section.line, style_section.column)

    return OrbitFile(template=template, script=script, style=style)
