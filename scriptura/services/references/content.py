# scriptura/services/references/content.py
"""
api.bible passage content: document tree and flattening to display text.

api.bible returns passage content (content-type=json) as a nested list of
nodes:

    [{"type": "tag", "name": "para", "attrs": {"style": "p"}, "items": [
        {"type": "tag", "name": "verse", "attrs": {"number": "1", ...}, "items": [
            {"type": "text", "text": "1"}]},
        {"type": "text", "text": "In the beginning ..."}]}]

parse_content() turns that into TextLeaf / Container nodes and flatten()
produces linear text with "[n] " verse markers, optionally one verse per
line for poetry.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Union

PILCROW_RE = re.compile(r"^\s*¶\s*")
LEADING_NUMBER_RE = re.compile(r"^\s*\d+\s*")
HORIZONTAL_SPACE_RE = re.compile(r"[ \t]{2,}")
NEWLINE_SPACE_RE = re.compile(r"\s*\n\s*")


@dataclass(frozen=True)
class TextLeaf:
    """Plain text node."""
    text: str


@dataclass(frozen=True)
class Container:
    """
    Tagged node holding ordered children.

    Attributes:
        name: Tag name ("para", "verse", "char", "note", ...)
        attrs: Tag attributes (e.g. {"number": "16"} for verse markers,
               {"vid": "PSA 23:1"} for verse-group paragraphs)
        items: Child nodes in document order
    """
    name: str
    attrs: dict = field(default_factory=dict)
    items: tuple = ()


Node = Union[TextLeaf, Container]


def parse_node(raw: Any) -> Optional[Node]:
    """Convert one api.bible JSON node. Unknown node types yield None."""
    if not isinstance(raw, dict):
        return None

    node_type = raw.get("type")
    if node_type == "text":
        return TextLeaf(str(raw.get("text") or ""))

    if node_type == "tag":
        return Container(
            name=str(raw.get("name") or ""),
            attrs=dict(raw.get("attrs") or {}),
            items=parse_content(raw.get("items")),
        )

    return None


def parse_content(raw: Any) -> tuple:
    """
    Convert api.bible JSON content into a tuple of nodes.

    Accepts a list of nodes, a single node dict, or None.
    """
    if raw is None:
        return ()
    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list):
        return ()

    nodes = []
    for item in raw:
        node = parse_node(item)
        if node is not None:
            nodes.append(node)
    return tuple(nodes)


def _has_attr(node: Container, name: str) -> bool:
    return node.attrs.get(name) not in (None, "")


class _Flattener:
    """Accumulates text chunks during a single depth-first walk."""

    def __init__(self, line_by_line: bool):
        self.line_by_line = line_by_line
        self.chunks: list[str] = []
        self.strip_leading_number = False

    def _ensure_trailing(self, suffix: str, pattern: str):
        if not self.chunks:
            return
        last = self.chunks[-1]
        if last and not re.search(pattern, last):
            self.chunks[-1] = last + suffix

    def ensure_space(self):
        self._ensure_trailing(" ", r"\s$")

    def ensure_newline(self):
        self._ensure_trailing("\n", r"\n$")

    def push_text(self, text: str):
        if not text:
            return
        cleaned = PILCROW_RE.sub("", text)
        if self.strip_leading_number:
            cleaned = LEADING_NUMBER_RE.sub("", cleaned)
            self.strip_leading_number = False
        if cleaned:
            self.chunks.append(cleaned)

    def walk(self, node):
        if node is None:
            return

        if isinstance(node, (list, tuple)):
            for child in node:
                self.walk(child)
            return

        if isinstance(node, TextLeaf):
            self.push_text(node.text)
            return

        if isinstance(node, Container):
            if self.line_by_line and node.name == "para" and _has_attr(node, "vid"):
                self.ensure_space()

            if node.name == "verse" and _has_attr(node, "number"):
                if self.line_by_line:
                    self.ensure_newline()
                else:
                    self.ensure_space()
                self.push_text(f"[{node.attrs['number']}] ")
                self.strip_leading_number = True

            for child in node.items:
                self.walk(child)

    def result(self) -> str:
        text = HORIZONTAL_SPACE_RE.sub(" ", "".join(self.chunks))
        if self.line_by_line:
            text = NEWLINE_SPACE_RE.sub("\n", text)
        text = text.strip()

        if self.line_by_line and text:
            # Markdown soft breaks downstream expect a space before each newline
            text = text.replace("\n", " \n")

        return f"{text} " if text else ""


def flatten(tree: Union[Node, Iterable[Node], None], line_by_line: bool = False) -> str:
    """
    Flatten a passage document tree into display text.

    Verse markers become "[n] " and a duplicated verse number at the start
    of the following text is dropped. With line_by_line, every verse starts
    on its own line (used for Psalms and other poetry).

    Args:
        tree: A node, a sequence of nodes, or None
        line_by_line: Put each verse on its own line

    Returns:
        Flattened text with a single trailing space, or "" when empty
    """
    if not tree:
        return ""
    flattener = _Flattener(line_by_line)
    flattener.walk(tree)
    return flattener.result()
