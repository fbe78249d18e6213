# lift/xml/parsing.py
"""
Markup <-> node model.

Parsing goes through BeautifulSoup's `html.parser` tree builder, which keeps
the document as written (no implied <html>/<head>/<body>, attribute order
kept). Rendering escapes text and attribute values with MarkupSafe.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from bs4 import BeautifulSoup
from bs4.element import CData, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag
from bs4.element import Comment as SoupComment
from markupsafe import Markup, escape

from lift.xml.nodes import Attribute, Comment, Element, Group, Node, Text, Unparsed

VOID_ELEMENTS = {
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
    "param",
    "source",
    "track",
    "wbr",
}

# Children of these are emitted without escaping.
RAW_TEXT_ELEMENTS = {"script", "style"}


# -----------------------------------------------------------------------------
# Parsing
# -----------------------------------------------------------------------------
def parse_html(markup: str) -> Tuple[Node, ...]:
    if not markup:
        return ()
    soup = BeautifulSoup(markup, "html.parser", multi_valued_attributes=None)
    return tuple(_convert_all(soup.contents))


def _convert_all(items: Iterable[object]) -> List[Node]:
    out: List[Node] = []
    for item in items:
        node = _convert(item)
        if node is not None:
            out.append(node)
    return out


def _convert(item: object):
    if isinstance(item, Tag):
        return Element(
            item.name,
            tuple(_attribute(k, v) for k, v in item.attrs.items()),
            tuple(_convert_all(item.contents)),
        )
    # PreformattedString subclasses first; they are NavigableStrings too.
    if isinstance(item, SoupComment):
        return Comment(str(item))
    if isinstance(item, Doctype):
        return Unparsed(f"<!DOCTYPE {item}>")
    if isinstance(item, CData):
        return Unparsed(f"<![CDATA[{item}]]>")
    if isinstance(item, ProcessingInstruction):
        return Unparsed(f"<?{item}>")
    if isinstance(item, Declaration):
        return Unparsed(f"<!{item}>")
    if isinstance(item, NavigableString):
        return Text(str(item))
    return None


def _attribute(name: str, value: object) -> Attribute:
    if value is None:
        text = ""
    elif isinstance(value, (list, tuple)):
        text = " ".join(str(v) for v in value)
    else:
        text = str(value)

    if ":" in name:
        prefix, local = name.split(":", 1)
        if prefix and local:
            return Attribute(local, text, prefix)
    return Attribute(name, text)


# -----------------------------------------------------------------------------
# Rendering
# -----------------------------------------------------------------------------
def render(nodes: Iterable[Node]) -> str:
    out: List[str] = []
    for node in nodes:
        _render_into(out, node, raw_text=False)
    return "".join(out)


def render_markup(nodes: Iterable[Node]) -> Markup:
    """Rendered nodes as Markup, safe to drop into a Jinja template."""
    return Markup(render(nodes))


def _render_into(out: List[str], node: Node, raw_text: bool) -> None:
    if isinstance(node, Element):
        out.append("<")
        out.append(node.label)
        for attr in node.attributes:
            out.append(f' {attr.key}="{escape(attr.value)}"')
        out.append(">")
        if node.label in VOID_ELEMENTS and not node.children:
            return
        raw = node.label in RAW_TEXT_ELEMENTS
        for child in node.children:
            _render_into(out, child, raw_text=raw)
        out.append(f"</{node.label}>")
    elif isinstance(node, Text):
        out.append(node.text if raw_text else str(escape(node.text)))
    elif isinstance(node, Comment):
        out.append(f"<!--{node.text}-->")
    elif isinstance(node, Group):
        for child in node.nodes:
            _render_into(out, child, raw_text=raw_text)
    elif isinstance(node, Unparsed):
        out.append(node.markup)
