from __future__ import annotations

from .nodes import NODE_TYPES, Attribute, Comment, Element, Group, Node, Text, Unparsed, elem, text_of
from .parsing import VOID_ELEMENTS, parse_html, render, render_markup

__all__ = [
    "NODE_TYPES",
    "Attribute",
    "Comment",
    "Element",
    "Group",
    "Node",
    "Text",
    "Unparsed",
    "elem",
    "text_of",
    "VOID_ELEMENTS",
    "parse_html",
    "render",
    "render_markup",
]
