# lift/xml/nodes.py
"""
Immutable HTML node model.

The variant set is closed: Element, Text, Comment, Group and Unparsed.
Traversals match on these five classes and nothing else.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Tuple, Union


@dataclass(frozen=True)
class Attribute:
    name: str
    value: str = ""
    prefix: Optional[str] = None

    @property
    def prefixed(self) -> bool:
        return self.prefix is not None

    @property
    def key(self) -> str:
        return f"{self.prefix}:{self.name}" if self.prefix else self.name


@dataclass(frozen=True)
class Element:
    label: str
    attributes: Tuple[Attribute, ...] = ()
    children: Tuple["Node", ...] = ()

    def copy(
        self,
        attributes: Optional[Iterable[Attribute]] = None,
        children: Optional[Iterable["Node"]] = None,
    ) -> "Element":
        changes = {}
        if attributes is not None:
            changes["attributes"] = tuple(attributes)
        if children is not None:
            changes["children"] = tuple(children)
        return replace(self, **changes)

    def get(self, name: str) -> Optional[str]:
        """Value of the unprefixed attribute `name`, or None."""
        for attr in self.attributes:
            if not attr.prefixed and attr.name == name:
                return attr.value
        return None


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Comment:
    text: str


@dataclass(frozen=True)
class Group:
    """Transparent container; renders as its children."""

    nodes: Tuple["Node", ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Unparsed:
    """Raw markup kept verbatim (doctype, CDATA, processing instruction)."""

    markup: str


Node = Union[Element, Text, Comment, Group, Unparsed]
NODE_TYPES = (Element, Text, Comment, Group, Unparsed)


def elem(label: str, *children: Node, **attrs: str) -> Element:
    """
    Small builder used by code and tests.

    Keyword names map `_` to `-` and a trailing `_` is dropped so reserved
    words work: elem("label", for_="x", data_role="y").
    """
    attributes = tuple(
        Attribute(k.rstrip("_").replace("_", "-"), v) for k, v in attrs.items()
    )
    return Element(label, attributes, tuple(children))


def text_of(nodes: Iterable[Node]) -> str:
    out = []
    for node in nodes:
        if isinstance(node, Text):
            out.append(node.text)
        elif isinstance(node, Element):
            out.append(text_of(node.children))
        elif isinstance(node, Group):
            out.append(text_of(node.nodes))
    return "".join(out)
