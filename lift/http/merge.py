# lift/http/merge.py
"""
Final assembly of a rendered page.

One normalization pass over the whole document, with a hook that tracks
whether we are inside <head> or <body>. Snippets may emit `<head>` blocks
inside the body and `<tail>` blocks anywhere; their contents are moved to the
real <head> and to the end of <body>. Everything the request queued on `S`
is added, and all page JavaScript goes into a single script element at the
end of the body.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from lift.http.js.cmds import Iife, JsCmd, Noop, join
from lift.http.session import S
from lift.xml.nodes import Attribute, Element, Group, Node, Text

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeState:
    in_head: bool = False
    in_body: bool = False
    depth: int = 0


def page_script(js: JsCmd, nonce: str = "") -> Optional[Element]:
    """The <script> element carrying `js`, or None when there is nothing to run."""
    if not js.commands:
        return None
    attributes = [Attribute("type", "text/javascript")]
    if nonce:
        attributes.append(Attribute("nonce", nonce))
    body = Iife(js).to_js_cmd().replace("</", "<\\/")
    return Element("script", tuple(attributes), (Text("\n" + body + "\n"),))


def merge_page(
    nodes: Sequence[Node],
    s: S,
    *,
    strip_comments: Optional[bool] = None,
    nonce: str = "",
) -> Tuple[Node, ...]:
    normalizer = s.normalizer()
    strip = s.strip_comments if strip_comments is None else strip_comments
    context_path = s.context_path

    head_nodes: List[Node] = []
    tail_nodes: List[Node] = []

    def changes(state: MergeState, element: Element):
        label = element.label

        if label == "tail" or (label == "head" and state.in_body):
            inner_state = state
            if label == "head":
                inner_state = replace(state, in_head=True, in_body=False)
            children, js = normalizer.normalize(element.children, context_path, strip, inner_state, changes)
            (head_nodes if label == "head" else tail_nodes).extend(children)
            return state, (), js

        next_state = MergeState(
            in_head=state.in_head or label == "head",
            in_body=state.in_body or label == "body",
            depth=state.depth + 1,
        )
        return next_state, element, Noop

    merged, page_js = normalizer.normalize(nodes, context_path, strip, MergeState(), changes)

    for_head, head_js = normalizer.normalize(s.for_head(), context_path, strip)
    for_tail, tail_js = normalizer.normalize(s.at_end_of_body(), context_path, strip)

    head_extra = tuple(head_nodes) + for_head
    if head_extra:
        merged, found = _append_to_first(merged, "head", head_extra)
        if not found:
            merged = head_extra + merged

    js = page_js & head_js & tail_js & join(s.js_to_append())
    tail_extra = tuple(tail_nodes) + for_tail
    script = page_script(js, nonce)
    if script is not None:
        tail_extra += (script,)

    if tail_extra:
        merged, found = _append_to_first(merged, "body", tail_extra)
        if not found:
            merged = merged + tail_extra

    log.debug(
        "merged page: %d head node(s) moved, %d tail node(s), %d js command(s)",
        len(head_nodes),
        len(tail_nodes),
        len(js.commands),
    )
    return merged


def _append_to_first(
    nodes: Tuple[Node, ...], label: str, extra: Tuple[Node, ...]
) -> Tuple[Tuple[Node, ...], bool]:
    out = list(nodes)
    for i, node in enumerate(out):
        if isinstance(node, Element):
            if node.label == label:
                out[i] = node.copy(children=node.children + extra)
                return tuple(out), True
            children, found = _append_to_first(node.children, label, extra)
        elif isinstance(node, Group):
            children, found = _append_to_first(node.nodes, label, extra)
        else:
            continue
        if found:
            out[i] = node.copy(children=children) if isinstance(node, Element) else Group(children)
            return tuple(out), True
    return tuple(out), False
