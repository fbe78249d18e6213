# lift/http/html_normalizer.py
"""
Lift-specific normalization of generated HTML.

- Fixes URLs on `a`, `form`, `link`, `script` (and `src` everywhere else) so
  root-relative URLs carry the application's context path, optionally run
  through the active URL rewriter.
- Extracts inline event handlers (`on*` attributes and `javascript:` URLs in
  `href`/`action`) and returns JavaScript that attaches them by element id
  instead. Elements without an id get a generated one.
- Lets the caller adjust each element (and thread state down to its
  children) through an `additional_changes` hook.

Nothing here mutates its input; every pass builds new node tuples.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

from lift.http.js.cmds import JsCmd, Noop, OnEvent
from lift.http.req import ExcludeFunc, RewriteFunc, normalize_href, url_attribute_for
from lift.xml.nodes import NODE_TYPES, Attribute, Comment, Element, Group, Node

log = logging.getLogger(__name__)

State = TypeVar("State")
Replacement = Union[Node, Sequence[Node], None]
AdditionalChanges = Callable[[Any, Element], Tuple[Any, Replacement, Optional[JsCmd]]]

GENERATED_ID_PREFIX = "lift-event-js-"

# URL attributes that may hold `javascript:` URLs, and the event that runs
# that JS once it is moved out of line. A form's action set to
# `javascript://doIt()` becomes a submit handler, an anchor's href a click
# handler.
EVENTS_BY_ATTRIBUTE_NAME = {
    "action": "submit",
    "href": "click",
}


@dataclass(frozen=True)
class EventAttribute:
    """An extracted event handler: the event name and the JS to run for it."""

    event_name: str
    js_string: str


def identity_changes(state: State, element: Element) -> Tuple[State, Element, JsCmd]:
    return state, element, Noop


def js_for_event_attributes(element_id: str, event_attributes: Iterable[EventAttribute]) -> JsCmd:
    """One lift.onEvent binding per extracted attribute, in order."""
    js: JsCmd = Noop
    for event in event_attributes:
        js = js & OnEvent(element_id, event.event_name, event.js_string)
    return js


def _javascript_url_handler(value: str) -> Optional[str]:
    # javascript: or javascript://
    script = value[len("javascript:"):]
    if script.startswith("//"):
        script = script[2:]
    if not script.strip():
        return None
    # The URL would have navigated; out of line that has to be suppressed.
    script = script.rstrip()
    separator = " " if script.endswith(";") else "; "
    return script + separator + "event.preventDefault();"


def _as_nodes(replacement: Replacement) -> Tuple[Node, ...]:
    if replacement is None:
        return ()
    if isinstance(replacement, NODE_TYPES):
        return (replacement,)
    return tuple(replacement)


class HtmlNormalizer:
    """
    One configured normalizer.

    `next_id` is the caller's id source (one call per generated id); it has
    to be safe for whatever concurrency the caller runs under. `rewrite` is
    the URL rewriter applied to rewritable URL attributes, `exclude` a
    predicate for root-relative paths that must not get the context path.
    With `removed_events_attribute` set, every element that lost handlers
    gets that attribute listing them (`onclick onchange`). With
    `extract_events=False` only URLs are fixed.
    """

    def __init__(
        self,
        next_id: Callable[[], Any],
        *,
        rewrite: Optional[RewriteFunc] = None,
        exclude: Optional[ExcludeFunc] = None,
        removed_events_attribute: Optional[str] = None,
        extract_events: bool = True,
    ) -> None:
        self.next_id = next_id
        self.rewrite = rewrite
        self.exclude = exclude
        self.removed_events_attribute = removed_events_attribute or None
        self.extract_events = extract_events

    # -------------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------------
    def normalize_url_and_extract_events(
        self,
        attribute_to_normalize: str,
        attributes: Optional[Sequence[Attribute]],
        context_path: str,
        should_rewrite_url: bool,
    ) -> Tuple[Optional[str], Tuple[Attribute, ...], List[EventAttribute]]:
        """
        Returns (id found in the attributes, normalized attributes, extracted
        events). Output attributes and events keep document order.
        """
        if not attributes:
            return None, (), []

        element_id: Optional[str] = None
        kept: List[Attribute] = []
        events: List[EventAttribute] = []

        # Walk from the tail so that every decision is made with the rest of
        # the list already settled; both lists are reversed at the end.
        for attribute in reversed(attributes):
            name = attribute.name

            if attribute.prefixed:
                kept.append(attribute)
                continue

            url_event = EVENTS_BY_ATTRIBUTE_NAME.get(name)

            if self.extract_events and url_event and attribute.value.startswith("javascript:"):
                handler = _javascript_url_handler(attribute.value)
                if handler is not None:
                    events.append(EventAttribute(url_event, handler))

            elif name == attribute_to_normalize:
                normalized = normalize_href(
                    context_path,
                    attribute.value,
                    should_rewrite_url,
                    self.rewrite,
                    self.exclude,
                )
                kept.append(Attribute(name, normalized))

            elif self.extract_events and name.startswith("on"):
                events.append(EventAttribute(name[2:], attribute.value))

            elif name == "id":
                if attribute.value:
                    element_id = attribute.value
                kept.append(attribute)

            else:
                kept.append(attribute)

        kept.reverse()
        events.reverse()
        return element_id, tuple(kept), events

    # -------------------------------------------------------------------------
    # Elements
    # -------------------------------------------------------------------------
    def normalize_element_and_attributes(
        self,
        element: Element,
        attribute_to_normalize: str,
        context_path: str,
        should_rewrite_url: bool,
    ) -> Tuple[Element, JsCmd]:
        element_id, attributes, events = self.normalize_url_and_extract_events(
            attribute_to_normalize,
            element.attributes,
            context_path,
            should_rewrite_url,
        )

        if self.removed_events_attribute and events:
            marker = self.removed_events_attribute
            removed = " ".join(f"on{e.event_name}" for e in events)
            attributes = tuple(a for a in attributes if a.prefixed or a.name != marker)
            attributes += (Attribute(marker, removed),)

        if element_id is not None:
            return element.copy(attributes=attributes), js_for_event_attributes(element_id, events)

        if not events:
            return element.copy(attributes=attributes), Noop

        generated_id = f"{GENERATED_ID_PREFIX}{self.next_id()}"
        log.debug("<%s> got id %s for %d handler(s)", element.label, generated_id, len(events))

        # an empty id="" counts as no id; don't leave it next to the new one
        attributes = (Attribute("id", generated_id),) + tuple(
            a for a in attributes if a.prefixed or a.name != "id"
        )
        return element.copy(attributes=attributes), js_for_event_attributes(generated_id, events)

    # -------------------------------------------------------------------------
    # Trees
    # -------------------------------------------------------------------------
    def normalize(
        self,
        nodes: Iterable[Node],
        context_path: str,
        strip_comments: bool,
        state: Any = None,
        additional_changes: AdditionalChanges = identity_changes,
    ) -> Tuple[Tuple[Node, ...], JsCmd]:
        """
        Normalize `nodes` and everything below them.

        For each element, `additional_changes(state, normalized_element)`
        returns `(next_state, replacement, js)`. When the replacement is a
        single Element its children are normalized with `next_state`;
        anything else (other node kinds, sequences, None) is emitted as-is
        and not descended into. `next_state` is only ever seen by that
        element's own subtree, never by its siblings or parents.

        Returned JS is in document order: for each element its own bindings,
        then what the hook added, then its descendants'.
        """
        normalized: List[Node] = []
        js: JsCmd = Noop

        for node in nodes:
            if isinstance(node, Element):
                attribute_to_fix, should_rewrite_url = url_attribute_for(node.label)
                element, element_js = self.normalize_element_and_attributes(
                    node,
                    attribute_to_fix,
                    context_path,
                    should_rewrite_url,
                )

                next_state, replacement, additional_js = additional_changes(state, element)
                if additional_js is None:
                    additional_js = Noop

                if isinstance(replacement, Element):
                    children, child_js = self.normalize(
                        replacement.children,
                        context_path,
                        strip_comments,
                        next_state,
                        additional_changes,
                    )
                    normalized.append(replacement.copy(children=children))
                    js = js & element_js & additional_js & child_js
                else:
                    normalized.extend(_as_nodes(replacement))
                    js = js & element_js & additional_js

            elif isinstance(node, Group):
                group_nodes, group_js = self.normalize(
                    node.nodes,
                    context_path,
                    strip_comments,
                    state,
                    additional_changes,
                )
                normalized.append(Group(group_nodes))
                js = js & group_js

            elif isinstance(node, Comment) and strip_comments:
                continue

            else:
                normalized.append(node)

        return tuple(normalized), js


def normalize_html_and_event_handlers(
    nodes: Iterable[Node],
    context_path: str,
    strip_comments: bool,
    state: Any,
    additional_changes: AdditionalChanges,
    *,
    next_id: Callable[[], Any],
    rewrite: Optional[RewriteFunc] = None,
    removed_events_attribute: Optional[str] = None,
) -> Tuple[Tuple[Node, ...], JsCmd]:
    """Functional entry point: build a normalizer and run one pass."""
    normalizer = HtmlNormalizer(
        next_id,
        rewrite=rewrite,
        removed_events_attribute=removed_events_attribute,
    )
    return normalizer.normalize(nodes, context_path, strip_comments, state, additional_changes)
