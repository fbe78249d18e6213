from __future__ import annotations

import pytest

from lift.http.html_normalizer import (
    EventAttribute,
    HtmlNormalizer,
    js_for_event_attributes,
    normalize_html_and_event_handlers,
)
from lift.http.js.cmds import Noop, OnEvent, Run
from lift.xml.nodes import Attribute, Comment, Element, Group, Text, elem


@pytest.fixture()
def normalizer(next_id):
    return HtmlNormalizer(next_id)


def ids_issued(counter_calls):
    def next_id():
        counter_calls.append(len(counter_calls) + 1)
        return counter_calls[-1]

    return next_id


# -----------------------------------------------------------------------------
# attribute pass
# -----------------------------------------------------------------------------
def test_javascript_href_becomes_click_handler(normalizer):
    element_id, attributes, events = normalizer.normalize_url_and_extract_events(
        "href", (Attribute("href", "javascript:doThing();"),), "/ctx", True
    )
    assert element_id is None
    assert attributes == ()
    assert events == [EventAttribute("click", "doThing(); event.preventDefault();")]


def test_javascript_slash_slash_prefix_is_stripped(normalizer):
    _, attributes, events = normalizer.normalize_url_and_extract_events(
        "action", (Attribute("method", "post"), Attribute("action", "javascript://submitIt()")), "", True
    )
    assert attributes == (Attribute("method", "post"),)
    assert events == [EventAttribute("submit", "submitIt(); event.preventDefault();")]


@pytest.mark.parametrize("value", ["javascript:", "javascript://", "javascript:   "])
def test_blank_javascript_url_is_dropped_without_event(normalizer, value):
    _, attributes, events = normalizer.normalize_url_and_extract_events(
        "href", (Attribute("class", "x"), Attribute("href", value)), "", True
    )
    assert attributes == (Attribute("class", "x"),)
    assert events == []


def test_on_attributes_are_extracted_and_order_kept(normalizer):
    _, attributes, events = normalizer.normalize_url_and_extract_events(
        "src",
        (
            Attribute("class", "a"),
            Attribute("onmouseover", "hover();"),
            Attribute("title", "t"),
            Attribute("onclick", "f();"),
            Attribute("data-x", "1"),
        ),
        "",
        True,
    )
    assert attributes == (Attribute("class", "a"), Attribute("title", "t"), Attribute("data-x", "1"))
    assert events == [EventAttribute("mouseover", "hover();"), EventAttribute("click", "f();")]


def test_url_attribute_is_normalized_in_place(normalizer):
    _, attributes, events = normalizer.normalize_url_and_extract_events(
        "href",
        (Attribute("class", "nav"), Attribute("href", "/foo"), Attribute("title", "Foo")),
        "/ctx",
        True,
    )
    assert attributes == (Attribute("class", "nav"), Attribute("href", "/ctx/foo"), Attribute("title", "Foo"))
    assert events == []


def test_id_is_reported_and_kept(normalizer):
    element_id, attributes, _ = normalizer.normalize_url_and_extract_events(
        "src", (Attribute("id", "x"), Attribute("onclick", "f();")), "", True
    )
    assert element_id == "x"
    assert attributes == (Attribute("id", "x"),)


def test_empty_id_counts_as_missing(normalizer):
    element_id, attributes, _ = normalizer.normalize_url_and_extract_events(
        "src", (Attribute("id", ""),), "", True
    )
    assert element_id is None
    assert attributes == (Attribute("id", ""),)


def test_prefixed_attributes_pass_through(normalizer):
    attrs = (
        Attribute("onclick", "ns();", prefix="lift"),
        Attribute("href", "/x", prefix="xlink"),
        Attribute("id", "y", prefix="svg"),
    )
    element_id, attributes, events = normalizer.normalize_url_and_extract_events("href", attrs, "/ctx", True)
    assert element_id is None
    assert attributes == attrs
    assert events == []


@pytest.mark.parametrize("attributes", [None, ()])
def test_no_attributes_short_circuits(normalizer, attributes):
    assert normalizer.normalize_url_and_extract_events("src", attributes, "/ctx", True) == (None, (), [])


def test_extraction_can_be_turned_off(next_id):
    normalizer = HtmlNormalizer(next_id, extract_events=False)
    attrs = (Attribute("href", "javascript:go()"), Attribute("onclick", "f();"))
    _, attributes, events = normalizer.normalize_url_and_extract_events("href", attrs, "/ctx", True)
    assert attributes == attrs
    assert events == []


# -----------------------------------------------------------------------------
# element pass: ids and bindings
# -----------------------------------------------------------------------------
def test_missing_id_is_synthesized(normalizer):
    element, js = normalizer.normalize_element_and_attributes(elem("div", onclick="f();"), "src", "", True)
    assert element.attributes == (Attribute("id", "lift-event-js-1"),)
    assert js.commands == (OnEvent("lift-event-js-1", "click", "f();"),)


def test_existing_id_is_reused(normalizer):
    element, js = normalizer.normalize_element_and_attributes(
        elem("div", id="x", onclick="f();"), "src", "", True
    )
    assert element.attributes == (Attribute("id", "x"),)
    assert js.commands == (OnEvent("x", "click", "f();"),)


def test_no_events_means_no_id_and_no_counter_use():
    issued = []
    normalizer = HtmlNormalizer(ids_issued(issued))
    element, js = normalizer.normalize_element_and_attributes(elem("p", class_="plain"), "src", "", True)
    assert element == elem("p", class_="plain")
    assert js is Noop
    assert issued == []


def test_empty_id_is_replaced_by_generated_one(normalizer):
    element, js = normalizer.normalize_element_and_attributes(
        elem("span", id="", title="t", onclick="f();"), "src", "", True
    )
    assert element.attributes == (Attribute("id", "lift-event-js-1"), Attribute("title", "t"))
    assert js.commands == (OnEvent("lift-event-js-1", "click", "f();"),)


def test_removed_events_attribute_lists_handlers(next_id):
    normalizer = HtmlNormalizer(next_id, removed_events_attribute="data-lift-removed-events")
    element, js = normalizer.normalize_element_and_attributes(
        elem("input", id="q", onchange="a();", onfocus="b();", name="q"), "src", "", True
    )
    assert element.attributes == (
        Attribute("id", "q"),
        Attribute("name", "q"),
        Attribute("data-lift-removed-events", "onchange onfocus"),
    )
    assert [c.event_name for c in js.commands] == ["change", "focus"]


def test_removed_events_attribute_not_added_without_events(next_id):
    normalizer = HtmlNormalizer(next_id, removed_events_attribute="data-lift-removed-events")
    element, _ = normalizer.normalize_element_and_attributes(elem("p", id="x"), "src", "", True)
    assert element.attributes == (Attribute("id", "x"),)


def test_javascript_href_and_onclick_both_extract(normalizer):
    element, js = normalizer.normalize_element_and_attributes(
        elem("a", href="javascript:go()", onclick="track();"), "href", "", True
    )
    assert element.attributes == (Attribute("id", "lift-event-js-1"),)
    assert js.commands == (
        OnEvent("lift-event-js-1", "click", "go(); event.preventDefault();"),
        OnEvent("lift-event-js-1", "click", "track();"),
    )


def test_bindings_render_as_lift_on_event():
    js = js_for_event_attributes("x", [EventAttribute("click", "f();"), EventAttribute("submit", "g();")])
    assert js.to_js_cmd() == (
        'lift.onEvent("x","click",function(event) {f();});\n'
        'lift.onEvent("x","submit",function(event) {g();});'
    )


def test_no_bindings_is_noop():
    assert js_for_event_attributes("x", []) is Noop


# -----------------------------------------------------------------------------
# tree pass
# -----------------------------------------------------------------------------
def test_siblings_keep_order_and_commands_follow_document_order(normalizer):
    nodes = (Comment(" c "), elem("div", onclick="a();"), Text("t"), elem("span", onclick="b();"))
    out, js = normalizer.normalize(nodes, "", False)

    assert out[0] == Comment(" c ")
    assert out[1] == elem("div", id="lift-event-js-1")
    assert out[2] == Text("t")
    assert out[3] == elem("span", id="lift-event-js-2")
    assert js.commands == (
        OnEvent("lift-event-js-1", "click", "a();"),
        OnEvent("lift-event-js-2", "click", "b();"),
    )


def test_comments_are_stripped_on_request(normalizer):
    nodes = (Comment(" c "), elem("div", onclick="a();"), Text("t"), elem("span", onclick="b();"))
    out, js = normalizer.normalize(nodes, "", True)

    assert out == (elem("div", id="lift-event-js-1"), Text("t"), elem("span", id="lift-event-js-2"))
    assert [c.element_id for c in js.commands] == ["lift-event-js-1", "lift-event-js-2"]


def test_nested_comments_are_stripped_too(normalizer):
    out, _ = normalizer.normalize((elem("div", Comment("x"), Text("y")),), "", True)
    assert out == (elem("div", Text("y")),)


def test_urls_fixed_per_tag(next_id):
    normalizer = HtmlNormalizer(next_id, rewrite=lambda url: url + ";s=1")
    nodes = (
        elem("a", href="/a"),
        elem("form", action="/f"),
        elem("link", href="/s.css"),
        elem("script", src="/j.js"),
        elem("img", src="/i.png"),
        elem("div", href="/not-a-url-attribute"),
    )
    out, _ = normalizer.normalize(nodes, "/ctx", False)
    assert [e.attributes[0].value for e in out] == [
        "/ctx/a;s=1",
        "/ctx/f;s=1",
        "/ctx/s.css",
        "/ctx/j.js",
        "/ctx/i.png;s=1",
        "/not-a-url-attribute",
    ]


def test_absolute_urls_untouched_in_tree(normalizer):
    nodes = (elem("a", href="https://example.com/"), elem("script", src="//cdn.example.com/x.js"))
    out, _ = normalizer.normalize(nodes, "/ctx", False)
    assert out == nodes


def test_children_are_normalized(normalizer):
    tree = (elem("ul", elem("li", elem("a", href="/x", onclick="go();"))),)
    out, js = normalizer.normalize(tree, "/ctx", False)
    anchor = out[0].children[0].children[0]
    assert anchor.attributes == (Attribute("id", "lift-event-js-1"), Attribute("href", "/ctx/x"))
    assert js.commands == (OnEvent("lift-event-js-1", "click", "go();"),)


def test_element_then_hook_then_children_js_order(normalizer):
    def hook(state, element):
        if element.label == "div":
            return state, element, Run("hook();")
        return state, element, Noop

    tree = (elem("div", elem("p", onclick="child();"), onclick="parent();"),)
    _, js = normalizer.normalize(tree, "", False, None, hook)
    assert js.commands == (
        OnEvent("lift-event-js-1", "click", "parent();"),
        Run("hook();"),
        OnEvent("lift-event-js-2", "click", "child();"),
    )


def test_hook_sees_normalized_element(normalizer):
    seen = []

    def hook(state, element):
        seen.append(element)
        return state, element, Noop

    normalizer.normalize((elem("a", href="/x", onclick="f();"),), "/ctx", False, None, hook)
    assert seen == [elem("a", id="lift-event-js-1", href="/ctx/x")]


def test_state_flows_down_only(normalizer):
    seen = []

    def count_sections(depth, element):
        seen.append((element.get("class"), depth))
        return (depth + 1 if element.label == "section" else depth), element, Noop

    tree = (
        elem(
            "section",
            elem("section", elem("p", class_="deep")),
            elem("p", class_="inner"),
            class_="outer",
        ),
        elem("p", class_="sibling"),
    )
    normalizer.normalize(tree, "", False, 0, count_sections)
    assert seen == [("outer", 0), (None, 1), ("deep", 2), ("inner", 1), ("sibling", 0)]


def test_groups_are_transparent_and_share_state(normalizer):
    seen = []

    def hook(state, element):
        seen.append((element.label, state))
        return state + 1, element, Noop

    tree = (Group((elem("a", href="/x"), elem("b"))),)
    out, _ = normalizer.normalize(tree, "/ctx", False, 10, hook)
    assert out == (Group((elem("a", href="/ctx/x"), elem("b"))),)
    assert seen == [("a", 10), ("b", 10)]


def test_non_element_replacement_is_not_descended_into(normalizer):
    raw = elem("span", onclick="raw();")

    def hook(state, element):
        if element.get("class") == "swap":
            return state, [raw, Text("!")], Run("swapped();")
        return state, element, Noop

    tree = (elem("div", elem("p", onclick="inner();"), class_="swap", onclick="outer();"), elem("hr"))
    out, js = normalizer.normalize(tree, "", False, None, hook)

    assert out == (raw, Text("!"), elem("hr"))
    assert out[0].get("onclick") == "raw();"
    # the element's own bindings and the hook's js survive; nothing from below
    assert js.commands == (OnEvent("lift-event-js-1", "click", "outer();"), Run("swapped();"))


def test_single_non_element_replacement(normalizer):
    def hook(state, element):
        return state, Text("gone"), Noop

    out, js = normalizer.normalize((elem("div", elem("a", onclick="x();")),), "", False, None, hook)
    assert out == (Text("gone"),)
    assert js is Noop


def test_none_replacement_removes_the_element(normalizer):
    def hook(state, element):
        if element.label == "script":
            return state, None, None
        return state, element, None

    out, js = normalizer.normalize((elem("script", Text("x();")), elem("p")), "", False, None, hook)
    assert out == (elem("p"),)
    assert js is Noop


def test_replacement_element_children_are_normalized(normalizer):
    def hook(state, element):
        if element.label == "div":
            return state, element.copy(children=(elem("b", onclick="x();"),)), Noop
        return state, element, Noop

    out, js = normalizer.normalize((elem("div", elem("i")),), "", False, None, hook)
    assert out == (elem("div", elem("b", id="lift-event-js-1")),)
    assert js.commands == (OnEvent("lift-event-js-1", "click", "x();"),)


def test_hook_failure_propagates(normalizer):
    def hook(state, element):
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        normalizer.normalize((elem("div", onclick="f();"),), "", False, None, hook)


def test_input_tree_is_not_modified(normalizer):
    tree = (elem("div", elem("a", href="/x", onclick="f();"), onclick="g();"),)
    before = repr(tree)
    normalizer.normalize(tree, "/ctx", True)
    assert repr(tree) == before


def test_empty_input(normalizer):
    assert normalizer.normalize((), "/ctx", True) == ((), Noop)


def test_functional_entry_point(next_id):
    def hook(state, element):
        return state, element, Noop

    out, js = normalize_html_and_event_handlers(
        (elem("button", onclick="go();"),),
        "",
        False,
        None,
        hook,
        next_id=next_id,
        removed_events_attribute="data-removed",
    )
    assert out == (
        Element(
            "button",
            (Attribute("id", "lift-event-js-1"), Attribute("data-removed", "onclick")),
        ),
    )
    assert js.commands == (OnEvent("lift-event-js-1", "click", "go();"),)
