from __future__ import annotations

from lift.xml.nodes import Attribute, Comment, Element, Group, Text, Unparsed, elem, text_of
from lift.xml.parsing import parse_html, render


def test_parse_keeps_attribute_order_and_whole_values():
    (div,) = parse_html('<div id="a" class="x y" onclick="f();">hi</div>')
    assert div == Element(
        "div",
        (Attribute("id", "a"), Attribute("class", "x y"), Attribute("onclick", "f();")),
        (Text("hi"),),
    )


def test_parse_comments_and_text():
    nodes = parse_html("<!-- c --><p>x</p>tail")
    assert nodes == (Comment(" c "), elem("p", Text("x")), Text("tail"))


def test_parse_prefixed_attribute():
    (svg,) = parse_html('<svg><use xlink:href="#icon"></use></svg>')
    use = svg.children[0]
    assert use.attributes == (Attribute("href", "#icon", "xlink"),)
    assert use.get("href") is None


def test_parse_doctype_is_unparsed():
    nodes = parse_html("<!DOCTYPE html><html></html>")
    assert isinstance(nodes[0], Unparsed)
    assert nodes[0].markup.startswith("<!DOCTYPE")


def test_parse_empty():
    assert parse_html("") == ()


def test_render_escapes_text_and_attributes():
    node = elem("p", Text("a < b & c"), title='say "hi"')
    assert render((node,)) == '<p title="say &#34;hi&#34;">a &lt; b &amp; c</p>'


def test_render_keeps_script_body_raw():
    node = Element("script", (), (Text("if (a < b && c) {}"),))
    assert render((node,)) == "<script>if (a < b && c) {}</script>"


def test_render_void_elements():
    assert render((elem("br"), elem("img", src="/x.png", alt=""))) == '<br><img src="/x.png" alt="">'


def test_render_group_and_prefixed_attribute():
    nodes = (Group((Text("a"), Element("use", (Attribute("href", "#i", "xlink"),)))),)
    assert render(nodes) == 'a<use xlink:href="#i"></use>'


def test_round_trip():
    markup = '<ul><li><a href="/x" onclick="go()">y</a></li><!-- n --></ul>'
    assert render(parse_html(markup)) == markup


def test_elem_builder_names():
    node = elem("label", for_="x", data_role="y")
    assert node.attributes == (Attribute("for", "x"), Attribute("data-role", "y"))


def test_text_of():
    assert text_of(parse_html("<p>a<b>b</b></p><!-- c -->c")) == "abc"
