from __future__ import annotations

import pytest

from lift.http.js.cmds import AnonFunc, Call, CmdSeq, Iife, JsRaw, Noop, OnEvent, Run, Str, join, seq
from lift.http.js.cmds import _Noop


def test_noop_is_identity():
    a = Run("a();")
    assert (Noop & a) is a
    assert (a & Noop) is a
    assert (Noop & Noop) is Noop


def test_noop_is_a_singleton():
    assert _Noop() is Noop
    assert Noop.commands == ()
    assert Noop.to_js_cmd() == ""


def test_composition_is_associative_and_ordered():
    a, b, c = Run("a();"), Run("b();"), Run("c();")
    assert (a & b) & c == a & (b & c)
    assert (a & b & c).commands == (a, b, c)
    assert (a & b & c) == CmdSeq((a, b, c))


def test_composing_with_non_command_fails():
    with pytest.raises(TypeError):
        Run("a();") & "b();"


def test_seq_and_join():
    a, b = Run("a();"), Run("b();")
    assert seq([]) is Noop
    assert seq([a]) is a
    assert seq([a, Noop, b]) == CmdSeq((a, b))
    assert join([]) is Noop
    assert join([a, b]).to_js_cmd() == "a();\nb();"


def test_call_encodes_plain_arguments():
    assert Call("f", "x", 1, True, None).to_js_cmd() == 'f("x",1,true,null)'
    assert Call("f", JsRaw("window"), Str("y")).to_js_cmd() == 'f(window,"y")'


def test_call_escapes_html_sensitive_characters():
    assert Call("lift.log", "</script>").to_js_cmd() == 'lift.log("\\u003c/script\\u003e")'
    assert Str("it's").to_js_cmd() == '"it\\u0027s"'


def test_expression_as_statement():
    assert Call("lift.log", "ready").cmd.to_js_cmd() == 'lift.log("ready");'


def test_anonymous_function():
    assert AnonFunc("event", Run("f();")).to_js_cmd() == "function(event) {f();}"


def test_on_event():
    cmd = OnEvent("x", "click", "f();")
    assert cmd.to_js_cmd() == 'lift.onEvent("x","click",function(event) {f();});'
    assert cmd.as_call().function == "lift.onEvent"


def test_iife():
    assert Iife(Run("a();") & Run("b();")).to_js_cmd() == "(function() {\na();\nb();\n})();"
