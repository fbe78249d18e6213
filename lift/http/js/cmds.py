# lift/http/js/cmds.py
"""
Client-side JavaScript as composable values.

`JsExp` is an expression, `JsCmd` a statement. Commands form a monoid under
`&`: `Noop` is the identity, composition is associative and keeps order, and
`commands` always exposes the flat sequence. Rendering to script text happens
only when `to_js_cmd()` is called.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Tuple

from lift.helpers import encode_js, encode_js_string


# -----------------------------------------------------------------------------
# Expressions
# -----------------------------------------------------------------------------
class JsExp:
    def to_js_cmd(self) -> str:
        raise NotImplementedError

    @property
    def cmd(self) -> "JsCmd":
        """This expression as a statement (`<exp>;`)."""
        return ExpCmd(self)

    def __str__(self) -> str:
        return self.to_js_cmd()


@dataclass(frozen=True)
class JsRaw(JsExp):
    js: str

    def to_js_cmd(self) -> str:
        return self.js


@dataclass(frozen=True)
class Str(JsExp):
    value: str

    def to_js_cmd(self) -> str:
        return encode_js_string(self.value)


@dataclass(frozen=True)
class AnonFunc(JsExp):
    params: str
    body: "JsCmd"

    def to_js_cmd(self) -> str:
        return f"function({self.params}) {{{self.body.to_js_cmd()}}}"


@dataclass(frozen=True, init=False)
class Call(JsExp):
    """
    Call("lift.onEvent", "id", "click", AnonFunc(...)).

    Arguments that are JsExp render as themselves; anything else is
    JSON-encoded.
    """

    function: str
    args: Tuple[Any, ...]

    def __init__(self, function: str, *args: Any) -> None:
        object.__setattr__(self, "function", function)
        object.__setattr__(self, "args", tuple(args))

    def to_js_cmd(self) -> str:
        rendered = ",".join(
            a.to_js_cmd() if isinstance(a, JsExp) else encode_js(a) for a in self.args
        )
        return f"{self.function}({rendered})"


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------
class JsCmd:
    @property
    def commands(self) -> Tuple["JsCmd", ...]:
        return (self,)

    def to_js_cmd(self) -> str:
        raise NotImplementedError

    def __and__(self, other: "JsCmd") -> "JsCmd":
        if not isinstance(other, JsCmd):
            return NotImplemented
        return seq(self.commands + other.commands)

    def __str__(self) -> str:
        return self.to_js_cmd()


class _Noop(JsCmd):
    _instance = None

    def __new__(cls) -> "_Noop":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def commands(self) -> Tuple[JsCmd, ...]:
        return ()

    def to_js_cmd(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "Noop"


Noop: JsCmd = _Noop()


@dataclass(frozen=True)
class ExpCmd(JsCmd):
    exp: JsExp

    def to_js_cmd(self) -> str:
        return self.exp.to_js_cmd() + ";"


@dataclass(frozen=True)
class Run(JsCmd):
    """A raw statement, emitted as written."""

    js: str

    def to_js_cmd(self) -> str:
        return self.js


@dataclass(frozen=True)
class OnEvent(JsCmd):
    """Attach `handler` to the `event_name` event of the element with `element_id`."""

    element_id: str
    event_name: str
    handler: str

    def as_call(self) -> Call:
        return Call("lift.onEvent", self.element_id, self.event_name, AnonFunc("event", Run(self.handler)))

    def to_js_cmd(self) -> str:
        return self.as_call().cmd.to_js_cmd()


@dataclass(frozen=True)
class CmdSeq(JsCmd):
    cmds: Tuple[JsCmd, ...]

    @property
    def commands(self) -> Tuple[JsCmd, ...]:
        return self.cmds

    def to_js_cmd(self) -> str:
        return "\n".join(c.to_js_cmd() for c in self.cmds)


@dataclass(frozen=True)
class Iife(JsCmd):
    body: JsCmd

    def to_js_cmd(self) -> str:
        return "(function() {\n" + self.body.to_js_cmd() + "\n})();"


def seq(commands: Iterable[JsCmd]) -> JsCmd:
    flat: Tuple[JsCmd, ...] = ()
    for c in commands:
        flat += c.commands
    if not flat:
        return Noop
    if len(flat) == 1:
        return flat[0]
    return CmdSeq(flat)


def join(cmds: Iterable[JsCmd]) -> JsCmd:
    out: JsCmd = Noop
    for c in cmds:
        out = out & c
    return out
