from __future__ import annotations

from .cmds import AnonFunc, Call, CmdSeq, ExpCmd, Iife, JsCmd, JsExp, JsRaw, Noop, OnEvent, Run, Str, join, seq

__all__ = [
    "AnonFunc",
    "Call",
    "CmdSeq",
    "ExpCmd",
    "Iife",
    "JsCmd",
    "JsExp",
    "JsRaw",
    "Noop",
    "OnEvent",
    "Run",
    "Str",
    "join",
    "seq",
]
