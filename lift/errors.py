# lift/errors.py
from __future__ import annotations


class LiftError(Exception):
    """Base class for errors raised by lift itself."""


class NoRenderStateError(LiftError, RuntimeError):
    """lift.http.session.current() was called with no request in flight."""


class TemplateRenderError(LiftError):
    def __init__(self, template: str, reason: str) -> None:
        super().__init__(f"cannot render {template!r}: {reason}")
        self.template = template
        self.reason = reason
