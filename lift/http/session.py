# lift/http/session.py
"""
Render state.

`LiftSession` lives as long as the app (one per Flask app, kept in
`app.extensions["lift"]`) and hands out unique function names, which double
as generated element ids. `S` lives for one request: it knows the context
path, collects head/tail elements and page JavaScript, carries the active URL
rewriter and builds the HtmlNormalizer for this request.
"""

from __future__ import annotations

import itertools
import logging
import secrets
import threading
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Union

from flask import Flask, current_app, g, has_request_context, request

from lift.errors import NoRenderStateError
from lift.http.html_normalizer import HtmlNormalizer
from lift.http.js.cmds import JsCmd
from lift.http.req import RewriteFunc, exclude_prefixes
from lift.xml.nodes import Element

log = logging.getLogger(__name__)

EXTENSION_KEY = "lift"


class LiftSession:
    def __init__(self, start: int = 1, suffix: Optional[str] = None) -> None:
        self._lock = threading.Lock()
        self._counter = itertools.count(start)
        # per-process token so two workers never hand out the same name
        self.suffix = suffix if suffix is not None else secrets.token_hex(3)

    def next_func_name(self) -> str:
        with self._lock:
            n = next(self._counter)
        return f"F{n}_{self.suffix}"


class S:
    def __init__(
        self,
        session: LiftSession,
        context_path: str = "",
        config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.session = session
        self.context_path = (context_path or "").rstrip("/")
        self.config: Mapping[str, Any] = config or {}

        self._js: List[JsCmd] = []
        self._global_js: List[JsCmd] = []
        self._head: List[Element] = []
        self._tail: List[Element] = []
        self._rewriters: List[RewriteFunc] = []

    @classmethod
    def for_app(cls, app: Flask, context_path: Optional[str] = None) -> "S":
        """Render state outside a request (CLI, tests)."""
        if context_path is None:
            context_path = app.config.get("LIFT_CONTEXT_PATH") or ""
        return cls(lift_session(app), context_path, app.config)

    # -------------------------------------------------------------------------
    # ids
    # -------------------------------------------------------------------------
    def next_func_name(self) -> str:
        return self.session.next_func_name()

    # -------------------------------------------------------------------------
    # page JavaScript
    # -------------------------------------------------------------------------
    def append_js(self, js: Union[JsCmd, Iterable[JsCmd]]) -> None:
        if isinstance(js, JsCmd):
            self._js.append(js)
        else:
            self._js.extend(js)

    def append_global_js(self, *js: JsCmd) -> None:
        """JS that must run before anything else on the page (global vars)."""
        self._global_js.extend(js)

    def js_to_append(self, clear_after_reading: bool = False) -> List[JsCmd]:
        out = self._global_js + self._js
        if clear_after_reading:
            self._global_js = []
            self._js = []
        return out

    # -------------------------------------------------------------------------
    # head / tail
    # -------------------------------------------------------------------------
    def put_in_head(self, element: Element) -> None:
        self._head.append(element)

    def for_head(self) -> List[Element]:
        return list(self._head)

    def put_at_end_of_body(self, element: Element) -> None:
        self._tail.append(element)

    def at_end_of_body(self) -> List[Element]:
        return list(self._tail)

    # -------------------------------------------------------------------------
    # URL rewriting
    # -------------------------------------------------------------------------
    @contextmanager
    def with_url_rewriter(self, rewrite: RewriteFunc) -> Iterator[None]:
        """Install `rewrite` for the block; the innermost rewriter wins."""
        self._rewriters.append(rewrite)
        try:
            yield
        finally:
            self._rewriters.pop()

    @property
    def url_rewriter(self) -> Optional[RewriteFunc]:
        return self._rewriters[-1] if self._rewriters else None

    def encode_url(self, url: str) -> str:
        rewrite = self.url_rewriter
        return rewrite(url) if rewrite else url

    # -------------------------------------------------------------------------
    # normalization
    # -------------------------------------------------------------------------
    @property
    def extract_inline_js(self) -> bool:
        return bool(self.config.get("LIFT_EXTRACT_INLINE_JS", True))

    @property
    def strip_comments(self) -> bool:
        return bool(self.config.get("LIFT_STRIP_COMMENTS", False))

    def normalizer(self, extract_events: Optional[bool] = None) -> HtmlNormalizer:
        return HtmlNormalizer(
            self.next_func_name,
            rewrite=self.encode_url,
            exclude=exclude_prefixes(self.config.get("LIFT_CONTEXT_REWRITE_EXCLUDE")),
            removed_events_attribute=self.config.get("LIFT_REMOVED_EVENTS_ATTRIBUTE"),
            extract_events=self.extract_inline_js if extract_events is None else extract_events,
        )


# -----------------------------------------------------------------------------
# Flask wiring
# -----------------------------------------------------------------------------
def lift_session(app: Flask) -> LiftSession:
    return app.extensions[EXTENSION_KEY]


def current() -> S:
    s = getattr(g, "lift_s", None) if has_request_context() else None
    if s is None:
        raise NoRenderStateError("no Lift render state: not inside a request")
    return s


def _request_context_path() -> str:
    override = current_app.config.get("LIFT_CONTEXT_PATH")
    if override is not None:
        return override
    return request.script_root or ""


def init_app(app: Flask) -> None:
    app.extensions[EXTENSION_KEY] = LiftSession()

    @app.before_request
    def _bootstrap_render_state():
        g.lift_s = S(lift_session(app), _request_context_path(), app.config)

    log.debug("Lift render state enabled")
