# lift/http/js/html_fixer.py
"""
Markup for asynchronous page updates.

Fragments sent to the browser as JavaScript string literals get their URLs
fixed, and inline <script> bodies are pulled out to run as commands. Event
attributes are left in place whatever the extraction setting is: the
fragment's markup is inserted by client code that has no page script block
to attach handlers from.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from lift.helpers import encode_js_string
from lift.http.js.cmds import JsCmd, Noop, Run, join
from lift.http.session import S, current
from lift.xml.nodes import Element, Node, text_of
from lift.xml.parsing import render

log = logging.getLogger(__name__)


def _lift_inline_scripts(state: None, element: Element):
    if element.label == "script" and element.get("src") is None:
        body = text_of(element.children)
        return state, (), Run(body) if body.strip() else Noop
    return state, element, Noop


def fix_html_and_js(uid: str, content: Sequence[Node], s: Optional[S] = None) -> Tuple[str, List[JsCmd]]:
    """
    Returns the fragment as a JS string literal plus the JavaScript lifted out
    of its inline <script> elements, in document order.
    """
    s = s or current()
    normalizer = s.normalizer(extract_events=False)
    fixed, js = normalizer.normalize(content, s.context_path, s.strip_comments, None, _lift_inline_scripts)
    log.debug("fixed fragment %s: %d script(s) lifted", uid, len(js.commands))
    return encode_js_string(render(fixed)), list(js.commands)


def fix_html_func(
    uid: str,
    content: Sequence[Node],
    f: Callable[[str], str],
    s: Optional[S] = None,
) -> str:
    """
    `f` receives the JS string literal and returns the JS expression that
    uses it. Lifted scripts run first, inside a function that then returns
    `f`'s expression.
    """
    literal, cmds = fix_html_and_js(uid, content, s)
    if not cmds:
        return f(literal)
    return "((function() {" + join(cmds).to_js_cmd() + " return " + f(literal) + ";})())"
