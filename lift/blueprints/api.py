# lift/blueprints/api.py
"""
JSON endpoints for client-driven updates.

POST /api/normalize  {"html": "...", "strip_comments": false}
    -> {"ok": true, "html": "...", "js": "..."}
POST /api/fragment   {"html": "...", "target": "element-id"}
    -> {"ok": true, "js": "lift.setHtml(...)"}
"""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, jsonify, request
from werkzeug.exceptions import BadRequest

from lift.helpers import encode_js_string
from lift.http.js.html_fixer import fix_html_func
from lift.http.session import current
from lift.xml.parsing import parse_html, render

bp = Blueprint("api", __name__)


def _payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("Expected a JSON object body.")
    return data


def _string_field(data: Dict[str, Any], name: str) -> str:
    value = data.get(name)
    if not isinstance(value, str):
        raise BadRequest(f"'{name}' must be a string.")
    return value


@bp.post("/normalize")
def normalize():
    data = _payload()
    html = _string_field(data, "html")
    s = current()

    strip = data.get("strip_comments", s.strip_comments)
    if not isinstance(strip, bool):
        raise BadRequest("'strip_comments' must be a boolean.")

    nodes, js = s.normalizer().normalize(parse_html(html), s.context_path, strip)
    return jsonify({"ok": True, "html": render(nodes), "js": js.to_js_cmd()})


@bp.post("/fragment")
def fragment():
    data = _payload()
    html = _string_field(data, "html")
    target = _string_field(data, "target")
    if not target:
        raise BadRequest("'target' must not be empty.")
    s = current()

    def set_html(literal: str) -> str:
        return f"lift.setHtml({encode_js_string(target)},{literal})"

    js = fix_html_func(s.next_func_name(), parse_html(html), set_html, s)
    return jsonify({"ok": True, "js": js})
