from __future__ import annotations

import itertools
import os
import socket
import time
from datetime import datetime, timezone
from typing import Any, Dict

from flask import Blueprint, current_app, g, jsonify
from jinja2 import TemplateNotFound

from lift.http.html_normalizer import HtmlNormalizer
from lift.xml.parsing import parse_html

bp = Blueprint("health", __name__)

APP_STARTED_AT = time.time()
HOSTNAME = socket.gethostname()

STRICT_HEALTH = os.getenv("STRICT_HEALTH", "0").lower() in {"1", "true", "yes", "on"}

BUILD_VERSION = (
    os.getenv("BUILD_VERSION") or os.getenv("RELEASE") or os.getenv("VERSION") or "dev"
)
GIT_SHA = os.getenv("GIT_SHA", "")[:12]

_PROBE = '<div><a href="/probe" onclick="probe();">probe</a></div>'


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _overall_status(parts: Dict[str, Dict[str, Any]]) -> str:
    states = [p.get("status", "ok") for p in parts.values()]
    if any(s == "fail" for s in states):
        return "fail"
    if any(s == "degraded" for s in states):
        return "degraded"
    return "ok"


def _pipeline_check() -> Dict[str, Any]:
    # private counter: the probe must not consume ids from the app's session
    normalizer = HtmlNormalizer(itertools.count(1).__next__)
    nodes, js = normalizer.normalize(parse_html(_PROBE), "/ctx", True)
    anchor = nodes[0].children[0]
    ok = anchor.get("href") == "/ctx/probe" and anchor.get("onclick") is None and len(js.commands) == 1
    if ok:
        return {"status": "ok", "ok": True}
    return {"status": "fail", "ok": False, "reason": "normalizer-probe-mismatch"}


def _templates_check() -> Dict[str, Any]:
    try:
        current_app.jinja_env.get_template("index.html")
    except TemplateNotFound:
        return {
            "status": "fail" if STRICT_HEALTH else "degraded",
            "ok": False,
            "reason": "index-template-missing",
        }
    return {"status": "ok", "ok": True}


def _summary_payload() -> Dict[str, Any]:
    parts = {
        "pipeline": _pipeline_check(),
        "templates": _templates_check(),
    }
    overall = _overall_status(parts)
    return {
        "status": overall,
        "version": BUILD_VERSION,
        "git": GIT_SHA,
        "hostname": HOSTNAME,
        "started_at": datetime.fromtimestamp(APP_STARTED_AT, tz=timezone.utc).isoformat(
            timespec="seconds"
        ),
        "uptime_s": int(time.time() - APP_STARTED_AT),
        "now": _now_iso(),
        "parts": parts,
        "flags": {
            "strict": STRICT_HEALTH,
            "extract_inline_js": bool(current_app.config.get("LIFT_EXTRACT_INLINE_JS", True)),
        },
    }


@bp.get("/healthz")
def healthz():
    p = _summary_payload()
    code = 200 if p["status"] != "fail" else 503
    p["request_id"] = getattr(g, "request_id", "-")
    return jsonify(p), code


@bp.get("/version")
def version():
    return jsonify(
        {
            "version": BUILD_VERSION,
            "git": GIT_SHA,
            "env": current_app.config.get("ENV"),
        }
    )
