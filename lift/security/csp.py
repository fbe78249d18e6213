# lift/security/csp.py
from __future__ import annotations

import secrets
from typing import Iterable

from flask import current_app, g
from markupsafe import Markup


def new_nonce() -> str:
    # 128-bit urlsafe token is plenty
    return secrets.token_urlsafe(16)


def nonce() -> str:
    # Access the per-request nonce; set in before_request
    return getattr(g, "csp_nonce", "")


def nonce_attr() -> Markup:
    # Handy for templates: <script {{ nonce_attr() }}>
    n = nonce()
    return Markup(f'nonce="{n}"') if n else Markup("")


def _join(*vals: Iterable[str]) -> str:
    return " ".join(v for v in vals if v)


def build_csp() -> str:
    """
    With inline JS extraction on, pages carry no on* attributes or
    javascript: URLs and the one page script is nonced, so script-src needs
    no 'unsafe-inline'. Turning extraction off puts it back.
    """
    n = nonce()
    cfg = current_app.config

    script_src = ["'self'", f"'nonce-{n}'" if n else ""]
    if not cfg.get("LIFT_EXTRACT_INLINE_JS", True):
        script_src.append("'unsafe-inline'")
    script_src += list(cfg.get("CSP_EXTRA_SCRIPT_SRC") or ())

    style_src = ["'self'", f"'nonce-{n}'" if n else ""]

    directives = [
        ("default-src", _join("'self'")),
        ("script-src", _join(*script_src)),
        ("style-src", _join(*style_src)),
        ("img-src", _join("'self'", "data:")),
        ("connect-src", _join("'self'")),
        ("frame-ancestors", _join("'self'")),
        ("base-uri", _join("'self'")),
        ("object-src", _join("'none'")),
        ("form-action", _join("'self'")),
    ]
    return "; ".join(
        f"{name} {value}".rstrip() if value else name for name, value in directives
    )


def apply_csp_headers(response):
    # Attach either CSP or Report-Only header
    header = (
        "Content-Security-Policy-Report-Only"
        if current_app.config.get("CSP_REPORT_ONLY", False)
        else "Content-Security-Policy"
    )
    response.headers[header] = build_csp()
    return response
