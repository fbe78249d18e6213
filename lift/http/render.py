# lift/http/render.py
from __future__ import annotations

from flask import Response, render_template
from jinja2 import TemplateNotFound

from lift.errors import TemplateRenderError
from lift.http.merge import merge_page
from lift.http.session import current
from lift.security.csp import nonce
from lift.xml.parsing import parse_html, render


def render_page(template: str, status: int = 200, **context) -> Response:
    """Render a Jinja template and run the result through the page merge."""
    s = current()
    try:
        markup = render_template(template, **context)
    except TemplateNotFound as e:
        raise TemplateRenderError(template, "template not found") from e

    merged = merge_page(parse_html(markup), s, nonce=nonce())
    return Response(render(merged), status=status, mimetype="text/html")
