from __future__ import annotations

from flask import Blueprint, current_app

from lift.http.js.cmds import Call
from lift.http.render import render_page
from lift.http.session import current
from lift.xml.nodes import elem

bp = Blueprint("pages", __name__)


@bp.get("/")
def index():
    s = current()
    s.put_in_head(elem("meta", name="lift-context-path", content=s.context_path or "/"))
    s.append_js(Call("lift.log", "page ready").cmd)
    return render_page("index.html", title=current_app.config.get("BRAND_NAME", "Lift"))
