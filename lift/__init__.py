# lift/__init__.py
# Lift: server-rendered pages with out-of-line event handlers
# Goals:
# - every HTML page goes through one normalization pass (URLs + handlers)
# - proxy-correct context path (X-Forwarded-Prefix via ProxyFix)
# - nonce-based CSP without 'unsafe-inline'
# - JSON error shape for API, HTML for web

from __future__ import annotations

import logging
import os
import time
from importlib import import_module
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, Union
from uuid import uuid4

from dotenv import load_dotenv
from flask import Blueprint, Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException, InternalServerError
from werkzeug.middleware.proxy_fix import ProxyFix
from werkzeug.utils import import_string

from lift.cli import lift_cli
from lift.helpers import json_sanitize
from lift.http import session as render_state
from lift.security.csp import apply_csp_headers, new_nonce, nonce_attr

# IMPORTANT: never override real env vars in prod
load_dotenv(override=False)

__version__ = "0.1.0"

PACKAGE_DIR = Path(__file__).resolve().parent
ConfigLike = Union[str, Type[Any]]


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _env_bool(name: str) -> Optional[bool]:
    v = os.getenv(name)
    if v is None:
        return None
    s = str(v).strip().lower()
    if s in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "f", "no", "n", "off"}:
        return False
    return None


def _env_mode(app: Optional[Flask] = None) -> str:
    """
    Determine environment mode deterministically.
    Priority:
      1) app.config["ENV"] (if present and meaningful)
      2) LIFT_ENV / ENV / FLASK_ENV env vars
      3) default "development"
    """
    if app is not None:
        v = app.config.get("ENV")
        if v and str(v).strip() and str(v).strip() not in {"?", "base"}:
            return str(v).strip().lower()

    for key in ("LIFT_ENV", "ENV", "FLASK_ENV"):
        val = (os.getenv(key) or "").strip().lower()
        if val:
            if val in {"prod"}:
                return "production"
            if val in {"dev"}:
                return "development"
            return val

    return "development"


def _resolve_config(target: Optional[ConfigLike]) -> ConfigLike:
    """
    Choose config class/module path.
    - If explicitly provided, respect it.
    - Else if FLASK_CONFIG is set, use it.
    - Else ProductionConfig when env indicates production; otherwise DevelopmentConfig.
    """
    if target is not None:
        return target

    explicit = (os.getenv("FLASK_CONFIG") or "").strip()
    if explicit:
        return explicit

    env = _env_mode(None)
    return "lift.config.ProductionConfig" if env == "production" else "lift.config.DevelopmentConfig"


def _is_prod(app: Flask) -> bool:
    return _env_mode(app) == "production"


def _json_error(message: str, status: int, **extra: Any):
    payload: Dict[str, Any] = {"ok": False, "error": {"code": int(status), "message": str(message)}}
    rid = extra.pop("request_id", None)
    if rid:
        payload["error"]["request_id"] = rid
    if extra:
        payload["error"].update(extra)

    resp = jsonify(payload)
    resp.status_code = int(status)
    return resp


def _wants_json_response() -> bool:
    path = request.path or ""
    if path.startswith(("/api/", "/healthz", "/version")):
        return True
    accept = (request.headers.get("Accept") or "").lower()
    return ("application/json" in accept) or bool(request.is_json)


# -----------------------------------------------------------------------------
# Logging with request_id
# -----------------------------------------------------------------------------
class _RequestIDFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        try:
            record.request_id = getattr(g, "request_id", "-")
        except RuntimeError:
            # outside an app context
            record.request_id = "-"
        return True


def _configure_logging(app: Flask) -> None:
    fmt = "%(asctime)s [%(levelname)s] %(name)s [rid=%(request_id)s]: %(message)s"
    root = logging.getLogger()

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        handler.addFilter(_RequestIDFilter())
        root.addHandler(handler)
    else:
        for h in root.handlers:
            if not any(isinstance(f, _RequestIDFilter) for f in h.filters):
                h.addFilter(_RequestIDFilter())
            if not getattr(h, "formatter", None) or "%(request_id)s" not in getattr(h.formatter, "_fmt", ""):
                h.setFormatter(logging.Formatter(fmt))

    root.setLevel(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    logging.getLogger("werkzeug").setLevel(str(app.config.get("WERKZEUG_LOG_LEVEL", "WARNING")).upper())
    app.logger.info("Loaded config: ENV=%s DEBUG=%s", app.config.get("ENV", "?"), app.debug)


# -----------------------------------------------------------------------------
# Jinja helpers: CSP nonce attr + json_sanitize
# -----------------------------------------------------------------------------
def _register_jinja_helpers(app: Flask) -> None:
    app.jinja_env.filters["json_sanitize"] = json_sanitize
    app.jinja_env.globals.setdefault("nonce_attr", nonce_attr)


# -----------------------------------------------------------------------------
# ProxyFix (reverse proxy; X-Forwarded-Prefix becomes the context path)
# -----------------------------------------------------------------------------
def _apply_proxyfix(app: Flask) -> None:
    trust = _env_bool("TRUST_PROXY")
    if trust is None:
        trust = _is_prod(app)

    if not trust:
        return

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=1)
    app.logger.info("ProxyFix enabled (trusting X-Forwarded-* headers).")


# -----------------------------------------------------------------------------
# Blueprint registration
# -----------------------------------------------------------------------------
_BLUEPRINTS: List[Tuple[str, Optional[str]]] = [
    ("lift.blueprints.health", None),
    ("lift.blueprints.api", "/api"),
    ("lift.blueprints.pages", None),
]


def _register_blueprints(app: Flask) -> None:
    disabled = {p.strip().lower() for p in (os.getenv("DISABLE_BPS", "")).split(",") if p.strip()}

    for dotted, url_prefix in _BLUEPRINTS:
        if dotted.split(".")[-1].lower() in disabled:
            app.logger.info("Disabled module: %s", dotted)
            continue

        blueprint = getattr(import_module(dotted), "bp", None)
        if not isinstance(blueprint, Blueprint):
            raise RuntimeError(f"{dotted} does not define `bp = Blueprint(...)`")

        app.register_blueprint(blueprint, url_prefix=url_prefix)
        app.logger.debug("Registered blueprint: %-8s → %s", blueprint.name, url_prefix or "/")


# -----------------------------------------------------------------------------
# Request lifecycle + errors
# -----------------------------------------------------------------------------
def _register_request_lifecycle(app: Flask) -> None:
    @app.before_request
    def _bootstrap_request():
        g.request_id = request.headers.get("X-Request-ID") or uuid4().hex
        g._start_ts = time.perf_counter()
        g.csp_nonce = new_nonce()

    @app.after_request
    def _attach_request_headers(resp):
        resp.headers["X-Request-ID"] = getattr(g, "request_id", "-")
        start = getattr(g, "_start_ts", None)
        if start:
            resp.headers["X-Response-Time-ms"] = str(int((time.perf_counter() - start) * 1000))
        if resp.mimetype == "text/html":
            apply_csp_headers(resp)
        return resp


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def _http_err(err: HTTPException):
        if _wants_json_response():
            return _json_error(err.description or err.name, err.code or 500, request_id=getattr(g, "request_id", "-"))
        return err

    @app.errorhandler(Exception)
    def _uncaught(err: Exception):
        app.logger.exception("Unhandled error")

        if _wants_json_response():
            return _json_error("Internal Server Error", 500, request_id=getattr(g, "request_id", "-"))
        return InternalServerError()


# -----------------------------------------------------------------------------
# App Factory
# -----------------------------------------------------------------------------
def create_app(config_class: Optional[ConfigLike] = None) -> Flask:
    app = Flask(
        __name__,
        static_folder=str(PACKAGE_DIR / "static"),
        template_folder=str(PACKAGE_DIR / "templates"),
    )

    # ---- Config loading
    cfg = _resolve_config(config_class)
    try:
        cfg_obj = import_string(cfg) if isinstance(cfg, str) else cfg
    except ImportError as exc:
        raise RuntimeError(f"Invalid FLASK_CONFIG '{cfg}': {exc}") from exc
    app.config.from_object(cfg_obj)

    init_hook = getattr(cfg_obj, "init_app", None)
    if callable(init_hook):
        init_hook(app)

    # ---- Normalize environment (do NOT leave ENV=?)
    env = _env_mode(app)
    app.config["ENV"] = env

    app.url_map.strict_slashes = False

    app.config.setdefault("BRAND_NAME", os.getenv("BRAND_NAME", "Lift"))

    # ---- Proxy handling first
    _apply_proxyfix(app)

    # ---- Logging / Jinja helpers
    _configure_logging(app)
    _register_jinja_helpers(app)

    # ---- Request lifecycle / render state / errors
    _register_request_lifecycle(app)
    render_state.init_app(app)
    _register_error_handlers(app)

    # ---- Blueprints + CLI
    _register_blueprints(app)
    app.cli.add_command(lift_cli)

    return app
