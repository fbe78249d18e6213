# lift/config/config.py
# Lift configuration (env-first, production-safe)

from __future__ import annotations

import os
from typing import Optional, Tuple


# ----------------------------
# Env helpers
# ----------------------------
_TRUTHY = {"1", "true", "yes", "on", "y"}
_FALSY = {"0", "false", "no", "off", "n"}


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    if v is None:
        return default
    s = str(v).strip()
    return s if s else default


def _bool(name: str, default: bool = False) -> bool:
    v = _env(name)
    if v is None:
        return default
    s = v.strip().lower()
    if s in _TRUTHY:
        return True
    if s in _FALSY:
        return False
    return default


def _csv(name: str) -> Tuple[str, ...]:
    return tuple(p.strip() for p in (_env(name) or "").split(",") if p.strip())


def _context_path(v: Optional[str]) -> Optional[str]:
    # "/" and "" both mean "mounted at the root"
    if v is None:
        return None
    s = v.strip().rstrip("/")
    if s and not s.startswith("/"):
        s = "/" + s
    return s


# ----------------------------
# Config classes
# ----------------------------
class BaseConfig:
    """
    Env-first config:
    - all important settings can be overridden via environment variables
    - safe defaults for local dev
    """

    ENV = (_env("APP_ENV") or _env("ENV") or _env("FLASK_ENV") or "base").strip().lower()

    DEBUG = _bool("FLASK_DEBUG", False)
    TESTING = _bool("TESTING", False)

    SECRET_KEY = _env("SECRET_KEY", "dev-change-me")

    LOG_LEVEL = _env("LOG_LEVEL", "INFO")
    WERKZEUG_LOG_LEVEL = _env("WERKZEUG_LOG_LEVEL", "WARNING")

    # Rendering pipeline
    # None -> take the context path from the request's script root
    LIFT_CONTEXT_PATH = _context_path(_env("LIFT_CONTEXT_PATH"))
    LIFT_EXTRACT_INLINE_JS = _bool("LIFT_EXTRACT_INLINE_JS", True)
    LIFT_REMOVED_EVENTS_ATTRIBUTE = _env("LIFT_REMOVED_EVENTS_ATTRIBUTE")
    LIFT_STRIP_COMMENTS = _bool("LIFT_STRIP_COMMENTS", False)
    LIFT_CONTEXT_REWRITE_EXCLUDE = _csv("LIFT_CONTEXT_REWRITE_EXCLUDE")

    # Security headers
    CSP_REPORT_ONLY = _bool("CSP_REPORT_ONLY", False)
    CSP_EXTRA_SCRIPT_SRC = _csv("CSP_EXTRA_SCRIPT_SRC")

    @classmethod
    def init_app(cls, app) -> None:
        """
        Optional hook for factory boot hardening.
        Called from create_app() after app.config.from_object(...)
        """
        return None


class DevelopmentConfig(BaseConfig):
    ENV = "development"
    DEBUG = True

    # makes extracted handlers visible when reading page source
    LIFT_REMOVED_EVENTS_ATTRIBUTE = _env("LIFT_REMOVED_EVENTS_ATTRIBUTE", "data-lift-removed-events")


class TestingConfig(BaseConfig):
    ENV = "testing"
    TESTING = True
    LOG_LEVEL = "WARNING"

    LIFT_CONTEXT_PATH = None
    LIFT_EXTRACT_INLINE_JS = True
    LIFT_REMOVED_EVENTS_ATTRIBUTE = None
    LIFT_STRIP_COMMENTS = False
    LIFT_CONTEXT_REWRITE_EXCLUDE: Tuple[str, ...] = ()


class ProductionConfig(BaseConfig):
    ENV = "production"
    DEBUG = False

    LIFT_STRIP_COMMENTS = _bool("LIFT_STRIP_COMMENTS", True)

    @classmethod
    def init_app(cls, app) -> None:
        super().init_app(app)

        # ---- Production guardrails (fail fast) ----
        sk = app.config.get("SECRET_KEY")
        if not sk or sk == "dev-change-me":
            raise RuntimeError("SECRET_KEY must be set to a strong random value in production.")

        if _bool("FLASK_DEBUG", False):
            raise RuntimeError("FLASK_DEBUG must be 0 in production.")
