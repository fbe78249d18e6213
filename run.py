#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Lift development launcher.

- Local dev:             ./run.py --env development
- Local dev (no reload): ./run.py --env development --no-reload
- Behind a proxy:        TRUST_PROXY=1 ./run.py --env production --no-reload
- Gunicorn export:       gunicorn "run:app"  (exports `app` when imported)

Notes:
- dotenv files never override real env vars (.env, then .env.<env>).
- Behind a reverse proxy, X-Forwarded-Prefix becomes the page context path.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


# -----------------------------------------------------------------------------
# Env + dotenv helpers
# -----------------------------------------------------------------------------
def _env_bool(name: str) -> Optional[bool]:
    """Return bool for env var if set, otherwise None."""
    v = os.getenv(name)
    if v is None:
        return None
    vv = str(v).strip().lower()
    if vv in {"1", "true", "yes", "y", "on"}:
        return True
    if vv in {"0", "false", "no", "n", "off"}:
        return False
    return None


def _normalize_env_name(v: str) -> str:
    r = (v or "").strip().lower()
    if r in {"dev", "development", "local"}:
        return "development"
    if r in {"test", "testing"}:
        return "testing"
    if r in {"prod", "production"}:
        return "production"
    return r or "development"


def load_env_stack(*, env: Optional[str] = None, override: bool = False) -> List[Path]:
    """
    Loads .env, then .env.<env>. Returns the files that were loaded.
    override=False keeps server-provided env vars authoritative.
    """
    env_eff = _normalize_env_name(env or os.getenv("LIFT_ENV") or os.getenv("ENV") or os.getenv("FLASK_ENV") or "")
    loaded: List[Path] = []
    for p in (Path(".env"), Path(f".env.{env_eff}")):
        if p.exists() and p.is_file():
            load_dotenv(p, override=override)
            loaded.append(p)
    return loaded


def normalize_config_path(value: Optional[str], *, env_hint: Optional[str] = None) -> str:
    """
    Returns a dotted path like "lift.config.DevelopmentConfig".
    Priority:
      1) explicit value (e.g. --config), aliases allowed
      2) env_hint (e.g. --env)
      3) LIFT_ENV / ENV / FLASK_ENV
    """
    by_env = {
        "development": "lift.config.DevelopmentConfig",
        "testing": "lift.config.TestingConfig",
        "production": "lift.config.ProductionConfig",
    }
    if value and str(value).strip():
        v = value.strip()
        return by_env.get(_normalize_env_name(v), v) if "." not in v else v

    env = _normalize_env_name(env_hint or os.getenv("LIFT_ENV") or os.getenv("ENV") or os.getenv("FLASK_ENV") or "")
    return by_env.get(env, by_env["development"])


# -----------------------------------------------------------------------------
# Runner config
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class RunnerConfig:
    env: str
    config_path: str
    host: str
    port: int
    debug: bool
    use_reloader: bool


def _parse_bool(value: str) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "no", "n", "off"}:
        return False
    raise argparse.ArgumentTypeError(f"expected a boolean, got {value!r}")


def make_runner_config(argv: Optional[List[str]] = None) -> RunnerConfig:
    parser = argparse.ArgumentParser(description="Run the Lift development server.")
    parser.add_argument("--env", default=None, choices=["development", "testing", "production"])
    parser.add_argument("--config", default=None, help="Dotted config path or alias (dev/test/prod).")
    parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "5000")))
    parser.add_argument("--debug", nargs="?", const=True, default=None, type=_parse_bool)
    parser.add_argument("--no-reload", action="store_true")
    args = parser.parse_args(argv)

    env = _normalize_env_name(args.env or os.getenv("LIFT_ENV") or os.getenv("ENV") or "development")
    debug = args.debug
    if debug is None:
        debug = _env_bool("FLASK_DEBUG")
    if debug is None:
        debug = env == "development"

    return RunnerConfig(
        env=env,
        config_path=normalize_config_path(args.config, env_hint=env),
        host=args.host,
        port=args.port,
        debug=bool(debug),
        use_reloader=bool(debug) and not args.no_reload,
    )


def setup_logging(debug: bool) -> None:
    logging.basicConfig(
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )


# -----------------------------------------------------------------------------
# Main entry
# -----------------------------------------------------------------------------
def main(argv: Optional[List[str]] = None) -> None:
    load_env_stack(override=False)

    cfg = make_runner_config(argv)
    load_env_stack(env=cfg.env, override=False)
    os.environ["LIFT_ENV"] = cfg.env

    setup_logging(cfg.debug)
    logging.info("Lift: env=%s config=%s debug=%s reload=%s", cfg.env, cfg.config_path, cfg.debug, cfg.use_reloader)

    if cfg.env == "production" and (cfg.debug or cfg.use_reloader):
        logging.warning("Production is running with debug/reloader enabled. Recommended: --debug=false --no-reload")

    from lift import create_app

    try:
        flask_app = create_app(cfg.config_path)
    except RuntimeError as exc:
        logging.error("Failed to build Lift app: %s", exc)
        raise SystemExit(1) from exc

    flask_app.run(host=cfg.host, port=cfg.port, debug=cfg.debug, use_reloader=cfg.use_reloader)


if __name__ == "__main__":
    main()
else:
    from lift import create_app as _create_app

    app = _create_app(normalize_config_path(os.getenv("FLASK_CONFIG")))
