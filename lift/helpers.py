# lift/helpers.py
"""
lift.helpers: JSON helpers shared by the JavaScript command layer and the API.

- json_sanitize: convert common non-JSON values into JSON-safe equivalents
- encode_js: JSON-encode a value so it can sit inside a <script> block
- encode_js_string: same, for strings (what Lift calls encJs)
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from jinja2 import Undefined
from jinja2.utils import htmlsafe_json_dumps


def json_sanitize(x: Any) -> Any:
    """
    Recursively convert common non-JSON types into JSON-safe equivalents.
    Undefined -> None, Decimal -> float, dates -> ISO strings, tuples -> lists.
    """
    if isinstance(x, Undefined):
        return None
    if x is None or isinstance(x, (str, int, float, bool)):
        return x
    if isinstance(x, Decimal):
        return float(x)
    if isinstance(x, (datetime, date)):
        return x.isoformat()
    if isinstance(x, dict):
        return {str(k): json_sanitize(v) for k, v in x.items()}
    if isinstance(x, (list, tuple, set, frozenset)):
        return [json_sanitize(v) for v in x]
    return str(x)


def encode_js(value: Any) -> str:
    # <, >, & and ' come out as \u escapes, so "</script>" can't end the block
    return str(htmlsafe_json_dumps(json_sanitize(value)))


def encode_js_string(s: str) -> str:
    return encode_js("" if s is None else str(s))
