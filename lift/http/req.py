# lift/http/req.py
"""URL fixing for generated markup: context-path prefixing and rewriting."""

from __future__ import annotations

import re
from typing import Callable, Optional, Tuple

RewriteFunc = Callable[[str], str]
ExcludeFunc = Callable[[str], bool]

# scheme ":" per RFC 3986 (http:, https:, javascript:, mailto:, data: ...)
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")

# label -> (attribute holding the URL, whether the global rewriter may touch it)
_URL_ATTRIBUTES = {
    "form": ("action", True),
    "a": ("href", True),
    "link": ("href", False),
    "script": ("src", False),
}
_DEFAULT_URL_ATTRIBUTE = ("src", True)


def url_attribute_for(label: str) -> Tuple[str, bool]:
    return _URL_ATTRIBUTES.get(label, _DEFAULT_URL_ATTRIBUTE)


def is_absolute(url: str) -> bool:
    return bool(url) and (url.startswith("//") or bool(_SCHEME_RE.match(url)))


def _context_relative(context_path: str, url: str, exclude: Optional[ExcludeFunc]) -> bool:
    if not context_path or not url.startswith("/") or url.startswith("//"):
        return False
    if url == context_path or url.startswith(context_path + "/"):
        return False
    return not (exclude and exclude(url))


def normalize_href(
    context_path: str,
    value: Optional[str],
    should_rewrite: bool,
    rewrite: Optional[RewriteFunc] = None,
    exclude: Optional[ExcludeFunc] = None,
) -> Optional[str]:
    """
    Rebase a root-relative URL onto `context_path`, then apply `rewrite`.

    normalize_href("/ctx", "/foo", True)           -> "/ctx/foo"
    normalize_href("/ctx", "/ctx/foo", True)       -> "/ctx/foo"
    normalize_href("/ctx", "https://x.io/", True)  -> "https://x.io/"

    Best-effort string transform: anything that doesn't look like a
    root-relative path is left alone. The rewriter never sees absolute URLs
    or fragment links.
    """
    if not value:
        return value

    ctx = (context_path or "").rstrip("/")
    updated = ctx + value if _context_relative(ctx, value, exclude) else value

    if should_rewrite and rewrite is not None and not (is_absolute(updated) or updated.startswith("#")):
        return rewrite(updated)
    return updated


def exclude_prefixes(prefixes) -> Optional[ExcludeFunc]:
    """Build an exclude predicate from path prefixes; None when there are none."""
    cleaned = tuple(p for p in (prefixes or ()) if p)
    if not cleaned:
        return None

    def _exclude(url: str) -> bool:
        return url.startswith(cleaned)

    return _exclude
