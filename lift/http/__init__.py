from __future__ import annotations

from .html_normalizer import EventAttribute, HtmlNormalizer, identity_changes, js_for_event_attributes
from .req import normalize_href, url_attribute_for
from .session import S, LiftSession, current

__all__ = [
    "EventAttribute",
    "HtmlNormalizer",
    "identity_changes",
    "js_for_event_attributes",
    "normalize_href",
    "url_attribute_for",
    "S",
    "LiftSession",
    "current",
]
