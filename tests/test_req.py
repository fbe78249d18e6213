from __future__ import annotations

import pytest

from lift.http.req import exclude_prefixes, is_absolute, normalize_href, url_attribute_for


@pytest.mark.parametrize(
    "label, expected",
    [
        ("form", ("action", True)),
        ("a", ("href", True)),
        ("link", ("href", False)),
        ("script", ("src", False)),
        ("img", ("src", True)),
        ("iframe", ("src", True)),
    ],
)
def test_url_attribute_per_tag(label, expected):
    assert url_attribute_for(label) == expected


@pytest.mark.parametrize("url", ["http://example.com/a", "https://example.com/a", "//cdn.example.com/a.js"])
@pytest.mark.parametrize("context_path", ["", "/ctx", "/deep/ctx/"])
def test_absolute_urls_are_left_alone(url, context_path):
    assert normalize_href(context_path, url, True) == url


def test_root_relative_url_gets_context_path():
    assert normalize_href("/ctx", "/foo", True, None) == "/ctx/foo"


def test_trailing_slash_on_context_path_is_ignored():
    assert normalize_href("/ctx/", "/foo", True) == "/ctx/foo"


def test_url_already_under_context_path_is_unchanged():
    assert normalize_href("/ctx", "/ctx/foo", True) == "/ctx/foo"
    assert normalize_href("/ctx", "/ctx", True) == "/ctx"


def test_document_relative_url_is_unchanged():
    assert normalize_href("/ctx", "foo/bar.html", True) == "foo/bar.html"


def test_root_context_path_leaves_urls_alone():
    assert normalize_href("", "/foo", True) == "/foo"
    assert normalize_href("/", "/foo", True) == "/foo"


@pytest.mark.parametrize("value", [None, ""])
def test_missing_value_passes_through(value):
    assert normalize_href("/ctx", value, True) == value


def test_malformed_value_passes_through():
    assert normalize_href("/ctx", "ht!tp//:bad url", True) == "ht!tp//:bad url"


def test_rewrite_runs_after_context_prefix():
    rewrite = lambda url: url + ";jsessionid=abc"  # noqa: E731
    assert normalize_href("/ctx", "/foo", True, rewrite) == "/ctx/foo;jsessionid=abc"
    assert normalize_href("/ctx", "foo", True, rewrite) == "foo;jsessionid=abc"


def test_rewrite_is_skipped_when_not_allowed():
    rewrite = lambda url: url + "?r=1"  # noqa: E731
    assert normalize_href("/ctx", "/foo", False, rewrite) == "/ctx/foo"


def test_rewrite_never_sees_absolute_or_fragment_urls():
    seen = []

    def rewrite(url):
        seen.append(url)
        return url + "?r=1"

    assert normalize_href("/ctx", "https://example.com/", True, rewrite) == "https://example.com/"
    assert normalize_href("/ctx", "#top", True, rewrite) == "#top"
    assert normalize_href("/ctx", "mailto:a@example.com", True, rewrite) == "mailto:a@example.com"
    assert seen == []


def test_excluded_prefixes_keep_their_path():
    exclude = exclude_prefixes(["/static", ""])
    assert normalize_href("/ctx", "/static/app.css", True, None, exclude) == "/static/app.css"
    assert normalize_href("/ctx", "/page", True, None, exclude) == "/ctx/page"


def test_exclude_prefixes_without_prefixes():
    assert exclude_prefixes(()) is None
    assert exclude_prefixes(None) is None


def test_is_absolute():
    assert is_absolute("javascript:void(0)")
    assert is_absolute("//host/x")
    assert not is_absolute("/x")
    assert not is_absolute("")
