from __future__ import annotations

import itertools

import pytest

from lift import create_app
from lift.http.session import LiftSession, S


@pytest.fixture()
def app():
    app = create_app("lift.config.TestingConfig")
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


@pytest.fixture()
def next_id():
    return itertools.count(1).__next__


@pytest.fixture()
def render_state():
    """Render state outside Flask, mounted at /ctx."""
    return S(LiftSession(suffix="t"), "/ctx", {})
