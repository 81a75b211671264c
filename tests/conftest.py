from __future__ import annotations

import pytest

from void.VoidAppBackEnd import create_app

TEST_CONFIG = {
    "TESTING": True,
    "SECRET_KEY": "test-secret",
    "TICK_INTERVAL": 0.01,
    "EVICT_AFTER": 10.0,
    "OUTBOX_SIZE": 10,
    "MAX_MESSAGE_LENGTH": 280,
}


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    yield app
    app.extensions["void.broadcaster"].shutdown()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return app.extensions["void.store"]
