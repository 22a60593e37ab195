"""Pytest configuration to make the local modules importable without installation."""
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure repository root is on sys.path for module resolution
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from database import InMemoryStore, get_store
from main import app
from notifier import get_notifier
from settings import Settings, get_settings

ADMIN_EMAIL = "admin@shop.test"


class RecordingNotifier:
    """Notifier double that records every message and fails on request."""

    def __init__(self, fail_subjects=(), fail_all=False):
        self.sent = []
        self.fail_subjects = set(fail_subjects)
        self.fail_all = fail_all

    async def send(self, message):
        self.sent.append(message)
        return not (self.fail_all or message.subject in self.fail_subjects)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, ADMIN_EMAIL=ADMIN_EMAIL)


@pytest.fixture
def client(store, notifier, settings):
    """Test client wired to an isolated store and a recording notifier.

    The lifespan is not entered, so no SMTP connection is attempted.
    """

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()
