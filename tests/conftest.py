"""
Shared fixtures: a fixed clock, fake pymongo collections and an in-memory runtime
"""

from datetime import datetime, timedelta, timezone

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from horario_widget.core.config import Settings
from horario_widget.flask_main import create_app
from horario_widget.runtime import WidgetRuntime
from horario_widget.store import MemoryPreferences

# Bogotá time; 2026-10-13 is a Tuesday
TZ = timezone(timedelta(hours=-5), "COT")
NOW = datetime(2026, 10, 13, 8, 0, tzinfo=TZ)


def _matches(doc, query):
    for key, expected in query.items():
        value = doc.get(key)
        if isinstance(expected, dict) and any(k.startswith("$") for k in expected):
            if value is None:
                return False
            if "$gte" in expected and not value >= expected["$gte"]:
                return False
            if "$lt" in expected and not value < expected["$lt"]:
                return False
        elif value != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self._docs = list(docs)

    def sort(self, key, direction=1):
        self._docs.sort(key=lambda doc: doc[key], reverse=direction < 0)
        return self

    def __iter__(self):
        return iter(self._docs)


class FakeCollection:
    """The handful of pymongo collection calls the service makes"""

    def __init__(self, docs=None):
        self.docs = [dict(doc) for doc in (docs or [])]
        self.queries = []

    def find_one(self, query):
        self.queries.append(query)
        for doc in self.docs:
            if _matches(doc, query):
                return dict(doc)
        return None

    def find(self, query):
        self.queries.append(query)
        return FakeCursor(dict(doc) for doc in self.docs if _matches(doc, query))

    def replace_one(self, query, replacement, upsert=False):
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                self.docs[index] = dict(replacement)
                return
        if upsert:
            self.docs.append(dict(replacement))


class FailingCollection:
    def _fail(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("no servers available")

    find_one = find = replace_one = _fail


class FakeDatabase(dict):
    def __missing__(self, name):
        collection = FakeCollection()
        self[name] = collection
        return collection


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def test_settings(monkeypatch):
    monkeypatch.setenv("WIDGET_DATA_SOURCE", "cached")
    monkeypatch.setenv("PREFERENCES_BACKEND", "memory")
    monkeypatch.setenv("WIDGET_LOCALE", "es")
    monkeypatch.setenv("SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
    return Settings()


@pytest.fixture
def runtime(test_settings, clock):
    return WidgetRuntime(test_settings, preferences=MemoryPreferences(), clock=clock)


@pytest.fixture
def app(runtime):
    app = create_app(runtime)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
