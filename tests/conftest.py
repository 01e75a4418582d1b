"""
Shared test fixtures for the launchindex test suite.

Provides temporary document stores, settings files and sample discovery
data that use real file I/O (no mocking of the filesystem).
"""

import pytest
import toml

from launchindex.discovery import StaticDiscovery
from launchindex.services.storage import DocumentWriter, SqliteDocumentStore


class FakeClock:
    """Manually advanced clock for deterministic timestamps."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 1.0) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tmp_store(tmp_path):
    """Create a real SQLite document store."""
    store = SqliteDocumentStore(tmp_path / "store.db")
    yield store
    store.close()


@pytest.fixture
def writer(tmp_store):
    """Synchronous writer so tests can read the store right after a mutation."""
    return DocumentWriter(tmp_store, async_writes=False)


@pytest.fixture
def sample_apps():
    return [
        {"name": "苹果商店", "path": "/apps/appstore", "icon": "appstore.png"},
        {"name": "Firefox", "path": "/apps/firefox", "icon": "firefox.png"},
        {"name": "Visual Studio Code", "path": "/apps/code", "icon": "code.png"},
    ]


@pytest.fixture
def sample_plugins():
    return [
        {
            "name": "Translate",
            "path": "/plugins/translate",
            "logo": "translate.png",
            "features": [
                {
                    "code": "tr",
                    "explain": "Translate text",
                    "cmds": [
                        "translate",
                        "翻译",
                        {"type": "over", "label": "Translate selection", "maxLength": 500},
                    ],
                },
                {
                    "code": "url",
                    "explain": "Open links",
                    "cmds": [
                        {"type": "regex", "label": "Open URL",
                         "match": "/^https?:\\/\\//i", "minLength": 8},
                    ],
                },
            ],
        },
    ]


@pytest.fixture
def discovery(sample_apps, sample_plugins):
    return StaticDiscovery(apps=sample_apps, plugins=sample_plugins)


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file with all sections."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "search": {"name_weight": 2.0, "phonetic_weight": 1.5, "initials_weight": 1.0},
        "history": {"max_items": 12, "min_uses": 1},
        "coordinator": {"ready_timeout": 5.0},
        "storage": {"db_path": str(tmp_path / "store.db"), "async_writes": False},
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path
