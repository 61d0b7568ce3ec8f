"""Shared fixtures and test configuration for pytest."""

import asyncio
from typing import Any

import pytest
import structlog

from contentful_ingest.core.config import ClientConfig
from contentful_ingest.core.models import RawEntry

# Configure structlog before any module caches a logger
structlog.reset_defaults()
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    context_class=dict,
    cache_logger_on_first_use=False,
)

SPACE_ID = "space123"
ACCESS_TOKEN = "token-abc"
ENTRIES_URL = f"https://cdn.contentful.com/spaces/{SPACE_ID}/environments/master/entries"


def make_entry(entry_id: str, content_type: str = "blog", **fields: Any) -> dict[str, Any]:
    """Build an entry shaped like the Content Delivery API returns it."""
    return {
        "sys": {
            "id": entry_id,
            "type": "Entry",
            "createdAt": "2024-01-01T00:00:00.000Z",
            "contentType": {"sys": {"type": "Link", "linkType": "ContentType", "id": content_type}},
        },
        "fields": fields,
    }


class FakePager:
    """In-memory entry source recording every call."""

    def __init__(self, entries_by_type=None, errors=None, delays=None):
        self.entries_by_type = entries_by_type or {}
        self.errors = errors or {}
        self.delays = delays or {}
        self.calls = []

    async def fetch_all(self, space_id, access_token, type_id, filters=None):
        self.calls.append((space_id, access_token, type_id, filters))
        await asyncio.sleep(self.delays.get(type_id, 0))
        if type_id in self.errors:
            raise self.errors[type_id]
        entries = self.entries_by_type.get(type_id, [])
        limit = (filters or {}).get("limit")
        if limit:
            entries = entries[:limit]
        return [RawEntry.model_validate(entry) for entry in entries]


@pytest.fixture
def entry_factory():
    """Factory for API-shaped entries."""
    return make_entry


@pytest.fixture
def blog_entries():
    """Two blog entries with a title and a body."""
    return [
        make_entry("3zjjnxwJWoks0Ym26U2Em0", title="Always Looking", body="First post"),
        make_entry("5KsDBWseXY6QegucYAoacS", title="Carrot Clicks", body="Second post"),
    ]


@pytest.fixture
def press_entries():
    """Three press entries."""
    return [make_entry(f"press{i}", content_type="press", headline=f"Press {i}") for i in range(3)]


@pytest.fixture
def fake_pager(blog_entries, press_entries):
    """Fake pager serving the blog and press fixtures."""
    return FakePager({"blogTypeId": blog_entries, "pressTypeId": press_entries})


@pytest.fixture
def pager_class():
    """The FakePager class, for tests needing custom behaviour."""
    return FakePager


@pytest.fixture
def client_config():
    """Client config pinned to the public CDN host with a small page size."""
    return ClientConfig(host="cdn.contentful.com", environment="master", page_size=2)


@pytest.fixture
def plugin_options():
    """Minimal valid constructor options."""
    return {"access_token": ACCESS_TOKEN, "space_id": SPACE_ID, "add_data_to": {}}
