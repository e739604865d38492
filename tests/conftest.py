import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_templates.db")
os.environ.setdefault("TEMPLATES_COLLECTION_PATH", "emailTemplates")
os.environ.setdefault("MULTI_TENANT_MODE", "false")

import pytest

from app.domains.identity.entities import Identity
from app.domains.identity.session import SessionHolder
from app.infrastructure.memory_store import MemoryDocumentStore
from tests.helpers import FakeClock


@pytest.fixture
def identity():
    return Identity(id="u1", display_name="A", email="a@x.com")


@pytest.fixture
def session(identity):
    return SessionHolder(identity)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryDocumentStore()
