from types import SimpleNamespace
from typing import Any, Dict, List, Optional
import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from outreach_planner.core.signal import Entity, Outreach, Signal
from outreach_planner.models.base import init_db
from outreach_planner.storage.kv_store import KeyValueStore
from outreach_planner.storage.signal_store import SignalStore

FULL_OUTREACH = {
    "email": {"subject": "Congrats on the Series B", "body": "Hi there, saw the news..."},
    "linkedin": "Big week for Acme Corp.",
    "twitter": "Acme Corp just raised $40M.",
    "callPoints": ["Growth plans", "Hiring roadmap", "Tooling gaps"],
    "summary": "Acme Corp raised a Series B to expand.",
}


def make_signal(**overrides) -> Signal:
    fields = {
        "id": "sig_001",
        "type": "funding",
        "company": "Acme Corp",
        "strength": "HIGH",
        "summary": "Acme Corp raised a $40M Series B.",
        "date": "2026-01-28",
    }
    fields.update(overrides)
    return Signal(**fields)


class FakeCompletions:
    """Stands in for client.chat.completions"""

    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None):
        self.completions = FakeCompletions(content, error)
        self.chat = SimpleNamespace(completions=self.completions)


def fake_openai_with(payload: Dict[str, Any]) -> FakeOpenAI:
    return FakeOpenAI(content=json.dumps(payload))


class FakeSandbox:
    """
    Sandbox whose file reads come from a script.

    Each read pops the next scripted item (bytes returned, exceptions raised).
    Once the script is exhausted, `default` is returned, or FileNotFoundError
    raised when there is no default.
    """

    def __init__(self, reads=None, default: Optional[bytes] = None, destroy_error: Optional[Exception] = None):
        self.id = "sb-test"
        self.reads = list(reads or [])
        self.default = default
        self.destroy_error = destroy_error
        self.commands: List[List[str]] = []
        self.read_calls = 0
        self.destroy_calls = 0

    async def execute(self, command, timeout_seconds):
        self.commands.append(command)
        return SimpleNamespace(status="queued")

    async def read_file(self, path):
        self.read_calls += 1
        if self.reads:
            item = self.reads.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        if self.default is None:
            raise FileNotFoundError(path)
        return self.default

    async def destroy(self):
        self.destroy_calls += 1
        if self.destroy_error is not None:
            raise self.destroy_error


class FakeSandboxProvider:
    def __init__(self, sandbox: Optional[FakeSandbox] = None, error: Optional[Exception] = None):
        self.sandbox = sandbox or FakeSandbox()
        self.error = error
        self.specs = []

    async def create(self, spec):
        self.specs.append(spec)
        if self.error is not None:
            raise self.error
        return self.sandbox


class FakeOutreachGenerator:
    def __init__(self, outreach: Optional[Outreach] = None, error: Optional[Exception] = None):
        self.outreach = outreach or Outreach.from_completion(FULL_OUTREACH)
        self.error = error
        self.calls = []

    async def generate(self, signal, entities=None):
        self.calls.append((signal, entities))
        if self.error is not None:
            raise self.error
        return self.outreach


class FakeLandingPageGenerator:
    def __init__(self, html: Optional[str] = None, error: Optional[Exception] = None):
        self.html = html
        self.error = error
        self.calls = []

    async def generate(self, signal, entities=None):
        self.calls.append((signal, entities))
        if self.error is not None:
            raise self.error
        return self.html


class FakeLinktSource:
    """In-memory Linkt API; IDs listed in `failing` raise on retrieval"""

    def __init__(self, signals=None, entities=None, failing=()):
        self.signals = signals or {}
        self.entities = entities or {}
        self.failing = set(failing)

    async def retrieve_signal(self, signal_id):
        if signal_id in self.failing or signal_id not in self.signals:
            raise RuntimeError(f"signal {signal_id} unavailable")
        return self.signals[signal_id]

    async def retrieve_entity(self, entity_id):
        if entity_id in self.failing or entity_id not in self.entities:
            raise RuntimeError(f"entity {entity_id} unavailable")
        return self.entities[entity_id]


def company_entity(**data) -> Entity:
    return Entity(entity_type="company", data=data)


def person_entity(**data) -> Entity:
    return Entity(entity_type="person", data=data)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def kv(session_factory):
    return KeyValueStore(session_factory)


@pytest.fixture
def store(kv):
    return SignalStore(kv, namespace="test-planner")
