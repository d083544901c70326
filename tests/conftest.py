import os

# Must be set before config.settings is imported
os.environ.setdefault("AUTH_DISABLED", "true")
os.environ.setdefault("LOCAL_USER_ID", "test-user")
os.environ.setdefault("GEMINI_API_KEY", "test-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import json
from types import SimpleNamespace

import pytest
import httpx

from neuronote.db.supabase_client import set_supabase_client
from neuronote.utils.llm_client import GeminiClient


SAMPLE_PACK = {
    "title": "Photosynthesis",
    "summary": {
        "core_concept": "Plants turn light, water and CO2 into sugar and oxygen.",
        "key_points": ["Happens in chloroplasts", "Needs light", "Releases oxygen"],
        "short_notes": "Light reactions then the Calvin cycle.",
        "long_notes": "Chlorophyll absorbs light..."
    },
    "mind_map": {
        "label": "Photosynthesis",
        "children": [
            {"label": "Light reactions", "children": [{"label": "Thylakoid"}, {"label": "ATP"}]},
            {"label": "Calvin cycle", "children": [{"label": "Stroma"}]}
        ]
    },
    "diagram": {"type": "flow", "steps": ["Light absorbed", "Water split", "Sugar built"]},
    "flashcards": [
        {"front": "Where does photosynthesis happen?", "back": "Chloroplasts"},
        {"front": "What gas is released?", "back": "Oxygen"}
    ],
    "mnemonics": [
        {"type": "Acronym", "content": "LEO", "explanation": "Light, Energy, Oxygen", "emoji": "🌱"}
    ],
    "quiz": {
        "multiple_choice": [
            {"question": "Which organelle?", "options": ["Nucleus", "Ribosome", "Chloroplast", "Golgi"], "correct_index": 2}
        ],
        "true_false": [
            {"statement": "Photosynthesis releases oxygen.", "answer": True}
        ],
        "fill_in_blank": [
            {"sentence": "The capital of France is ___.", "answer": "paris"}
        ]
    }
}


def gemini_reply(payload) -> dict:
    """Wrap text in the generateContent response envelope"""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def sample_pack_dict():
    return json.loads(json.dumps(SAMPLE_PACK))


@pytest.fixture
def make_client():
    """Build a GeminiClient over a MockTransport; sleeps are recorded, not taken"""
    clients = []

    def factory(handler, **kwargs):
        sleeps = []
        kwargs.setdefault("api_key", "test-key")
        kwargs.setdefault("max_retries", 3)
        client = GeminiClient(
            transport=httpx.MockTransport(handler),
            cache_ttl=0,
            sleep=sleeps.append,
            **kwargs
        )
        client.sleeps = sleeps
        clients.append(client)
        return client

    yield factory
    for c in clients:
        c.close()


class FakeQuery:
    """Just enough of the postgrest builder for the profile store"""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = None
        self.payload = None
        self.filters = {}

    def select(self, *_):
        self.op = "select"
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def eq(self, column, value):
        self.filters[column] = value
        return self

    def limit(self, _):
        return self

    def execute(self):
        if self.op in self.db.fail_on:
            raise ConnectionError(f"{self.op} failed")
        rows = self.db.tables.setdefault(self.table, [])
        matches = [r for r in rows if all(r.get(k) == v for k, v in self.filters.items())]
        if self.op == "insert":
            rows.append(dict(self.payload))
            return SimpleNamespace(data=[dict(self.payload)])
        if self.op == "update":
            for r in matches:
                r.update(self.payload)
            return SimpleNamespace(data=matches)
        return SimpleNamespace(data=[dict(r) for r in matches])


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.fail_on = set()

    def table(self, name):
        return FakeQuery(self, name)


@pytest.fixture
def fake_db():
    fake = FakeSupabase()
    set_supabase_client(fake)
    yield fake
    set_supabase_client(None)
