"""Shared test fixtures."""

from typing import Any, Dict, List, Optional

import pytest

from notion_migrate.clients.base import CollectionClient, QueryPage
from notion_migrate.errors import RemoteError
from notion_migrate.models.record import PageRecord
from notion_migrate.models.schema import DatabaseSchema


def title(text: str) -> Dict[str, Any]:
    return {
        "type": "title",
        "title": [{"type": "text", "text": {"content": text}, "plain_text": text}],
    }


def number(value: Optional[float]) -> Dict[str, Any]:
    return {"type": "number", "number": value}


def checkbox(value: bool) -> Dict[str, Any]:
    return {"type": "checkbox", "checkbox": value}


def make_page(page_id: str, **properties: Dict[str, Any]) -> PageRecord:
    return PageRecord(id=page_id, properties=dict(properties))


def make_schema(**types: str) -> DatabaseSchema:
    return DatabaseSchema.from_api({
        "id": "target-db",
        "title": [{"plain_text": "Target"}],
        "properties": {
            name: {"id": f"id-{name}", "name": name, "type": prop_type, prop_type: {}}
            for name, prop_type in types.items()
        },
    })


class FakeCollectionClient(CollectionClient):
    """In-memory client that records every call."""

    def __init__(
        self,
        records: Optional[List[PageRecord]] = None,
        schema: Optional[DatabaseSchema] = None,
        page_size: int = 100,
        fail_create_for: Optional[set] = None,
        fail_all_creates: bool = False,
    ):
        self.records = records or []
        self.schema = schema or make_schema()
        self.page_size = page_size
        self.fail_create_for = fail_create_for or set()
        self.fail_all_creates = fail_all_creates
        self.fetch_calls: List[Optional[str]] = []
        self.schema_calls: List[str] = []
        self.created: List[Dict[str, Any]] = []
        self.calls: List[str] = []

    def fetch_page(self, collection_id, cursor=None):
        self.fetch_calls.append(cursor)
        self.calls.append("fetch_page")
        start = int(cursor) if cursor else 0
        end = start + self.page_size
        has_more = end < len(self.records)
        return QueryPage(
            records=self.records[start:end],
            has_more=has_more,
            next_cursor=str(end) if has_more else None,
        )

    def fetch_schema(self, collection_id):
        self.schema_calls.append(collection_id)
        self.calls.append("fetch_schema")
        return self.schema

    def create_record(self, collection_id, properties):
        self.calls.append("create_record")
        title_value = properties.get("Name", {}).get("title", [{}])
        label = title_value[0].get("plain_text") if title_value else None
        if self.fail_all_creates or label in self.fail_create_for:
            raise RemoteError("body failed validation", status_code=400, code="validation_error")
        self.created.append({"collection_id": collection_id, "properties": properties})
        return PageRecord(id=f"new-{len(self.created)}", properties=properties)


class SleepRecorder:
    """Stand-in for time.sleep that records the requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleep():
    return SleepRecorder()


@pytest.fixture
def task_schema():
    return make_schema(Name="title", Score="number", Done="checkbox")


@pytest.fixture
def task_page():
    return make_page("page-a", Name=title("Task A"), Score=number(5))
