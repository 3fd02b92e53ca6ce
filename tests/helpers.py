"""Builders for Notion-shaped records and an in-memory content source"""
from typing import Dict, List, Optional

from content_source import ContentSourceError


def title(text: str) -> Dict:
    return {"type": "title", "title": [{"plain_text": text}]}


def rich(text: str) -> Dict:
    return {"type": "rich_text", "rich_text": [{"plain_text": text}]}


def checkbox(value: bool) -> Dict:
    return {"type": "checkbox", "checkbox": value}


def select(name: Optional[str]) -> Dict:
    return {"type": "select", "select": {"name": name} if name else None}


def multi_select(*names: str) -> Dict:
    return {"type": "multi_select", "multi_select": [{"name": n} for n in names]}


def url(value: Optional[str]) -> Dict:
    return {"type": "url", "url": value}


def number(value) -> Dict:
    return {"type": "number", "number": value}


def date_prop(start: Optional[str]) -> Dict:
    return {"type": "date", "date": {"start": start} if start else None}


def relation(*ids: str) -> Dict:
    return {"type": "relation", "relation": [{"id": i} for i in ids]}


def page(page_id: str, **properties) -> Dict:
    """A record; double underscores in keyword names become spaces (Is__Published -> "Is Published")"""
    return {
        "id": page_id,
        "properties": {name.replace("__", " "): prop for name, prop in properties.items()},
    }


def schema(**types: str) -> Dict:
    """Database schema: property name -> type, with empty type configs"""
    return {name.replace("__", " "): {"type": kind, kind: {}} for name, kind in types.items()}


class FakeSource:
    """In-memory stand-in for NotionContentSource"""

    def __init__(self, databases: Optional[Dict[str, List[Dict]]] = None,
                 schemas: Optional[Dict[str, Dict]] = None, fail_on: Optional[set] = None):
        self.databases = databases or {}
        self.schemas = schemas or {}
        self.fail_on = fail_on or set()
        self.created: List[Dict] = []
        self.updated: List[Dict] = []
        self.queries: List[Dict] = []

    def _check(self, operation: str):
        if operation in self.fail_on:
            raise ContentSourceError(f"{operation} failed", status=500)

    def fetch_all(self, database_id, filter=None):
        self._check("fetch_all")
        return list(self.databases.get(database_id, []))

    def query_database(self, database_id, start_cursor=None, filter=None, page_size=None):
        self._check("query_database")
        self.queries.append({"database_id": database_id, "filter": filter, "page_size": page_size})
        rows = list(self.databases.get(database_id, []))
        if filter and "checkbox" in filter:
            want = filter["checkbox"]["equals"]
            rows = [r for r in rows
                    if bool(r["properties"].get(filter["property"], {}).get("checkbox")) == want]
        if page_size:
            rows = rows[:page_size]
        return {"results": rows, "has_more": False, "next_cursor": None}

    def retrieve_database(self, database_id):
        self._check("retrieve_database")
        return {"id": database_id, "properties": self.schemas.get(database_id, {})}

    def create_page(self, database_id, properties):
        self._check("create_page")
        created = {"id": f"new-{len(self.created) + 1}", "database_id": database_id, "properties": properties}
        self.created.append(created)
        return created

    def update_page(self, page_id, properties):
        self._check("update_page")
        self.updated.append({"id": page_id, "properties": properties})
        return {"id": page_id}
