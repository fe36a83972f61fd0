"""
Test configuration for the Open Congress API
"""

import os
import sys
from typing import Any, Callable, Dict, List, Union

import pytest

# Add parent directory to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from congress_api.lib.graph import Statement

Matcher = Union[str, Callable[[str], bool]]


def is_count(text: str) -> bool:
    return text.rstrip().endswith("AS total")


def is_page(text: str) -> bool:
    return "SKIP $offset" in text


class FakeGraph:
    """Stand-in for GraphClient: records every statement and answers with canned rows.

    Responses are matched in registration order, by substring of the statement text or by a
    predicate. Unmatched statements return no rows.
    """

    def __init__(self):
        self.statements: List[Statement] = []
        self.responses: List[tuple] = []
        self.connectivity_error: Exception = None
        self.closed = False

    def respond(self, matcher: Matcher, rows: List[Dict[str, Any]]) -> "FakeGraph":
        self.responses.append((matcher, rows))
        return self

    def respond_page(self, total: int, rows: List[Dict[str, Any]]) -> "FakeGraph":
        return self.respond(is_count, [{"total": total}]).respond(is_page, rows)

    def _matches(self, matcher: Matcher, text: str) -> bool:
        if callable(matcher):
            return matcher(text)
        return matcher in text

    async def execute(self, statement: Statement) -> List[Dict[str, Any]]:
        self.statements.append(statement)
        for matcher, rows in self.responses:
            if self._matches(matcher, statement.text):
                if isinstance(rows, Exception):
                    raise rows
                return [dict(row) for row in rows]
        return []

    async def run(self, query: str, params: Dict[str, Any] = None) -> List[Dict[str, Any]]:
        return await self.execute(Statement(query, params or {}))

    async def verify_connectivity(self) -> None:
        if self.connectivity_error is not None:
            raise self.connectivity_error

    async def close(self) -> None:
        self.closed = True

    @property
    def last(self) -> Statement:
        return self.statements[-1]

    def find(self, fragment: str) -> Statement:
        for statement in self.statements:
            if fragment in statement.text:
                return statement
        raise AssertionError(f"No statement containing {fragment!r}")


@pytest.fixture
def graph():
    return FakeGraph()


@pytest.fixture
def client(graph, monkeypatch):
    """TestClient whose services all talk to the fake graph"""
    from fastapi.testclient import TestClient

    from congress_api import main

    for service in (
        main.congress_service,
        main.person_service,
        main.document_service,
        main.stats_service,
        main.health_service,
    ):
        monkeypatch.setattr(service, "graph", graph)
    return TestClient(main.app)


SAMPLE_PERSON = {
    "id": "person-reyes",
    "first_name": "Maria",
    "last_name": "Reyes",
    "middle_name": "Lopez",
    "full_name": "Maria Lopez Reyes",
    "aliases": ["REYES, MARIA L."],
}

SAMPLE_BILL = {
    "id": "bill-19-hb-1",
    "type": "bill",
    "subtype": "HB",
    "name": "HB00001",
    "bill_number": 1,
    "congress": 19,
    "title": "Tax Relief for Small Enterprises Act",
    "date_filed": "2022-07-01",
    "scope": "National",
    "authors": [SAMPLE_PERSON],
}

SAMPLE_CONGRESS = {
    "id": "congress-19",
    "congress_number": 19,
    "name": "19th Congress of the Philippines",
    "ordinal": "19th",
    "start_year": 2022,
    "end_year": 2025,
    "year_range": "2022-2025",
}
