import logging
from typing import Any, Dict, List, Optional

from congress_api.lib.errors import NotFoundError
from congress_api.lib.fields import (
    AUTHOR_ORDER,
    AUTHORS,
    BILL_TYPE,
    DOCUMENT_FIELDS,
    DOCUMENT_SORTS,
    PERSON_FIELDS,
    author_filter,
    document_congress_filter,
    document_match,
    document_search,
)
from congress_api.lib.graph import GraphClient, Statement, get_graph_client
from congress_api.lib.keys import ByCode, DocumentKey, parse_congress_key
from congress_api.lib.pagination import fetch_page
from congress_api.lib.params import Page, is_set, is_wildcard
from congress_api.lib.query_builder import (
    ListQuery,
    Where,
    columns,
    date_range,
    equals,
    equals_ignore_case,
)
from congress_api.lib.responses import PagedResult
from congress_api.models.schemas import Bill, Person, shape, shape_all

logger = logging.getLogger(__name__)


def resolve_document(key: DocumentKey) -> Statement:
    """Leading part of every single-bill statement: binds ``d`` to exactly one bill.

    A bill code matches the bill's own name or its subtype + number; an exact name match
    wins, then the most recent congress.
    """
    where = Where(BILL_TYPE, document_match(key))
    if isinstance(key, ByCode):
        preference = "CASE WHEN d.name = $code THEN 0 ELSE 1 END, d.congress DESC, d.id ASC"
    else:
        preference = "d.id ASC"

    text = "\n".join(
        [
            "MATCH (d:Document)",
            where.render(),
            "WITH DISTINCT d",
            f"ORDER BY {preference}",
            "LIMIT 1",
        ]
    )
    return Statement(text, where.bindings())


class DocumentService:
    def __init__(self, graph: Optional[GraphClient] = None):
        self.graph = graph or get_graph_client()

    async def list_documents(
        self,
        congress: Optional[str] = None,
        type: Optional[str] = None,
        scope: Optional[str] = None,
        author: Optional[str] = None,
        search: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        sort: Optional[str] = None,
        dir: Optional[str] = None,
        limit: Optional[str] = None,
        offset: Optional[str] = None,
    ) -> PagedResult:
        """List bills with filters, free-text search and sorting; authors embedded"""
        where = Where(BILL_TYPE)
        if is_set(congress):
            where.add(document_congress_filter(parse_congress_key(congress)))
        if is_set(type):
            where.add(equals("d.subtype", "type", type.strip().upper()))
        if is_set(scope):
            where.add(equals("d.scope", "scope", scope.strip()))
        if is_set(author):
            where.add(author_filter(author.strip()))
        if is_set(search):
            where.add(document_search("search", search.strip()))
        where.extend(date_range("d.date_filed", date_from, date_to))

        query = ListQuery(
            match="MATCH (d:Document)",
            variable="d",
            where=where,
            projection=columns("d", DOCUMENT_FIELDS),
            ordering=DOCUMENT_SORTS.resolve(sort, dir),
            page=Page.from_query(limit, offset),
            collects=(AUTHORS,),
        )
        return await fetch_page(self.graph, query, Bill)

    async def search_documents(
        self,
        q: str,
        congress: Optional[str] = None,
        scope: Optional[str] = None,
        subtype: Optional[str] = None,
        sort: Optional[str] = None,
        dir: Optional[str] = None,
        limit: Optional[str] = None,
        offset: Optional[str] = None,
    ) -> PagedResult:
        """Search bills; 'all'/'any' disable the congress, scope and subtype filters"""
        where = Where(BILL_TYPE, document_search("q", q.strip()))
        if not is_wildcard(congress):
            where.add(document_congress_filter(parse_congress_key(congress)))
        if not is_wildcard(scope):
            where.add(equals_ignore_case("d.scope", "scope", scope.strip()))
        if not is_wildcard(subtype):
            where.add(equals_ignore_case("d.subtype", "subtype", subtype.strip().upper()))

        query = ListQuery(
            match="MATCH (d:Document)",
            variable="d",
            where=where,
            projection=columns("d", DOCUMENT_FIELDS),
            ordering=DOCUMENT_SORTS.resolve(sort, dir),
            page=Page.from_query(limit, offset),
            collects=(AUTHORS,),
        )
        return await fetch_page(self.graph, query, Bill)

    async def get_document(self, key: DocumentKey, raw_id: str) -> Dict[str, Any]:
        """Get one bill by opaque id or bill code, with its authors"""
        resolved = resolve_document(key)
        lines = [resolved.text]
        lines.extend(AUTHORS.render(["d"]))
        lines.append("RETURN " + ",\n       ".join(columns("d", DOCUMENT_FIELDS) + ["authors"]))

        rows = await self.graph.execute(Statement("\n".join(lines), resolved.params))
        if not rows:
            raise NotFoundError(f"Bill with id '{raw_id}' not found")
        return shape(Bill, rows[0])

    async def list_authors(self, key: DocumentKey) -> List[Dict[str, Any]]:
        """Authors of one bill, by last name"""
        resolved = resolve_document(key)
        text = "\n".join(
            [
                resolved.text,
                "MATCH (d)<-[:AUTHORED]-(p:Person)",
                "WITH DISTINCT p",
                "RETURN " + ",\n       ".join(columns("p", PERSON_FIELDS)),
                f"ORDER BY {AUTHOR_ORDER}",
            ]
        )
        rows = await self.graph.execute(Statement(text, resolved.params))
        return shape_all(Person, rows)
