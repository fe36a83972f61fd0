import logging
from typing import Any, Dict, Optional

from congress_api.lib.errors import NotFoundError
from congress_api.lib.fields import (
    AUTHORS,
    BILL_TYPE,
    CHAMBERS,
    COMMITTEE_FIELDS,
    COMMITTEE_SORTS,
    CONGRESS_FIELDS,
    CONGRESS_SORTS,
    DOCUMENT_FIELDS,
    DOCUMENT_SORTS,
    PEOPLE_SORTS,
    PERSON_FIELDS,
    congress_match,
    memberships_collect,
    membership_filter,
)
from congress_api.lib.graph import GraphClient, Statement, get_graph_client
from congress_api.lib.keys import CongressKey
from congress_api.lib.pagination import fetch_page
from congress_api.lib.params import Page, is_set, to_int
from congress_api.lib.query_builder import Condition, ListQuery, Where, columns, equals, lookup_statement
from congress_api.lib.responses import PagedResult
from congress_api.models.schemas import Bill, Committee, Congress, Person, shape

logger = logging.getLogger(__name__)

CONGRESS_TOTALS = """
MATCH (c:Congress {id: $congress_id})
OPTIONAL MATCH (p:Person)-[:MEMBER_OF]->(g:Group)-[:BELONGS_TO]->(c)
WITH c,
     COUNT(DISTINCT CASE WHEN toLower(g.subtype) = 'senate' THEN p END) AS total_senators,
     COUNT(DISTINCT CASE WHEN toLower(g.subtype) = 'house' THEN p END) AS total_representatives
OPTIONAL MATCH (com:Committee)-[:BELONGS_TO]->(c)
RETURN total_senators,
       total_representatives,
       COUNT(DISTINCT com) AS total_committees
"""


class CongressService:
    def __init__(self, graph: Optional[GraphClient] = None):
        self.graph = graph or get_graph_client()

    async def list_congresses(
        self,
        year: Optional[str] = None,
        ordinal: Optional[str] = None,
        limit: Optional[str] = None,
        offset: Optional[str] = None,
    ) -> PagedResult:
        """List congresses, newest first, optionally only those in session during ``year``"""
        where = Where()
        if is_set(year):
            where.add(Condition("(c.start_year <= $year AND c.end_year >= $year)", {"year": to_int(year, "year")}))
        if is_set(ordinal):
            where.add(equals("c.ordinal", "ordinal", ordinal.strip()))

        query = ListQuery(
            match="MATCH (c:Congress)",
            variable="c",
            where=where,
            projection=columns("c", CONGRESS_FIELDS),
            ordering=CONGRESS_SORTS.fixed(),
            page=Page.from_query(limit, offset),
        )
        return await fetch_page(self.graph, query, Congress)

    async def get_congress(self, key: CongressKey, raw_id: str) -> Dict[str, Any]:
        """Get one congress by number or id, with member and committee totals"""
        statement = lookup_statement(
            match="MATCH (c:Congress)",
            variable="c",
            where=Where(congress_match(key)),
            projection=columns("c", CONGRESS_FIELDS),
            order_by="c.congress_number DESC",
            limit=1,
        )
        rows = await self.graph.execute(statement)
        if not rows:
            raise NotFoundError(f"Congress with id '{raw_id}' not found")

        congress = rows[0]
        totals = await self.graph.execute(Statement(CONGRESS_TOTALS, {"congress_id": congress["id"]}))
        counts = totals[0] if totals else {}
        congress["total_senators"] = counts.get("total_senators") or 0
        congress["total_representatives"] = counts.get("total_representatives") or 0
        congress["total_committees"] = counts.get("total_committees") or 0
        return shape(Congress, congress)

    async def list_documents(
        self,
        key: CongressKey,
        type: Optional[str] = None,
        limit: Optional[str] = None,
        offset: Optional[str] = None,
    ) -> PagedResult:
        """Bills filed in one congress, newest filing first"""
        where = Where(BILL_TYPE, congress_match(key))
        if is_set(type):
            where.add(equals("d.subtype", "type", type.strip().upper()))

        query = ListQuery(
            match="MATCH (d:Document)-[:FILED_IN]->(c:Congress)",
            variable="d",
            where=where,
            projection=columns("d", DOCUMENT_FIELDS),
            ordering=DOCUMENT_SORTS.fixed(),
            page=Page.from_query(limit, offset),
            collects=(AUTHORS,),
        )
        return await fetch_page(self.graph, query, Bill)

    async def list_committees(
        self,
        key: CongressKey,
        type: Optional[str] = None,
        limit: Optional[str] = None,
        offset: Optional[str] = None,
    ) -> PagedResult:
        """Committees belonging to one congress, by name"""
        where = Where(congress_match(key))
        if is_set(type):
            where.add(equals("com.type", "type", type.strip()))

        projection = columns("com", COMMITTEE_FIELDS) + [
            "c.id AS congress_id",
            "c.congress_number AS congress_number",
            "c.ordinal AS congress_ordinal",
        ]
        query = ListQuery(
            match="MATCH (com:Committee)-[:BELONGS_TO]->(c:Congress)",
            variable="com",
            where=where,
            projection=projection,
            ordering=COMMITTEE_SORTS.fixed(),
            page=Page.from_query(limit, offset),
            carry=("c",),
        )
        return await fetch_page(self.graph, query, Committee)

    async def list_members(
        self,
        key: CongressKey,
        position: str,
        limit: Optional[str] = None,
        offset: Optional[str] = None,
    ) -> PagedResult:
        """Senators or representatives of one congress, each with their full congress history"""
        if position not in CHAMBERS:
            raise ValueError(f"Unknown position '{position}'")

        query = ListQuery(
            match="MATCH (p:Person)",
            variable="p",
            where=Where(membership_filter(position=position, congress=key)),
            projection=columns("p", PERSON_FIELDS) + [f"'{position}' AS position"],
            ordering=PEOPLE_SORTS.fixed(),
            page=Page.from_query(limit, offset),
            collects=(memberships_collect(),),
        )
        return await fetch_page(self.graph, query, Person)
