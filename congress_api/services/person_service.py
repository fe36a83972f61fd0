import logging
from typing import Any, Dict, List, Optional

from congress_api.lib.errors import NotFoundError
from congress_api.lib.fields import (
    AUTHORS,
    BILL_TYPE,
    DOCUMENT_FIELDS,
    DOCUMENT_SORTS,
    GROUP_FIELDS,
    PEOPLE_SORTS,
    PERSON_FIELDS,
    POSITION_CASE,
    document_congress_filter,
    memberships_collect,
    membership_filter,
    parse_position,
    person_search,
)
from congress_api.lib.graph import GraphClient, Statement, get_graph_client
from congress_api.lib.keys import parse_congress_key
from congress_api.lib.pagination import fetch_page
from congress_api.lib.params import Page, is_set, is_wildcard
from congress_api.lib.query_builder import ListQuery, Where, columns, equals, lookup_statement
from congress_api.lib.responses import PagedResult
from congress_api.models.schemas import Bill, CongressMembership, Group, Person, shape, shape_all

logger = logging.getLogger(__name__)

MEMBERSHIPS = """
MATCH (p:Person {id: $id})-[hm:MEMBER_OF]->(g:Group)-[:BELONGS_TO]->(hc:Congress)
RETURN DISTINCT hc.id AS congress_id,
       hc.congress_number AS congress_number,
       hc.ordinal AS congress_ordinal,
       hc.name AS congress_name,
       %s AS position,
       hm.type AS type,
       hc.start_date AS start_date,
       hc.end_date AS end_date,
       hc.year_range AS year_range
ORDER BY congress_number DESC, position
""" % POSITION_CASE

PERSON_EXISTS = "MATCH (p:Person {id: $id}) RETURN p.id AS id LIMIT 1"


class PersonService:
    def __init__(self, graph: Optional[GraphClient] = None):
        self.graph = graph or get_graph_client()

    def _people_query(
        self,
        where: Where,
        sort: Optional[str],
        dir: Optional[str],
        limit: Optional[str],
        offset: Optional[str],
    ) -> ListQuery:
        return ListQuery(
            match="MATCH (p:Person)",
            variable="p",
            where=where,
            projection=columns("p", PERSON_FIELDS),
            ordering=PEOPLE_SORTS.resolve(sort, dir),
            page=Page.from_query(limit, offset),
        )

    async def list_people(
        self,
        type: Optional[str] = None,
        congress: Optional[str] = None,
        last_name: Optional[str] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
        dir: Optional[str] = None,
        limit: Optional[str] = None,
        offset: Optional[str] = None,
    ) -> PagedResult:
        """List people with position/congress membership, name and free-text filters"""
        where = Where()
        congress_key = parse_congress_key(congress) if is_set(congress) else None
        where.add(membership_filter(position=parse_position(type), congress=congress_key))
        if is_set(last_name):
            where.add(equals("p.last_name", "last_name", last_name.strip()))
        if is_set(search):
            where.add(person_search("search", search.strip()))

        query = self._people_query(where, sort, dir, limit, offset)
        return await fetch_page(self.graph, query, Person)

    async def search_people(
        self,
        q: str,
        type: Optional[str] = None,
        congress: Optional[str] = None,
        limit: Optional[str] = None,
        offset: Optional[str] = None,
    ) -> PagedResult:
        """Search names and aliases; congress may be a number, an id or 'all'"""
        where = Where(person_search("q", q.strip()))
        congress_key = None if is_wildcard(congress) else parse_congress_key(congress)
        where.add(membership_filter(position=parse_position(type), congress=congress_key))

        query = self._people_query(where, None, None, limit, offset)
        return await fetch_page(self.graph, query, Person)

    async def get_person(self, person_id: str, include_congresses: bool = False) -> Dict[str, Any]:
        """Get one person, optionally with their congress membership history"""
        statement = lookup_statement(
            match="MATCH (p:Person)",
            variable="p",
            where=Where(equals("p.id", "id", person_id)),
            projection=columns("p", PERSON_FIELDS),
            collects=(memberships_collect(),) if include_congresses else (),
            limit=1,
        )
        rows = await self.graph.execute(statement)
        if not rows:
            raise NotFoundError(f"Person with id '{person_id}' not found")
        return shape(Person, rows[0])

    async def list_memberships(self, person_id: str) -> List[Dict[str, Any]]:
        """Every congress the person served in, newest first"""
        rows = await self.graph.execute(Statement(MEMBERSHIPS, {"id": person_id}))
        if not rows:
            exists = await self.graph.execute(Statement(PERSON_EXISTS, {"id": person_id}))
            if not exists:
                raise NotFoundError(f"Person with id '{person_id}' not found")
        return shape_all(CongressMembership, rows)

    async def list_groups(self, person_id: str, type: Optional[str] = None) -> List[Dict[str, Any]]:
        """Chambers/groups the person is a member of"""
        where = Where(equals("p.id", "id", person_id))
        if is_set(type):
            where.add(equals("g.type", "type", type.strip()))

        statement = lookup_statement(
            match="MATCH (p:Person)-[:MEMBER_OF]->(g:Group)",
            variable="g",
            where=where,
            projection=columns("g", GROUP_FIELDS),
            order_by="g.congress DESC, g.name ASC, g.id ASC",
        )
        return shape_all(Group, await self.graph.execute(statement))

    async def list_documents(
        self,
        person_id: str,
        congress: Optional[str] = None,
        type: Optional[str] = None,
        limit: Optional[str] = None,
        offset: Optional[str] = None,
    ) -> PagedResult:
        """Bills authored by the person"""
        where = Where(equals("author.id", "person_id", person_id), BILL_TYPE)
        if is_set(congress):
            where.add(document_congress_filter(parse_congress_key(congress)))
        if is_set(type):
            where.add(equals("d.subtype", "type", type.strip().upper()))

        query = ListQuery(
            match="MATCH (author:Person)-[:AUTHORED]->(d:Document)",
            variable="d",
            where=where,
            projection=columns("d", DOCUMENT_FIELDS),
            ordering=DOCUMENT_SORTS.fixed(),
            page=Page.from_query(limit, offset),
            collects=(AUTHORS,),
        )
        return await fetch_page(self.graph, query, Bill)
