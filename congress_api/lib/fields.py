"""
Graph vocabulary shared by the services: returned columns, sort allow-lists and the filter
clauses that more than one endpoint needs.

Graph model:
    (:Person)-[:MEMBER_OF]->(:Group {type: 'chamber', subtype: 'senate'|'house'})-[:BELONGS_TO]->(:Congress)
    (:Committee)-[:BELONGS_TO]->(:Congress)
    (:Person)-[:AUTHORED]->(:Document {type: 'bill'})
    (:Document)-[:FILED_IN]->(:Congress)
"""

from typing import Optional

from congress_api.lib.keys import ByCode, ByNumber, CongressKey, DocumentKey
from congress_api.lib.query_builder import (
    AnyOf,
    Clause,
    Collect,
    Condition,
    Exists,
    SortField,
    SortOptions,
    TextMatch,
    collect_map,
    equals,
)

CONGRESS_FIELDS = (
    "id",
    "congress_number",
    "congress_website_key",
    "name",
    "ordinal",
    "start_date",
    "end_date",
    "start_year",
    "end_year",
    "year_range",
)

PERSON_FIELDS = (
    "id",
    "first_name",
    "last_name",
    "middle_name",
    "name_prefix",
    "name_suffix",
    "full_name",
    "professional_designations",
    "senate_website_keys",
    "congress_website_primary_keys",
    "congress_website_author_keys",
    "aliases",
)

DOCUMENT_FIELDS = (
    "id",
    "type",
    "subtype",
    "name",
    "bill_number",
    "congress",
    "title",
    "long_title",
    "congress_website_title",
    "congress_website_abstract",
    "date_filed",
    "scope",
    "subjects",
    "authors_raw",
    "senate_website_permalink",
    "download_url_sources",
)

COMMITTEE_FIELDS = ("id", "name", "type", "senate_website_keys")

GROUP_FIELDS = ("id", "name", "type", "subtype", "congress")

BILL_TYPE = Condition("d.type = 'bill'")

# chamber subtype on the Group node for each position
CHAMBERS = {"senator": "senate", "representative": "house"}

POSITION_CASE = (
    "CASE WHEN toLower(g.subtype) = 'senate' OR g.name CONTAINS 'Senate' THEN 'senator' "
    "WHEN toLower(g.subtype) = 'house' OR g.name CONTAINS 'House' THEN 'representative' "
    "ELSE 'member' END"
)

AUTHOR_ORDER = "p.last_name, p.first_name, p.id"

AUTHORS = Collect(
    alias="authors",
    pattern="(d)<-[:AUTHORED]-(p:Person)",
    variable="p",
    fields=collect_map("p", PERSON_FIELDS),
    order_by=AUTHOR_ORDER,
)

DOCUMENT_SORTS = SortOptions(
    fields={
        "date_filed": SortField("d.date_filed"),
        "congress": SortField("d.congress"),
        "bill_number": SortField("d.bill_number"),
        "title": SortField("COALESCE(d.title, d.congress_website_title)"),
        "scope": SortField("d.scope"),
        "authors_count": SortField.counted(
            "authors_count", "(d)<-[:AUTHORED]-(counted:Person)", "COUNT(DISTINCT counted)"
        ),
    },
    default_field="date_filed",
    default_direction="DESC",
    tiebreakers=("d.name ASC", "d.id ASC"),
)

PEOPLE_SORTS = SortOptions(
    fields={
        "last_name": SortField("p.last_name"),
        "first_name": SortField("p.first_name"),
        "middle_name": SortField("p.middle_name"),
        "name_suffix": SortField("p.name_suffix"),
    },
    default_field="last_name",
    default_direction="ASC",
    tiebreakers=("p.last_name ASC", "p.first_name ASC", "p.id ASC"),
)

CONGRESS_SORTS = SortOptions(
    fields={"congress_number": SortField("c.congress_number")},
    default_field="congress_number",
    default_direction="DESC",
    tiebreakers=("c.id ASC",),
)

COMMITTEE_SORTS = SortOptions(
    fields={"name": SortField("com.name")},
    default_field="name",
    default_direction="ASC",
    tiebreakers=("com.id ASC",),
)


def congress_match(key: CongressKey, variable: str = "c") -> Condition:
    """Congress selected either by congress_number or by opaque id"""
    if isinstance(key, ByNumber):
        return equals(f"{variable}.congress_number", "congress_number", key.value)
    return equals(f"{variable}.id", "congress_id", key.value)


def document_congress_filter(key: CongressKey) -> Clause:
    """Documents of one congress: number against d.congress, opaque id through FILED_IN"""
    if isinstance(key, ByNumber):
        return equals("d.congress", "congress", key.value)
    return Exists("(d)-[:FILED_IN]->(fc:Congress)", (equals("fc.id", "congress_id", key.value),))


def document_match(key: DocumentKey) -> Clause:
    if isinstance(key, ByCode):
        by_number = Condition(
            "(d.subtype = $subtype AND d.bill_number = $bill_number)",
            {"subtype": key.subtype, "bill_number": key.number},
        )
        if key.number is None:
            return equals("d.name", "code", key.code)
        return AnyOf((equals("d.name", "code", key.code), by_number))
    return equals("d.id", "id", key.value)


def person_search(param: str, value: str, variable: str = "p") -> TextMatch:
    return TextMatch(
        param=param,
        value=value,
        fields=(f"{variable}.first_name", f"{variable}.last_name", f"{variable}.full_name"),
        list_fields=(f"{variable}.aliases",),
    )


def document_search(param: str, value: str) -> AnyOf:
    """Text on the bill itself OR on any of its authors' names and aliases"""
    own_fields = TextMatch(
        param=param,
        value=value,
        fields=(
            "d.title",
            "d.long_title",
            "d.name",
            "d.congress_website_title",
            "d.congress_website_abstract",
        ),
    )
    author_fields = TextMatch(
        param=param,
        value=value,
        fields=("sa.first_name", "sa.last_name", "sa.full_name"),
        list_fields=("sa.aliases",),
    )
    return AnyOf((own_fields, Exists("(d)<-[:AUTHORED]-(sa:Person)", (author_fields,))))


def author_filter(value: str) -> Exists:
    """Required existence of an author whose last name contains ``value``"""
    return Exists(
        "(d)<-[:AUTHORED]-(fa:Person)",
        (Condition("toLower(fa.last_name) CONTAINS toLower($author)", {"author": value}),),
    )


def membership_filter(position: Optional[str] = None, congress: Optional[CongressKey] = None) -> Optional[Exists]:
    """People holding a chamber membership, optionally of one position and/or one congress"""
    conditions = []
    if position is not None:
        conditions.append(equals("toLower(mg.subtype)", "chamber", CHAMBERS[position]))
    if congress is not None:
        conditions.append(congress_match(congress, "mc"))
    if not conditions:
        return None
    return Exists("(p)-[:MEMBER_OF]->(mg:Group)-[:BELONGS_TO]->(mc:Congress)", tuple(conditions))


def parse_position(value: Optional[str]) -> Optional[str]:
    """'senator' / 'representative' (any case); anything else means no position filter"""
    if value is None:
        return None
    position = value.strip().lower()
    return position if position in CHAMBERS else None


def memberships_collect(alias: str = "congresses_served") -> Collect:
    """Full chamber-membership history of ``p``"""
    return Collect(
        alias=alias,
        pattern="(p)-[hm:MEMBER_OF]->(g:Group)-[:BELONGS_TO]->(hc:Congress)",
        variable="hc",
        fields=(
            ("congress_id", "hc.id"),
            ("congress_number", "hc.congress_number"),
            ("congress_ordinal", "hc.ordinal"),
            ("congress_name", "hc.name"),
            ("position", POSITION_CASE),
            ("type", "hm.type"),
            ("start_date", "hc.start_date"),
            ("end_date", "hc.end_date"),
            ("year_range", "hc.year_range"),
        ),
        order_by="hc.congress_number DESC",
        also=("hm", "g"),
    )
