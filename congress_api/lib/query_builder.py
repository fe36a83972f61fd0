"""
Cypher construction from typed clauses.

Filters are collected as clause objects that each carry their own parameter bindings. Nothing
is turned into Cypher text until a statement is rendered, and the count statement and the data
statement of a list query are rendered from the very same ``Where``, so they always agree on
which rows match.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from congress_api.lib.graph import Statement
from congress_api.lib.params import Page, is_set, parse_direction


def merge_bindings(target: Dict[str, Any], source: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge parameter bindings, refusing to bind one name to two different values"""
    for name, value in source.items():
        if name in target and target[name] != value:
            raise ValueError(f"Parameter '${name}' bound twice with different values")
        target[name] = value
    return target


class Clause:
    def render(self) -> str:
        raise NotImplementedError

    def bindings(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class Condition(Clause):
    """A single boolean expression, e.g. ``d.subtype = $type``"""

    text: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def render(self) -> str:
        return self.text

    def bindings(self) -> Dict[str, Any]:
        return dict(self.params)


@dataclass(frozen=True)
class TextMatch(Clause):
    """Case-insensitive substring match over scalar fields and list fields, OR-ed together"""

    param: str
    value: str
    fields: Tuple[str, ...] = ()
    list_fields: Tuple[str, ...] = ()

    def render(self) -> str:
        needle = f"toLower(${self.param})"
        parts = [f"toLower({name}) CONTAINS {needle}" for name in self.fields]
        parts += [
            f"ANY(alias IN {name} WHERE toLower(alias) CONTAINS {needle})"
            for name in self.list_fields
        ]
        return "(" + " OR ".join(parts) + ")"

    def bindings(self) -> Dict[str, Any]:
        return {self.param: self.value}


@dataclass(frozen=True)
class Exists(Clause):
    """Existence sub-query: ``EXISTS { MATCH <pattern> WHERE ... }``"""

    pattern: str
    where: Tuple[Clause, ...] = ()

    def render(self) -> str:
        if not self.where:
            return f"EXISTS {{ MATCH {self.pattern} }}"
        conditions = " AND ".join(clause.render() for clause in self.where)
        return f"EXISTS {{ MATCH {self.pattern} WHERE {conditions} }}"

    def bindings(self) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for clause in self.where:
            merge_bindings(merged, clause.bindings())
        return merged


@dataclass(frozen=True)
class AnyOf(Clause):
    clauses: Tuple[Clause, ...]

    def render(self) -> str:
        return "(" + " OR ".join(clause.render() for clause in self.clauses) + ")"

    def bindings(self) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for clause in self.clauses:
            merge_bindings(merged, clause.bindings())
        return merged


def equals(expression: str, param: str, value: Any) -> Condition:
    return Condition(f"{expression} = ${param}", {param: value})


def equals_ignore_case(expression: str, param: str, value: str) -> Condition:
    return Condition(f"toLower({expression}) = toLower(${param})", {param: value})


def at_least(expression: str, param: str, value: Any) -> Condition:
    return Condition(f"{expression} >= ${param}", {param: value})


def at_most(expression: str, param: str, value: Any) -> Condition:
    return Condition(f"{expression} <= ${param}", {param: value})


def date_range(expression: str, date_from: Optional[str], date_to: Optional[str]) -> List[Condition]:
    """Inclusive bounds on a ``YYYY-MM-DD`` string property (compared lexically)"""
    clauses = []
    if is_set(date_from):
        clauses.append(at_least(expression, "date_from", date_from.strip()))
    if is_set(date_to):
        clauses.append(at_most(expression, "date_to", date_to.strip()))
    return clauses


class Where:
    """Ordered collection of clauses joined with AND"""

    def __init__(self, *clauses: Clause):
        self.clauses: List[Clause] = list(clauses)

    def add(self, clause: Optional[Clause]) -> "Where":
        if clause is not None:
            self.clauses.append(clause)
        return self

    def extend(self, clauses: Iterable[Clause]) -> "Where":
        for clause in clauses:
            self.add(clause)
        return self

    def __bool__(self) -> bool:
        return bool(self.clauses)

    def render(self) -> str:
        if not self.clauses:
            return ""
        return "WHERE " + "\n  AND ".join(clause.render() for clause in self.clauses)

    def bindings(self) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for clause in self.clauses:
            merge_bindings(merged, clause.bindings())
        return merged


# -- ordering ---------------------------------------------------------------------------------


@dataclass(frozen=True)
class Aggregate:
    """A per-row aggregate computed before pagination, e.g. the number of authors"""

    alias: str
    pattern: str
    expression: str


@dataclass(frozen=True)
class SortField:
    expression: str
    aggregate: Optional[Aggregate] = None

    @classmethod
    def counted(cls, alias: str, pattern: str, expression: str) -> "SortField":
        return cls(expression=alias, aggregate=Aggregate(alias, pattern, expression))


@dataclass(frozen=True)
class Ordering:
    field: SortField
    direction: str
    tiebreakers: Tuple[str, ...] = ()

    @property
    def aggregate(self) -> Optional[Aggregate]:
        return self.field.aggregate

    def render(self) -> str:
        # a tie-breaker on the primary sort expression adds nothing
        tiebreakers = [t for t in self.tiebreakers if t.rsplit(" ", 1)[0] != self.field.expression]
        return ", ".join([f"{self.field.expression} {self.direction}", *tiebreakers])


@dataclass(frozen=True)
class SortOptions:
    """Allow-list of sortable fields for one entity"""

    fields: Mapping[str, SortField]
    default_field: str
    default_direction: str = "DESC"
    tiebreakers: Tuple[str, ...] = ()

    def resolve(self, sort: Optional[str] = None, direction: Optional[str] = None) -> Ordering:
        name = sort.strip().lower() if is_set(sort) else self.default_field
        if name not in self.fields:
            name = self.default_field
        return Ordering(
            field=self.fields[name],
            direction=parse_direction(direction, self.default_direction),
            tiebreakers=self.tiebreakers,
        )

    def fixed(self) -> Ordering:
        return self.resolve()


# -- projections and collections --------------------------------------------------------------


def columns(variable: str, names: Sequence[str]) -> List[str]:
    return [f"{variable}.{name} AS {name}" for name in names]


@dataclass(frozen=True)
class Collect:
    """Related rows gathered into a list column after pagination"""

    alias: str
    pattern: str
    variable: str
    fields: Tuple[Tuple[str, str], ...]
    order_by: str = ""
    # other pattern variables referenced by ``fields``
    also: Tuple[str, ...] = ()

    def render(self, carried: Sequence[str]) -> List[str]:
        carry = ", ".join(carried)
        entries = ", ".join(f"{key}: {expression}" for key, expression in self.fields)
        lines = [f"OPTIONAL MATCH {self.pattern}"]
        lines.append(f"WITH {', '.join([*carried, self.variable, *self.also])}")
        if self.order_by:
            lines.append(f"ORDER BY {self.order_by}")
        lines.append(
            f"WITH {carry}, COLLECT(DISTINCT CASE WHEN {self.variable} IS NULL THEN NULL "
            f"ELSE {{{entries}}} END) AS {self.alias}"
        )
        return lines


def collect_map(variable: str, names: Sequence[str]) -> Tuple[Tuple[str, str], ...]:
    return tuple((name, f"{variable}.{name}") for name in names)


# -- statements -------------------------------------------------------------------------------


@dataclass
class ListQuery:
    """Count + page statements for one paginated listing.

    ``match`` is the MATCH part (may span several patterns), ``variable`` the entity being
    listed. Aggregate sort fields are computed before SKIP/LIMIT so ordering by them is
    global, and the same ordering (with its tie-breakers) is applied again on the RETURN
    so collections gathered after paging cannot reorder the page.
    """

    match: str
    variable: str
    where: Where
    projection: Sequence[str]
    ordering: Ordering
    page: Page
    collects: Sequence[Collect] = ()
    # variables fixed by the filter that the projection still needs after pagination
    carry: Sequence[str] = ()

    def count_statement(self) -> Statement:
        text = "\n".join(
            line for line in (
                self.match,
                self.where.render(),
                f"RETURN COUNT(DISTINCT {self.variable}) AS total",
            ) if line
        )
        return Statement(text, self.where.bindings())

    def data_statement(self) -> Statement:
        lines = [self.match, self.where.render()]
        carried = [self.variable, *self.carry]

        aggregate = self.ordering.aggregate
        if aggregate is not None:
            lines.append(f"OPTIONAL MATCH {aggregate.pattern}")
            lines.append(f"WITH {', '.join(carried)}, {aggregate.expression} AS {aggregate.alias}")
            carried.append(aggregate.alias)
        else:
            lines.append(f"WITH DISTINCT {', '.join(carried)}")

        lines.append(f"ORDER BY {self.ordering.render()}")
        lines.append("SKIP $offset")
        lines.append("LIMIT $limit")

        for collect in self.collects:
            lines.extend(collect.render(carried))
            carried.append(collect.alias)

        returned = list(self.projection) + [collect.alias for collect in self.collects]
        lines.append("RETURN " + ",\n       ".join(returned))
        lines.append(f"ORDER BY {self.ordering.render()}")

        params = self.where.bindings()
        merge_bindings(params, {"offset": self.page.offset, "limit": self.page.limit})
        return Statement("\n".join(line for line in lines if line), params)


def lookup_statement(
    match: str,
    variable: str,
    where: Where,
    projection: Sequence[str],
    collects: Sequence[Collect] = (),
    order_by: Optional[str] = None,
    limit: Optional[int] = None,
) -> Statement:
    """Statement for a detail lookup or an unpaginated sub-list"""
    lines = [match, where.render()]
    carried = [variable]

    if collects or order_by or limit:
        lines.append(f"WITH DISTINCT {variable}")
        if order_by:
            lines.append(f"ORDER BY {order_by}")
        if limit:
            lines.append(f"LIMIT {int(limit)}")

    for collect in collects:
        lines.extend(collect.render(carried))
        carried.append(collect.alias)

    returned = list(projection) + [collect.alias for collect in collects]
    lines.append("RETURN " + ",\n       ".join(returned))
    if order_by:
        lines.append(f"ORDER BY {order_by}")
    return Statement("\n".join(line for line in lines if line), where.bindings())
