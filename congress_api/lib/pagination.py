from typing import Type

from pydantic import BaseModel

from congress_api.lib.graph import GraphClient
from congress_api.lib.params import Page
from congress_api.lib.query_builder import ListQuery
from congress_api.lib.responses import PagedResult
from congress_api.models.schemas import Pagination, shape_all


def paginate(total: int, page: Page, returned_count: int) -> Pagination:
    """Pagination block for one page of results.

    ``has_more`` is ``offset + returned_count < total``; ``next_cursor`` is only present when
    there is more to fetch. The offset is never clamped against the total, so a page past the
    end comes back empty with ``has_more`` false.
    """
    has_more = page.offset + returned_count < total
    return Pagination(
        total=total,
        limit=page.limit,
        offset=page.offset,
        has_more=has_more,
        next_cursor=str(page.offset + page.limit) if has_more else None,
    )


async def fetch_page(graph: GraphClient, query: ListQuery, model: Type[BaseModel]) -> PagedResult:
    """Run the count and page statements of ``query`` and shape the rows through ``model``"""
    count_rows = await graph.execute(query.count_statement())
    total = int(count_rows[0]["total"]) if count_rows and count_rows[0].get("total") is not None else 0

    rows = await graph.execute(query.data_statement())
    data = shape_all(model, rows)
    return PagedResult(data=data, pagination=paginate(total, query.page, len(data)))
