import asyncio
import logging
from typing import Any, Dict, List, Optional

from congress_api.lib.graph import GraphClient, get_graph_client
from congress_api.models.schemas import BillsByCongress, Stats

logger = logging.getLogger(__name__)

BILLS_BY_SUBTYPE = """
MATCH (d:Document {type: 'bill'})
RETURN COUNT(d) AS total_bills,
       SUM(CASE WHEN d.subtype = 'HB' THEN 1 ELSE 0 END) AS total_house_bills,
       SUM(CASE WHEN d.subtype = 'SB' THEN 1 ELSE 0 END) AS total_senate_bills
"""

# each label is counted in its own sub-query so an empty label cannot zero the others
ENTITY_TOTALS = """
CALL { MATCH (c:Congress) RETURN COUNT(c) AS total_congresses }
CALL { MATCH (p:Person) RETURN COUNT(p) AS total_people }
CALL { MATCH (com:Committee) RETURN COUNT(com) AS total_committees }
RETURN total_congresses, total_people, total_committees
"""

BILL_DATES = """
MATCH (d:Document {type: 'bill'})
RETURN COUNT(CASE WHEN d.date_filed IS NOT NULL THEN 1 END) AS bills_with_dates,
       COUNT(CASE WHEN d.date_filed IS NULL THEN 1 END) AS bills_without_dates
"""

BILLS_BY_CONGRESS = """
MATCH (d:Document {type: 'bill'})
WHERE d.congress IS NOT NULL
RETURN d.congress AS congress,
       COUNT(d) AS total,
       SUM(CASE WHEN d.subtype = 'HB' THEN 1 ELSE 0 END) AS house_bills,
       SUM(CASE WHEN d.subtype = 'SB' THEN 1 ELSE 0 END) AS senate_bills
ORDER BY congress DESC
"""


def _first(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    # missing or null counts read as zero
    row = rows[0] if rows else {}
    return {key: value for key, value in row.items() if value is not None}


class StatsService:
    def __init__(self, graph: Optional[GraphClient] = None):
        self.graph = graph or get_graph_client()

    async def get_stats(self) -> Dict[str, Any]:
        """Database-wide counts; the four queries are independent and run concurrently"""
        bills, totals, dates, by_congress = await asyncio.gather(
            self.graph.run(BILLS_BY_SUBTYPE),
            self.graph.run(ENTITY_TOTALS),
            self.graph.run(BILL_DATES),
            self.graph.run(BILLS_BY_CONGRESS),
        )

        stats = Stats(
            **_first(bills),
            **_first(totals),
            **_first(dates),
            bills_by_congress=[BillsByCongress(**_first([row])) for row in by_congress],
        )
        return stats.model_dump()
