import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from congress_api.lib.errors import DbError
from congress_api.lib.graph import GraphClient, get_graph_client
from congress_api.models.schemas import DatabaseStatus, PingStatus

logger = logging.getLogger(__name__)


class HealthService:
    def __init__(self, graph: Optional[GraphClient] = None):
        self.graph = graph or get_graph_client()

    async def ping(self) -> Dict[str, Any]:
        """Check that the graph database is reachable"""
        try:
            await self.graph.verify_connectivity()
        except Exception as exc:
            raise DbError(str(exc) or "Database connection failed") from exc

        status = PingStatus(
            status="ok",
            timestamp=datetime.now(timezone.utc).isoformat(),
            database=DatabaseStatus(connected=True),
        )
        return status.model_dump()
