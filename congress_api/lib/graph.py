"""
Neo4j access for the API.

One ``GraphClient`` lives for the whole process. The async driver is created on first use,
every statement runs in its own short-lived session, and ``close()`` is wired to application
shutdown. Rows leave this module already normalized to plain JSON-friendly values.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional

from neo4j import AsyncDriver, AsyncGraphDatabase, AsyncSession

from congress_api.config import Settings, get_settings
from congress_api.lib.errors import GraphConfigurationError
from congress_api.lib.normalize import normalize_row

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


@dataclass(frozen=True)
class Statement:
    """A Cypher statement together with its parameter bindings"""

    text: str
    params: Dict[str, Any] = field(default_factory=dict)


class GraphClient:
    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings
        self._driver: Optional[AsyncDriver] = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def driver(self) -> AsyncDriver:
        if self._driver is None:
            self._driver = self._create_driver()
        return self._driver

    def _create_driver(self) -> AsyncDriver:
        settings = self.settings
        if not settings.neo4j_uri or not settings.neo4j_username or not settings.neo4j_password:
            raise GraphConfigurationError("Missing Neo4j connection environment variables")

        logger.info("Creating Neo4j driver for %s", settings.neo4j_uri)
        return AsyncGraphDatabase.driver(
            settings.neo4j_uri,
            auth=(settings.neo4j_username, settings.neo4j_password),
            max_connection_lifetime=settings.neo4j_max_connection_lifetime,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Scoped session, released whether or not the body raises"""
        kwargs = {}
        if self.settings.neo4j_database:
            kwargs["database"] = self.settings.neo4j_database
        session = self.driver.session(**kwargs)
        try:
            yield session
        finally:
            await session.close()

    async def run(self, query: str, params: Optional[Dict[str, Any]] = None) -> List[Row]:
        """Run one read statement and return its normalized rows"""
        logger.debug("Running statement: %s params=%s", " ".join(query.split()), params)
        async with self.session() as session:
            result = await session.run(query, params or {})
            return [normalize_row(dict(record.items())) async for record in result]

    async def execute(self, statement: Statement) -> List[Row]:
        return await self.run(statement.text, statement.params)

    async def verify_connectivity(self) -> None:
        await self.driver.verify_connectivity()

    async def close(self) -> None:
        if self._driver is not None:
            await self._driver.close()
            self._driver = None
            logger.info("Neo4j driver closed")


_client: Optional[GraphClient] = None


def get_graph_client() -> GraphClient:
    """Process-wide client, created on first call"""
    global _client
    if _client is None:
        _client = GraphClient()
    return _client


async def close_graph_client() -> None:
    if _client is not None:
        await _client.close()
