import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _split_origins(raw: str) -> List[str]:
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


@dataclass(frozen=True)
class Settings:
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_username: str = "neo4j"
    neo4j_password: Optional[str] = None
    neo4j_database: Optional[str] = None
    neo4j_max_connection_lifetime: int = 3600
    api_prefix: str = "/api"
    log_level: str = "INFO"
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings from the environment (after .env has been loaded)"""
    return Settings(
        neo4j_uri=os.getenv("NEO4J_URI", "bolt://localhost:7687"),
        neo4j_username=os.getenv("NEO4J_USERNAME") or os.getenv("NEO4J_USER", "neo4j"),
        neo4j_password=os.getenv("NEO4J_PASSWORD") or None,
        neo4j_database=os.getenv("NEO4J_DATABASE") or None,
        neo4j_max_connection_lifetime=int(os.getenv("NEO4J_MAX_CONNECTION_LIFETIME", "3600")),
        api_prefix=os.getenv("API_PREFIX", "/api").rstrip("/"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        allowed_origins=_split_origins(os.getenv("ALLOWED_ORIGINS", "*")),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )
