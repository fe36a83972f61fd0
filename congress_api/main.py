from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import APIRouter, FastAPI, Query
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from congress_api.config import get_settings
from congress_api.lib.graph import close_graph_client
from congress_api.lib.keys import parse_congress_key, parse_document_key
from congress_api.lib.params import parse_flag
from congress_api.lib.responses import guarded, validation_error_handler
from congress_api.logging_config import setup_logging
from congress_api.services.congress_service import CongressService
from congress_api.services.document_service import DocumentService
from congress_api.services.health_service import HealthService
from congress_api.services.person_service import PersonService
from congress_api.services.stats_service import StatsService

settings = get_settings()
logger = setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Open Congress API starting")
    yield
    await close_graph_client()
    logger.info("Open Congress API stopped")


app = FastAPI(
    title="Open Congress API",
    description="Philippine congressional data: congresses, bills, people and committees",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_exception_handler(RequestValidationError, validation_error_handler)

# Services
congress_service = CongressService()
person_service = PersonService()
document_service = DocumentService()
stats_service = StatsService()
health_service = HealthService()

router = APIRouter()


@app.get("/")
async def root():
    return {"message": "Open Congress API", "docs": "/docs", "api": settings.api_prefix}


# Congress endpoints
@router.get("/congresses")
async def list_congresses(
    year: Optional[str] = None,
    ordinal: Optional[str] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
):
    return await guarded("Congress list", congress_service.list_congresses(year, ordinal, limit, offset))


@router.get("/congresses/{congress_id}")
async def get_congress(congress_id: str):
    key = parse_congress_key(congress_id)
    return await guarded("Congress detail", congress_service.get_congress(key, congress_id))


@router.get("/congresses/{congress_id}/documents")
@router.get("/congresses/{congress_id}/bills")
async def list_congress_documents(
    congress_id: str,
    type: Optional[str] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
):
    key = parse_congress_key(congress_id)
    return await guarded("Congress documents", congress_service.list_documents(key, type, limit, offset))


@router.get("/congresses/{congress_id}/committees")
async def list_congress_committees(
    congress_id: str,
    type: Optional[str] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
):
    key = parse_congress_key(congress_id)
    return await guarded("Congress committees", congress_service.list_committees(key, type, limit, offset))


@router.get("/congresses/{congress_id}/senators")
async def list_congress_senators(congress_id: str, limit: Optional[str] = None, offset: Optional[str] = None):
    key = parse_congress_key(congress_id)
    return await guarded("Congress senators", congress_service.list_members(key, "senator", limit, offset))


@router.get("/congresses/{congress_id}/representatives")
async def list_congress_representatives(
    congress_id: str,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
):
    key = parse_congress_key(congress_id)
    return await guarded(
        "Congress representatives", congress_service.list_members(key, "representative", limit, offset)
    )


# People endpoints
@router.get("/people")
async def list_people(
    type: Optional[str] = None,
    congress: Optional[str] = None,
    last_name: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
    dir: Optional[str] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
):
    return await guarded(
        "People list",
        person_service.list_people(type, congress, last_name, search, sort, dir, limit, offset),
    )


@router.get("/people/{person_id}")
async def get_person(person_id: str, include_congresses: Optional[str] = None):
    return await guarded("Person detail", person_service.get_person(person_id, parse_flag(include_congresses)))


@router.get("/people/{person_id}/congresses")
async def list_person_congresses(person_id: str):
    return await guarded("Person congresses", person_service.list_memberships(person_id))


@router.get("/people/{person_id}/groups")
async def list_person_groups(person_id: str, type: Optional[str] = None):
    return await guarded("Person groups", person_service.list_groups(person_id, type))


@router.get("/people/{person_id}/documents")
@router.get("/people/{person_id}/bills")
async def list_person_documents(
    person_id: str,
    congress: Optional[str] = None,
    type: Optional[str] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
):
    return await guarded(
        "Person documents", person_service.list_documents(person_id, congress, type, limit, offset)
    )


# Document endpoints
@router.get("/documents")
@router.get("/bills")
async def list_documents(
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
):
    return await guarded(
        "Document list",
        document_service.list_documents(
            congress, type, scope, author, search, date_from, date_to, sort, dir, limit, offset
        ),
    )


@router.get("/documents/{document_id}")
@router.get("/bills/{document_id}")
async def get_document(document_id: str):
    key = parse_document_key(document_id)
    return await guarded("Document detail", document_service.get_document(key, document_id))


@router.get("/documents/{document_id}/authors")
@router.get("/bills/{document_id}/authors")
async def list_document_authors(document_id: str):
    key = parse_document_key(document_id)
    return await guarded("Document authors", document_service.list_authors(key))


# Search endpoints
@router.get("/search/people")
async def search_people(
    q: str = Query(..., min_length=1),
    type: Optional[str] = None,
    congress: Optional[str] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
):
    return await guarded("People search", person_service.search_people(q, type, congress, limit, offset))


@router.get("/search/documents")
async def search_documents(
    q: str = Query(..., min_length=1),
    congress: Optional[str] = None,
    scope: Optional[str] = None,
    subtype: Optional[str] = None,
    sort: Optional[str] = None,
    dir: Optional[str] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
):
    return await guarded(
        "Document search",
        document_service.search_documents(q, congress, scope, subtype, sort, dir, limit, offset),
    )


# Utility endpoints
@router.get("/stats")
async def get_stats():
    return await guarded("Stats", stats_service.get_stats())


@router.get("/ping")
async def ping():
    return await guarded("Ping", health_service.ping())


app.include_router(router, prefix=settings.api_prefix)


if __name__ == "__main__":
    uvicorn.run("congress_api.main:app", host=settings.host, port=settings.port, reload=True)
