from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


class Congress(BaseModel):
    id: Optional[str] = None
    congress_number: Optional[int] = None
    congress_website_key: Optional[int] = None
    name: Optional[str] = None
    ordinal: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    start_year: Optional[int] = None
    end_year: Optional[int] = None
    year_range: Optional[str] = None
    total_senators: Optional[int] = None
    total_representatives: Optional[int] = None
    total_committees: Optional[int] = None


class CongressMembership(BaseModel):
    congress_id: Optional[str] = None
    congress_number: Optional[int] = None
    congress_ordinal: Optional[str] = None
    congress_name: Optional[str] = None
    position: Optional[str] = None
    type: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    year_range: Optional[str] = None


class Person(BaseModel):
    id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    middle_name: Optional[str] = None
    name_prefix: Optional[str] = None
    name_suffix: Optional[str] = None
    full_name: Optional[str] = None
    professional_designations: Optional[List[str]] = None
    senate_website_keys: Optional[List[str]] = None
    congress_website_primary_keys: Optional[List[Union[int, str]]] = None
    congress_website_author_keys: Optional[List[str]] = None
    aliases: Optional[List[str]] = None
    congresses: Optional[List[CongressMembership]] = None
    congresses_served: Optional[List[CongressMembership]] = None
    position: Optional[str] = None


class Committee(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    senate_website_keys: Optional[List[str]] = None
    congress_id: Optional[str] = None
    congress_number: Optional[int] = None
    congress_ordinal: Optional[str] = None


class Group(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    subtype: Optional[str] = None
    congress: Optional[int] = None


class Bill(BaseModel):
    id: Optional[str] = None
    type: Optional[str] = None
    subtype: Optional[str] = None
    name: Optional[str] = None
    bill_number: Optional[int] = None
    congress: Optional[int] = None
    title: Optional[str] = None
    long_title: Optional[str] = None
    congress_website_title: Optional[str] = None
    congress_website_abstract: Optional[str] = None
    date_filed: Optional[str] = None
    scope: Optional[str] = None
    subjects: Optional[List[str]] = None
    authors_raw: Optional[str] = None
    senate_website_permalink: Optional[str] = None
    download_url_sources: Optional[List[str]] = None
    authors: Optional[List[Person]] = None
    congress_details: Optional[Congress] = None


class BillsByCongress(BaseModel):
    congress: int
    total: int = 0
    house_bills: int = 0
    senate_bills: int = 0


class Stats(BaseModel):
    total_bills: int = 0
    total_house_bills: int = 0
    total_senate_bills: int = 0
    total_congresses: int = 0
    total_people: int = 0
    total_committees: int = 0
    bills_with_dates: int = 0
    bills_without_dates: int = 0
    bills_by_congress: List[BillsByCongress] = []


class DatabaseStatus(BaseModel):
    connected: bool


class PingStatus(BaseModel):
    status: str
    timestamp: str
    database: DatabaseStatus


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool
    next_cursor: Optional[str] = None


class ErrorBody(BaseModel):
    code: str
    message: str


def shape(model: Type[ModelT], row: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a graph row against ``model`` and keep only the columns the query returned"""
    return model.model_validate(row).model_dump(exclude_unset=True)


def shape_all(model: Type[ModelT], rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [shape(model, row) for row in rows]
