"""
Uniform JSON envelopes.

Success: ``{"success": true, "data": ..., "pagination"?: {...}}``
Error:   ``{"success": false, "error": {"code": ..., "message": ...}}``
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, List, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from congress_api.lib.errors import ApiError
from congress_api.models.schemas import ErrorBody, Pagination

logger = logging.getLogger(__name__)


@dataclass
class PagedResult:
    """Service result for list endpoints: rows plus their pagination block"""

    data: List[Any]
    pagination: Pagination


def success_body(data: Any, pagination: Optional[Pagination] = None) -> dict:
    body = {"success": True, "data": jsonable_encoder(data)}
    if pagination is not None:
        body["pagination"] = pagination.model_dump(exclude_none=True)
    return body


def error_body(code: str, message: str) -> dict:
    return {"success": False, "error": ErrorBody(code=code, message=message).model_dump()}


def success_response(data: Any, pagination: Optional[Pagination] = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=success_body(data, pagination))


def error_response(code: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(code, message))


async def guarded(operation: str, call: Awaitable[Any]) -> JSONResponse:
    """Await a service call and wrap the outcome in an envelope.

    ``ApiError`` keeps its own code and status. Anything else is a FETCH_ERROR (500) carrying
    the exception text, logged with the name of the operation that failed.
    """
    try:
        result = await call
    except ApiError as exc:
        if exc.status_code >= 500:
            logger.error("%s error: %s", operation, exc.message)
        else:
            logger.info("%s: %s", operation, exc.message)
        return error_response(exc.code, exc.message, exc.status_code)
    except Exception as exc:
        logger.exception("%s error", operation)
        message = str(exc) or f"Failed to {operation.lower()}"
        return error_response("FETCH_ERROR", message, 500)

    if isinstance(result, PagedResult):
        return success_response(result.data, result.pagination)
    return success_response(result)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}"
        for error in exc.errors()
    )
    logger.info("Rejected request %s: %s", request.url.path, details)
    return error_response("FETCH_ERROR", details or "Invalid request parameters", 400)
