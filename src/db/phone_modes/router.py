"""
Phone mode API endpoints.

This module provides the lookup endpoint used by telephony webhooks and
the endpoints for managing which numbers are in CALL or OTP mode.
"""

from collections.abc import Mapping
from http import HTTPStatus
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.db.phone_modes.constants import LOOKUP_NUMBER_FIELDS
from src.db.phone_modes.decorators import handle_phone_mode_errors
from src.db.phone_modes.dependencies import get_phone_mode_service
from src.db.phone_modes.schemas import (
    AddNumberRequest,
    BulkAddRequest,
    BulkAddResponse,
    LookupResponse,
    PhoneModeEnvelope,
    PhoneModeResponse,
    StatsResponse,
    UpdateModeRequest,
)
from src.db.phone_modes.service import PhoneModeService
from src.utils.logger import logger
from src.utils.phone import first_normalized

router = APIRouter(tags=["Phone Modes"])

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_request_fields(request: Request) -> dict[str, Any]:
    """
    Read a request body as a flat mapping.

    Accepts JSON objects and form posts. Anything else, including an
    unparsable body, yields an empty mapping.
    """
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith(FORM_CONTENT_TYPES):
            form = await request.form()
            return dict(form)
        body = await request.body()
        if not body:
            return {}
        data = await request.json()
    except (ValueError, StarletteHTTPException) as e:
        logger.warning("[PHONE_MODES] Ignoring unreadable request body", error=str(e))
        return {}
    return data if isinstance(data, dict) else {}


def pick_field(name: str, *sources: Mapping[str, Any]) -> Any:
    """Return the first truthy value of a field across sources."""
    for source in sources:
        value = source.get(name)
        if value:
            return value
    return None


@router.post("/lookup", response_model=LookupResponse)
@handle_phone_mode_errors("look up number")
async def lookup_number(
    request: Request,
    service: PhoneModeService = Depends(get_phone_mode_service),
) -> LookupResponse:
    """
    Look up the mode for a called number.

    The number is taken from ``Called`` and then ``To``, each checked in the
    body before the query string. Unknown or absent numbers report UNKNOWN.
    """
    body = await read_request_fields(request)
    query = request.query_params

    candidates = [
        lambda source=source, field=field: source.get(field)
        for field in LOOKUP_NUMBER_FIELDS
        for source in (body, query)
    ]
    called_number = first_normalized(candidates)

    return await service.lookup(
        called_number,
        from_number=pick_field("From", body, query),
        call_sid=pick_field("CallSid", body, query),
    )


@router.get("/numbers", response_model=list[PhoneModeResponse])
@handle_phone_mode_errors("fetch numbers")
async def list_numbers(
    service: PhoneModeService = Depends(get_phone_mode_service),
) -> list[PhoneModeResponse]:
    """List all numbers, newest first."""
    records = await service.list_numbers()
    return [PhoneModeResponse.from_record(record) for record in records]


@router.post("/add-number", response_model=PhoneModeEnvelope)
@handle_phone_mode_errors("add number")
async def add_number(
    data: AddNumberRequest,
    service: PhoneModeService = Depends(get_phone_mode_service),
) -> PhoneModeEnvelope:
    """
    Add a number with a mode.

    Raises:
        HTTPException: 400 for missing fields, an invalid mode, a blank
            number or an existing number
    """
    record = await service.add_number(data.number, data.mode)
    return PhoneModeEnvelope(data=PhoneModeResponse.from_record(record))


@router.put("/update-mode", response_model=PhoneModeEnvelope)
@handle_phone_mode_errors("update mode")
async def update_mode(
    data: UpdateModeRequest,
    service: PhoneModeService = Depends(get_phone_mode_service),
) -> PhoneModeEnvelope:
    """
    Change the mode of a number.

    Raises:
        HTTPException: 400 for missing fields or an invalid mode, 404 if
            the ID is unknown
    """
    record = await service.update_mode(data.id, data.mode)
    return PhoneModeEnvelope(data=PhoneModeResponse.from_record(record))


@router.delete("/delete-number/{record_id}", response_model=PhoneModeEnvelope)
@handle_phone_mode_errors("delete number")
async def delete_number(
    record_id: str,
    service: PhoneModeService = Depends(get_phone_mode_service),
) -> PhoneModeEnvelope:
    """
    Delete a number and return the removed record.

    Raises:
        HTTPException: 404 if the ID is unknown
    """
    record = await service.delete_number(record_id)
    return PhoneModeEnvelope(data=PhoneModeResponse.from_record(record))


@router.get("/stats", response_model=StatsResponse)
@handle_phone_mode_errors("fetch stats")
async def get_stats(
    service: PhoneModeService = Depends(get_phone_mode_service),
) -> StatsResponse:
    """Count numbers in total and per mode."""
    return await service.get_stats()


@router.post("/bulk-add", response_model=BulkAddResponse)
@handle_phone_mode_errors("bulk add numbers")
async def bulk_add(
    data: BulkAddRequest,
    service: PhoneModeService = Depends(get_phone_mode_service),
) -> BulkAddResponse:
    """
    Add many numbers at once.

    Each item is handled independently and reported as added, skipped
    (number exists) or an error.

    Raises:
        HTTPException: 400 if ``numbers`` is not a list
    """
    if not isinstance(data.numbers, list):
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST, detail="Numbers array required"
        )

    results = await service.bulk_add(data.numbers)
    return BulkAddResponse(results=results)
