import logging
from typing import Any

from fastapi import Request

from .service import RelayService

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


def get_relay_service(request: Request) -> RelayService:
    return request.app.state.relay_service


async def read_json_body(request: Request) -> Any:
    """
    Decoded JSON body, or None when the request is not ``application/json``
    or its body is empty or not valid JSON.
    """
    media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if media_type != JSON_MEDIA_TYPE:
        logger.debug(f"Request to {request.url.path} has content type {media_type!r}, body ignored")
        return None
    try:
        return await request.json()
    except ValueError:
        logger.debug(f"Request to {request.url.path} has no valid JSON body")
        return None
