from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from ..dependencies import get_relay_service, read_json_body
from ..service import RelayService

router = APIRouter()
tags = ["Block list"]


@router.post('/update-blocked', tags=tags, response_class=PlainTextResponse)
async def update_blocked_devices(
        service: Annotated[RelayService, Depends(get_relay_service)],
        body: Annotated[Any, Depends(read_json_body)],
):
    """Replace the list of blocked device serials with ``{"list": [...]}``"""
    service.handle_block_list_update(body)
    return "Blocked list updated successfully"
