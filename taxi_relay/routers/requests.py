import logging
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, Header

from ..dependencies import get_relay_service, read_json_body
from ..errors import RelayError
from ..service import RelayService

logger = logging.getLogger(__name__)

router = APIRouter()
tags = ["Requests"]


@router.post('/request', tags=tags)
async def relay_device_request(
        service: Annotated[RelayService, Depends(get_relay_service)],
        body: Annotated[Any, Depends(read_json_body)],
        x_api_key: Annotated[Optional[str], Header()] = None,
        x_timestamp: Annotated[Optional[str], Header()] = None,
):
    """
    Forward a device's taxi request to the FCM ``requests`` topic

    Raises:
        400: Missing fields, missing auth headers or malformed timestamp
        401: Unknown API key or stale timestamp
        403: Device is on the block list
        500: Token exchange or FCM send failed
    """
    try:
        return await service.handle_request(x_api_key, x_timestamp, body)
    except RelayError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error relaying device request: {str(e)}", exc_info=True)
        raise RelayError(str(e))
