import json
from typing import Any, Dict
from urllib.parse import parse_qsl

import sentry_sdk
import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from starlette.requests import Request

from app.depends.services import get_webhook_service
from app.services.webhooks.cryptapi import CryptapiWebhookService

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

logger = structlog.get_logger(__name__)

# the processor stops re-delivering a callback once it reads this body
ACKNOWLEDGEMENT = "*ok*"


async def read_callback_params(req: Request) -> Dict[str, Any]:
    """
    Merges callback fields from the query string and the body (JSON or form encoded).
    Query string values win over body values.
    """
    params: Dict[str, Any] = {}
    body = await req.body()
    if body:
        content_type = req.headers.get("content-type", "")
        try:
            if "json" in content_type:
                parsed = json.loads(body)
                if isinstance(parsed, dict):
                    params.update(parsed)
            else:
                params.update(parse_qsl(body.decode(), keep_blank_values=False))
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning("Unreadable callback body", error=str(e), content_type=content_type)
    params.update(req.query_params)
    return params


@router.api_route("/cryptapi", methods=["GET", "POST"], response_class=PlainTextResponse)
async def cryptapi_webhook(
        req: Request,
        webhook_service: CryptapiWebhookService = Depends(get_webhook_service),
):
    try:
        data = await read_callback_params(req)
    except Exception as e:
        logger.error("Failed to read callback", error=repr(e))
        sentry_sdk.capture_exception(e)
        return ACKNOWLEDGEMENT
    await webhook_service.process_webhook_event(data)
    return ACKNOWLEDGEMENT
