"""
Incoming webhook receiver, authenticated by a shared token header
"""
import hmac
import json
import logging
from fastapi import APIRouter, Header, HTTPException, Request, status
from typing import Optional
from presence.core.config import settings

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("")
async def receive_webhook(
    request: Request,
    x_webhook_token: Optional[str] = Header(None),
):
    """Validate x-webhook-token, parse the JSON body and acknowledge."""
    expected = settings.WEBHOOK_TOKEN
    if not expected or not x_webhook_token or not hmac.compare_digest(x_webhook_token, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Webhook body is not valid JSON")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Failed to process webhook")

    logger.info("Webhook received: type=%s", body.get("type") if isinstance(body, dict) else None)
    logger.debug("Webhook body: %s", body)
    return {"ok": True, "message": "Webhook received"}
