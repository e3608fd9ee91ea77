from typing import Dict, Any, Optional

from fastapi import BackgroundTasks, Response
from echobot.config import settings
from echobot.logging import setup_logger
from echobot.services.events import InvalidWebhookObject, handle_event, parse_webhook
from echobot.services.messaging.client import WhatsApp

logger = setup_logger(__name__)


async def verify_webhook(
    hub_mode: Optional[str], hub_verify_token: Optional[str], hub_challenge: Optional[str]
) -> Response:
    """
    Verify webhook subscription request from WhatsApp API
    """
    if (
        hub_mode == "subscribe"
        and settings.WHATSAPP_VERIFY_TOKEN
        and hub_verify_token == settings.WHATSAPP_VERIFY_TOKEN
    ):
        logger.info(f"Verified webhook with mode: {hub_mode}")
        return Response(content=hub_challenge or "", media_type="text/plain")

    logger.error("Webhook verification failed")
    return Response(content="Invalid verification token", status_code=403)


async def handle_message(
    data: Dict[Any, Any], client: WhatsApp, background_tasks: BackgroundTasks
) -> Dict[str, Any]:
    """
    Schedule one background task per incoming message in a webhook payload
    """
    try:
        events = list(parse_webhook(data))
    except InvalidWebhookObject as e:
        logger.error(str(e))
        return {"status": "error", "message": "Invalid object"}

    for event in events:
        logger.info(f"Received {event.type} message {event.message_id} from {event.chat}")
        background_tasks.add_task(handle_event, event, client, settings.MEDIA_FOLDER)

    if not events:
        return {"status": "success", "message": "Non-message event processed"}

    return {"status": "success", "message": f"Scheduled {len(events)} event(s)"}
