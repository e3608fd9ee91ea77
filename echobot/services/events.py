from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

from echobot.constants import MEDIA_MESSAGE_TYPES, MESSAGING_PRODUCT, WEBHOOK_OBJECT
from echobot.logging import setup_logger
from echobot.services import responders
from echobot.services.messaging.client import WhatsApp
from echobot.services.types import MediaInfo, MessageEvent

logger = setup_logger(__name__)


class InvalidWebhookObject(ValueError):
    """Raised when a webhook payload is not a WhatsApp Business Account event"""


def parse_webhook(data: Dict[str, Any]) -> Iterator[MessageEvent]:
    """
    Yield every incoming message contained in a webhook payload.

    Delivery statuses and other non-message changes yield nothing.

    Raises:
        InvalidWebhookObject: if ``object`` is not a WhatsApp Business Account
    """
    if data.get("object") != WEBHOOK_OBJECT:
        raise InvalidWebhookObject(f"Invalid object in webhook data: {data.get('object')}")

    for entry in data.get("entry") or []:
        for change in entry.get("changes") or []:
            value = change.get("value") or {}
            if value.get("messaging_product") != MESSAGING_PRODUCT:
                logger.info(f"Skipping change for field {change.get('field')}")
                continue

            names = {
                contact.get("wa_id"): (contact.get("profile") or {}).get("name")
                for contact in value.get("contacts") or []
                if isinstance(contact, dict)
            }

            for message in value.get("messages") or []:
                event = _to_event(message, names)
                if event is not None:
                    yield event


def _to_event(message: Any, names: Dict[str, Optional[str]]) -> Optional[MessageEvent]:
    """Build an event from one message, or log and return None if it is malformed"""
    if not isinstance(message, dict) or not message.get("id") or not message.get("from"):
        logger.error(f"Skipping malformed message: {message}")
        return None

    try:
        return _build_event(message, names)
    except (ValueError, TypeError, AttributeError) as e:
        # pydantic's ValidationError is a ValueError
        logger.error(f"Skipping malformed message {message.get('id')}: {e}")
        return None


def _build_event(
    message: Dict[str, Any], names: Dict[str, Optional[str]]
) -> MessageEvent:
    message_id = message["id"]
    sender = message["from"]
    message_type = message.get("type", "unknown")
    timestamp = message.get("timestamp")

    media = None
    media_obj = message.get(message_type)
    if message_type in MEDIA_MESSAGE_TYPES and isinstance(media_obj, dict):
        if media_obj.get("id"):
            media = MediaInfo(
                id=media_obj["id"],
                mime_type=media_obj.get("mime_type", ""),
                sha256=media_obj.get("sha256"),
                caption=media_obj.get("caption"),
            )
        else:
            logger.error(f"Missing media ID for {message_type} message {message_id}")

    return MessageEvent(
        message_id=message_id,
        chat=sender,
        type=message_type,
        push_name=names.get(sender.split("@", 1)[0]),
        timestamp=datetime.fromtimestamp(int(timestamp)) if timestamp else None,
        text=(message.get("text") or {}).get("body"),
        media=media,
    )


async def handle_event(
    event: MessageEvent, client: WhatsApp, media_folder: Union[str, Path]
) -> None:
    """Mark a routed message as read, then hand it to its responder."""
    if event.is_status:
        return

    if event.type == "text" and event.text is not None:
        await client.mark_as_read(event.message_id)
        await responders.conversation_message(event, client)
    elif event.type == "image" and event.media is not None:
        await client.mark_as_read(event.message_id)
        await responders.image_message(event, client, media_folder)
    else:
        logger.info(f"Unprocessed message type: {event.type}")
