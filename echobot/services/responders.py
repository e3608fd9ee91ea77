from pathlib import Path
from typing import Union

from echobot.constants import MESSAGES, REPLY_BUTTONS
from echobot.logging import setup_logger, log_exception
from echobot.services.messaging.client import WhatsApp, message_id_from
from echobot.services.messaging.media import (
    extension_for_mime,
    read_media,
    save_media,
)
from echobot.services.types import MessageEvent

logger = setup_logger(__name__)


async def conversation_message(event: MessageEvent, client: WhatsApp) -> None:
    """Answer 'ping' with 'pong' and anything else with a reply-button message."""
    try:
        if event.text == MESSAGES["ping"]:
            await client.send_message(MESSAGES["pong"], event.chat_user)
            return

        logger.info("not ping :)")
        response = await client.send_interactive_buttons(
            body_text=MESSAGES["buttons_body"],
            buttons=REPLY_BUTTONS,
            phone_number=event.chat_user,
            footer_text=MESSAGES["buttons_footer"],
        )

        sent_id = message_id_from(response)
        if sent_id:
            logger.info(f"Message sent (id: {sent_id})")
        else:
            logger.error(f"Error sending message: {response.get('error')}")
    except Exception as e:
        log_exception(logger, f"Error replying to message {event.message_id}", e)


async def image_message(
    event: MessageEvent, client: WhatsApp, media_folder: Union[str, Path]
) -> None:
    """
    Save a received image, acknowledge it and echo it back.

    Steps: download, write to ``media_folder``, read back, upload,
    send the acknowledgement text, then send the uploaded image with the
    original caption.
    """
    if event.media is None:
        logger.error(f"Image message {event.message_id} has no media block")
        return

    sender = event.chat_user
    caption = event.media.caption or ""
    if caption:
        logger.info(f"caption: {caption}")

    try:
        downloaded = await client.download_media(event.media.id)
        if downloaded is None:
            logger.error(f"Failed to download image {event.media.id}")
            return
        content, mime_type = downloaded
        mime_type = event.media.mime_type or mime_type
        extension = extension_for_mime(mime_type)

        try:
            file_path = save_media(
                media_folder, sender, event.message_id, content, mime_type
            )
            content = read_media(file_path)
        except OSError as e:
            log_exception(logger, "Failed to save to server directory", e)
            return

        uploaded = await client.upload_media(content, mime_type, file_path.name)

        await client.send_message(
            MESSAGES["image_received"].format(
                mime_type=mime_type, extension=extension
            ),
            sender,
        )

        if uploaded is None:
            logger.warning(f"Upload failed, not echoing image back to {sender}")
            return

        await client.send_image(sender, media_id=uploaded.id, caption=caption)
    except Exception as e:
        log_exception(logger, f"Error handling image message {event.message_id}", e)
