"""
WhatsApp messaging for echobot.

This package talks to the WhatsApp Cloud API and stores the media the bot
receives.
"""

from echobot.services.messaging.client import WhatsApp, message_id_from
from echobot.services.messaging.media import (
    extension_for_mime,
    media_filename,
    read_media,
    save_media,
)

__all__ = [
    "WhatsApp",
    "message_id_from",
    "extension_for_mime",
    "media_filename",
    "read_media",
    "save_media",
]
