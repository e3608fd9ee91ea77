from datetime import datetime
from typing import Optional, TypedDict
from pydantic import BaseModel

from echobot.constants import STATUS_CHAT_USER


class ButtonItem(TypedDict):
    """Type definition for a reply button"""

    id: str
    title: str


class MediaInfo(BaseModel):
    """Media block attached to an incoming message"""

    id: str
    mime_type: str = ""
    sha256: Optional[str] = None
    caption: Optional[str] = None


class MessageEvent(BaseModel):
    """A single incoming WhatsApp message taken from a webhook payload"""

    message_id: str
    chat: str
    type: str
    push_name: Optional[str] = None
    timestamp: Optional[datetime] = None
    text: Optional[str] = None
    media: Optional[MediaInfo] = None

    @property
    def chat_user(self) -> str:
        return self.chat.split("@", 1)[0]

    @property
    def is_status(self) -> bool:
        return self.chat_user == STATUS_CHAT_USER


class UploadedMedia(BaseModel):
    """Result of a media upload to the Cloud API"""

    id: str
    mime_type: str
    file_length: int
