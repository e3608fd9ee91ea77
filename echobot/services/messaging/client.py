"""
WhatsApp Cloud API client for sending messages and moving media.

This module wraps the Graph API endpoints the bot needs: text and
interactive replies, image messages, read receipts, and the media
download and upload endpoints.
"""

from __future__ import annotations
import httpx
from typing import Dict, Any, Optional, List, Tuple

from echobot.constants import MAX_REPLY_BUTTONS, MESSAGING_PRODUCT
from echobot.logging import setup_logger
from echobot.services.types import ButtonItem, UploadedMedia


def message_id_from(response_data: Dict[str, Any]) -> Optional[str]:
    """Return the id of the sent message from a send response, if any."""
    messages = response_data.get("messages") or []
    if messages and isinstance(messages[0], dict):
        return messages[0].get("id")
    return None


class WhatsApp:
    """WhatsApp messaging client implementation using the WhatsApp Cloud API."""

    def __init__(
        self,
        token: Optional[str] = None,
        phone_number_id: Optional[str] = None,
        api_version: str = "v17.0",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.logger = setup_logger(__name__)
        self.token = token
        self.phone_number_id = phone_number_id
        self.base_url = f"https://graph.facebook.com/{api_version}"
        self.url = f"{self.base_url}/{phone_number_id}/messages"
        self.media_url = f"{self.base_url}/{phone_number_id}/media"
        self.timeout = timeout
        self._transport = transport

    @property
    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    @property
    def headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json", **self.auth_headers}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self.timeout)

    async def _post_message(
        self, payload: Dict[str, Any], phone_number: str, content_type: str
    ) -> Dict[str, Any]:
        """Post a message payload and log the outcome."""
        try:
            async with self._client() as client:
                response = await client.post(
                    self.url, headers=self.headers, json=payload
                )
                response_data = response.json()

                if response.status_code != 200:
                    self._handle_api_error(response_data, phone_number, content_type)
                else:
                    self.logger.info(f"Sent {content_type} to {phone_number}")

                return response_data
        except Exception as e:
            error_msg = f"Exception sending {content_type} to {phone_number}: {str(e)}"
            self.logger.error(error_msg)
            return {"error": {"message": error_msg, "type": "Exception"}}

    async def send_message(
        self,
        message: str,
        phone_number: str,
        recipient_type: str = "individual",
        preview_url: bool = False,
    ) -> Dict[str, Any]:
        """Send a text message to a WhatsApp user."""
        payload = {
            "messaging_product": MESSAGING_PRODUCT,
            "recipient_type": recipient_type,
            "to": phone_number,
            "type": "text",
            "text": {"preview_url": preview_url, "body": message},
        }
        return await self._post_message(payload, phone_number, "message")

    async def send_interactive_buttons(
        self,
        body_text: str,
        buttons: List[ButtonItem],
        phone_number: str,
        footer_text: Optional[str] = None,
        header_text: Optional[str] = None,
        recipient_type: str = "individual",
    ) -> Dict[str, Any]:
        """Send a reply-button message to a WhatsApp user."""
        if not buttons:
            raise ValueError("At least one button is required")
        if len(buttons) > MAX_REPLY_BUTTONS:
            raise ValueError(
                f"At most {MAX_REPLY_BUTTONS} reply buttons are allowed, got {len(buttons)}"
            )

        payload = {
            "messaging_product": MESSAGING_PRODUCT,
            "recipient_type": recipient_type,
            "to": phone_number,
            "type": "interactive",
            "interactive": {
                "type": "button",
                "body": {"text": body_text},
                "action": {
                    "buttons": [
                        {
                            "type": "reply",
                            "reply": {"id": btn["id"], "title": btn["title"]},
                        }
                        for btn in buttons
                    ]
                },
            },
        }

        if header_text:
            payload["interactive"]["header"] = {"type": "text", "text": header_text}
        if footer_text:
            payload["interactive"]["footer"] = {"text": footer_text}

        return await self._post_message(payload, phone_number, "interactive buttons")

    async def send_image(
        self,
        phone_number: str,
        media_id: Optional[str] = None,
        link: Optional[str] = None,
        caption: Optional[str] = None,
        recipient_type: str = "individual",
    ) -> Dict[str, Any]:
        """Send an image by uploaded media id or by public link."""
        if bool(media_id) == bool(link):
            raise ValueError("Exactly one of media_id or link is required")

        image = {"id": media_id} if media_id else {"link": link}
        if caption:
            image["caption"] = caption

        payload = {
            "messaging_product": MESSAGING_PRODUCT,
            "recipient_type": recipient_type,
            "to": phone_number,
            "type": "image",
            "image": image,
        }
        return await self._post_message(payload, phone_number, "image")

    async def mark_as_read(self, message_id: str) -> bool:
        """Mark an incoming message as read."""
        payload = {
            "messaging_product": MESSAGING_PRODUCT,
            "status": "read",
            "message_id": message_id,
        }
        try:
            async with self._client() as client:
                response = await client.post(
                    self.url, headers=self.headers, json=payload
                )
            return response.status_code == 200
        except Exception as e:
            self.logger.error(f"Failed to mark message as read: {str(e)}")
            return False

    async def get_media_url(self, media_id: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve the download URL and metadata for a media id.

        Example response:
        {
            'url': 'https://lookaside.fbsbx.com/whatsapp_business/attachments/?mid=...',
            'mime_type': 'image/jpeg',
            'sha256': '435e47a0...',
            'file_size': 257546,
            'id': '714034044338587',
            'messaging_product': 'whatsapp'
        }
        """
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self.base_url}/{media_id}", headers=self.auth_headers
                )
        except Exception as e:
            self.logger.error(f"Exception retrieving media URL for {media_id}: {str(e)}")
            return None

        if response.status_code != 200:
            self.logger.error(
                f"Failed to retrieve media URL. Status code: {response.status_code}"
            )
            self.logger.error(f"Response: {response.text}")
            return None

        data = response.json()
        if "url" not in data:
            self.logger.error(f"No URL found in media response: {data}")
            return None

        return data

    async def download_media(self, media_id: str) -> Optional[Tuple[bytes, str]]:
        """
        Download the content of a media id.

        Returns:
            Tuple of (content, mime type) or None if any step failed
        """
        data = await self.get_media_url(media_id)
        if data is None:
            return None

        try:
            async with self._client() as client:
                response = await client.get(data["url"], headers=self.auth_headers)
        except Exception as e:
            self.logger.error(f"Exception downloading media {media_id}: {str(e)}")
            return None

        if response.status_code != 200:
            self.logger.error(
                f"Failed to download media. Status code: {response.status_code}"
            )
            return None

        mime_type = data.get("mime_type") or response.headers.get(
            "content-type", "application/octet-stream"
        )
        self.logger.info(
            f"Downloaded media {media_id} ({len(response.content)} bytes, {mime_type})"
        )
        return response.content, mime_type

    async def upload_media(
        self, content: bytes, mime_type: str, filename: str
    ) -> Optional[UploadedMedia]:
        """Upload bytes to the Cloud API media store."""
        try:
            async with self._client() as client:
                response = await client.post(
                    self.media_url,
                    headers=self.auth_headers,
                    data={"messaging_product": MESSAGING_PRODUCT, "type": mime_type},
                    files={"file": (filename, content, mime_type)},
                )
        except Exception as e:
            self.logger.error(f"Exception uploading {filename}: {str(e)}")
            return None

        try:
            response_data = response.json()
        except ValueError:
            response_data = {"error": {"message": response.text}}

        if response.status_code != 200 or "id" not in response_data:
            self.logger.error(
                f"Failed to upload {filename}: {self._format_error_message(response_data)}"
            )
            return None

        self.logger.info(f"Uploaded {filename} as media {response_data['id']}")
        return UploadedMedia(
            id=response_data["id"], mime_type=mime_type, file_length=len(content)
        )

    def _handle_api_error(
        self,
        response_data: Dict[str, Any],
        phone_number: str,
        content_type: str = "message",
    ) -> None:
        """Handle and log WhatsApp API errors."""
        error_info = response_data.get("error", {})
        error_code = error_info.get("code")
        error_message = error_info.get("message", "Unknown error")

        if error_code == 131030:
            # Test numbers only deliver to recipients on the allowed list
            error_details = "Recipient phone number not in allowed list. Add the number to test numbers in Meta developer portal."
            self.logger.error(f"WhatsApp API Error {error_code}: {error_details}")
        else:
            self.logger.error(
                f"Failed to send {content_type} to {phone_number}: {error_message} (Code: {error_code})"
            )

        self.logger.warning(
            f"{content_type.capitalize()} not delivered to {phone_number} due to API error"
        )

    def _format_error_message(self, response_data: Dict[str, Any]) -> Dict[str, str]:
        """Format API error message for consistent error reporting."""
        error_info = response_data.get("error", {})
        error_code = error_info.get("code", "unknown")
        error_message = error_info.get("message", "Unknown error")

        return {"code": str(error_code), "message": error_message}
