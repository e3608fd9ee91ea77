import json
import os
import tempfile

# Settings are read at import time, so the environment is prepared first
os.environ["WHATSAPP_TOKEN"] = "test-token"
os.environ["WHATSAPP_PHONE_NUMBER_ID"] = "1234567890"
os.environ["WHATSAPP_VERIFY_TOKEN"] = "test-verify-token"
os.environ["WHATSAPP_API_VERSION"] = "v17.0"
os.environ["OPENAI_API_KEY"] = "test-openai-key"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="echobot-logs-")

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from echobot.config import settings  # noqa: E402
from echobot.main import app, get_whatsapp  # noqa: E402
from echobot.services.messaging.client import WhatsApp  # noqa: E402

PHONE_NUMBER_ID = "1234567890"
GRAPH = "https://graph.facebook.com/v17.0"
MEDIA_ID = "681999801233256"
IMAGE_BYTES = b"\xff\xd8\xff\xe0fake-jpeg-bytes"
LOOKASIDE_URL = (
    f"https://lookaside.fbsbx.com/whatsapp_business/attachments/?mid={MEDIA_ID}"
)


class FakeGraphAPI:
    """
    Stand-in for the Graph API served through httpx.MockTransport.

    Every request is recorded. Responses can be replaced per
    (method, path) key through ``overrides``.
    """

    def __init__(self):
        self.requests = []
        self.overrides = {}
        self.sent_count = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key in self.overrides:
            return self.overrides[key]

        if key == ("POST", f"/v17.0/{PHONE_NUMBER_ID}/messages"):
            self.sent_count += 1
            return httpx.Response(
                200,
                json={
                    "messaging_product": "whatsapp",
                    "contacts": [{"input": "923408957390", "wa_id": "923408957390"}],
                    "messages": [{"id": f"wamid.OUT{self.sent_count}"}],
                },
            )
        if key == ("POST", f"/v17.0/{PHONE_NUMBER_ID}/media"):
            return httpx.Response(200, json={"id": "uploaded-media-1"})
        if key == ("GET", f"/v17.0/{MEDIA_ID}"):
            return httpx.Response(
                200,
                json={
                    "url": LOOKASIDE_URL,
                    "mime_type": "image/jpeg",
                    "sha256": "435e47a077a9b3d6fb65d2aec1a70e129f9783b2ad103ce85b7476f6f356892a",
                    "file_size": len(IMAGE_BYTES),
                    "id": MEDIA_ID,
                    "messaging_product": "whatsapp",
                },
            )
        if request.url.host == "lookaside.fbsbx.com":
            return httpx.Response(
                200, content=IMAGE_BYTES, headers={"content-type": "image/jpeg"}
            )
        return httpx.Response(404, json={"error": {"message": "Unknown path", "code": 100}})

    def _message_posts(self):
        return [
            json.loads(r.content)
            for r in self.requests
            if r.method == "POST" and r.url.path.endswith("/messages")
        ]

    def sent_messages(self):
        """JSON bodies of messages sent to users, read receipts excluded"""
        return [body for body in self._message_posts() if body.get("status") != "read"]

    def read_receipts(self):
        return [
            body["message_id"]
            for body in self._message_posts()
            if body.get("status") == "read"
        ]

    def uploads(self):
        return [
            r
            for r in self.requests
            if r.method == "POST" and r.url.path.endswith("/media")
        ]


@pytest.fixture
def graph_api():
    return FakeGraphAPI()


@pytest.fixture
def whatsapp(graph_api):
    """WhatsApp client whose HTTP calls go to the fake Graph API"""
    return WhatsApp(
        token="test-token",
        phone_number_id=PHONE_NUMBER_ID,
        api_version="v17.0",
        transport=httpx.MockTransport(graph_api.handler),
    )


@pytest.fixture
def media_folder(tmp_path, monkeypatch):
    folder = tmp_path / "myFolder"
    monkeypatch.setattr(settings, "MEDIA_FOLDER", str(folder))
    return folder


@pytest.fixture
def client(whatsapp):
    """Create a test client for the FastAPI application"""
    app.dependency_overrides[get_whatsapp] = lambda: whatsapp
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_payload(*messages, contacts=None, statuses=None):
    """Build a webhook payload the way the Cloud API sends it"""
    value = {
        "messaging_product": "whatsapp",
        "metadata": {
            "display_phone_number": "15550000000",
            "phone_number_id": PHONE_NUMBER_ID,
        },
    }
    if contacts is not None:
        value["contacts"] = contacts
    if messages:
        value["messages"] = list(messages)
    if statuses is not None:
        value["statuses"] = statuses

    return {
        "object": "whatsapp_business_account",
        "entry": [
            {
                "id": "102290129340398",
                "changes": [{"value": value, "field": "messages"}],
            }
        ],
    }


def text_message(body, sender="923408957390", message_id="wamid.IN1"):
    return {
        "from": sender,
        "id": message_id,
        "timestamp": "1747191936",
        "type": "text",
        "text": {"body": body},
    }


def image_message(
    sender="923408957390", message_id="wamid.IMG1", caption=None, mime_type="image/jpeg"
):
    image = {
        "mime_type": mime_type,
        "sha256": "6v8WKRouzX4frSkccvOFU+bTojosgbiCMsaVa/F03Yk=",
        "id": MEDIA_ID,
    }
    if caption is not None:
        image["caption"] = caption
    return {
        "from": sender,
        "id": message_id,
        "timestamp": "1747191936",
        "type": "image",
        "image": image,
    }
