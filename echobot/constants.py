# WhatsApp reply texts
MESSAGES = {
    "ping": "ping",
    "pong": "pong",
    "buttons_body": "Content",
    "buttons_footer": "Footer",
    "image_received": "We received your image with MIME type: {mime_type} ({extension})",
}

REPLY_BUTTONS = [
    {"id": "ButtonId", "title": "Ok"},
]

# Chat user of the status broadcast list
STATUS_CHAT_USER = "status"

WEBHOOK_OBJECT = "whatsapp_business_account"
MESSAGING_PRODUCT = "whatsapp"

MEDIA_MESSAGE_TYPES = ["image", "video", "audio", "document", "sticker"]

# Cloud API limit for reply buttons in one interactive message
MAX_REPLY_BUTTONS = 3

DEFAULT_PROMPT = "Write a story about a magic backpack."
