"""
echobot: a WhatsApp Cloud API bot and a one-shot text generation client.

The webhook service answers 'ping' with 'pong', replies to other text with a
button message, and saves and echoes back received images. The generate
program sends one prompt to OpenAI and prints the answer.
"""

__version__ = "0.1.0"
