from typing import Any, Dict, List, Optional
from openai import AsyncOpenAI
from echobot.config import settings
from echobot.logging import setup_logger


class AsyncOpenAIService:
    """Service for sending single text-generation requests to OpenAI"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.logger = setup_logger(__name__)
        self.model = model or settings.OPENAI_MODEL

        if client is not None:
            self._client = client
            return

        api_key = api_key or settings.OPENAI_API_KEY
        if not api_key:
            raise ValueError("OpenAI API key not provided.")

        self._client = AsyncOpenAI(
            api_key=api_key,
            timeout=settings.OPENAI_TIMEOUT,
            max_retries=settings.OPENAI_MAX_RETRIES,
        )

    async def generate_text(
        self,
        prompt: str,
        model: Optional[str] = None,
        system_prompt: Optional[str] = None,
        **kwargs: Any,
    ) -> Optional[str]:
        """Send one prompt and return the first choice's text"""
        messages: List[Dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        model = model or self.model
        try:
            self.logger.info(f"Creating chat completion with model {model}")
            completion = await self._client.chat.completions.create(
                model=model,
                messages=messages,
                **kwargs,
            )
            return completion.choices[0].message.content if completion.choices else None
        except Exception as e:
            self.logger.error(f"Error creating chat completion: {e}")
            return None
