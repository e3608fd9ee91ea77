from echobot.services.genai.openai_service import AsyncOpenAIService

__all__ = ["AsyncOpenAIService"]
