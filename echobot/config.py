from typing import List, Literal
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration with environment variable mapping.
    All settings can be defined in .env file or as environment variables.
    """

    # Core settings
    PROJECT_NAME: str = Field(default="echobot")
    PROJECT_DESCRIPTION: str = Field(
        default="WhatsApp ping and image echo bot"
    )
    ENVIRONMENT: Literal["dev", "prod"] = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: str = Field(default="logs")
    HOST: str = Field(default="127.0.0.1")
    PORT: int = Field(default=8000)

    # WhatsApp
    WHATSAPP_TOKEN: str = Field(default="")
    WHATSAPP_PHONE_NUMBER_ID: str = Field(default="")
    WHATSAPP_VERIFY_TOKEN: str = Field(default="")
    WHATSAPP_API_VERSION: str = Field(default="v17.0")
    WHATSAPP_TIMEOUT: float = Field(default=30.0)
    MEDIA_FOLDER: str = Field(default="myFolder")

    # OpenAI
    OPENAI_API_KEY: str = Field(default="")
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")
    OPENAI_TIMEOUT: float = Field(default=600.0)
    OPENAI_MAX_RETRIES: int = Field(default=2)

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def missing_whatsapp_settings(self) -> List[str]:
        """Names of the WhatsApp settings the webhook service cannot run without"""
        required = ["WHATSAPP_TOKEN", "WHATSAPP_PHONE_NUMBER_ID", "WHATSAPP_VERIFY_TOKEN"]
        return [name for name in required if not getattr(self, name)]


settings = Settings()
