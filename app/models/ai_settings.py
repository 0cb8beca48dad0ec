"""
AI Settings Models for Configuration Management
"""
import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from app.helpers.constants import PLACEHOLDER_API_KEY
from app.utils.exceptions import ConfigurationError


class LLMSettings(BaseModel):
    """AI completion backend configuration"""
    model_config = ConfigDict(protected_namespaces=())

    api_key: SecretStr = Field(default=SecretStr(""), description="Backend credential")
    base_url: str = Field(default="https://api.openai.com/v1", description="OpenAI-compatible API base URL")
    model_name: str = Field(default="gpt-3.5-turbo", description="Chat completion model")
    temperature: float = Field(default=0.3, ge=0.0, le=2.0, description="Generation temperature")
    max_tokens: int = Field(default=500, ge=1, le=4096, description="Maximum tokens to generate")
    timeout: float = Field(default=30, gt=0, le=300, description="Request timeout in seconds")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def is_configured(self) -> bool:
        """True when a real credential is present"""
        key = self.api_key.get_secret_value().strip()
        return bool(key) and key != PLACEHOLDER_API_KEY


class AuthSettings(BaseModel):
    """Bearer tokens accepted by the default session provider"""
    api_tokens: List[SecretStr] = Field(default_factory=list)


class AppSettings(BaseModel):
    """Complete service configuration"""
    llm_settings: LLMSettings = Field(default_factory=LLMSettings)
    auth_settings: AuthSettings = Field(default_factory=AuthSettings)

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Build settings from the process environment and ``.env``"""
        load_dotenv()
        tokens = [t.strip() for t in os.getenv("API_TOKENS", "").split(",") if t.strip()]
        try:
            llm_settings = LLMSettings(
                api_key=os.getenv("OPENAI_API_KEY", ""),
                base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
                model_name=os.getenv("OPENAI_MODEL", "gpt-3.5-turbo"),
                temperature=float(os.getenv("OPENAI_TEMPERATURE", "0.3")),
                max_tokens=int(os.getenv("OPENAI_MAX_TOKENS", "500")),
                timeout=float(os.getenv("OPENAI_TIMEOUT", "30")),
            )
        except ValueError as e:
            # pydantic's ValidationError is a ValueError too
            raise ConfigurationError("Invalid AI backend configuration", cause=e) from e
        return cls(
            llm_settings=llm_settings,
            auth_settings=AuthSettings(api_tokens=tokens),
        )
