from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from mealvision.constants import (
    CLAUDE_MODEL,
    OPENAI_MODEL,
    PROVIDER_OPENAI,
    SUPPORTED_PROVIDERS,
)


@dataclass(frozen=True)
class Config:
    openai_api_key: Optional[str]
    anthropic_api_key: Optional[str]
    llm_provider: str
    openai_model: str
    claude_model: str
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        openai_api_key = os.getenv("OPENAI_API_KEY", "").strip() or None
        anthropic_api_key = os.getenv("ANTHROPIC_API_KEY", "").strip() or None
        provider = os.getenv("LLM_PROVIDER", PROVIDER_OPENAI).strip().lower()
        openai_model = os.getenv("OPENAI_MODEL", "").strip() or OPENAI_MODEL
        claude_model = os.getenv("CLAUDE_MODEL", "").strip() or CLAUDE_MODEL
        log_level = os.getenv("LOG_LEVEL", "INFO")

        return cls._validate(
            openai_api_key=openai_api_key,
            anthropic_api_key=anthropic_api_key,
            llm_provider=provider,
            openai_model=openai_model,
            claude_model=claude_model,
            log_level=log_level,
        )

    @staticmethod
    def _validate(
        openai_api_key: Optional[str],
        anthropic_api_key: Optional[str],
        llm_provider: str,
        openai_model: str,
        claude_model: str,
        log_level: str,
    ) -> "Config":
        match llm_provider:
            case p if p in SUPPORTED_PROVIDERS:
                pass
            case _:
                raise ValueError(
                    f"LLM_PROVIDER must be one of {', '.join(SUPPORTED_PROVIDERS)}, got {llm_provider!r}"
                )

        return Config(
            openai_api_key=openai_api_key,
            anthropic_api_key=anthropic_api_key,
            llm_provider=llm_provider,
            openai_model=openai_model,
            claude_model=claude_model,
            log_level=log_level,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.openai_api_key or self.anthropic_api_key)
