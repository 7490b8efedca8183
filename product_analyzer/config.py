from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from product_analyzer import constants
from product_analyzer.constants import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_VISION_MODELS,
    DEFAULT_VISION_PROVIDER,
)


@dataclass(frozen=True)
class Config:
    vision_provider: str
    vision_model: str
    log_level: str
    max_tokens: int
    gemini_api_key: Optional[str]
    anthropic_api_key: Optional[str]
    openai_api_key: Optional[str]

    @property
    def api_key(self) -> Optional[str]:
        """Key for the selected provider."""
        return {
            constants.PROVIDER_GEMINI: self.gemini_api_key,
            constants.PROVIDER_CLAUDE: self.anthropic_api_key,
            constants.PROVIDER_OPENAI: self.openai_api_key,
        }.get(self.vision_provider)

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        provider = os.getenv("VISION_PROVIDER", DEFAULT_VISION_PROVIDER).strip().lower()
        model = os.getenv("VISION_MODEL") or None
        log_level = os.getenv("LOG_LEVEL", "INFO")
        max_tokens = os.getenv("MAX_TOKENS", str(DEFAULT_MAX_TOKENS))
        gemini_api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or None
        anthropic_api_key = os.getenv("ANTHROPIC_API_KEY") or None
        openai_api_key = os.getenv("OPENAI_API_KEY") or None

        return cls._validate(
            vision_provider=provider,
            vision_model=model,
            log_level=log_level,
            max_tokens=int(max_tokens),
            gemini_api_key=gemini_api_key,
            anthropic_api_key=anthropic_api_key,
            openai_api_key=openai_api_key,
        )

    @staticmethod
    def _validate(
        vision_provider: str,
        vision_model: Optional[str],
        log_level: str,
        max_tokens: int,
        gemini_api_key: Optional[str],
        anthropic_api_key: Optional[str],
        openai_api_key: Optional[str],
    ) -> "Config":
        match (vision_provider, gemini_api_key, anthropic_api_key, openai_api_key):
            case (p, _, _, _) if p not in DEFAULT_VISION_MODELS:
                raise ValueError(
                    f"VISION_PROVIDER must be one of {', '.join(DEFAULT_VISION_MODELS)}"
                )
            case (constants.PROVIDER_GEMINI, None, _, _):
                raise ValueError("GEMINI_API_KEY must be set in .env")
            case (constants.PROVIDER_CLAUDE, _, None, _):
                raise ValueError("ANTHROPIC_API_KEY must be set in .env")
            case (constants.PROVIDER_OPENAI, _, _, None):
                raise ValueError("OPENAI_API_KEY must be set in .env")
            case _:
                pass

        return Config(
            vision_provider=vision_provider,
            vision_model=vision_model or DEFAULT_VISION_MODELS[vision_provider],
            log_level=log_level,
            max_tokens=max_tokens,
            gemini_api_key=gemini_api_key,
            anthropic_api_key=anthropic_api_key,
            openai_api_key=openai_api_key,
        )
