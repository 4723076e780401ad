"""
Configuration settings loader with secure API key handling.
Loads environment variables from .env file and provides masked logging.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

from .constants import (
    DEFAULT_LLM_BASE_URL,
    DEFAULT_LLM_MODEL,
    DEFAULT_LLM_TEMPERATURE,
    DEFAULT_LLM_TIMEOUT_SECONDS,
)

# Load environment variables from .env
project_root = Path(__file__).parent.parent
env_path = project_root / '.env'
load_dotenv(dotenv_path=env_path)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Settings:
    """Application settings for the chat-completion endpoint."""

    def __init__(self):
        self.OPENAI_API_KEY: str | None = os.getenv('OPENAI_API_KEY') or None
        self.LLM_BASE_URL: str = os.getenv('LLM_BASE_URL', DEFAULT_LLM_BASE_URL)
        self.LLM_MODEL: str = os.getenv('LLM_MODEL', DEFAULT_LLM_MODEL)
        self.LLM_TEMPERATURE: float = _float_env('LLM_TEMPERATURE', DEFAULT_LLM_TEMPERATURE)
        self.LLM_TIMEOUT_SECONDS: float = _float_env('LLM_TIMEOUT_SECONDS', DEFAULT_LLM_TIMEOUT_SECONDS)

        # The key is optional: without it every strategy uses the
        # deterministic fallback signal.

    @property
    def has_llm_key(self) -> bool:
        return bool(self.OPENAI_API_KEY)

    @staticmethod
    def mask_api_key(api_key: str) -> str:
        """
        Mask API key for secure logging.
        Shows only first 4 and last 4 characters.

        Args:
            api_key: The API key to mask

        Returns:
            Masked API key (e.g., 'sk-A...I4ha')
        """
        if not api_key or len(api_key) < 8:
            return "****"
        return f"{api_key[:4]}...{api_key[-4:]}"

    def get_masked_llm_key(self) -> str:
        """Get masked LLM API key for logging."""
        return self.mask_api_key(self.OPENAI_API_KEY or "")


# Global settings instance
settings = Settings()
