"""
LLM Client Module
=================

Infrastructure layer for an OpenAI-compatible chat-completion endpoint.
Handles authentication and the HTTP round trip; agnostic to the content
being generated. A single attempt per call, no retries.
"""

import logging
from typing import Any, Dict, Optional, Protocol, Tuple
from urllib.parse import urljoin

import requests

from config.settings import settings
from utils.logger import resolve_logger


class ChatTransport(Protocol):
    """Anything that can POST a JSON payload and report (ok, body)."""

    def post(self, path: str, payload: Dict[str, Any]) -> Tuple[bool, str]:
        ...


class LLMClient:
    """
    Client for an OpenAI-compatible chat-completion API.

    Example:
        >>> client = LLMClient(api_key="sk-...")
        >>> ok, body = client.post("chat/completions", {"model": "gpt-4", "messages": []})
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key or settings.OPENAI_API_KEY
        self.base_url = base_url or settings.LLM_BASE_URL
        if not self.base_url.endswith('/'):
            self.base_url += '/'
        self.timeout = timeout if timeout is not None else settings.LLM_TIMEOUT_SECONDS
        self.logger = resolve_logger(logger, 'llm_client')
        self.session = session or requests.Session()

        if not self.api_key:
            self.logger.warning("LLM API key not provided. Signals will use the deterministic fallback.")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def post(self, path: str, payload: Dict[str, Any]) -> Tuple[bool, str]:
        """
        POST a JSON payload relative to the base URL.

        Args:
            path: Endpoint path, e.g. "chat/completions"
            payload: JSON-serializable request body

        Returns:
            (True, response text) on HTTP 200, otherwise (False, error text)
        """
        if not self.api_key:
            return False, "LLM API key not configured"

        url = urljoin(self.base_url, path)
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        self.logger.debug(f"LLM POST {url} (key {settings.mask_api_key(self.api_key)})")

        try:
            response = self.session.post(url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            self.logger.warning(f"Exception calling {url}: {e}")
            return False, str(e)

        if response.status_code != 200:
            self.logger.warning(f"API Error ({response.status_code}): {response.text[:200]}")
            return False, response.text

        return True, response.text
