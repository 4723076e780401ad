"""
LLM module - chat-completion transport and signal generation with a
deterministic fallback.
"""

from .llm_client import ChatTransport, LLMClient
from .signal_generator import (
    LLMSignalGenerator,
    SignalOutcome,
    extract_json,
    parse_confidence,
    parse_signal,
)

__all__ = [
    'ChatTransport',
    'LLMClient',
    'LLMSignalGenerator',
    'SignalOutcome',
    'extract_json',
    'parse_confidence',
    'parse_signal',
]
