"""
LLM Signal Generator
====================

Turns a strategy's scored analysis into a TradeSignal in three stages:

1. Compose  - system prompt + analysis JSON into a chat-completion payload
2. Invoke   - one POST through the injected transport, no retries
3. Interpret - pull a JSON object out of the reply and normalize it

Any failure along the way falls back to a deterministic signal derived from
the aggregated scores, so identical inputs always give identical output.
"""

import json
import logging
import math
import re
from decimal import Decimal
from typing import Any, Dict, Literal, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from config.analysis_config import FALLBACK_CONFIDENCE
from config.constants import CHAT_COMPLETIONS_PATH
from config.settings import settings
from signal_engine.scoring import ScoreResult
from signal_engine.signals import AggregateResult
from utils.logger import resolve_logger
from utils.unified_schema import TradeSignal
from .llm_client import ChatTransport
from .prompts import build_user_prompt

SignalSource = Literal['llm', 'fallback', 'unscored']

# Fixed fallback reasons; the free-text cause only goes to the log
TRANSPORT_FAILURE = "transport failure"
MALFORMED_RESPONSE = "malformed response"
LLM_DISABLED = "LLM disabled"

SIGNAL_SYNONYMS = {
    "bullish": "bullish",
    "buy": "bullish",
    "long": "bullish",
    "strong buy": "bullish",
    "bearish": "bearish",
    "sell": "bearish",
    "short": "bearish",
    "neutral": "neutral",
    "hold": "neutral",
}

_OBJECT_PATTERN = re.compile(r"\{[\s\S]*?\}")


class SignalOutcome(BaseModel):
    """A signal together with where it came from."""
    model_config = ConfigDict(frozen=True)

    signal: TradeSignal
    source: SignalSource
    failure_reason: Optional[str] = None


def format_number(value: Any) -> str:
    """
    Plain decimal text without trailing zeros.

    Examples:
        >>> format_number(Decimal("5.950"))
        '5.95'
        >>> format_number(Decimal("100"))
        '100'
    """
    number = Decimal(str(value)).normalize()
    return format(number, 'f')


def extract_json(content: str) -> Optional[str]:
    """
    Locate a JSON object in free-form model output.

    Fenced replies take everything from the first "{" to the last "}";
    otherwise the first non-greedy {...} match; otherwise the whole trimmed
    text when it is itself braced.

    Examples:
        >>> extract_json('```json\\n{"signal": "bullish"}\\n```')
        '{"signal": "bullish"}'
        >>> extract_json('Answer: {"signal": "neutral"} done')
        '{"signal": "neutral"}'
    """
    if content.strip().startswith("```"):
        start = content.find("{")
        end = content.rfind("}")
        if start >= 0 and end > start:
            return content[start:end + 1]

    match = _OBJECT_PATTERN.search(content)
    if match:
        return match.group(0)

    trimmed = content.strip()
    if trimmed.startswith("{") and trimmed.endswith("}"):
        return trimmed
    return None


def parse_signal(raw: Any) -> Optional[str]:
    """Normalize a signal value or synonym; None when unrecognized."""
    if not isinstance(raw, str):
        return None
    key = " ".join(raw.strip().lower().replace("_", " ").split())
    return SIGNAL_SYNONYMS.get(key)


def parse_confidence(raw: Any) -> Optional[float]:
    """Coerce to float clamped into [0, 100]; None when not numeric."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip().rstrip('%')
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(value):
        return None
    return max(0.0, min(100.0, value))


class LLMSignalGenerator:
    """
    Compose -> Invoke -> Interpret, with a deterministic fallback.

    Args:
        transport: ChatTransport used for the POST; None disables the LLM path
        model: Chat model name (defaults to settings.LLM_MODEL)
        temperature: Sampling temperature (defaults to settings.LLM_TEMPERATURE)
        logger: Optional injected logger
    """

    def __init__(
        self,
        transport: Optional[ChatTransport] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.transport = transport
        self.model = model or settings.LLM_MODEL
        self.temperature = settings.LLM_TEMPERATURE if temperature is None else temperature
        self.logger = resolve_logger(logger, 'signal_generator')

    # --- Compose ---

    def compose(
        self,
        system_prompt: str,
        display_name: str,
        ticker: str,
        analysis: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Build the chat-completion payload."""
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": build_user_prompt(display_name, ticker, analysis)},
            ],
            "temperature": self.temperature,
        }

    # --- Invoke ---

    def invoke(self, payload: Dict[str, Any]) -> Tuple[bool, str]:
        """Single POST; a transport exception counts as a failed call."""
        if self.transport is None:
            return False, "no transport configured"
        try:
            return self.transport.post(CHAT_COMPLETIONS_PATH, payload)
        except Exception as e:
            return False, f"transport error: {e}"

    # --- Interpret ---

    def interpret(self, ticker: str, body: str) -> Tuple[Optional[TradeSignal], Optional[str]]:
        """
        Parse a chat-completion response body.

        Returns:
            (TradeSignal, None) on success, (None, cause) otherwise
        """
        try:
            document = json.loads(body)
            content = document["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            return None, f"unexpected response shape: {e}"

        if not isinstance(content, str) or not content.strip():
            return None, "empty response from LLM"

        raw_json = extract_json(content)
        if raw_json is None:
            return None, "no JSON object in LLM response"

        try:
            parsed = json.loads(raw_json)
        except ValueError as e:
            return None, f"invalid JSON in LLM response: {e}"
        if not isinstance(parsed, dict):
            return None, "LLM response JSON is not an object"

        fields = {str(k).lower(): v for k, v in parsed.items()}

        signal = parse_signal(fields.get("signal"))
        if signal is None:
            return None, f"unrecognized signal {fields.get('signal')!r}"

        confidence = parse_confidence(fields.get("confidence"))
        if confidence is None:
            return None, f"invalid confidence {fields.get('confidence')!r}"

        reasoning = fields.get("reasoning", "")
        if not isinstance(reasoning, str):
            reasoning = json.dumps(reasoning, default=str)

        return TradeSignal(ticker=ticker, signal=signal, confidence=confidence, reasoning=reasoning), None

    # --- Fallback ---

    @staticmethod
    def fallback_signal(
        ticker: str,
        scores: Sequence[ScoreResult],
        aggregate: AggregateResult,
        reason: str,
    ) -> TradeSignal:
        """
        Deterministic signal from the aggregated scores.

        Confidence is fixed per signal: bullish 90, bearish 75, neutral 60.
        """
        breakdown = "; ".join(s.summary() for s in scores)
        reasoning = (
            f"Deterministic fallback ({reason}): {breakdown}. "
            f"Total {format_number(aggregate.total)}/{format_number(aggregate.max_score)}."
        )
        return TradeSignal(
            ticker=ticker,
            signal=aggregate.signal,
            confidence=FALLBACK_CONFIDENCE[aggregate.signal],
            reasoning=reasoning,
        )

    # --- Pipeline ---

    def generate(
        self,
        ticker: str,
        system_prompt: str,
        display_name: str,
        analysis: Dict[str, Any],
        scores: Sequence[ScoreResult],
        aggregate: AggregateResult,
    ) -> SignalOutcome:
        """Run the full pipeline, falling back on any failure."""
        if self.transport is None:
            return SignalOutcome(
                signal=self.fallback_signal(ticker, scores, aggregate, LLM_DISABLED),
                source='fallback',
                failure_reason=LLM_DISABLED,
            )

        payload = self.compose(system_prompt, display_name, ticker, analysis)
        self.logger.debug(f"{ticker}: LLM request for {display_name}")

        ok, body = self.invoke(payload)
        if not ok:
            self.logger.warning(f"{ticker}: {display_name} LLM call failed ({body[:200]}); using fallback")
            return SignalOutcome(
                signal=self.fallback_signal(ticker, scores, aggregate, TRANSPORT_FAILURE),
                source='fallback',
                failure_reason=TRANSPORT_FAILURE,
            )

        signal, cause = self.interpret(ticker, body)
        if signal is None:
            self.logger.warning(f"{ticker}: {display_name} LLM output unusable ({cause}); using fallback")
            return SignalOutcome(
                signal=self.fallback_signal(ticker, scores, aggregate, MALFORMED_RESPONSE),
                source='fallback',
                failure_reason=MALFORMED_RESPONSE,
            )

        return SignalOutcome(signal=signal, source='llm')
