"""
AI Prompt Templates
Separated from the signal generator logic for better maintainability.
"""

import json
from decimal import Decimal
from typing import Any, Dict

RESPONSE_FORMAT = """Return JSON exactly in this format:
{
  "signal": "bullish" or "bearish" or "neutral",
  "confidence": float (0-100),
  "reasoning": "string"
}"""


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    if hasattr(value, 'model_dump'):
        return value.model_dump(mode='json')
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def build_user_prompt(display_name: str, ticker: str, analysis: Dict[str, Any]) -> str:
    """
    Construct the user message from the scored analysis.

    Args:
        display_name: Strategy name, e.g. "Warren Buffett"
        ticker: Ticker being analyzed
        analysis: Totals and category breakdown

    Returns:
        Prompt text ending with the required JSON response format
    """
    json_str = json.dumps(analysis, indent=2, default=_json_default)
    return (
        f"Based on the following analysis, create a {display_name}-style investment signal:\n"
        f"\n"
        f"Analysis Data for {ticker}:\n"
        f"{json_str}\n"
        f"\n"
        f"{RESPONSE_FORMAT}"
    )
