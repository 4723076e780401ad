"""
Analysis Configuration
Centralized configuration for signal thresholds, fallback confidences,
DCF risk tiers and weighted-strategy parameters.
"""

from decimal import Decimal
from typing import Dict, Any

# --- Signal Thresholds ---
# Same for all strategies:
#   total >= BULLISH_RATIO * max  -> bullish
#   total <= BEARISH_RATIO * max  -> bearish
SIGNAL_THRESHOLDS = {
    "BULLISH_RATIO": Decimal("0.7"),
    "BEARISH_RATIO": Decimal("0.3"),
}

# --- Fallback Confidence ---
# Fixed confidence used when the LLM path fails
FALLBACK_CONFIDENCE = {
    "bullish": 90.0,
    "bearish": 75.0,
    "neutral": 60.0,
}

# Weighted strategies compare against this fixed maximum
WEIGHTED_MAX_SCORE = 10

# --- DCF Risk Tiers ---
# (growth rate, discount rate, terminal multiple)
# Higher risk tolerance assumes faster growth, lower discounting and a
# richer terminal multiple.
RISK_TIER_ASSUMPTIONS: Dict[str, Dict[str, Any]] = {
    "low": {
        "growth_rate": Decimal("0.05"),
        "discount_rate": Decimal("0.09"),
        "terminal_multiple": 12,
        "basis": "owner_earnings",
    },
    "medium": {
        "growth_rate": Decimal("0.08"),
        "discount_rate": Decimal("0.07"),
        "terminal_multiple": 16,
        "basis": "free_cash_flow",
    },
    "high": {
        "growth_rate": Decimal("0.12"),
        "discount_rate": Decimal("0.06"),
        "terminal_multiple": 20,
        "basis": "free_cash_flow",
    },
}

# Share of capex treated as maintenance spend in owner earnings
MAINTENANCE_CAPEX_RATIO = Decimal("0.75")

# --- Activist DCF (5-year) ---
ACTIVIST_DCF_ASSUMPTIONS = {
    "growth_rate": Decimal("0.06"),
    "discount_rate": Decimal("0.10"),
    "terminal_multiple": 15,
}

# --- Weighted Strategies ---
# Macro-momentum weights by category title; must sum to 1.0
MOMENTUM_WEIGHTS = {
    "Growth & Momentum": Decimal("0.35"),
    "Risk/Reward": Decimal("0.20"),
    "Valuation": Decimal("0.20"),
    "Sentiment": Decimal("0.15"),
    "Insider Activity": Decimal("0.10"),
}
