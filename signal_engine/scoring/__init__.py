"""
Scoring module - Category scorers turning fundamental, price and market
series into bounded ScoreResults.

Every scorer declares its own maximum, sorts its inputs oldest-first and
reports missing data as a zero score with an "Insufficient data" detail.
"""

from .score_result import INSUFFICIENT_DATA, ScoreResult
from .value_scorers import (
    score_earnings_stability,
    score_financial_strength,
    score_net_asset_valuation,
)
from .quality_scorers import (
    score_business_quality,
    score_consistency,
    score_financial_discipline,
    score_fundamentals,
    score_management_quality,
    score_moat_strength,
    score_predictability,
)
from .growth_scorers import (
    score_disruptive_potential,
    score_growth_momentum,
    score_risk_reward,
)
from .valuation_scorers import (
    score_activist_valuation,
    score_fcf_yield_valuation,
    score_intrinsic_value,
    score_multiples_valuation,
)
from .market_scorers import (
    score_company_news,
    score_insider_activity,
    score_keyword_sentiment,
)

__all__ = [
    'INSUFFICIENT_DATA',
    'ScoreResult',
    'score_earnings_stability',
    'score_financial_strength',
    'score_net_asset_valuation',
    'score_business_quality',
    'score_financial_discipline',
    'score_fundamentals',
    'score_consistency',
    'score_moat_strength',
    'score_management_quality',
    'score_predictability',
    'score_growth_momentum',
    'score_risk_reward',
    'score_disruptive_potential',
    'score_activist_valuation',
    'score_fcf_yield_valuation',
    'score_multiples_valuation',
    'score_intrinsic_value',
    'score_keyword_sentiment',
    'score_insider_activity',
    'score_company_news',
]
