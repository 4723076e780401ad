"""
Built-in strategy catalog.

Six strategies: deep value, activist quality, quality at a fair price,
mental-model quality, macro momentum and disruptive growth.
"""

from config.analysis_config import MOMENTUM_WEIGHTS, WEIGHTED_MAX_SCORE
from signal_engine.scoring import (
    score_activist_valuation,
    score_business_quality,
    score_company_news,
    score_consistency,
    score_disruptive_potential,
    score_earnings_stability,
    score_fcf_yield_valuation,
    score_financial_discipline,
    score_financial_strength,
    score_fundamentals,
    score_growth_momentum,
    score_insider_activity,
    score_intrinsic_value,
    score_keyword_sentiment,
    score_management_quality,
    score_moat_strength,
    score_multiples_valuation,
    score_net_asset_valuation,
    score_predictability,
    score_risk_reward,
)
from utils.unified_schema import RiskLevel
from .descriptor import CategorySpec, StrategyDescriptor

# --- Category adapters: (TickerData, valuation) -> ScoreResult ---

EARNINGS_STABILITY = CategorySpec(
    'earnings_stability', lambda data, _: score_earnings_stability(data.metrics))
FINANCIAL_STRENGTH = CategorySpec(
    'financial_strength', lambda data, _: score_financial_strength(data.fundamentals))
NET_ASSET_VALUATION = CategorySpec(
    'net_asset_valuation',
    lambda data, _: score_net_asset_valuation(data.metrics, data.fundamentals, data.latest_price()))

BUSINESS_QUALITY = CategorySpec(
    'business_quality', lambda data, _: score_business_quality(data.metrics, data.fundamentals))
FINANCIAL_DISCIPLINE = CategorySpec(
    'financial_discipline', lambda data, _: score_financial_discipline(data.metrics, data.fundamentals))
ACTIVIST_VALUATION = CategorySpec(
    'activist_valuation', lambda data, _: score_activist_valuation(data.metrics))

FUNDAMENTALS = CategorySpec(
    'fundamentals', lambda data, _: score_fundamentals(data.metrics))
CONSISTENCY = CategorySpec(
    'consistency', lambda data, _: score_consistency(data.metrics, RiskLevel.MEDIUM))
INTRINSIC_VALUE = CategorySpec(
    'intrinsic_value', lambda _, valuation: score_intrinsic_value(valuation))

MOAT_STRENGTH = CategorySpec(
    'moat_strength', lambda data, _: score_moat_strength(data.metrics, data.fundamentals))
MANAGEMENT_QUALITY = CategorySpec(
    'management_quality',
    lambda data, _: score_management_quality(data.metrics, data.fundamentals, data.insider_trades))
PREDICTABILITY = CategorySpec(
    'predictability', lambda data, _: score_predictability(data.metrics, data.fundamentals))
FCF_YIELD_VALUATION = CategorySpec(
    'fcf_yield_valuation', lambda data, _: score_fcf_yield_valuation(data.metrics))
COMPANY_NEWS = CategorySpec(
    'company_news', lambda data, _: score_company_news(data.news, data.ticker, data.as_of))

GROWTH_MOMENTUM = CategorySpec(
    'growth_momentum',
    lambda data, _: score_growth_momentum(data.metrics, data.fundamentals, data.prices))
RISK_REWARD = CategorySpec(
    'risk_reward', lambda data, _: score_risk_reward(data.metrics, data.prices))
MULTIPLES_VALUATION = CategorySpec(
    'multiples_valuation', lambda data, _: score_multiples_valuation(data.metrics, data.fundamentals))
KEYWORD_SENTIMENT = CategorySpec(
    'keyword_sentiment', lambda data, _: score_keyword_sentiment(data.news))
INSIDER_ACTIVITY = CategorySpec(
    'insider_activity', lambda data, _: score_insider_activity(data.insider_trades))

DISRUPTIVE_POTENTIAL = CategorySpec(
    'disruptive_potential', lambda data, _: score_disruptive_potential(data.metrics, data.fundamentals))


# --- System prompts ---

BEN_GRAHAM_PROMPT = """You are a Benjamin Graham AI agent. Judge investments with his principles:
1. Demand a margin of safety: buy below intrinsic value (Graham Number, net-net).
2. Favor financial strength: low leverage and ample current assets.
3. Prefer earnings that have been stable over many years.
4. Treat a reliable dividend record as extra safety.
5. Avoid speculative or high-growth assumptions; rely on proven figures.

Return a rational recommendation (bullish, bearish or neutral) with a confidence level (0-100) and concise reasoning."""

BILL_ACKMAN_PROMPT = """You are a Bill Ackman AI agent. Judge investments with his principles:
1. Seek high-quality businesses with durable competitive advantages.
2. Prioritize consistent free cash flow and growth potential.
3. Insist on financial discipline: sensible leverage and efficient capital allocation.
4. Valuation matters: target intrinsic value with a margin of safety.
5. Hold concentrated, high-conviction positions for the long term.
6. Consider activism where management or operations can be improved.

Rules:
- Weigh brand strength, market position and other moats.
- Check free cash flow generation and earnings stability.
- Review balance sheet health (reasonable debt, good ROE).
- Buy at a discount to intrinsic value; a deeper discount means stronger conviction.
- Provide a data-driven recommendation (bullish, bearish or neutral)."""

WARREN_BUFFETT_PROMPT = """You are a Warren Buffett AI agent. Decide on investment signals with his principles:
- Circle of competence: invest only in businesses you understand.
- Margin of safety: buy well below intrinsic value.
- Economic moat: prefer companies with lasting advantages.
- Quality management: conservative, shareholder-oriented teams.
- Financial strength: low debt and strong returns on equity.
- Long-term perspective: buy businesses, not tickers.

Rules:
- Buy only with a margin of safety above 30%.
- Focus on owner earnings and intrinsic value.
- Prefer consistent earnings growth.
- Avoid high debt and poor management.
- Hold good businesses for the long term."""

CHARLIE_MUNGER_PROMPT = """You are a Charlie Munger AI agent. Judge investments with his principles:
1. Focus on the quality and predictability of the business.
2. Apply mental models from many disciplines.
3. Look for strong, durable competitive advantages.
4. Think long term and be patient.
5. Value management integrity and competence.
6. Prioritize high returns on invested capital.
7. Pay a fair price for a wonderful business, never more.
8. Avoid complexity and businesses you do not understand.
9. Invert: concentrate on avoiding stupidity rather than seeking brilliance.
10. Take the recent company news sentiment into account.

Rules:
- Praise predictable, consistent operations and cash flows.
- Reward high ROIC and pricing power.
- Admire management with skin in the game and shareholder-friendly capital allocation.
- Be skeptical of excessive dilution, leverage or financial engineering.
- Provide a rational, data-driven recommendation (bullish, bearish or neutral)."""

STANLEY_DRUCKENMILLER_PROMPT = """You are a Stanley Druckenmiller AI agent. Judge investments with his principles:
1. Seek asymmetric risk-reward: large upside, limited downside.
2. Emphasize growth, momentum and market sentiment.
3. Preserve capital by avoiding major drawdowns.
4. Pay up for true growth leaders.
5. Be aggressive when conviction is high and cut losses when the thesis changes.

Rules:
- Reward strong revenue and earnings growth with positive price momentum.
- Use sentiment and insider activity as supporting or contradicting evidence.
- Watch for leverage or volatility that threatens capital.
- Output a JSON object with signal, confidence and a reasoning string."""

CATHIE_WOOD_PROMPT = """You are a Cathie Wood AI agent. Judge investments with her principles:
1. Look for disruptive innovation that can reshape industries.
2. Favor exponential revenue growth and large addressable markets.
3. Reward heavy investment in research and development.
4. Accept volatility in exchange for long-horizon upside (five years or more).
5. Focus on technology platforms such as AI, robotics, genomics and fintech.

Rules:
- Weigh revenue acceleration, margin expansion and R&D intensity.
- Compare the growth-case intrinsic value with the current price.
- Provide a data-driven recommendation (bullish, bearish or neutral)."""


BEN_GRAHAM = StrategyDescriptor(
    key='ben_graham',
    display_name='Ben Graham',
    system_prompt=BEN_GRAHAM_PROMPT,
    categories=(EARNINGS_STABILITY, FINANCIAL_STRENGTH, NET_ASSET_VALUATION),
    description="Deep value: earnings stability, balance-sheet strength, net-net and Graham Number",
)

BILL_ACKMAN = StrategyDescriptor(
    key='bill_ackman',
    display_name='Bill Ackman',
    system_prompt=BILL_ACKMAN_PROMPT,
    categories=(BUSINESS_QUALITY, FINANCIAL_DISCIPLINE, ACTIVIST_VALUATION),
    description="Activist quality: business quality, capital discipline and a 5-year DCF",
)

WARREN_BUFFETT = StrategyDescriptor(
    key='warren_buffett',
    display_name='Warren Buffett',
    system_prompt=WARREN_BUFFETT_PROMPT,
    categories=(FUNDAMENTALS, CONSISTENCY, INTRINSIC_VALUE),
    valuation_risk_level=RiskLevel.MEDIUM,
    description="Quality at a fair price: fundamentals, earnings consistency and DCF margin of safety",
)

CHARLIE_MUNGER = StrategyDescriptor(
    key='charlie_munger',
    display_name='Charlie Munger',
    system_prompt=CHARLIE_MUNGER_PROMPT,
    categories=(MOAT_STRENGTH, MANAGEMENT_QUALITY, PREDICTABILITY, FCF_YIELD_VALUATION, COMPANY_NEWS),
    description="Moat, management, predictability, FCF yield and news sentiment",
)

STANLEY_DRUCKENMILLER = StrategyDescriptor(
    key='stanley_druckenmiller',
    display_name='Stanley Druckenmiller',
    system_prompt=STANLEY_DRUCKENMILLER_PROMPT,
    categories=(GROWTH_MOMENTUM, RISK_REWARD, MULTIPLES_VALUATION, KEYWORD_SENTIMENT, INSIDER_ACTIVITY),
    weights=MOMENTUM_WEIGHTS,
    max_score=WEIGHTED_MAX_SCORE,
    description="Macro momentum: weighted growth, risk/reward, multiples, sentiment and insiders",
)

CATHIE_WOOD = StrategyDescriptor(
    key='cathie_wood',
    display_name='Cathie Wood',
    system_prompt=CATHIE_WOOD_PROMPT,
    categories=(DISRUPTIVE_POTENTIAL, INTRINSIC_VALUE),
    valuation_risk_level=RiskLevel.HIGH,
    description="Disruptive growth: innovation signals and a high-growth DCF",
)

BUILTIN_STRATEGIES = (
    BEN_GRAHAM,
    BILL_ACKMAN,
    WARREN_BUFFETT,
    CHARLIE_MUNGER,
    STANLEY_DRUCKENMILLER,
    CATHIE_WOOD,
)
