"""
Breakpoint configuration for the category scorers.

Each dict holds the fixed thresholds and point values of one category. The
breakpoints are part of the observable contract: changing one changes the
detail lines and scores callers see.
"""

from decimal import Decimal

D = Decimal

# --- Value (net assets, earnings record) ---

EARNINGS_STABILITY = {
    'max_score': 4,
    'min_periods': 2,
    'most_positive_ratio': D('0.8'),
    'growth_threshold': D('0.10'),
}

FINANCIAL_STRENGTH = {
    'max_score': 4,
    'current_ratio_strong': D('2.0'),      # +2
    'current_ratio_adequate': D('1.5'),    # +1
    'debt_ratio_low': D('0.5'),            # +2
    'debt_ratio_moderate': D('0.8'),       # +1
}

NET_ASSET_VALUATION = {
    'max_score': 4,
    'net_net_points': 4,
    'partial_ncav_ratio': D('0.67'),
    'partial_ncav_points': 2,
    'graham_constant': D('22.5'),
    'below_graham_points': 3,
    'above_graham_points': 1,
    'ttm_periods': 4,
}

# --- Quality ---

BUSINESS_QUALITY = {
    'min_periods': 2,
    'max_score': 7,
    'strong_revenue_growth': D('0.5'),
    'operating_margin': D('0.15'),
    'roe': D('0.15'),
}

FINANCIAL_DISCIPLINE = {
    'min_periods': 2,
    'max_score': 4,
    'debt_to_equity': D('1.0'),
    'debt_to_equity_ceiling': D('10000'),
    'liabilities_to_assets': D('0.5'),
}

FUNDAMENTALS = {
    'max_score': 7,
    'roe': D('0.15'),
    'debt_to_equity': D('0.5'),
    'operating_margin': D('0.15'),
    'current_ratio': D('1.5'),
}

CONSISTENCY = {
    'max_score': 3,
    'min_periods': 4,
}

MOAT_STRENGTH = {
    'min_periods': 3,
    'max_score': 10,
    'raw_max': 9,
    'roic': D('0.15'),
    'roic_excellent_share': D('0.8'),
    'roic_good_share': D('0.5'),
    'improving_margin_share': D('0.7'),
    'good_gross_margin': D('0.3'),
    'low_capex': D('0.05'),
    'moderate_capex': D('0.10'),
}

MANAGEMENT_QUALITY = {
    'max_score': 10,
    'raw_max': 12,
    'min_periods': 5,
    'fcf_conversion': (D('1.1'), D('0.9'), D('0.7')),   # 3 / 2 / 1
    'debt_to_equity': (D('0.3'), D('0.7'), D('1.5')),   # 3 / 2 / 1
    'cash_to_revenue_prudent': (D('0.1'), D('0.25')),
    'cash_to_revenue_acceptable': ((D('0.05'), D('0.1')), (D('0.25'), D('0.4'))),
    'share_reduction': D('0.95'),
    'share_stable': D('1.05'),
    'share_dilution': D('1.2'),
    'insider_buy_strong': D('0.7'),      # +2
    'insider_buy_balanced': D('0.4'),    # +1
    'insider_sell_heavy': D('0.1'),      # -1 when more than 5 sales
}

PREDICTABILITY = {
    'max_score': 10,
    'min_periods': 5,
    'revenue_growth_high': D('0.05'),
    'revenue_volatility_low': D('0.10'),
    'revenue_volatility_moderate': D('0.20'),
}

# --- Growth / momentum ---

GROWTH_MOMENTUM = {
    'max_score': 10,
    'raw_max': 9,
    'growth_bands': (D('0.30'), D('0.15'), D('0.05')),   # 3 / 2 / 1
    'price_bands': (D('0.5'), D('0.2'), D('0')),         # 3 / 2 / 1
    'min_prices': 30,
}

RISK_REWARD = {
    'max_score': 10,
    'raw_max': 6,
    'debt_to_equity': (D('0.3'), D('0.7'), D('1.5')),    # 3 / 2 / 1
    'volatility': (0.01, 0.02, 0.04),                    # 3 / 2 / 1
    'min_prices': 10,
}

DISRUPTIVE_POTENTIAL = {
    'max_score': 5,
    'raw_max': 12,
    'min_periods': 3,
    'revenue_growth_bands': (D('1.0'), D('0.5'), D('0.2')),   # 3 / 2 / 1
    'gross_margin_trend_strong': D('0.05'),
    'high_gross_margin': D('0.5'),
    'rd_intensity_bands': (D('0.15'), D('0.08'), D('0.05')),  # 3 / 2 / 1
}

# --- Valuation ---

ACTIVIST_VALUATION = {
    'max_score': 3,
    'strong_margin': D('0.3'),
    'moderate_margin': D('0.1'),
}

FCF_YIELD_VALUATION = {
    'max_score': 10,
    'min_positive_fcf': 3,
    'normalize_periods': 5,
    'yield_bands': ((D('0.08'), 4), (D('0.05'), 3), (D('0.03'), 1)),
    'multiples': (10, 15, 20),   # conservative / reasonable / optimistic
    'upside_bands': ((D('0.3'), 3), (D('0.1'), 2), (D('-0.1'), 1)),
    'fcf_trend_strong': D('1.2'),
}

MULTIPLES_VALUATION = {
    'max_score': 10,
    'raw_max': 8,
    'neutral_score': 5,
    'pe': (D('15'), D('25')),
    'price_to_fcf': (D('15'), D('25')),
    'ev_to_ebit': (D('15'), D('25')),
    'ev_to_ebitda': (D('10'), D('18')),
}

INTRINSIC_VALUE = {
    'max_score': 10,
    'excellent_margin': D('0.3'),
    'excellent_points': 10,
    'positive_points': 8,
    'negative_points': 2,
}

# --- Market signals ---

KEYWORD_SENTIMENT = {
    'max_score': 10,
    'no_news_score': 5,
    'heavy_negative_share': D('0.3'),
}

INSIDER_ACTIVITY = {
    'max_score': 10,
    'no_trades_score': 5,
    'buy_ratio_bands': ((D('0.7'), 8), (D('0.4'), 6)),
    'default_score': 4,
}

COMPANY_NEWS = {
    'max_score': 10,
    'positive_cutoff': D('0.2'),
    'negative_cutoff': D('-0.2'),
    'sentiment_bands': ((D('0.3'), 8), (D('0.1'), 6), (D('-0.1'), 5), (D('-0.3'), 3)),
    'floor_score': 1,
}
