"""
Growth scorers: growth & momentum, risk/reward and disruptive potential.

Price-based checks run on a pandas close series; fundamentals stay Decimal.
"""

from decimal import Decimal
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from utils.numeric_utils import growth_rate, series_growth
from utils.unified_schema import (
    FundamentalPeriod, LineItem, MetricsSnapshot, PricePoint, sort_metrics, sort_prices,
)
from .score_result import ScoreResult
from .scoring_config import DISRUPTIVE_POTENTIAL, GROWTH_MOMENTUM, RISK_REWARD
from .series import line_item_values, metric_values, period_growth_rates, revenue_series


def close_series(prices: Sequence[PricePoint]) -> pd.Series:
    """Date-indexed float closes, oldest first."""
    ordered = sort_prices(list(prices))
    return pd.Series(
        [float(p.close) for p in ordered],
        index=pd.to_datetime([p.date for p in ordered]),
        name='close',
    )


def daily_return_volatility(prices: Sequence[PricePoint]) -> Optional[float]:
    """Population standard deviation of daily returns over positive closes."""
    closes = close_series(prices)
    closes = closes[closes > 0]
    returns = closes.pct_change().dropna()
    if returns.empty:
        return None
    return float(np.std(returns.to_numpy(), ddof=0))


def _band_points(value: Decimal, bands) -> int:
    """3/2/1 points for the first band the value exceeds."""
    for points, threshold in zip((3, 2, 1), bands):
        if value > threshold:
            return points
    return 0


def score_growth_momentum(
    metrics: Sequence[MetricsSnapshot],
    periods: Sequence[FundamentalPeriod] = (),
    prices: Sequence[PricePoint] = (),
) -> ScoreResult:
    """
    Revenue growth, EPS growth and price momentum; raw max 9 scaled to 10.

    Growth bands: > 30% -> 3, > 15% -> 2, > 5% -> 1.
    Momentum (needs more than 30 closes): > 50% -> 3, > 20% -> 2, > 0 -> 1.
    """
    cfg = GROWTH_MOMENTUM
    title = "Growth & Momentum"
    if not metrics and not periods and not prices:
        return ScoreResult.insufficient(title, cfg['max_score'], "no fundamentals or prices for growth analysis")

    result = ScoreResult.start(title, cfg['max_score'])
    labels = ("Strong", "Moderate", "Slight")

    revenues = revenue_series(metrics, periods)
    growth = series_growth(revenues)
    if len(revenues) < 2:
        result = result.note("Not enough revenue data points for growth calculation.")
    elif growth is None:
        result = result.note("Revenue growth undefined: initial revenue is zero.")
    else:
        points = _band_points(growth, cfg['growth_bands'])
        if points:
            result = result.add(points, f"{labels[3 - points]} revenue growth: {growth:.1%}")
        else:
            result = result.note(f"Minimal/negative revenue growth: {growth:.1%}")

    eps = metric_values(metrics, 'earnings_per_share')
    growth = series_growth(eps)
    if len(eps) < 2:
        result = result.note("Not enough EPS data points for growth calculation.")
    elif growth is None:
        result = result.note("EPS growth undefined: initial EPS is zero.")
    else:
        points = _band_points(growth, cfg['growth_bands'])
        if points:
            result = result.add(points, f"{labels[3 - points]} EPS growth: {growth:.1%}")
        else:
            result = result.note(f"Minimal/negative EPS growth: {growth:.1%}")

    if len(prices) <= cfg['min_prices']:
        result = result.note("Not enough recent price data for momentum analysis.")
    else:
        ordered = sort_prices(list(prices))
        change = growth_rate(ordered[0].close, ordered[-1].close)
        if ordered[0].close <= 0 or change is None:
            result = result.note("Invalid start price (<= 0); can't compute momentum.")
        else:
            points = _band_points(change, cfg['price_bands'])
            momentum = ("Very strong price momentum", "Moderate price momentum", "Slight positive momentum")
            if points:
                result = result.add(points, f"{momentum[3 - points]}: {change:.1%}")
            else:
                result = result.note(f"Negative price momentum: {change:.1%}")

    return result.with_score(min(cfg['max_score'], int(result.score * cfg['max_score'] / cfg['raw_max'])))


def score_risk_reward(
    metrics: Sequence[MetricsSnapshot],
    prices: Sequence[PricePoint] = (),
) -> ScoreResult:
    """
    Leverage and price volatility; raw max 6 scaled to 10.

    Latest D/E (debt / equity): < 0.3 -> 3, < 0.7 -> 2, < 1.5 -> 1.
    Daily-return stdev (needs more than 10 closes): < 1% -> 3, < 2% -> 2, < 4% -> 1.
    """
    cfg = RISK_REWARD
    title = "Risk/Reward"
    if not metrics or not prices:
        return ScoreResult.insufficient(title, cfg['max_score'], "no metrics or prices for risk-reward analysis")

    result = ScoreResult.start(title, cfg['max_score'])
    latest = sort_metrics(list(metrics))[-1]

    if latest.total_debt is None or latest.shareholder_equity is None:
        result = result.note("No consistent debt/equity data available.")
    elif latest.shareholder_equity <= 0:
        result = result.note("Debt-to-equity undefined: shareholder equity is not positive.")
    else:
        ratio = latest.total_debt / latest.shareholder_equity
        low, moderate, elevated = cfg['debt_to_equity']
        if ratio < low:
            result = result.add(3, f"Low debt-to-equity: {ratio:.2f}")
        elif ratio < moderate:
            result = result.add(2, f"Moderate debt-to-equity: {ratio:.2f}")
        elif ratio < elevated:
            result = result.add(1, f"Somewhat high debt-to-equity: {ratio:.2f}")
        else:
            result = result.note(f"High debt-to-equity: {ratio:.2f}")

    if len(prices) <= cfg['min_prices']:
        result = result.note("Not enough price data for volatility analysis.")
    else:
        stdev = daily_return_volatility(prices)
        low, moderate, high = cfg['volatility']
        if stdev is None:
            result = result.note("Insufficient daily returns data for volatility calc.")
        elif stdev < low:
            result = result.add(3, f"Low volatility: daily returns stdev {stdev:.2%}")
        elif stdev < moderate:
            result = result.add(2, f"Moderate volatility: daily returns stdev {stdev:.2%}")
        elif stdev < high:
            result = result.add(1, f"High volatility: daily returns stdev {stdev:.2%}")
        else:
            result = result.note(f"Very high volatility: daily returns stdev {stdev:.2%}")

    return result.with_score(min(cfg['max_score'], round(result.score * cfg['max_score'] / cfg['raw_max'])))


def score_disruptive_potential(
    metrics: Sequence[MetricsSnapshot],
    periods: Sequence[FundamentalPeriod] = (),
) -> ScoreResult:
    """
    Revenue acceleration, gross margin expansion, operating leverage and
    R&D intensity; raw max 12 normalized to 5.
    """
    cfg = DISRUPTIVE_POTENTIAL
    title = "Disruptive Potential"
    if len(metrics) < cfg['min_periods'] and len(periods) < cfg['min_periods']:
        return ScoreResult.insufficient(
            title, cfg['max_score'],
            f"need at least {cfg['min_periods']} periods to analyze disruptive potential")

    result = ScoreResult.start(title, cfg['max_score'])

    revenues = revenue_series(metrics, periods)
    rates = period_growth_rates(revenues)
    if not rates:
        result = result.note("Insufficient revenue data for growth analysis")
    else:
        if len(rates) >= 2 and rates[-1] > rates[0]:
            result = result.add(2, "Revenue growth is accelerating")
        else:
            result = result.note("Revenue growth is not accelerating")
        latest_growth = rates[-1]
        points = _band_points(latest_growth, cfg['revenue_growth_bands'])
        if points == 3:
            result = result.add(3, f"Exceptional revenue growth: {latest_growth:.1%}")
        elif points == 2:
            result = result.add(2, f"Strong revenue growth: {latest_growth:.1%}")
        elif points == 1:
            result = result.add(1, f"Moderate revenue growth: {latest_growth:.1%}")
        else:
            result = result.note(f"Limited revenue growth: {latest_growth:.1%}")

    gross = metric_values(metrics, 'gross_margin')
    if len(gross) < 2:
        result = result.note("Insufficient gross margin data")
    else:
        trend = gross[-1] - gross[0]
        if trend > cfg['gross_margin_trend_strong']:
            result = result.add(2, f"Expanding gross margins: +{trend:.1%}")
        elif trend > 0:
            result = result.add(1, f"Slightly improving gross margins: +{trend:.1%}")
        else:
            result = result.note(f"Gross margins not expanding: {trend:.1%}")
        if gross[-1] > cfg['high_gross_margin']:
            result = result.add(2, f"High gross margin: {gross[-1]:.1%}")
        else:
            result = result.note(f"Gross margin below 50%: {gross[-1]:.1%}")

    operating_expense = line_item_values(periods, LineItem.OPERATING_EXPENSE)
    revenue_growth = series_growth(revenues)
    expense_growth = series_growth(operating_expense)
    if revenue_growth is None or expense_growth is None:
        result = result.note("Insufficient data for operating leverage analysis")
    elif revenue_growth > expense_growth:
        result = result.add(2, "Positive operating leverage: Revenue growing faster than expenses")
    else:
        result = result.note("No operating leverage: expenses growing as fast as revenue")

    research = line_item_values(periods, LineItem.RESEARCH_AND_DEVELOPMENT)
    if not research or not revenues or revenues[-1] <= 0:
        result = result.note("No R&D data available")
    else:
        intensity = research[-1] / revenues[-1]
        points = _band_points(intensity, cfg['rd_intensity_bands'])
        if points == 3:
            result = result.add(3, f"High R&D investment: {intensity:.1%} of revenue")
        elif points == 2:
            result = result.add(2, f"Moderate R&D investment: {intensity:.1%} of revenue")
        elif points == 1:
            result = result.add(1, f"Some R&D investment: {intensity:.1%} of revenue")
        else:
            result = result.note(f"Limited R&D investment: {intensity:.1%} of revenue")

    return result.with_score(min(cfg['max_score'], round(result.score * cfg['max_score'] / cfg['raw_max'])))
