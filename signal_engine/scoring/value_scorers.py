"""
Value scorers: earnings record, balance-sheet strength and net-asset valuation.

All scorers take plain series, sort them oldest-first themselves and never
raise for missing data.
"""

from decimal import Decimal
from typing import List, Optional, Sequence

from config.constants import NET_NET_MARKET_CAP_CEILING
from utils.numeric_utils import safe_divide, series_growth
from utils.unified_schema import (
    FundamentalPeriod, LineItem, MetricsSnapshot, sort_metrics, sort_periods,
)
from .score_result import ScoreResult
from .scoring_config import EARNINGS_STABILITY, FINANCIAL_STRENGTH, NET_ASSET_VALUATION


def score_earnings_stability(metrics: Sequence[MetricsSnapshot]) -> ScoreResult:
    """
    Score the EPS record.

    All periods positive: +3, otherwise at least 80% positive: +2.
    Growth over the whole series above 10%: +1.
    """
    cfg = EARNINGS_STABILITY
    title = "Earnings Stability"
    eps = [m.earnings_per_share for m in sort_metrics(list(metrics))
           if m.earnings_per_share is not None]

    if len(eps) < cfg['min_periods']:
        return ScoreResult.insufficient(
            title, cfg['max_score'],
            f"need at least {cfg['min_periods']} periods of EPS (got {len(eps)})")

    result = ScoreResult.start(title, cfg['max_score'])
    positive = sum(1 for e in eps if e > 0)
    if positive == len(eps):
        result = result.add(3, "EPS was positive in all periods.")
    elif Decimal(positive) >= Decimal(len(eps)) * cfg['most_positive_ratio']:
        result = result.add(2, "EPS was positive in most periods.")
    else:
        result = result.note("EPS was negative in multiple periods.")

    growth = series_growth(eps)
    if growth is None:
        result = result.note("EPS growth undefined: initial EPS is zero.")
    elif growth > cfg['growth_threshold']:
        result = result.add(1, f"EPS grew consistently over the period: {growth:.1%}")
    elif eps[-1] > eps[0]:
        result = result.note(f"EPS grew overall but inconsistently: {growth:.1%}")
    else:
        result = result.note("EPS did not grow over the full period.")
    return result


def _latest_balance_sheet(periods: Sequence[FundamentalPeriod]) -> Optional[FundamentalPeriod]:
    keys = (LineItem.TOTAL_CURRENT_ASSETS, LineItem.TOTAL_CURRENT_LIABILITIES,
            LineItem.TOTAL_ASSETS, LineItem.TOTAL_LIABILITIES)
    for period in reversed(sort_periods(list(periods))):
        if any(period.get(k) is not None for k in keys):
            return period
    return None


def score_financial_strength(periods: Sequence[FundamentalPeriod]) -> ScoreResult:
    """
    Score liquidity and leverage from the latest balance sheet.

    Current ratio >= 2.0: +2, >= 1.5: +1.
    Debt ratio (liabilities / assets) < 0.5: +2, < 0.8: +1.
    """
    cfg = FINANCIAL_STRENGTH
    title = "Financial Strength"
    latest = _latest_balance_sheet(periods)
    if latest is None:
        return ScoreResult.insufficient(title, cfg['max_score'], "no balance sheet data for financial strength")

    result = ScoreResult.start(title, cfg['max_score'])

    current_assets = latest.get(LineItem.TOTAL_CURRENT_ASSETS)
    current_liabilities = latest.get(LineItem.TOTAL_CURRENT_LIABILITIES)
    if current_assets is None or current_liabilities is None:
        result = result.note("Current ratio unavailable: missing current assets or current liabilities.")
    elif current_liabilities <= 0:
        result = result.note("Current ratio undefined: current liabilities are zero.")
    else:
        ratio = current_assets / current_liabilities
        if ratio >= cfg['current_ratio_strong']:
            result = result.add(2, f"Current ratio = {ratio:.2f}")
        elif ratio >= cfg['current_ratio_adequate']:
            result = result.add(1, f"Current ratio = {ratio:.2f}")
        else:
            result = result.note(f"Current ratio = {ratio:.2f}")

    assets = latest.get(LineItem.TOTAL_ASSETS)
    liabilities = latest.get(LineItem.TOTAL_LIABILITIES)
    if assets is None or liabilities is None:
        result = result.note("Debt ratio unavailable: missing total assets or total liabilities.")
    elif assets <= 0:
        result = result.note("Debt ratio undefined: total assets are zero.")
    else:
        debt_ratio = liabilities / assets
        if debt_ratio < cfg['debt_ratio_low']:
            result = result.add(2, f"Debt ratio = {debt_ratio:.2f}")
        elif debt_ratio < cfg['debt_ratio_moderate']:
            result = result.add(1, f"Debt ratio = {debt_ratio:.2f}")
        else:
            result = result.note(f"Debt ratio = {debt_ratio:.2f}")
    return result


def _ttm_eps(metrics: List[MetricsSnapshot], periods: int) -> Optional[Decimal]:
    eps = [m.earnings_per_share for m in reversed(metrics) if m.earnings_per_share is not None]
    if len(eps) < periods:
        return None
    return sum(eps[:periods], Decimal(0))


def _book_value_per_share(latest: MetricsSnapshot) -> Optional[Decimal]:
    if latest.book_value_per_share is not None:
        return latest.book_value_per_share
    return safe_divide(latest.shareholder_equity, latest.outstanding_shares)


def score_net_asset_valuation(
    metrics: Sequence[MetricsSnapshot],
    periods: Sequence[FundamentalPeriod],
    current_price: Optional[Decimal],
) -> ScoreResult:
    """
    Net-net test for companies below the market-cap ceiling, Graham number
    comparison above it.
    """
    cfg = NET_ASSET_VALUATION
    title = "Valuation"
    ordered = sort_metrics(list(metrics))
    if not ordered:
        return ScoreResult.insufficient(title, cfg['max_score'], "missing financial metrics")

    latest_metrics = ordered[-1]
    market_cap = latest_metrics.market_cap
    if market_cap is None or market_cap <= 0:
        return ScoreResult.insufficient(title, cfg['max_score'], "market cap missing")

    result = ScoreResult.start(title, cfg['max_score'])

    if market_cap < NET_NET_MARKET_CAP_CEILING:
        sheet = next((p for p in reversed(sort_periods(list(periods)))
                      if p.has(LineItem.TOTAL_ASSETS, LineItem.TOTAL_LIABILITIES)), None)
        if sheet is None:
            return ScoreResult.insufficient(title, cfg['max_score'], "missing total assets or total liabilities")

        ncav = sheet.get(LineItem.TOTAL_ASSETS) - sheet.get(LineItem.TOTAL_LIABILITIES)
        if ncav > market_cap:
            return result.add(cfg['net_net_points'],
                              "Net-Net: NCAV > Market Cap (classic Graham deep value).")
        if ncav >= market_cap * cfg['partial_ncav_ratio']:
            return result.add(cfg['partial_ncav_points'],
                              "NCAV >= 2/3 of Market Cap (moderate Graham value).")
        return result.note(
            f"NCAV (${ncav:,.0f}) is less than 2/3 of Market Cap (${market_cap:,.0f}), "
            "no deep value opportunity.")

    ttm_eps = _ttm_eps(ordered, cfg['ttm_periods'])
    bvps = _book_value_per_share(latest_metrics)
    if ttm_eps is None or bvps is None or ttm_eps <= 0 or bvps <= 0:
        return result.note(
            "Graham Number unavailable: missing or non-positive TTM EPS or book value per share.")

    graham_number = (cfg['graham_constant'] * ttm_eps * bvps).sqrt()
    if current_price is None:
        return result.note("No price data available for Graham Number comparison.")

    if current_price <= graham_number:
        return result.add(
            cfg['below_graham_points'],
            f"Price (${current_price:.2f}) is below Graham Number (${graham_number:.2f}), "
            "valuation is attractive.")
    return result.add(
        cfg['above_graham_points'],
        f"Price (${current_price:.2f}) exceeds Graham Number (${graham_number:.2f}), "
        "limited margin of safety.")
