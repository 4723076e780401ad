"""
Valuation scorers: activist DCF, FCF yield, price multiples and the
intrinsic-value margin of safety.
"""

from decimal import Decimal
from typing import Optional, Sequence, Union

from config.analysis_config import ACTIVIST_DCF_ASSUMPTIONS
from config.constants import ACTIVIST_DCF_PROJECTION_YEARS
from signal_engine.valuation import DCFAssumptions, DCFModel, ValuationFailure, ValuationSummary
from utils.numeric_utils import mean
from utils.unified_schema import FundamentalPeriod, LineItem, MetricsSnapshot, sort_metrics
from .score_result import ScoreResult
from .scoring_config import (
    ACTIVIST_VALUATION, FCF_YIELD_VALUATION, INTRINSIC_VALUE, MULTIPLES_VALUATION,
)
from .series import latest_value, line_item_values


def _latest_market_cap(metrics: Sequence[MetricsSnapshot]) -> Optional[Decimal]:
    cap = latest_value(metrics, 'market_cap')
    return cap if cap is not None and cap > 0 else None


def score_activist_valuation(metrics: Sequence[MetricsSnapshot]) -> ScoreResult:
    """
    Five-year DCF on the latest free cash flow (6% growth, 10% discount,
    15x exit), compared with market cap.

    Margin of safety > 30%: +3, > 10%: +1.
    """
    cfg = ACTIVIST_VALUATION
    title = "Valuation"
    market_cap = _latest_market_cap(metrics)
    if not metrics or market_cap is None:
        return ScoreResult.insufficient(title, cfg['max_score'], "no market cap to perform valuation")

    fcfs = [m.free_cash_flow for m in sort_metrics(list(metrics)) if m.free_cash_flow is not None]
    if not fcfs or fcfs[-1] <= 0:
        latest = fcfs[-1] if fcfs else Decimal(0)
        return ScoreResult.start(title, cfg['max_score']).note(
            f"No positive FCF for valuation; FCF = {latest:,.2f}")

    assumptions = DCFAssumptions(years=ACTIVIST_DCF_PROJECTION_YEARS, **ACTIVIST_DCF_ASSUMPTIONS)
    projection = DCFModel.project(fcfs[-1], assumptions)
    intrinsic_value = projection.total
    margin_of_safety = (intrinsic_value - market_cap) / market_cap

    result = ScoreResult.start(title, cfg['max_score'])
    if margin_of_safety > cfg['strong_margin']:
        result = result.add(3, f"Margin of safety: {margin_of_safety:.1%}")
    elif margin_of_safety > cfg['moderate_margin']:
        result = result.add(1, f"Margin of safety: {margin_of_safety:.1%}")
    else:
        result = result.note(f"Margin of safety: {margin_of_safety:.1%}")

    return (result
            .note(f"Intrinsic value: ~{intrinsic_value:,.0f}")
            .note(f"Market cap: ~{market_cap:,.0f}")
            .note(f"Base FCF: {projection.basis:,.0f}")
            .note(f"Present Value ({assumptions.years}y): {projection.present_value:,.0f}")
            .note(f"Terminal Value: {projection.terminal_value:,.0f}"))


def score_fcf_yield_valuation(metrics: Sequence[MetricsSnapshot]) -> ScoreResult:
    """
    Normalized FCF yield, upside to a 15x FCF value and FCF trend.

    Uses the average of the last five positive FCF figures; needs at least 3.
    """
    cfg = FCF_YIELD_VALUATION
    title = "Valuation"
    market_cap = _latest_market_cap(metrics)
    if not metrics or market_cap is None:
        return ScoreResult.insufficient(title, cfg['max_score'], "no market cap to perform valuation")

    newest_first = reversed(sort_metrics(list(metrics)))
    fcfs = [m.free_cash_flow for m in newest_first
            if m.free_cash_flow is not None and m.free_cash_flow > 0]
    if len(fcfs) < cfg['min_positive_fcf']:
        return ScoreResult.insufficient(
            title, cfg['max_score'],
            f"need {cfg['min_positive_fcf']} positive free cash flow periods (got {len(fcfs)})")

    normalized = mean(fcfs[:cfg['normalize_periods']])
    fcf_yield = normalized / market_cap
    conservative, reasonable, optimistic = (normalized * m for m in cfg['multiples'])

    result = ScoreResult.start(title, cfg['max_score'])
    yield_labels = ("Excellent value", "Good value", "Fair value")
    for label, (threshold, points) in zip(yield_labels, cfg['yield_bands']):
        if fcf_yield > threshold:
            result = result.add(points, f"{label}: {fcf_yield:.1%} FCF yield")
            break
    else:
        result = result.note(f"Expensive: Only {fcf_yield:.1%} FCF yield")

    upside = (reasonable - market_cap) / market_cap
    (large, large_pts), (moderate, moderate_pts), (fair, fair_pts) = cfg['upside_bands']
    if upside > large:
        result = result.add(large_pts, f"Large margin of safety: {upside:.1%} upside to reasonable value")
    elif upside > moderate:
        result = result.add(moderate_pts, f"Moderate margin of safety: {upside:.1%} upside to reasonable value")
    elif upside > fair:
        result = result.add(fair_pts, f"Fair price: Within 10% of reasonable value ({upside:.1%})")
    else:
        result = result.note(f"Expensive: {-upside:.1%} premium to reasonable value")

    recent = mean(fcfs[:3])
    older = mean(fcfs[3:6]) if len(fcfs) >= 6 else fcfs[-1]
    if recent > older * cfg['fcf_trend_strong']:
        result = result.add(3, "Growing FCF trend adds to intrinsic value")
    elif recent > older:
        result = result.add(2, "Stable to growing FCF supports valuation")
    else:
        result = result.note("Declining FCF trend is concerning")

    result = result.with_score(min(cfg['max_score'], result.score))
    return (result
            .note(f"Intrinsic value range: Conservative = {conservative:,.0f}, "
                  f"Reasonable = {reasonable:,.0f}, Optimistic = {optimistic:,.0f}")
            .note(f"Normalized FCF: {normalized:,.0f}, FCF Yield: {fcf_yield:.2%}"))


def _multiple_points(result: ScoreResult, name: str, value: Decimal, bands, phrases) -> ScoreResult:
    cheap, fair = bands
    if value < cheap:
        return result.add(2, f"Attractive {name}: {value:.2f}, {phrases[0]}")
    if value < fair:
        return result.add(1, f"Fair {name}: {value:.2f}, {phrases[1]}")
    return result.note(f"High {name}: {value:.2f}, {phrases[2]}")


def score_multiples_valuation(
    metrics: Sequence[MetricsSnapshot],
    periods: Sequence[FundamentalPeriod] = (),
) -> ScoreResult:
    """
    P/E, P/FCF, EV/EBIT and EV/EBITDA, up to 2 points each; raw max 8
    scaled to 10. Without a market cap the category is neutral (5).
    """
    cfg = MULTIPLES_VALUATION
    title = "Valuation"
    market_cap = _latest_market_cap(metrics)
    if market_cap is None:
        return ScoreResult(title=title, max_score=cfg['max_score'], score=cfg['neutral_score'],
                           details=("Insufficient data for valuation analysis",))

    ordered = sort_metrics(list(metrics))
    debt = latest_value(ordered, 'total_debt') or Decimal(0)
    cash = latest_value(ordered, 'cash_and_equivalents') or Decimal(0)
    enterprise_value = market_cap + debt - cash

    result = ScoreResult.start(title, cfg['max_score'])

    net_income = latest_value(ordered, 'net_income')
    if net_income is None or net_income <= 0:
        result = result.note("No positive net income for P/E calculation")
    else:
        result = _multiple_points(result, "P/E", market_cap / net_income, cfg['pe'], (
            "the stock valuation is attractive",
            "the stock appears to be fairly valued",
            "the stock may be overvalued"))

    fcfs = [m.free_cash_flow for m in ordered if m.free_cash_flow is not None]
    if not fcfs or fcfs[-1] <= 0:
        result = result.note("No positive free cash flow for P/FCF calculation")
    else:
        result = _multiple_points(result, "P/FCF", market_cap / fcfs[-1], cfg['price_to_fcf'], (
            "cheap relative to the free cash it generates",
            "fairly valued relative to the free cash it generates",
            "expensive relative to the free cash it generates"))

    ebit = line_item_values(periods, LineItem.EBIT)
    if enterprise_value <= 0 or not ebit or ebit[-1] <= 0:
        result = result.note("No valid EV/EBIT because EV <= 0 or EBIT <= 0")
    else:
        result = _multiple_points(result, "EV/EBIT", enterprise_value / ebit[-1], cfg['ev_to_ebit'], (
            "cheap relative to its operating earnings",
            "fair relative to its operating earnings",
            "expensive relative to its operating earnings"))

    ebitda = line_item_values(periods, LineItem.EBITDA)
    if enterprise_value <= 0 or not ebitda or ebitda[-1] <= 0:
        result = result.note("No valid EV/EBITDA because EV <= 0 or EBITDA <= 0")
    else:
        result = _multiple_points(result, "EV/EBITDA", enterprise_value / ebitda[-1], cfg['ev_to_ebitda'], (
            "attractive relative to its cash-operating profitability",
            "fair relative to its cash-operating profitability",
            "expensive relative to its cash-operating profitability"))

    return result.with_score(min(cfg['max_score'], round(result.score * cfg['max_score'] / cfg['raw_max'])))


def score_intrinsic_value(
    valuation: Union[ValuationSummary, ValuationFailure, None],
) -> ScoreResult:
    """
    Score the DCF margin of safety.

    > 30%: 10, > 0: 8, otherwise 2. A failed valuation or a missing price
    scores 0 with the reason as detail.
    """
    cfg = INTRINSIC_VALUE
    title = "Intrinsic Value"
    result = ScoreResult.start(title, cfg['max_score'])

    if valuation is None:
        return result.note("Valuation unavailable: no valuation performed")
    if isinstance(valuation, ValuationFailure):
        return result.note(f"Valuation unavailable: {valuation.reason}")

    result = result.note(
        f"{valuation.basis_label} DCF ({valuation.risk_level.value} risk): "
        f"intrinsic value {valuation.intrinsic_value:.2f} per share")
    if valuation.margin_of_safety is None:
        return result.note("No price data available for margin of safety.")

    mos = valuation.margin_of_safety
    if mos > cfg['excellent_margin']:
        return result.add(cfg['excellent_points'], f"Margin of safety {mos:.1%}: trading well below intrinsic value")
    if mos > 0:
        return result.add(cfg['positive_points'], f"Margin of safety {mos:.1%}: trading below intrinsic value")
    return result.add(cfg['negative_points'], f"Margin of safety {mos:.1%}: trading above intrinsic value")
