"""
Quality scorers: business quality, capital discipline, fundamentals,
earnings consistency, moat, management and predictability.
"""

from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from utils.numeric_utils import mean, safe_divide, series_growth
from utils.unified_schema import (
    FundamentalPeriod, InsiderTrade, LineItem, MetricsSnapshot, RiskLevel,
    sort_metrics, sort_periods,
)
from .score_result import ScoreResult
from .scoring_config import (
    BUSINESS_QUALITY, CONSISTENCY, FINANCIAL_DISCIPLINE, FUNDAMENTALS,
    MANAGEMENT_QUALITY, MOAT_STRENGTH, PREDICTABILITY,
)
from .series import (
    is_majority, latest_value, line_item_values, mean_absolute_deviation,
    metric_values, period_growth_rates, revenue_series,
)


def score_business_quality(
    metrics: Sequence[MetricsSnapshot],
    periods: Sequence[FundamentalPeriod] = (),
) -> ScoreResult:
    """
    Revenue growth, operating margin and FCF consistency, and ROE.

    Revenue growth > 50%: +2, positive: +1.
    Operating margin > 15% in a majority of periods: +2.
    Positive FCF in a majority of periods: +1.
    Latest ROE > 15%: +2.
    """
    cfg = BUSINESS_QUALITY
    title = "Business Quality"
    if len(metrics) < cfg['min_periods']:
        return ScoreResult.insufficient(
            title, cfg['max_score'],
            f"need at least {cfg['min_periods']} periods to analyze business quality (got {len(metrics)})")

    result = ScoreResult.start(title, cfg['max_score'])

    revenues = revenue_series(metrics, periods)
    if len(revenues) < 2:
        result = result.note("Not enough revenue data.")
    else:
        growth = series_growth(revenues)
        if growth is None:
            result = result.note("Revenue growth undefined: initial revenue is zero.")
        elif growth > cfg['strong_revenue_growth']:
            result = result.add(2, f"Revenue grew by {growth:.1%} over the period.")
        elif growth > 0:
            result = result.add(1, f"Revenue grew by {growth:.1%} over the period.")
        else:
            result = result.note("Revenue did not grow significantly.")

    margins = metric_values(metrics, 'operating_margin')
    if not margins:
        result = result.note("No operating margin data available.")
    elif is_majority(sum(1 for m in margins if m > cfg['operating_margin']), len(margins)):
        result = result.add(2, "Operating margin exceeded 15% in most periods.")
    else:
        result = result.note("Operating margin not consistently above 15%.")

    fcfs = [m.free_cash_flow for m in sort_metrics(list(metrics)) if m.free_cash_flow is not None]
    if not fcfs:
        result = result.note("No free cash flow data available.")
    elif is_majority(sum(1 for f in fcfs if f > 0), len(fcfs)):
        result = result.add(1, "Positive free cash flow in majority of periods.")
    else:
        result = result.note("Free cash flow not consistently positive.")

    roe = latest_value(metrics, 'return_on_equity')
    if roe is None:
        result = result.note("No ROE data available.")
    elif roe > cfg['roe']:
        result = result.add(2, f"ROE is {roe:.1%}, indicating possible moat.")
    else:
        result = result.note(f"ROE is {roe:.1%}, not indicative of a strong moat.")
    return result


def score_financial_discipline(
    metrics: Sequence[MetricsSnapshot],
    periods: Sequence[FundamentalPeriod] = (),
) -> ScoreResult:
    """
    Leverage, dividends and buybacks.

    Debt-to-equity < 1.0 in a majority of periods: +2 (falls back to
    liabilities-to-assets < 50% when no usable D/E exists).
    Dividends paid in a majority of periods: +1.
    Share count reduced: +1.
    """
    cfg = FINANCIAL_DISCIPLINE
    title = "Financial Discipline"
    if len(metrics) < cfg['min_periods']:
        return ScoreResult.insufficient(
            title, cfg['max_score'],
            f"need at least {cfg['min_periods']} periods to analyze financial discipline (got {len(metrics)})")

    result = ScoreResult.start(title, cfg['max_score'])

    debt_to_equity = [v for v in metric_values(metrics, 'debt_to_equity')
                      if 0 <= v < cfg['debt_to_equity_ceiling']]
    if debt_to_equity:
        below_one = sum(1 for r in debt_to_equity if r < cfg['debt_to_equity'])
        if is_majority(below_one, len(debt_to_equity)):
            result = result.add(2, "Debt-to-equity < 1.0 in most periods.")
        else:
            result = result.note("High debt-to-equity in many periods.")
    else:
        ratios = []
        for period in sort_periods(list(periods)):
            assets = period.get(LineItem.TOTAL_ASSETS)
            if assets is not None and assets > 0:
                ratio = safe_divide(period.get(LineItem.TOTAL_LIABILITIES), assets)
                if ratio is not None:
                    ratios.append(ratio)
        if not ratios:
            result = result.note("No leverage ratio data available.")
        elif is_majority(sum(1 for r in ratios if r < cfg['liabilities_to_assets']), len(ratios)):
            result = result.add(2, "Liabilities-to-assets < 50% in most periods.")
        else:
            result = result.note("High liabilities-to-assets in many periods.")

    dividends = metric_values(metrics, 'dividends_paid')
    if not dividends:
        result = result.note("No dividend data available.")
    elif is_majority(sum(1 for d in dividends if d < 0), len(dividends)):
        result = result.add(1, "Company returned capital via dividends in most periods.")
    else:
        result = result.note("Dividends not consistently paid.")

    shares = metric_values(metrics, 'outstanding_shares')
    if len(shares) < 2:
        result = result.note("No multi-period share count data.")
    elif shares[-1] < shares[0]:
        result = result.add(1, "Outstanding shares decreased over time (buybacks).")
    else:
        result = result.note("No reduction in outstanding shares.")
    return result


def score_fundamentals(metrics: Sequence[MetricsSnapshot]) -> ScoreResult:
    """
    ROE > 15%: +2; D/E < 0.5: +2; operating margin > 15%: +2;
    current ratio > 1.5: +1. Uses the latest snapshot.
    """
    cfg = FUNDAMENTALS
    title = "Fundamentals"
    ordered = sort_metrics(list(metrics))
    if not ordered:
        return ScoreResult.insufficient(title, cfg['max_score'], "no recent financial metrics available")

    latest = ordered[-1]
    result = ScoreResult.start(title, cfg['max_score'])

    if latest.return_on_equity is None:
        result = result.note("ROE data not available")
    elif latest.return_on_equity > cfg['roe']:
        result = result.add(2, f"Strong ROE of {latest.return_on_equity:.1%}, reflecting efficient capital use")
    else:
        result = result.note(f"Weak ROE of {latest.return_on_equity:.1%}")

    if latest.debt_to_equity is None:
        result = result.note("Debt-to-equity data not available")
    elif latest.debt_to_equity < cfg['debt_to_equity']:
        result = result.add(2, "Conservative debt levels (D/E < 0.5)")
    else:
        result = result.note(f"High debt-to-equity ratio of {latest.debt_to_equity:.2f}")

    if latest.operating_margin is None:
        result = result.note("Operating margin data not available")
    elif latest.operating_margin > cfg['operating_margin']:
        result = result.add(2, "Strong operating margins (> 15%)")
    else:
        result = result.note(f"Weak operating margin of {latest.operating_margin:.1%}")

    if latest.current_ratio is None:
        result = result.note("Current ratio data not available")
    elif latest.current_ratio > cfg['current_ratio']:
        result = result.add(1, "Good liquidity position (Current Ratio > 1.5)")
    else:
        result = result.note(f"Weak liquidity with current ratio of {latest.current_ratio:.2f}")
    return result


def score_consistency(
    metrics: Sequence[MetricsSnapshot],
    risk_level: RiskLevel = RiskLevel.MEDIUM,
) -> ScoreResult:
    """
    Earnings consistency over 4+ periods of net income, calibrated by risk tier.

    Low: growth in more than half of steps -> 3.
    Medium: growth in >= 40% of steps -> 2, >= 25% -> 1.
    High: total growth > 20% -> 3, > 0 -> 2, else >= 25% growth steps -> 1.
    """
    cfg = CONSISTENCY
    title = "Consistency"
    earnings = metric_values(metrics, 'net_income')
    if len(earnings) < cfg['min_periods']:
        return ScoreResult.insufficient(
            title, cfg['max_score'],
            f"earnings trend analysis needs {cfg['min_periods']}+ periods (got {len(earnings)})")

    steps = len(earnings) - 1
    growth_steps = sum(1 for older, newer in zip(earnings, earnings[1:]) if older < newer)
    growth_ratio = Decimal(growth_steps) / Decimal(steps)
    growth = series_growth(earnings)

    result = ScoreResult.start(title, cfg['max_score'])
    if risk_level == RiskLevel.LOW:
        if growth_ratio > Decimal("0.5"):
            result = result.add(3, "Consistent earnings growth over the past periods.")
        else:
            result = result.note("Inconsistent earnings growth pattern.")
    elif risk_level == RiskLevel.MEDIUM:
        points = 2 if growth_ratio >= Decimal("0.4") else 1 if growth_ratio >= Decimal("0.25") else 0
        result = result.add(points, f"Earnings growth seen in {growth_ratio:.0%} of periods.")
    else:
        if growth is not None and growth > Decimal("0.2"):
            points = 3
        elif growth is not None and growth > 0:
            points = 2
        elif growth_ratio >= Decimal("0.25"):
            points = 1
        else:
            points = 0
        if growth is None:
            result = result.add(points, "Earnings growth rate undefined: initial earnings are zero.")
        else:
            result = result.add(points, f"Earnings growth rate of {growth:.1%} across all periods.")

    if growth is not None:
        result = result.note(f"Total earnings growth of {growth:.1%} over {len(earnings)} periods.")
    return result


def score_moat_strength(
    metrics: Sequence[MetricsSnapshot],
    periods: Sequence[FundamentalPeriod] = (),
) -> ScoreResult:
    """
    Durable advantage from ROIC, pricing power, capital intensity and
    intangibles. Raw points (max 9) are scaled to 0-10.
    """
    cfg = MOAT_STRENGTH
    title = "Moat Strength"
    if len(metrics) < cfg['min_periods']:
        return ScoreResult.insufficient(
            title, cfg['max_score'],
            f"need at least {cfg['min_periods']} periods to analyze moat strength (got {len(metrics)})")

    result = ScoreResult.start(title, cfg['max_score'])

    roic = metric_values(metrics, 'return_on_invested_capital')
    if not roic:
        result = result.note("No ROIC data available")
    else:
        high = sum(1 for r in roic if r > cfg['roic'])
        total = Decimal(len(roic))
        if high >= total * cfg['roic_excellent_share']:
            result = result.add(3, f"Excellent ROIC: >15% in {high}/{len(roic)} periods")
        elif high >= total * cfg['roic_good_share']:
            result = result.add(2, f"Good ROIC: >15% in {high}/{len(roic)} periods")
        elif high > 0:
            result = result.add(1, f"Mixed ROIC: >15% in {high}/{len(roic)} periods")
        else:
            result = result.note("Poor ROIC: Never exceeds 15% threshold")

    gross = metric_values(metrics, 'gross_margin')
    if len(gross) < 2:
        result = result.note("Insufficient gross margin data")
    else:
        improving = sum(1 for older, newer in zip(gross, gross[1:]) if newer >= older)
        average = mean(gross)
        if improving >= len(gross) * cfg['improving_margin_share']:
            result = result.add(2, "Strong pricing power: Gross margins consistently improving")
        elif average > cfg['good_gross_margin']:
            result = result.add(1, f"Good pricing power: Average gross margin {average:.1%}")
        else:
            result = result.note("Limited pricing power: Low or declining gross margins")

    capex_ratios = []
    for period in sort_periods(list(periods)):
        capex = period.get(LineItem.CAPITAL_EXPENDITURES)
        revenue = period.get(LineItem.TOTAL_REVENUE)
        if capex is not None and revenue is not None and revenue > 0:
            capex_ratios.append(abs(capex) / revenue)
    if not capex_ratios:
        result = result.note("No capital expenditure data available")
    else:
        avg_capex = mean(capex_ratios)
        if avg_capex < cfg['low_capex']:
            result = result.add(2, f"Low capital requirements: Avg capex {avg_capex:.1%} of revenue")
        elif avg_capex < cfg['moderate_capex']:
            result = result.add(1, f"Moderate capital requirements: Avg capex {avg_capex:.1%} of revenue")
        else:
            result = result.note(f"High capital requirements: Avg capex {avg_capex:.1%} of revenue")

    research = sum(line_item_values(periods, LineItem.RESEARCH_AND_DEVELOPMENT), Decimal(0))
    if research > 0:
        result = result.add(1, "Invests in R&D, building intellectual property")
    else:
        result = result.note("No R&D investment reported")

    has_goodwill = bool(metric_values(metrics, 'goodwill')) or bool(line_item_values(periods, LineItem.GOODWILL))
    if has_goodwill:
        result = result.add(1, "Significant goodwill/intangibles, suggesting brand value or IP")
    else:
        result = result.note("No goodwill or intangibles reported")

    raw = result.score
    return result.with_score(min(cfg['max_score'], raw * cfg['max_score'] // cfg['raw_max']))


def _insider_counts(trades: Sequence[InsiderTrade]):
    buys = sum(1 for t in trades if t.transaction_shares is not None and t.transaction_shares > 0)
    sells = sum(1 for t in trades if t.transaction_shares is not None and t.transaction_shares < 0)
    return buys, sells


def score_management_quality(
    metrics: Sequence[MetricsSnapshot],
    periods: Sequence[FundamentalPeriod] = (),
    insider_trades: Optional[Sequence[InsiderTrade]] = None,
) -> ScoreResult:
    """
    Capital allocation: cash conversion, leverage, cash reserves, insider
    conviction and share count. Raw points (max 12) are scaled to 0-10.
    """
    cfg = MANAGEMENT_QUALITY
    title = "Management Quality"
    ordered = sort_metrics(list(metrics))
    if len(ordered) < cfg['min_periods']:
        return ScoreResult.insufficient(
            title, cfg['max_score'],
            f"management analysis needs {cfg['min_periods']}+ periods (got {len(ordered)})")

    result = ScoreResult.start(title, cfg['max_score'])
    raw = 0

    # Cash conversion
    conversions = [m.free_cash_flow / m.net_income for m in ordered
                   if m.free_cash_flow is not None and m.net_income is not None and m.net_income > 0]
    if not conversions:
        result = result.note("Missing FCF or Net Income data")
    else:
        avg = mean(conversions)
        excellent, good, moderate = cfg['fcf_conversion']
        if avg > excellent:
            raw += 3
            result = result.note(f"Excellent cash conversion: FCF/NI ratio of {avg:.2f}")
        elif avg > good:
            raw += 2
            result = result.note(f"Good cash conversion: FCF/NI ratio of {avg:.2f}")
        elif avg > moderate:
            raw += 1
            result = result.note(f"Moderate cash conversion: FCF/NI ratio of {avg:.2f}")
        else:
            result = result.note(f"Poor cash conversion: FCF/NI ratio of only {avg:.2f}")

    # Leverage on the latest balance sheet
    debt = latest_value(ordered, 'total_debt')
    equity = latest_value(ordered, 'shareholder_equity')
    if debt is None or equity is None:
        result = result.note("Missing debt or equity data")
    elif equity <= 0:
        result = result.note("Debt-to-equity undefined: shareholder equity is not positive")
    else:
        ratio = debt / equity
        conservative, prudent, moderate = cfg['debt_to_equity']
        if ratio < conservative:
            raw += 3
            result = result.note(f"Conservative debt management: D/E ratio of {ratio:.2f}")
        elif ratio < prudent:
            raw += 2
            result = result.note(f"Prudent debt management: D/E ratio of {ratio:.2f}")
        elif ratio < moderate:
            raw += 1
            result = result.note(f"Moderate debt level: D/E ratio of {ratio:.2f}")
        else:
            result = result.note(f"High debt level: D/E ratio of {ratio:.2f}")

    # Cash reserves relative to revenue
    cash = latest_value(ordered, 'cash_and_equivalents')
    revenues = revenue_series(ordered, periods)
    revenue = revenues[-1] if revenues else None
    if cash is None or revenue is None or revenue <= 0:
        result = result.note("Insufficient cash or revenue data")
    else:
        cash_to_revenue = cash / revenue
        low, high = cfg['cash_to_revenue_prudent']
        (lower_a, lower_b), (upper_a, upper_b) = cfg['cash_to_revenue_acceptable']
        if low <= cash_to_revenue <= high:
            raw += 2
            result = result.note(f"Prudent cash management: Cash/Revenue ratio of {cash_to_revenue:.2f}")
        elif lower_a <= cash_to_revenue < lower_b or upper_a < cash_to_revenue <= upper_b:
            raw += 1
            result = result.note(f"Acceptable cash position: Cash/Revenue ratio of {cash_to_revenue:.2f}")
        elif cash_to_revenue > upper_b:
            result = result.note(f"Excess cash reserves: Cash/Revenue ratio of {cash_to_revenue:.2f}")
        else:
            result = result.note(f"Low cash reserves: Cash/Revenue ratio of {cash_to_revenue:.2f}")

    # Insider conviction
    if insider_trades is None:
        result = result.note("Insider activity analysis skipped (no insider data supplied)")
    else:
        buys, sells = _insider_counts(insider_trades)
        total = buys + sells
        if total == 0:
            result = result.note("No recorded insider transactions")
        else:
            buy_ratio = Decimal(buys) / Decimal(total)
            if buy_ratio > cfg['insider_buy_strong']:
                raw += 2
                result = result.note(f"Strong insider buying: {buys}/{total} transactions are purchases")
            elif buy_ratio > cfg['insider_buy_balanced']:
                raw += 1
                result = result.note(f"Balanced insider trading: {buys}/{total} transactions are purchases")
            elif buy_ratio < cfg['insider_sell_heavy'] and sells > 5:
                raw -= 1
                result = result.note(f"Concerning insider selling: {sells}/{total} transactions are sales")
            else:
                result = result.note(f"Mixed insider activity: {buys}/{total} transactions are purchases")

    # Share count
    shares = metric_values(ordered, 'outstanding_shares')
    if len(shares) < 3:
        result = result.note("Insufficient share count data")
    else:
        start, end = shares[0], shares[-1]
        if end < start * cfg['share_reduction']:
            raw += 2
            result = result.note("Shareholder-friendly: Reducing share count over time")
        elif end < start * cfg['share_stable']:
            raw += 1
            result = result.note("Stable share count: Limited dilution")
        elif end > start * cfg['share_dilution']:
            raw -= 1
            result = result.note("Concerning dilution: Share count increased significantly")
        else:
            result = result.note("Moderate share count increase over time")

    scaled = max(0, min(cfg['max_score'], raw * cfg['max_score'] // cfg['raw_max']))
    return result.with_score(scaled)


def _operating_income_points(values: List[Decimal]) -> Tuple[int, str]:
    positive = sum(1 for v in values if v > 0)
    total = len(values)
    if total >= 5:
        if positive == total:
            return 3, "Highly predictable operations: Operating income positive in all periods"
        if positive >= total * Decimal("0.8"):
            return 2, f"Predictable operations: Operating income positive in {positive}/{total} periods"
        if positive >= total * Decimal("0.6"):
            return 1, f"Somewhat predictable operations: Operating income positive in {positive}/{total} periods"
        return 0, f"Unpredictable operations: Operating income positive in only {positive}/{total} periods"
    if total >= 3:
        if positive == total:
            return 2, f"Limited history: all periods show positive operating income ({positive}/{total})"
        if positive >= total * Decimal("0.66"):
            return 1, f"Limited history: mostly positive operating income in {positive}/{total} periods"
        return 0, f"Limited history: inconsistent operating income, {positive}/{total} periods positive"
    if total == 2:
        if positive == 2:
            return 1, "Very limited history: both periods show positive operating income"
        return 0, f"Very limited history: {positive} out of 2 periods show positive operating income"
    return 0, "Insufficient operating income history (less than 2 periods)"


def _margin_points(margins: List[Decimal]) -> Tuple[int, str]:
    total = len(margins)
    if total < 2:
        return 0, "Insufficient operating margin history (less than 2 periods)"
    avg = mean(margins)
    volatility = mean_absolute_deviation(margins)
    if total >= 5:
        if volatility < Decimal("0.03"):
            return 2, f"Highly predictable margins: {avg:.1%} avg with minimal volatility"
        if volatility < Decimal("0.07"):
            return 1, f"Moderately predictable margins: {avg:.1%} avg with some volatility"
        return 0, f"Unpredictable margins: {avg:.1%} avg with high volatility ({volatility:.1%})"
    if total >= 3:
        if volatility < Decimal("0.04"):
            return 1, f"Limited history: fairly predictable margins, {avg:.1%} avg with low volatility"
        return 0, f"Limited history: volatile margins, {avg:.1%} avg with high volatility ({volatility:.1%})"
    if volatility < Decimal("0.05"):
        return 1, f"Very limited history: potentially stable margins, {avg:.1%} avg"
    return 0, f"Very limited history: potentially unstable margins, {avg:.1%} avg"


def score_predictability(
    metrics: Sequence[MetricsSnapshot],
    periods: Sequence[FundamentalPeriod] = (),
) -> ScoreResult:
    """
    How easy the business is to forecast: revenue growth stability,
    operating income record, margin volatility and FCF reliability.
    """
    cfg = PREDICTABILITY
    title = "Predictability"
    if len(metrics) < cfg['min_periods']:
        return ScoreResult.insufficient(
            title, cfg['max_score'],
            f"predictability analysis needs {cfg['min_periods']}+ periods (got {len(metrics)})")

    result = ScoreResult.start(title, cfg['max_score'])

    revenues = revenue_series(metrics, periods)
    rates = period_growth_rates(revenues) if len(revenues) >= cfg['min_periods'] else []
    if not rates:
        result = result.note("Insufficient revenue history for predictability analysis")
    else:
        avg_growth = mean(rates)
        volatility = mean_absolute_deviation(rates)
        if avg_growth > cfg['revenue_growth_high'] and volatility < cfg['revenue_volatility_low']:
            result = result.add(3, f"Highly predictable revenue: {avg_growth:.1%} avg growth with low volatility")
        elif avg_growth > 0 and volatility < cfg['revenue_volatility_moderate']:
            result = result.add(2, f"Moderately predictable revenue: {avg_growth:.1%} avg growth with some volatility")
        elif avg_growth > 0:
            result = result.add(1, f"Growing but less predictable revenue: {avg_growth:.1%} avg growth with high volatility")
        else:
            result = result.note(f"Declining or highly unpredictable revenue: {avg_growth:.1%} avg growth")

    operating_income = line_item_values(periods, LineItem.OPERATING_INCOME)
    points, detail = _operating_income_points(operating_income)
    result = result.add(points, detail)

    margins = line_item_values(periods, LineItem.OPERATING_MARGIN) or metric_values(metrics, 'operating_margin')
    points, detail = _margin_points(margins)
    result = result.add(points, detail)

    fcfs = [m.free_cash_flow for m in sort_metrics(list(metrics)) if m.free_cash_flow is not None]
    if len(fcfs) < cfg['min_periods']:
        result = result.note("Insufficient free cash flow history")
    else:
        positive = sum(1 for f in fcfs if f > 0)
        if positive == len(fcfs):
            result = result.add(2, "Highly predictable cash generation: Positive FCF in all periods")
        elif positive >= len(fcfs) * Decimal("0.8"):
            result = result.add(1, f"Predictable cash generation: Positive FCF in {positive}/{len(fcfs)} periods")
        else:
            result = result.note(f"Unpredictable cash generation: Positive FCF in only {positive}/{len(fcfs)} periods")
    return result
