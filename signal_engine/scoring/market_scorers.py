"""
Market scorers: headline sentiment, insider activity and relevance-weighted
company news.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional, Sequence

from config.constants import NEGATIVE_NEWS_KEYWORDS, NEWS_LOOKBACK_DAYS
from utils.unified_schema import InsiderTrade, NewsSentiment, to_utc
from .score_result import ScoreResult
from .scoring_config import COMPANY_NEWS, INSIDER_ACTIVITY, KEYWORD_SENTIMENT


def is_negative_headline(title: Optional[str]) -> bool:
    text = (title or "").lower()
    return any(keyword in text for keyword in NEGATIVE_NEWS_KEYWORDS)


def score_keyword_sentiment(news: Sequence[NewsSentiment]) -> ScoreResult:
    """
    Share of headlines containing a negative keyword.

    No news: 5. More than 30% negative: 3. Some negative: 6. None: 8.
    """
    cfg = KEYWORD_SENTIMENT
    title = "Sentiment"
    items = list(news or [])
    if not items:
        return ScoreResult(title=title, max_score=cfg['max_score'], score=cfg['no_news_score'],
                           details=("No news data; defaulting to neutral sentiment",))

    negative = sum(1 for item in items if is_negative_headline(item.title))
    result = ScoreResult.start(title, cfg['max_score'])
    if negative > len(items) * cfg['heavy_negative_share']:
        return result.add(3, f"High proportion of negative headlines: {negative}/{len(items)}")
    if negative > 0:
        return result.add(6, f"Some negative headlines: {negative}/{len(items)}")
    return result.add(8, "Mostly positive/neutral headlines")


def score_insider_activity(trades: Sequence[InsiderTrade]) -> ScoreResult:
    """
    Buy ratio of insider transactions.

    No trades: 5. Buy ratio > 70%: 8, > 40%: 6, otherwise 4.
    """
    cfg = INSIDER_ACTIVITY
    title = "Insider Activity"
    neutral = ScoreResult(title=title, max_score=cfg['max_score'], score=cfg['no_trades_score'])

    shares = [t.transaction_shares for t in trades or [] if t.transaction_shares is not None]
    if not shares:
        return neutral.note("No insider trades data; defaulting to neutral")

    buys = sum(1 for s in shares if s > 0)
    sells = sum(1 for s in shares if s < 0)
    total = buys + sells
    if total == 0:
        return neutral.note("No buy/sell transactions found; neutral")

    buy_ratio = Decimal(buys) / Decimal(total)
    result = ScoreResult.start(title, cfg['max_score'])
    (heavy, heavy_pts), (moderate, moderate_pts) = cfg['buy_ratio_bands']
    if buy_ratio > heavy:
        return result.add(heavy_pts, f"Heavy insider buying: {buys} buys vs. {sells} sells")
    if buy_ratio > moderate:
        return result.add(moderate_pts, f"Moderate insider buying: {buys} buys vs. {sells} sells")
    return result.add(cfg['default_score'], f"Mostly insider selling: {buys} buys vs. {sells} sells")


def score_company_news(
    news: Sequence[NewsSentiment],
    ticker: Optional[str] = None,
    as_of: Optional[datetime] = None,
) -> ScoreResult:
    """
    Relevance-weighted sentiment of news published in the lookback window.

    Average > 0.3: 8, > 0.1: 6, > -0.1: 5, > -0.3: 3, otherwise 1.
    No recent news, or no relevance, scores 0.

    Args:
        news: News items with per-ticker sentiment
        ticker: When given, only sentiment entries for this ticker count
        as_of: End of the lookback window (defaults to now, UTC)
    """
    cfg = COMPANY_NEWS
    title = "Company News"
    result = ScoreResult.start(title, cfg['max_score'])
    items = list(news or [])
    if not items:
        return result.note("No news sentiment data available")

    cutoff = to_utc(as_of or datetime.now(timezone.utc)) - timedelta(days=NEWS_LOOKBACK_DAYS)
    recent = [n for n in items if n.published_at is not None and to_utc(n.published_at) > cutoff]
    if not recent:
        return result.note(f"No recent news in the last {NEWS_LOOKBACK_DAYS} days")

    positive = negative = neutral = 0
    weighted_sum = Decimal(0)
    total_relevance = Decimal(0)
    for item in recent:
        for entry in item.ticker_sentiments:
            if ticker and entry.ticker and entry.ticker.upper() != ticker.upper():
                continue
            if entry.sentiment_score is None or entry.relevance_score is None:
                continue
            weighted_sum += entry.sentiment_score * entry.relevance_score
            total_relevance += entry.relevance_score
            if entry.sentiment_score > cfg['positive_cutoff']:
                positive += 1
            elif entry.sentiment_score < cfg['negative_cutoff']:
                negative += 1
            else:
                neutral += 1

    if total_relevance == 0:
        return result.note("News articles have no relevance-weighted sentiment")

    average = weighted_sum / total_relevance
    result = (result
              .note(f"Analyzed {len(recent)} recent news items")
              .note(f"Positive: {positive}, Negative: {negative}, Neutral: {neutral}")
              .note(f"Relevance-weighted sentiment score: {average:.2f}"))

    labels = ("clearly positive", "modestly positive", "neutral", "modestly negative")
    for label, (threshold, points) in zip(labels, cfg['sentiment_bands']):
        if average > threshold:
            return result.add(points, f"Market sentiment is {label}")
    return result.add(cfg['floor_score'], "Market sentiment is clearly negative")
