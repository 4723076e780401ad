"""Tests for sentiment, insider and company news scorers."""

from datetime import datetime, timedelta, timezone

from signal_engine.scoring import (
    score_company_news,
    score_insider_activity,
    score_keyword_sentiment,
)
from signal_engine.scoring.market_scorers import is_negative_headline
from utils.unified_schema import InsiderTrade, NewsSentiment, TickerSentiment

AS_OF = datetime(2024, 6, 30, tzinfo=timezone.utc)


def _headlines(*titles):
    return [NewsSentiment(title=t) for t in titles]


def _news(days_ago, sentiment, relevance=1.0, ticker="TEST"):
    return NewsSentiment(
        title="Item",
        published_at=AS_OF - timedelta(days=days_ago),
        ticker_sentiments=[TickerSentiment(ticker=ticker, sentiment_score=sentiment, relevance_score=relevance)],
    )


class TestKeywordSentiment:
    """Tests for headline keyword sentiment."""

    def test_negative_keyword_detection(self) -> None:
        """Test keywords match case-insensitively."""
        assert is_negative_headline("SEC opens Investigation")
        assert not is_negative_headline("Record quarter")
        assert not is_negative_headline(None)

    def test_no_news_is_neutral(self) -> None:
        """Test no headlines default to 5."""
        assert score_keyword_sentiment([]).score == 5

    def test_heavy_negative(self) -> None:
        """Test more than 30% negative headlines score 3."""
        result = score_keyword_sentiment(_headlines("Fraud alleged", "Recall announced", "New product"))

        assert result.score == 3

    def test_some_negative(self) -> None:
        """Test a minority of negative headlines scores 6."""
        result = score_keyword_sentiment(_headlines("Lawsuit filed", "Beat", "Beat", "Beat"))

        assert result.score == 6

    def test_all_clean(self) -> None:
        """Test no negative headlines scores 8."""
        assert score_keyword_sentiment(_headlines("Beat", "Raise")).score == 8


class TestInsiderActivity:
    """Tests for insider buy ratio scoring."""

    def _trades(self, *shares):
        return [InsiderTrade(ticker="TEST", transaction_shares=s) for s in shares]

    def test_no_trades(self) -> None:
        """Test no trades default to 5."""
        assert score_insider_activity([]).score == 5

    def test_heavy_buying(self) -> None:
        """Test a buy ratio above 70% scores 8."""
        assert score_insider_activity(self._trades(10, 20, 30, 40, -5)).score == 8

    def test_moderate_buying(self) -> None:
        """Test a buy ratio above 40% scores 6."""
        assert score_insider_activity(self._trades(10, -5)).score == 6

    def test_mostly_selling(self) -> None:
        """Test a low buy ratio scores 4."""
        result = score_insider_activity(self._trades(10, -5, -5, -5))

        assert result.score == 4
        assert result.details == ("Mostly insider selling: 1 buys vs. 3 sells",)


class TestCompanyNews:
    """Tests for relevance-weighted news sentiment."""

    def test_clearly_positive(self) -> None:
        """Test an average above 0.3 scores 8."""
        news = [_news(1, 0.5), _news(2, 0.4, relevance=0.5)]

        result = score_company_news(news, "TEST", AS_OF)

        assert result.score == 8
        assert "Positive: 2, Negative: 0, Neutral: 0" in result.details

    def test_old_news_is_ignored(self) -> None:
        """Test items outside the 14-day window do not count."""
        result = score_company_news([_news(30, 0.9)], "TEST", AS_OF)

        assert result.score == 0
        assert result.details == ("No recent news in the last 14 days",)

    def test_other_tickers_are_ignored(self) -> None:
        """Test sentiment for another ticker is filtered out."""
        news = [_news(1, -0.9, ticker="OTHER"), _news(1, 0.0)]

        result = score_company_news(news, "TEST", AS_OF)

        assert result.score == 5

    def test_naive_timestamps_are_utc(self) -> None:
        """Test naive publication times compare against an aware cutoff."""
        item = NewsSentiment(
            published_at=datetime(2024, 6, 29, 12, 0),
            ticker_sentiments=[TickerSentiment(ticker="TEST", sentiment_score=-0.5, relevance_score=1)],
        )

        result = score_company_news([item], "TEST", AS_OF)

        assert result.score == 1
        assert result.details[-1] == "Market sentiment is clearly negative"

    def test_no_news(self) -> None:
        """Test no items scores zero."""
        assert score_company_news([], "TEST", AS_OF).score == 0
