"""
Unified Data Schema
===================

Standardized data models used throughout the signal engine.

Unit Conventions
----------------
- **Monetary Values** (revenue, net income, debt, etc.):
  - Unit: Raw currency value as Decimal (NOT in millions/billions)
  - Example: $1.5 billion = Decimal("1500000000")

- **Ratio Values** (margins, ROE, ROIC, growth rates):
  - Unit: Decimal fraction (NOT percentage)
  - Example: 15% = Decimal("0.15")

- **Per-Share Values** (EPS, book value per share, prices):
  - Unit: Raw currency per share

Line items are keyed by the LineItem enum. String keys are accepted on input
in any case or separator style and resolved through LineItem.parse; a key
outside the enum is rejected rather than silently ignored.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional, Literal, Dict, Any, List, Union

from pydantic import BaseModel, ConfigDict, Field, BeforeValidator, field_validator

from utils.numeric_utils import to_decimal

_Date = date

# Bumped whenever a LineItem member is added, removed or renamed
LINE_ITEM_SCHEMA_VERSION = 2

DecimalValue = Annotated[Optional[Decimal], BeforeValidator(to_decimal)]

SignalValue = Literal['bullish', 'bearish', 'neutral']


class LineItem(str, Enum):
    """Typed key space for fundamental line items."""
    TOTAL_REVENUE = "TotalRevenue"
    GROSS_PROFIT = "GrossProfit"
    OPERATING_INCOME = "OperatingIncome"
    OPERATING_MARGIN = "OperatingMargin"
    OPERATING_EXPENSE = "OperatingExpense"
    NET_INCOME = "NetIncome"
    EBIT = "EBIT"
    EBITDA = "EBITDA"
    RESEARCH_AND_DEVELOPMENT = "ResearchAndDevelopment"
    CAPITAL_EXPENDITURES = "CapitalExpenditures"
    DEPRECIATION_AND_AMORTIZATION = "DepreciationAndAmortization"
    OPERATING_CASH_FLOW = "OperatingCashFlow"
    TOTAL_ASSETS = "TotalAssets"
    TOTAL_LIABILITIES = "TotalLiabilities"
    TOTAL_CURRENT_ASSETS = "TotalCurrentAssets"
    TOTAL_CURRENT_LIABILITIES = "TotalCurrentLiabilities"
    CASH_AND_EQUIVALENTS = "CashAndEquivalents"
    GOODWILL = "Goodwill"
    TOTAL_DEBT = "TotalDebt"
    SHAREHOLDER_EQUITY = "ShareholderEquity"
    DIVIDENDS_PAID = "DividendsPaid"
    SHARES_OUTSTANDING = "SharesOutstanding"

    @classmethod
    def parse(cls, key: Union[str, "LineItem"]) -> "LineItem":
        """
        Resolve a line item from any case/separator variant of its name.

        Args:
            key: e.g. "TotalRevenue", "total_revenue", "TOTAL-REVENUE"

        Returns:
            The matching LineItem

        Raises:
            ValueError: if the key names no known line item
        """
        if isinstance(key, LineItem):
            return key
        normalized = _normalize_key(str(key))
        if normalized in _DERIVED_LINE_ITEMS:
            raise ValueError(f"{key!r} is derived, not stored; use {_DERIVED_LINE_ITEMS[normalized]}")
        item = _LINE_ITEM_LOOKUP.get(normalized)
        if item is None:
            raise ValueError(f"Unknown line item: {key!r}")
        return item


def _normalize_key(key: str) -> str:
    return "".join(ch for ch in key.lower() if ch.isalnum())


_LINE_ITEM_LOOKUP: Dict[str, LineItem] = {
    _normalize_key(item.value): item for item in LineItem
}
# Common provider spellings
_LINE_ITEM_LOOKUP.update({
    "revenue": LineItem.TOTAL_REVENUE,
    "capitalexpenditure": LineItem.CAPITAL_EXPENDITURES,
    "capex": LineItem.CAPITAL_EXPENDITURES,
    "operatingexpenses": LineItem.OPERATING_EXPENSE,
    "researchanddevelopmentexpense": LineItem.RESEARCH_AND_DEVELOPMENT,
    "cashandcashequivalents": LineItem.CASH_AND_EQUIVALENTS,
    "totalshareholderequity": LineItem.SHAREHOLDER_EQUITY,
    "dividendspaid": LineItem.DIVIDENDS_PAID,
    "commonstocksharesoutstanding": LineItem.SHARES_OUTSTANDING,
    "outstandingshares": LineItem.SHARES_OUTSTANDING,
})

# Values computed from other fields
_DERIVED_LINE_ITEMS: Dict[str, str] = {
    "freecashflow": "MetricsSnapshot.free_cash_flow",
    "fcf": "MetricsSnapshot.free_cash_flow",
}


class RiskLevel(str, Enum):
    """Risk tier selecting the DCF assumption set and valuation basis."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# --- Input Series ---

class FundamentalPeriod(BaseModel):
    """One reporting period of line items for one ticker."""
    model_config = ConfigDict(frozen=True)

    ticker: str
    report_date: date
    period: str = "annual"
    currency: str = "USD"
    line_items: Dict[LineItem, Optional[Decimal]] = Field(default_factory=dict)

    @field_validator('line_items', mode='before')
    @classmethod
    def _parse_line_items(cls, value: Any) -> Dict[LineItem, Optional[Decimal]]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            return value
        return {LineItem.parse(key): to_decimal(raw) for key, raw in value.items()}

    def get(self, item: Union[LineItem, str]) -> Optional[Decimal]:
        return self.line_items.get(LineItem.parse(item))

    def has(self, *items: Union[LineItem, str]) -> bool:
        """True when every named line item is present and non-null."""
        return all(self.get(item) is not None for item in items)


class MetricsSnapshot(BaseModel):
    """Per-period ratios and market data supplied alongside fundamentals."""
    model_config = ConfigDict(frozen=True)

    ticker: str
    report_date: date
    period: str = "annual"

    market_cap: DecimalValue = None
    enterprise_value: DecimalValue = None
    earnings_per_share: DecimalValue = None
    book_value_per_share: DecimalValue = None
    price_to_earnings: DecimalValue = None

    return_on_equity: DecimalValue = None
    return_on_invested_capital: DecimalValue = None
    debt_to_equity: DecimalValue = None
    operating_margin: DecimalValue = None
    gross_margin: DecimalValue = None
    current_ratio: DecimalValue = None

    revenue: DecimalValue = None
    net_income: DecimalValue = None
    operating_cash_flow: DecimalValue = None
    capital_expenditure: DecimalValue = Field(None, description="Positive outflow")
    depreciation_and_amortization: DecimalValue = None
    dividends_paid: DecimalValue = Field(None, description="Negative when paid out")
    outstanding_shares: DecimalValue = None
    total_debt: DecimalValue = None
    shareholder_equity: DecimalValue = None
    cash_and_equivalents: DecimalValue = None
    goodwill: DecimalValue = None

    @property
    def free_cash_flow(self) -> Optional[Decimal]:
        """Operating cash flow minus capital expenditure; never stored."""
        if self.operating_cash_flow is None or self.capital_expenditure is None:
            return None
        return self.operating_cash_flow - self.capital_expenditure


class PricePoint(BaseModel):
    """Daily OHLC bar."""
    model_config = ConfigDict(frozen=True)

    date: _Date
    open: DecimalValue = None
    high: DecimalValue = None
    low: DecimalValue = None
    close: Decimal
    volume: Optional[int] = None

    @field_validator('close', mode='before')
    @classmethod
    def _parse_close(cls, value: Any) -> Decimal:
        parsed = to_decimal(value)
        if parsed is None:
            raise ValueError("close must be a finite number")
        return parsed


class TickerSentiment(BaseModel):
    ticker: Optional[str] = None
    relevance_score: DecimalValue = None
    sentiment_score: DecimalValue = None
    sentiment_label: Optional[str] = None


class NewsSentiment(BaseModel):
    """A news item with per-ticker sentiment."""
    title: Optional[str] = None
    url: Optional[str] = None
    published_at: Optional[datetime] = None
    overall_sentiment_score: DecimalValue = None
    overall_sentiment_label: Optional[str] = None
    ticker_sentiments: List[TickerSentiment] = Field(default_factory=list)


class InsiderTrade(BaseModel):
    """Positive transaction_shares is a buy, negative a sell."""
    ticker: str
    transaction_date: Optional[date] = None
    transaction_shares: DecimalValue = None


def to_utc(moment: datetime) -> datetime:
    """Aware UTC datetime; naive datetimes are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def sort_periods(periods: List[FundamentalPeriod]) -> List[FundamentalPeriod]:
    """Oldest-first copy of a fundamental series."""
    return sorted(periods, key=lambda p: p.report_date)


def sort_metrics(metrics: List[MetricsSnapshot]) -> List[MetricsSnapshot]:
    """Oldest-first copy of a metrics series."""
    return sorted(metrics, key=lambda m: m.report_date)


def sort_prices(prices: List[PricePoint]) -> List[PricePoint]:
    """Oldest-first copy of a price series."""
    return sorted(prices, key=lambda p: p.date)


def ensure_unique_periods(periods: List[FundamentalPeriod]) -> List[FundamentalPeriod]:
    """
    Validate that a ticker's periods are unique by report date.

    Raises:
        ValueError: on a duplicate (ticker, report_date)
    """
    seen = set()
    for period in periods:
        key = (period.ticker, period.report_date)
        if key in seen:
            raise ValueError(f"Duplicate period for {period.ticker} on {period.report_date}")
        seen.add(key)
    return periods


class TickerData(BaseModel):
    """Everything the scorers need for one ticker, as supplied by a provider."""
    ticker: str
    as_of: Optional[datetime] = None
    fundamentals: List[FundamentalPeriod] = Field(default_factory=list)
    metrics: List[MetricsSnapshot] = Field(default_factory=list)
    prices: List[PricePoint] = Field(default_factory=list)
    news: List[NewsSentiment] = Field(default_factory=list)
    insider_trades: List[InsiderTrade] = Field(default_factory=list)

    @field_validator('fundamentals')
    @classmethod
    def _unique_periods(cls, value: List[FundamentalPeriod]) -> List[FundamentalPeriod]:
        return ensure_unique_periods(value)

    @property
    def is_empty(self) -> bool:
        return not (self.fundamentals or self.metrics or self.prices)

    def periods(self) -> List[FundamentalPeriod]:
        return sort_periods(self.fundamentals)

    def snapshots(self) -> List[MetricsSnapshot]:
        return sort_metrics(self.metrics)

    def price_series(self) -> List[PricePoint]:
        return sort_prices(self.prices)

    def latest_metrics(self) -> Optional[MetricsSnapshot]:
        snapshots = self.snapshots()
        return snapshots[-1] if snapshots else None

    def latest_price(self) -> Optional[Decimal]:
        prices = self.price_series()
        return prices[-1].close if prices else None


# --- Portfolio ---

class Position(BaseModel):
    long_shares: int = 0
    long_cost_basis: Decimal = Decimal(0)
    short_shares: int = 0
    short_cost_basis: Decimal = Decimal(0)


class Portfolio(BaseModel):
    cash: Decimal = Decimal(0)
    positions: Dict[str, Position] = Field(default_factory=dict)

    def position(self, ticker: str) -> Position:
        return self.positions.get(ticker, Position())


# --- Outputs ---

class TradeSignal(BaseModel):
    """Structured trade recommendation; ticker is always set by the caller."""
    model_config = ConfigDict(frozen=True)

    ticker: str
    signal: SignalValue
    confidence: float = Field(..., ge=0, le=100)
    reasoning: str = ""


class RiskReasoning(BaseModel):
    model_config = ConfigDict(frozen=True)

    portfolio_value: Decimal
    current_position: Decimal
    position_limit: Decimal
    remaining_limit: Decimal
    available_cash: Decimal


class RiskAssessment(BaseModel):
    """Remaining allowable position size for one ticker."""
    model_config = ConfigDict(frozen=True)

    ticker: str
    remaining_position_limit: Decimal
    current_price: Decimal
    reasoning: RiskReasoning
