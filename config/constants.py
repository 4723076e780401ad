"""
Centralized constants for the application.
Stores the LLM endpoint defaults, projection horizons and portfolio caps.
"""

# --- LLM Configuration ---

# OpenAI-compatible chat-completion endpoint
DEFAULT_LLM_BASE_URL = "https://api.openai.com/v1/"
CHAT_COMPLETIONS_PATH = "chat/completions"
DEFAULT_LLM_MODEL = "gpt-4"
DEFAULT_LLM_TEMPERATURE = 0.2
DEFAULT_LLM_TIMEOUT_SECONDS = 120.0

# --- Valuation ---

DCF_PROJECTION_YEARS = 10
ACTIVIST_DCF_PROJECTION_YEARS = 5

# Market cap below which the net-net (NCAV) test is applied
NET_NET_MARKET_CAP_CEILING = 200_000_000_000

# --- Risk ---

# Maximum share of total portfolio value held in one ticker
MAX_POSITION_FRACTION = "0.20"

# --- News ---

# Only news published within this window counts toward company sentiment
NEWS_LOOKBACK_DAYS = 14

# Keywords that mark a headline as negative
NEGATIVE_NEWS_KEYWORDS = (
    "lawsuit", "fraud", "negative", "downturn",
    "decline", "investigation", "recall",
)
