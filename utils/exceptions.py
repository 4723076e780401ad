"""
Exception types for the signal engine.

Expected failures (missing data, undefined ratios, LLM errors) are handled
with result objects and never raised; these exceptions mark failures the
caller must decide about.
"""


class SignalEngineError(Exception):
    """Base class for signal engine errors."""


class DataUnavailableError(SignalEngineError):
    """A provider could not supply data for one ticker."""

    def __init__(self, ticker: str, message: str = "no data"):
        self.ticker = ticker
        self.message = message
        super().__init__(f"{ticker}: {message}")
