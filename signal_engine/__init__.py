"""
Signal engine: scoring, valuation, aggregation, LLM signal generation,
strategy orchestration and position sizing.

Import subpackages directly, e.g. `from signal_engine.strategies import registry`.
"""
