"""
Financial Signal Generation - Batch Runner
Runs the selected investor strategies over tickers read from a directory of
JSON fixtures and logs one line per signal:
1. Load ticker data
2. Score each strategy
3. Generate the signal (LLM or deterministic fallback)
4. Size positions against a cash-only portfolio
"""

import sys
import os
import argparse
from datetime import datetime
from decimal import Decimal, InvalidOperation

# Add project root to path
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.insert(0, current_dir)

from config.settings import settings
from data_acquisition import JsonDirectoryProvider
from signal_engine.llm import LLMClient, LLMSignalGenerator
from signal_engine.strategies import StrategyEngine, registry
from signal_engine.workflow import TradingWorkflow, WorkflowResult
from utils.logger import LoggingContext, set_logging_mode, setup_logger
from utils.unified_schema import Portfolio

logger = setup_logger('run_signals')


def _split(raw):
    """Accept both comma and space separated lists."""
    return [s.strip() for s in (raw or '').replace(',', ' ').split() if s.strip()]


def _decimal(raw: str) -> Decimal:
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {raw}")


def _as_of(raw: str) -> datetime:
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an ISO date, got {raw}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Financial Signal Generation')
    parser.add_argument('--data-dir', '-d', required=True,
                        help='Directory of <TICKER>.json data files')
    parser.add_argument('--tickers', '-t',
                        help='Tickers to analyze (comma or space separated); default: every file in --data-dir')
    parser.add_argument('--strategies', '-s',
                        help=f"Strategies to run; default: all ({', '.join(registry.names())})")
    parser.add_argument('--cash', type=_decimal, default=None,
                        help='Portfolio cash for position sizing; omit to skip the risk pass')
    parser.add_argument('--as-of', type=_as_of, default=None,
                        help='Point-in-time cutoff (ISO date)')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Only show this script and workflow logs')
    return parser


def build_workflow(data_dir: str, strategies) -> TradingWorkflow:
    """Wire the provider, LLM transport and engine."""
    provider = JsonDirectoryProvider(data_dir)

    transport = None
    if settings.has_llm_key:
        logger.info(f"LLM enabled ({settings.LLM_MODEL}, key {settings.get_masked_llm_key()})")
        transport = LLMClient()
    else:
        logger.warning("OPENAI_API_KEY not set; using deterministic fallback signals")

    engine = StrategyEngine(signal_generator=LLMSignalGenerator(transport=transport))
    return TradingWorkflow(provider, strategies=strategies, engine=engine)


def log_result(result: WorkflowResult):
    for ticker, by_strategy in result.reports.items():
        for report in by_strategy.values():
            signal = report.signal
            logger.info(
                f"{ticker:<6} {report.display_name:<22} {signal.signal:<8} "
                f"{signal.confidence:>5.1f}%  [{report.source}]  "
                f"score {report.total_score}/{report.max_score}")
        risk = result.risk.get(ticker)
        if risk is not None:
            logger.info(
                f"{ticker:<6} remaining position limit {risk.remaining_position_limit:.2f} "
                f"at {risk.current_price}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.quiet:
        set_logging_mode(LoggingContext.ORCHESTRATED)

    strategies = _split(args.strategies) or None
    try:
        workflow = build_workflow(args.data_dir, strategies)
    except ValueError as e:
        logger.error(str(e))
        return 2

    tickers = _split(args.tickers) or workflow.provider.available_tickers()
    if not tickers:
        logger.error(f"No tickers given and no data files found in {args.data_dir}")
        return 1

    portfolio = Portfolio(cash=args.cash) if args.cash is not None else None
    result = workflow.run(tickers, portfolio=portfolio, as_of=args.as_of)
    log_result(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
