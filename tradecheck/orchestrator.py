"""
Trade Setup Checker command-line entry point.

Modes:
1. Analyze: score one JSON setup and print the full report
2. Batch: score every JSON setup in a directory and print a table
3. Margin: liquidation price and margin requirements for a position
4. Levels: support/resistance from an OHLC CSV file
5. Demo: a fully aligned long setup, end to end

Usage:
    python -m tradecheck.orchestrator --analyze setups/sol_long.json
    python -m tradecheck.orchestrator --batch setups/
    python -m tradecheck.orchestrator --margin --coin BTC --direction long \\
        --capital 10000 --leverage 10 --ratio 20 --entry 60000
    python -m tradecheck.orchestrator --levels candles.csv --timeframe daily
    python -m tradecheck.orchestrator --demo
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import pandas as pd

from tradecheck.analysis.batch import evaluate_batch, summarize_batch
from tradecheck.analysis.contradictions import find_contradictions
from tradecheck.config import EngineConfig
from tradecheck.data.loader import load_analyses_from_directory, load_analysis
from tradecheck.data.signals import InvalidPrecondition
from tradecheck.data.trade_analysis import EMAReading, KSTReading, TradeAnalysis
from tradecheck.levels.support_resistance import ChartTimeframe, SupportResistanceCalculator
from tradecheck.report.report import render_report
from tradecheck.risk.margin import MarginCalculator
from tradecheck.scoring.composite import evaluate

logger = logging.getLogger("tradecheck.orchestrator")


def analyze(record: TradeAnalysis, config: EngineConfig) -> str:
    """Score one setup and render its report."""
    breakdown = evaluate(record)
    contradictions = find_contradictions(record, breakdown.high_risk)
    logger.info(
        "%s %s: total=%d (%s), %d contradiction(s)",
        record.coin_type, record.open_dir.value, breakdown.total,
        breakdown.band.value, len(contradictions),
    )
    return render_report(record, breakdown, contradictions, config.report)


def run_batch(directory: str) -> None:
    loaded = load_analyses_from_directory(Path(directory))
    frame = evaluate_batch(record for _, record in loaded)
    if not frame.empty:
        frame.insert(0, "file", [path.name for path, _ in loaded])

    with pd.option_context("display.max_columns", None, "display.width", 160):
        print(frame.drop(columns=["contradictions"]).to_string(index=False))

    summary = summarize_batch(frame)
    print(
        f"\n=== BATCH SUMMARY ===\n"
        f"Setups: {summary['count']}\n"
        f"Mean total: {summary['mean_total']:.2f} "
        f"(min {summary['min_total']}, max {summary['max_total']})\n"
        f"High leveraged risk: {summary['high_risk_count']}\n"
        f"Bands: " + ", ".join(f"{k}={v}" for k, v in summary["bands"].items())
    )


def run_levels(csv_path: str, timeframe: str) -> None:
    candles = pd.read_csv(csv_path)
    candles.columns = [c.strip().lower() for c in candles.columns]
    calc = SupportResistanceCalculator(candles, ChartTimeframe(timeframe))
    print(calc.levels.summary_str())


def demo_record() -> TradeAnalysis:
    """A long setup where every signal agrees."""
    return TradeAnalysis.build(
        coin_type="SOL/USDT",
        open_dir="long",
        leverage=5,
        open_price=100.0,
        liquid_price=81.0,
        stop_loss=95.0,
        long_trend="up",
        mid_trend="up",
        short_trend="up",
        short_trend_line_break_times=0,
        rsi_level="normal",
        rsi_duration=3,
        rsi_unit="days",
        ema_list=[
            EMAReading("4h", 20, "up"),
            EMAReading("day", 50, "up"),
            EMAReading("week", 200, "up"),
        ],
        kst_list=[
            KSTReading("4h", (10, 15, 20, 30), "cross_up"),
            KSTReading("day", (10, 15, 20, 30), "cross_up"),
            KSTReading("week", (10, 15, 20, 30), "cross_up"),
        ],
    )


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Trade Setup Consistency Checker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m tradecheck.orchestrator --demo
  python -m tradecheck.orchestrator --analyze setups/sol_long.json
  python -m tradecheck.orchestrator --batch setups/
        """,
    )

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--analyze", type=str, metavar="FILE", help="Analyze one JSON setup")
    mode.add_argument("--batch", type=str, metavar="DIR", help="Analyze every JSON setup in DIR")
    mode.add_argument("--margin", action="store_true", help="Margin and liquidation calculator")
    mode.add_argument("--levels", type=str, metavar="CSV", help="Support/resistance from OHLC CSV")
    mode.add_argument("--demo", action="store_true", help="Run the demo setup")

    parser.add_argument("--coin", type=str, default="BTC", help="Coin for --margin")
    parser.add_argument("--direction", type=str, default="long", help="long or short")
    parser.add_argument("--capital", type=float, default=10000.0, help="Total capital (USDT)")
    parser.add_argument("--leverage", type=float, default=1.0, help="Leverage multiple")
    parser.add_argument("--ratio", type=float, default=10.0, help="Position ratio of capital (%%)")
    parser.add_argument("--entry", type=float, help="Entry price (USDT)")
    parser.add_argument(
        "--timeframe", type=str, default="daily",
        choices=[tf.value for tf in ChartTimeframe], help="Candle timeframe for --levels",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    config = EngineConfig.from_env()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        if args.demo:
            print(analyze(demo_record(), config))
        elif args.analyze:
            print(analyze(load_analysis(Path(args.analyze)), config))
        elif args.batch:
            run_batch(args.batch)
        elif args.margin:
            if args.entry is None:
                parser.error("--margin requires --entry")
            calc = MarginCalculator(
                coin=args.coin,
                leverage=args.leverage,
                position_ratio=args.ratio,
                entry_price=args.entry,
                direction=args.direction,
                total_capital=args.capital,
                config=config.risk,
            )
            print(calc.summary().summary_str())
        elif args.levels:
            run_levels(args.levels, args.timeframe)
    except InvalidPrecondition as e:
        logger.error("Invalid input: %s", e)
        return 1
    except (OSError, ValueError) as e:
        logger.error("Failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
