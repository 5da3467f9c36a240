"""Agentic Invest CLI entry point."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

env_file = Path(__file__).parent.parent / ".env"
load_dotenv(env_file)

from agentic_invest import __version__
from agentic_invest.config import get_settings
from agentic_invest.context import build_context
from agentic_invest.pipeline.exceptions import PipelineError
from agentic_invest.pipeline.models import SessionSnapshot, TradeRecommendation
from agentic_invest.pipeline.orchestrator import run_pipeline
from agentic_invest.pipeline.stages import PipelineStatus, Stage
from agentic_invest.pipeline.state import SessionStore
from agentic_invest.services.finnhub import collect_financial_data

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


def _init_logfire() -> None:
    """Initialize Logfire if available, without failing commands."""
    try:
        from agentic_invest.observability import initialize_logfire

        initialize_logfire(get_settings())
    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")


class ProgressPrinter:
    """Session observer that prints each stage once as it starts and finishes."""

    def __init__(self) -> None:
        self._stage = Stage.IDLE
        self._printed: set[Stage] = set()

    def __call__(self, snapshot: SessionSnapshot) -> None:
        if snapshot.current_stage is not self._stage and snapshot.current_stage is not Stage.IDLE:
            self._stage = snapshot.current_stage
            stage = self._stage
            print(f"[{stage.index + 1}/5] {stage.label}...")

        for stage, output in snapshot.stage_outputs.items():
            if stage in self._printed:
                continue
            self._printed.add(stage)
            print(f"      {output.text}")
            for source in output.sources or []:
                print(f"        - {source.title}: {source.uri}")


def format_trade_table(trades: list[TradeRecommendation]) -> str:
    """Render trades as a fixed-width table."""
    header = f"{'Ticker':<8}{'Strategy':<22}{'POP':>6}  {'Legs':<40}Thesis"
    lines = [header, "-" * len(header)]
    for trade in trades:
        lines.append(
            f"{trade.ticker:<8}{trade.strategy:<22}{trade.probability_of_profit:>6.0%}  "
            f"{trade.legs:<40}{trade.thesis}"
        )
    return "\n".join(lines)


def _read_strategy(args: argparse.Namespace) -> str | None:
    if args.strategy_file:
        return Path(args.strategy_file).read_text(encoding="utf-8").strip()
    return args.strategy


def cmd_run(args: argparse.Namespace) -> int:
    """Run one full investment cycle and print the recommended trades."""
    try:
        _init_logfire()

        if args.debug:
            logging.getLogger().setLevel(logging.DEBUG)

        settings = get_settings()
        strategy = _read_strategy(args)

        print("\n=== Agentic Invest Pipeline ===\n")
        print(f"Version: {__version__}")
        print(f"Trend Model: {settings.models.trend_primary} (fallback {settings.models.trend_fallback})")
        print(f"Advisor Model: {settings.models.advisor}\n")

        store = SessionStore.from_settings(settings)
        store.subscribe(ProgressPrinter())
        snapshot = asyncio.run(run_pipeline(build_context(settings), store, strategy))

        if snapshot.status is PipelineStatus.ERROR:
            print(f"\n❌ Pipeline failed: {snapshot.error_message}\n")
            return 1

        print(f"\n=== Top {len(snapshot.trades)} Trades ===\n")
        print(format_trade_table(snapshot.trades))
        last = snapshot.portfolio_history[-1]
        print(f"\nPortfolio value (day {last.day}): ${last.value:,}\n")
        return 0

    except KeyboardInterrupt:
        print("\n\nReceived interrupt signal. Shutting down...\n")
        return 0
    except OSError as e:
        print(f"\n❌ Could not read strategy file: {e}\n")
        return 1
    except Exception as e:
        logger.error(f"Pipeline run failed: {e}", exc_info=True)
        print(f"\nFailed to run pipeline: {e}\n")
        return 1


def cmd_trends(args: argparse.Namespace) -> int:
    """Run trend detection on its own."""
    _init_logfire()

    try:
        context = build_context(get_settings())
        report = asyncio.run(context.trends.detect())
    except PipelineError as e:
        print(f"\n❌ {e.message}\n")
        return 1

    print(f"\n=== Trending Stocks ({report.source}) ===\n")
    print(f"Sentiment: {report.sentiment}  Confidence: {report.confidence}%\n")
    for i, stock in enumerate(report.stocks, 1):
        print(f"  {i:>2}. {stock.ticker:<6} {stock.reason}")
    if report.analysis:
        print(f"\n{report.analysis}")
    print()
    return 0


def cmd_collect(args: argparse.Namespace) -> int:
    """Collect Finnhub data for tickers and export a JSON bundle."""
    _init_logfire()
    settings = get_settings()
    out_dir = Path(args.out) if args.out else settings.data_dir / "financial-data"
    tickers = [t.strip().upper() for t in args.tickers if t.strip()]

    try:
        results = asyncio.run(
            collect_financial_data(settings.finnhub_api_key, tickers, out_dir)
        )
    except PipelineError as e:
        print(f"\n❌ {e.message}\n")
        return 1

    print(f"\n=== Collected {len(results)}/{len(tickers)} tickers ===\n")
    for bundle in results:
        print(f"  {bundle.ticker:<6} {bundle.populated_fields} data categories")
    print(f"\nSaved to {out_dir}\n")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Serve the dashboard API."""
    import uvicorn

    _init_logfire()
    uvicorn.run("agentic_invest.api.server:app", host=args.host, port=args.port)
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Display merged configuration."""
    try:
        settings = get_settings()

        print("\n=== Agentic Invest Configuration ===\n")
        print(f"Data Directory: {settings.data_dir}\n")

        print("Trends:")
        print(f"  Primary Target: {settings.trends.primary_target} stocks")
        print(f"  Fallback Range: {settings.trends.fallback_min}-{settings.trends.fallback_max} stocks")
        print(f"  Excluded: {', '.join(settings.trends.excluded_tickers)}\n")

        print("Models:")
        print(f"  Trends: {settings.models.trend_primary} -> {settings.models.trend_fallback}")
        print(f"  Selector: {settings.models.selector}")
        print(f"  Advisor: {settings.models.advisor}\n")

        print("Rubric:")
        print(f"  Trades: {settings.rubric.trade_count}")
        print(f"  Min POP: {settings.rubric.min_probability_of_profit:.0%}")
        print(f"  Min Credit/Max Loss: {settings.rubric.min_credit_to_max_loss:.2f}")
        print(f"  Max Loss: ${settings.rubric.max_loss_usd:,.0f} ({settings.rubric.max_loss_pct_of_nav:.1%} of NAV)")
        print(f"  Max Trades per Sector: {settings.rubric.max_trades_per_sector}\n")

        print("API Keys:")
        print(f"  Grok: {'✓ Set' if settings.grok_api_key else '✗ Not set'}")
        print(f"  Gemini: {'✓ Set' if settings.gemini_api_key else '✗ Not set'}")
        print(f"  Exa AI: {'✓ Set' if settings.exa_api_key else '✗ Not set'}")
        print(f"  Finnhub: {'✓ Set' if settings.finnhub_api_key else '✗ Not set'}")
        print(f"  Logfire: {'✓ Set' if settings.logfire_token else '✗ Not set'}\n")

        return 0

    except ValidationError as e:
        print("\n❌ Configuration Error:\n")
        for error in e.errors():
            print(f"  • {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
        print()
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentic_invest",
        description="Agentic Invest: multi-agent options trade recommendation pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Agentic Invest {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_run = subparsers.add_parser(
        "run",
        help="Run the full pipeline once and print the recommended trades",
    )
    strategy_group = parser_run.add_mutually_exclusive_group()
    strategy_group.add_argument(
        "--strategy",
        help="Investment strategy text (defaults to the configured strategy)",
    )
    strategy_group.add_argument(
        "--strategy-file",
        help="Read the investment strategy from a file",
    )
    parser_run.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser_run.set_defaults(func=cmd_run)

    parser_trends = subparsers.add_parser(
        "trends",
        help="Run trend detection only",
    )
    parser_trends.set_defaults(func=cmd_trends)

    parser_collect = subparsers.add_parser(
        "collect",
        help="Collect Finnhub financial data for tickers",
    )
    parser_collect.add_argument("tickers", nargs="+", metavar="TICKER")
    parser_collect.add_argument(
        "--out",
        help="Output directory (defaults to <data_dir>/financial-data)",
    )
    parser_collect.set_defaults(func=cmd_collect)

    parser_serve = subparsers.add_parser(
        "serve",
        help="Serve the dashboard API",
    )
    parser_serve.add_argument("--host", default="127.0.0.1")
    parser_serve.add_argument("--port", type=int, default=8000)
    parser_serve.set_defaults(func=cmd_serve)

    parser_config = subparsers.add_parser(
        "config",
        help="Display merged configuration",
    )
    parser_config.set_defaults(func=cmd_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
