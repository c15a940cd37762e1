import argparse
import asyncio
import logging
import sys
from datetime import date

from pydantic import ValidationError
from rich.console import Console

from fundamental_signals.analysis.fundamental import BaseScorer, RuleBasedScorer
from fundamental_signals.analysis.pipeline import analyze_tickers
from fundamental_signals.analysis.progress import Stage
from fundamental_signals.config import DEFAULT_LLM_MODEL, AnalysisConfig
from fundamental_signals.data.market_data import MetricsProvider
from fundamental_signals.models.common import AnalysisRequest
from fundamental_signals.models.fundamental import TickerResult
from fundamental_signals.output.renderer import AnalysisRenderer, to_json
from fundamental_signals.tickers import extract_tickers

logger = logging.getLogger(__name__)
console = Console()


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date (expected YYYY-MM-DD): {value}")


def _add_run_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--end-date",
        type=_iso_date,
        default=None,
        help="Use statements dated on or before this day (default: today)",
    )
    p.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Number of statement periods to fetch",
    )
    p.add_argument(
        "--quarterly",
        action="store_true",
        help="Use quarterly instead of annual statements",
    )
    p.add_argument(
        "--llm",
        action="store_true",
        help="Score with Claude instead of the rule-based scorer",
    )
    p.add_argument(
        "--model",
        default=DEFAULT_LLM_MODEL,
        help="Claude model used with --llm",
    )
    p.add_argument(
        "--json",
        action="store_true",
        help="Print {ticker: analysis} JSON instead of tables",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="fundamentals",
        description="Rule-based bullish/bearish/neutral signals from financial ratios",
    )
    sub = p.add_subparsers(dest="command")

    # --- analyze (default) ---
    analyze = sub.add_parser("analyze", help="Score one or more tickers")
    analyze.add_argument("tickers", nargs="+", help="Stock ticker symbols")
    _add_run_options(analyze)

    # --- ask ---
    ask = sub.add_parser("ask", help="Score every $TICKER mentioned in a message")
    ask.add_argument("message", help='Free text, e.g. "How do $AAPL and $MSFT look?"')
    _add_run_options(ask)

    return p


def build_scorer(config: AnalysisConfig) -> BaseScorer:
    if config.use_llm:
        from fundamental_signals.analysis.llm import LLMScorer

        return LLMScorer(api_key=config.anthropic_api_key, model=config.llm_model)
    return RuleBasedScorer(config.thresholds)


async def run_analysis(
    request: AnalysisRequest, config: AnalysisConfig
) -> dict[str, TickerResult]:
    provider = MetricsProvider(config)
    scorer = build_scorer(config)

    with console.status("[cyan]Analyzing fundamentals...") as status:

        def on_progress(ticker: str, stage: Stage) -> None:
            logger.debug("%s - %s", ticker, stage.label)
            status.update(f"[cyan]{ticker}: {stage.label}...")

        return await analyze_tickers(
            request.tickers,
            request.end_date,
            provider=provider,
            scorer=scorer,
            config=config,
            on_progress=on_progress,
        )


def _run(tickers: list[str], args: argparse.Namespace) -> None:
    if args.llm:
        from dotenv import load_dotenv

        load_dotenv()

    try:
        request = AnalysisRequest(
            tickers=tickers,
            end_date=args.end_date or date.today(),
            limit=args.limit,
        )
    except ValidationError as e:
        console.print(f"[red]Invalid request: {e.errors()[0]['msg']}[/red]")
        sys.exit(2)

    config = AnalysisConfig(
        period="quarterly" if args.quarterly else "annual",
        limit=request.limit,
        use_llm=args.llm,
        llm_model=args.model,
    )
    if config.use_llm and not config.anthropic_api_key:
        console.print(
            "[red]ANTHROPIC_API_KEY not set in environment. "
            "Set it via .env or export.[/red]"
        )
        sys.exit(1)

    results = asyncio.run(run_analysis(request, config))

    if args.json:
        print(to_json(results))
    else:
        AnalysisRenderer(console).render(results)


def _run_analyze(args: argparse.Namespace) -> None:
    """Execute the analyze subcommand."""
    _run(args.tickers, args)


def _run_ask(args: argparse.Namespace) -> None:
    """Execute the ask subcommand."""
    tickers = extract_tickers(args.message)
    if not tickers:
        console.print(
            "[yellow]No tickers found. Mention them with a $ prefix, "
            "e.g. $AAPL.[/yellow]"
        )
        sys.exit(1)
    _run(tickers, args)


SUBCOMMANDS = ("analyze", "ask")


def normalize_argv(argv: list[str]) -> list[str]:
    """Default to ``analyze`` and let run options precede the subcommand."""
    if not argv or argv[0] in SUBCOMMANDS or argv[0] in ("-h", "--help"):
        return argv
    if argv[0].startswith("-"):
        for i, arg in enumerate(argv):
            if arg in SUBCOMMANDS:
                return [arg, *argv[:i], *argv[i + 1 :]]
    return ["analyze", *argv]


def main() -> None:
    parser = build_parser()

    # Backward compatibility: bare tickers run the analyze subcommand
    args = parser.parse_args(normalize_argv(sys.argv[1:]))

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    try:
        if args.command == "analyze":
            _run_analyze(args)
        elif args.command == "ask":
            _run_ask(args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled.[/yellow]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
