"""Fan out metric fetching and scoring across a batch of tickers."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date

from fundamental_signals.analysis.fundamental import BaseScorer, RuleBasedScorer
from fundamental_signals.analysis.progress import (
    ProgressCallback,
    Stage,
    noop_progress,
)
from fundamental_signals.config import AnalysisConfig
from fundamental_signals.data.errors import MetricsUnavailableError
from fundamental_signals.data.market_data import MetricsProvider
from fundamental_signals.models.fundamental import FundamentalAnalysis, TickerResult
from fundamental_signals.tickers import normalize_tickers

logger = logging.getLogger(__name__)


def analyze_ticker(
    ticker: str,
    end_date: date,
    provider: MetricsProvider,
    scorer: BaseScorer,
    limit: int = 10,
    on_progress: ProgressCallback | None = None,
) -> TickerResult:
    report = on_progress or noop_progress

    report(ticker, Stage.FETCHING_METRICS)
    history = provider.get_financial_metrics(ticker, end_date, limit)
    if not history:
        raise MetricsUnavailableError(ticker, "provider returned no records")

    metrics = history[0]
    analysis = scorer.score(metrics, ticker=ticker, on_progress=report)

    report(ticker, Stage.DONE)
    return TickerResult(ticker=ticker, metrics=metrics, analysis=analysis)


async def analyze_tickers(
    tickers: list[str],
    end_date: date,
    provider: MetricsProvider | None = None,
    scorer: BaseScorer | None = None,
    config: AnalysisConfig | None = None,
    on_progress: ProgressCallback | None = None,
) -> dict[str, TickerResult]:
    """Analyse every ticker independently; failures become placeholders.

    Results are keyed by upper-cased symbol in input order.
    """
    config = config or AnalysisConfig()
    provider = provider or MetricsProvider(config)
    scorer = scorer or RuleBasedScorer(config.thresholds)
    symbols = normalize_tickers(tickers)
    if not symbols:
        return {}

    loop = asyncio.get_running_loop()
    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        raw_results = await asyncio.gather(
            *(
                loop.run_in_executor(
                    executor,
                    analyze_ticker,
                    symbol,
                    end_date,
                    provider,
                    scorer,
                    config.limit,
                    on_progress,
                )
                for symbol in symbols
            ),
            return_exceptions=True,
        )

    results: dict[str, TickerResult] = {}
    for symbol, r in zip(symbols, raw_results):
        if isinstance(r, MetricsUnavailableError):
            logger.warning("%s", r)
            results[symbol] = TickerResult(
                ticker=symbol,
                analysis=FundamentalAnalysis.placeholder(r.reason),
            )
        elif isinstance(r, BaseException):
            logger.error("Analysis failed for %s: %s", symbol, r)
            results[symbol] = TickerResult(
                ticker=symbol,
                analysis=FundamentalAnalysis.placeholder(f"analysis failed: {r}"),
            )
        else:
            results[symbol] = r
    return results
