from abc import ABC, abstractmethod

from fundamental_signals.analysis.progress import (
    ProgressCallback,
    Stage,
    noop_progress,
)
from fundamental_signals.config import Thresholds
from fundamental_signals.models.common import AnalysisSource, CategorySignal, Signal
from fundamental_signals.models.fundamental import (
    FinancialMetrics,
    FundamentalAnalysis,
    FundamentalReasoning,
)


def _fmt(value: float | None, suffix: str = "") -> str:
    if value is None:
        return "N/A"
    return f"{value:.2f}{suffix}"


def _above(value: float | None, threshold: float) -> int:
    return int(value is not None and value > threshold)


def _below(value: float | None, threshold: float) -> int:
    return int(value is not None and value < threshold)


def _category(points: int, details: str) -> CategorySignal:
    return CategorySignal(
        signal=Signal.from_points(points),
        details=details,
        points=points,
    )


class BaseScorer(ABC):
    """Maps one metrics snapshot to one FundamentalAnalysis."""

    name: str = ""

    @abstractmethod
    def score(
        self,
        metrics: FinancialMetrics,
        ticker: str = "",
        on_progress: ProgressCallback | None = None,
    ) -> FundamentalAnalysis: ...


class RuleBasedScorer(BaseScorer):
    """Deterministic threshold scorer.

    Each of the four categories awards up to three points; two or more is
    bullish, none is bearish, anything else neutral. Unknown metrics never
    award a point. The overall signal is a majority vote of bullish against
    bearish categories, and confidence is the winning count out of four.
    """

    name = "rules"

    def __init__(self, thresholds: Thresholds | None = None) -> None:
        self.thresholds = thresholds or Thresholds()

    def score(
        self,
        metrics: FinancialMetrics,
        ticker: str = "",
        on_progress: ProgressCallback | None = None,
    ) -> FundamentalAnalysis:
        report = on_progress or noop_progress
        ticker = ticker or metrics.ticker

        report(ticker, Stage.PROFITABILITY)
        profitability = self._profitability(metrics)

        report(ticker, Stage.GROWTH)
        growth = self._growth(metrics)

        report(ticker, Stage.FINANCIAL_HEALTH)
        health = self._financial_health(metrics)

        report(ticker, Stage.PRICE_RATIOS)
        price_ratios = self._price_ratios(metrics)

        report(ticker, Stage.AGGREGATE)
        return aggregate(
            FundamentalReasoning(
                profitability_signal=profitability,
                growth_signal=growth,
                financial_health_signal=health,
                price_ratios_signal=price_ratios,
            )
        )

    def _profitability(self, m: FinancialMetrics) -> CategorySignal:
        t = self.thresholds
        points = (
            _above(m.return_on_equity, t.return_on_equity)
            + _above(m.net_margin, t.net_margin)
            + _above(m.operating_margin, t.operating_margin)
        )
        details = (
            f"ROE: {_fmt(m.return_on_equity, '%')}, "
            f"Net Margin: {_fmt(m.net_margin, '%')}, "
            f"Op Margin: {_fmt(m.operating_margin, '%')}"
        )
        return _category(points, details)

    def _growth(self, m: FinancialMetrics) -> CategorySignal:
        t = self.thresholds
        points = (
            _above(m.revenue_growth, t.revenue_growth)
            + _above(m.earnings_growth, t.earnings_growth)
            + _above(m.book_value_growth, t.book_value_growth)
        )
        details = (
            f"Revenue Growth: {_fmt(m.revenue_growth, '%')}, "
            f"Earnings Growth: {_fmt(m.earnings_growth, '%')}, "
            f"Book Value Growth: {_fmt(m.book_value_growth, '%')}"
        )
        return _category(points, details)

    def _financial_health(self, m: FinancialMetrics) -> CategorySignal:
        t = self.thresholds
        points = _above(m.current_ratio, t.current_ratio) + _below(
            m.debt_to_equity, t.debt_to_equity
        )
        # Cash conversion only counts when both operands are known.
        if m.free_cash_flow_per_share is not None and m.earnings_per_share is not None:
            points += _above(
                m.free_cash_flow_per_share, m.earnings_per_share * t.fcf_to_eps
            )
        details = (
            f"Current Ratio: {_fmt(m.current_ratio)}, D/E: {_fmt(m.debt_to_equity)}"
        )
        return _category(points, details)

    def _price_ratios(self, m: FinancialMetrics) -> CategorySignal:
        # NOTE: a ratio above its bound earns a point, same as every other
        # category, so expensive stocks tally toward bullish.
        t = self.thresholds
        points = (
            _above(m.price_to_earnings_ratio, t.price_to_earnings)
            + _above(m.price_to_book_ratio, t.price_to_book)
            + _above(m.price_to_sales_ratio, t.price_to_sales)
        )
        details = (
            f"P/E: {_fmt(m.price_to_earnings_ratio)}, "
            f"P/B: {_fmt(m.price_to_book_ratio)}, "
            f"P/S: {_fmt(m.price_to_sales_ratio)}"
        )
        return _category(points, details)


def aggregate(
    reasoning: FundamentalReasoning,
    source: AnalysisSource = AnalysisSource.RULES,
) -> FundamentalAnalysis:
    signals = reasoning.signals()
    bullish = signals.count(Signal.BULLISH)
    bearish = signals.count(Signal.BEARISH)

    if bullish > bearish:
        overall = Signal.BULLISH
    elif bearish > bullish:
        overall = Signal.BEARISH
    else:
        overall = Signal.NEUTRAL

    # Ties are still reported with the tied count's strength.
    confidence = round(max(bullish, bearish) / len(signals) * 100)

    return FundamentalAnalysis(
        signal=overall,
        confidence=confidence,
        reasoning=reasoning,
        source=source,
    )


def score_metrics(
    metrics: FinancialMetrics,
    thresholds: Thresholds | None = None,
) -> FundamentalAnalysis:
    return RuleBasedScorer(thresholds).score(metrics)
