from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fundamental_signals.models.common import AnalysisSource, CategorySignal, Signal


class FinancialMetrics(BaseModel):
    """One snapshot of ratios for a ticker. ``None`` means unknown."""

    ticker: str = ""
    period_end: date | None = None

    # Profitability (percent)
    return_on_equity: float | None = None
    net_margin: float | None = None
    operating_margin: float | None = None

    # Growth (percent, period over period)
    revenue_growth: float | None = None
    earnings_growth: float | None = None
    book_value_growth: float | None = None

    # Financial health
    current_ratio: float | None = None
    debt_to_equity: float | None = None
    free_cash_flow_per_share: float | None = None
    earnings_per_share: float | None = None

    # Price ratios
    price_to_earnings_ratio: float | None = None
    price_to_book_ratio: float | None = None
    price_to_sales_ratio: float | None = None


class FundamentalReasoning(BaseModel):
    model_config = ConfigDict(frozen=True)

    profitability_signal: CategorySignal
    growth_signal: CategorySignal
    financial_health_signal: CategorySignal
    price_ratios_signal: CategorySignal

    def signals(self) -> list[Signal]:
        return [
            self.profitability_signal.signal,
            self.growth_signal.signal,
            self.financial_health_signal.signal,
            self.price_ratios_signal.signal,
        ]

    @classmethod
    def all_neutral(cls, details: str) -> "FundamentalReasoning":
        neutral = CategorySignal(signal=Signal.NEUTRAL, details=details)
        return cls(
            profitability_signal=neutral,
            growth_signal=neutral,
            financial_health_signal=neutral,
            price_ratios_signal=neutral,
        )


class FundamentalAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    signal: Signal
    confidence: int = Field(ge=0, le=100)
    reasoning: FundamentalReasoning
    source: AnalysisSource = AnalysisSource.RULES
    note: str = ""

    @field_validator("signal", mode="before")
    @classmethod
    def _normalize_signal(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @classmethod
    def placeholder(cls, reason: str) -> "FundamentalAnalysis":
        """Neutral stand-in used when no metrics could be obtained."""
        return cls(
            signal=Signal.NEUTRAL,
            confidence=0,
            reasoning=FundamentalReasoning.all_neutral("Metrics unavailable"),
            source=AnalysisSource.UNAVAILABLE,
            note=reason,
        )

    @classmethod
    def llm_fallback(cls, reason: str = "") -> "FundamentalAnalysis":
        return cls(
            signal=Signal.NEUTRAL,
            confidence=50,
            reasoning=FundamentalReasoning.all_neutral("LLM analysis unavailable"),
            source=AnalysisSource.LLM_FALLBACK,
            note=reason,
        )

    @property
    def available(self) -> bool:
        return self.source != AnalysisSource.UNAVAILABLE


class TickerResult(BaseModel):
    ticker: str
    metrics: FinancialMetrics | None = None
    analysis: FundamentalAnalysis
