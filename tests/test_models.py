from datetime import date

import pytest
from pydantic import ValidationError

from fundamental_signals.models.common import (
    AnalysisRequest,
    AnalysisSource,
    CategorySignal,
    Signal,
)
from fundamental_signals.models.fundamental import (
    FinancialMetrics,
    FundamentalAnalysis,
    FundamentalReasoning,
)


class TestSignal:
    def test_from_points_bullish(self):
        assert Signal.from_points(2) == Signal.BULLISH
        assert Signal.from_points(3) == Signal.BULLISH

    def test_from_points_neutral(self):
        assert Signal.from_points(1) == Signal.NEUTRAL

    def test_from_points_bearish(self):
        assert Signal.from_points(0) == Signal.BEARISH

    def test_string_values(self):
        assert Signal.BULLISH == "bullish"
        assert Signal.NEUTRAL.value == "neutral"


class TestCategorySignal:
    def test_signal_normalized(self):
        cat = CategorySignal(signal="  Bullish ", details="x")
        assert cat.signal == Signal.BULLISH

    def test_rejects_unknown_signal(self):
        with pytest.raises(ValidationError):
            CategorySignal(signal="moon")

    def test_points_bounded(self):
        with pytest.raises(ValidationError):
            CategorySignal(signal=Signal.BULLISH, points=4)


class TestFinancialMetrics:
    def test_all_fields_default_unknown(self):
        m = FinancialMetrics()
        dumped = m.model_dump(exclude={"ticker", "period_end"})
        assert len(dumped) == 13
        assert all(v is None for v in dumped.values())


class TestFundamentalAnalysis:
    def test_frozen(self):
        a = FundamentalAnalysis.placeholder("boom")
        with pytest.raises(ValidationError):
            a.confidence = 90

    def test_confidence_bounds(self):
        with pytest.raises(ValidationError):
            FundamentalAnalysis(
                signal=Signal.NEUTRAL,
                confidence=101,
                reasoning=FundamentalReasoning.all_neutral(""),
            )

    def test_placeholder_is_distinguishable(self):
        a = FundamentalAnalysis.placeholder("no quote data found")
        assert a.signal == Signal.NEUTRAL
        assert a.confidence == 0
        assert a.source == AnalysisSource.UNAVAILABLE
        assert a.note == "no quote data found"
        assert not a.available

    def test_llm_fallback(self):
        a = FundamentalAnalysis.llm_fallback()
        assert a.signal == Signal.NEUTRAL
        assert a.confidence == 50
        assert a.source == AnalysisSource.LLM_FALLBACK
        assert a.available
        assert a.reasoning.signals() == [Signal.NEUTRAL] * 4

    def test_json_shape(self):
        a = FundamentalAnalysis.llm_fallback()
        data = a.model_dump(mode="json")
        assert set(data["reasoning"]) == {
            "profitability_signal",
            "growth_signal",
            "financial_health_signal",
            "price_ratios_signal",
        }
        assert data["signal"] == "neutral"


class TestAnalysisRequest:
    def test_requires_tickers(self):
        with pytest.raises(ValidationError):
            AnalysisRequest(tickers=[])

    def test_defaults(self):
        req = AnalysisRequest(tickers=["AAPL"])
        assert req.end_date == date.today()
        assert req.limit == 10
