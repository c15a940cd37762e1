import json
from types import SimpleNamespace

import anthropic
import httpx
import pytest

from fundamental_signals.analysis.llm import LLMScorer, parse_analysis
from fundamental_signals.models.common import AnalysisSource, Signal
from fundamental_signals.models.fundamental import FinancialMetrics

VALID = {
    "signal": "Bullish",
    "confidence": 80,
    "reasoning": {
        "profitability_signal": {"signal": "bullish", "details": "High ROE"},
        "growth_signal": {"signal": "neutral", "details": "Flat revenue"},
        "financial_health_signal": {"signal": "bullish", "details": "Low debt"},
        "price_ratios_signal": {"signal": "bearish", "details": "Rich P/E"},
    },
}


class FakeMessages:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=self.text)])


def make_scorer(text=None, error=None):
    messages = FakeMessages(text, error)
    client = SimpleNamespace(messages=messages)
    return LLMScorer(client=client, model="test-model"), messages


class TestParseAnalysis:
    def test_plain_json(self):
        a = parse_analysis(json.dumps(VALID))
        assert a.signal == Signal.BULLISH
        assert a.confidence == 80
        assert a.source == AnalysisSource.LLM
        assert a.reasoning.price_ratios_signal.signal == Signal.BEARISH

    def test_json_wrapped_in_prose(self):
        text = "Here is my analysis:\n```json\n" + json.dumps(VALID) + "\n```\nThanks"
        assert parse_analysis(text).confidence == 80

    def test_braces_in_prose_before_payload(self):
        text = "Using {P/E} bands and {growth}: " + json.dumps(VALID) + " {done}"
        a = parse_analysis(text)
        assert a.confidence == 80
        assert a.reasoning.growth_signal.signal == Signal.NEUTRAL

    def test_source_cannot_be_spoofed(self):
        payload = dict(VALID, source="rules", note="trust me")
        a = parse_analysis(json.dumps(payload))
        assert a.source == AnalysisSource.LLM
        assert a.note == ""

    def test_no_json(self):
        with pytest.raises(ValueError):
            parse_analysis("I cannot help with that.")

    def test_wrong_shape(self):
        with pytest.raises(ValueError):
            parse_analysis('{"signal": "bullish"}')


class TestLLMScorer:
    def test_success(self):
        scorer, messages = make_scorer(json.dumps(VALID))
        a = scorer.score(FinancialMetrics(return_on_equity=22.0), ticker="AAPL")
        assert a.source == AnalysisSource.LLM
        assert a.signal == Signal.BULLISH
        assert messages.kwargs["model"] == "test-model"
        prompt = messages.kwargs["messages"][0]["content"]
        assert "AAPL" in prompt
        assert '"return_on_equity": 22.0' in prompt
        assert '"net_margin": null' in prompt

    def test_unparseable_falls_back(self):
        scorer, _ = make_scorer("not json at all")
        a = scorer.score(FinancialMetrics(), ticker="AAPL")
        assert a.source == AnalysisSource.LLM_FALLBACK
        assert a.signal == Signal.NEUTRAL
        assert a.confidence == 50

    def test_invalid_signal_falls_back(self):
        bad = dict(VALID, signal="to the moon")
        scorer, _ = make_scorer(json.dumps(bad))
        a = scorer.score(FinancialMetrics(), ticker="AAPL")
        assert a.source == AnalysisSource.LLM_FALLBACK

    def test_api_error_falls_back(self):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        scorer, _ = make_scorer(error=anthropic.APIConnectionError(request=request))
        a = scorer.score(FinancialMetrics(), ticker="AAPL")
        assert a.source == AnalysisSource.LLM_FALLBACK
        assert "LLM call failed" in a.note

    def test_missing_key_raises(self):
        scorer = LLMScorer(api_key="")
        with pytest.raises(RuntimeError):
            scorer.client

    def test_missing_key_falls_back(self):
        a = LLMScorer(api_key="").score(FinancialMetrics(), ticker="AAPL")
        assert a.source == AnalysisSource.LLM_FALLBACK
        assert a.confidence == 50
        assert "ANTHROPIC_API_KEY" in a.note
