"""Alternate scorer that asks Claude for the same output shape."""

import json
import logging

import anthropic
from pydantic import ValidationError

from fundamental_signals.analysis.fundamental import BaseScorer
from fundamental_signals.analysis.progress import (
    ProgressCallback,
    Stage,
    noop_progress,
)
from fundamental_signals.analysis.prompts import SYSTEM_PROMPT, USER_PROMPT
from fundamental_signals.config import DEFAULT_LLM_MODEL
from fundamental_signals.models.common import AnalysisSource
from fundamental_signals.models.fundamental import (
    FinancialMetrics,
    FundamentalAnalysis,
)

logger = logging.getLogger(__name__)

_DECODER = json.JSONDecoder()


def _first_json_object(text: str) -> dict:
    idx = text.find("{")
    while idx != -1:
        try:
            payload, _ = _DECODER.raw_decode(text, idx)
        except json.JSONDecodeError:
            payload = None
        if isinstance(payload, dict):
            return payload
        idx = text.find("{", idx + 1)
    raise ValueError("no JSON object in model response")


def parse_analysis(text: str) -> FundamentalAnalysis:
    """Extract and validate the first JSON object in a model reply.

    Braces in surrounding prose are skipped. Raises ValueError when no object
    decodes and ValidationError when the object does not match the analysis
    shape.
    """
    payload = _first_json_object(text)
    payload.pop("note", None)
    payload["source"] = AnalysisSource.LLM
    return FundamentalAnalysis.model_validate(payload)


class LLMScorer(BaseScorer):
    """Non-deterministic scorer; falls back to neutral/50 on any failure."""

    name = "llm"

    def __init__(
        self,
        api_key: str = "",
        model: str = DEFAULT_LLM_MODEL,
        client: anthropic.Anthropic | None = None,
        max_tokens: int = 1024,
    ) -> None:
        self._api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self._client = client

    @property
    def client(self) -> anthropic.Anthropic:
        if self._client is None:
            if not self._api_key:
                raise RuntimeError("ANTHROPIC_API_KEY required for LLM scoring")
            self._client = anthropic.Anthropic(api_key=self._api_key)
        return self._client

    def score(
        self,
        metrics: FinancialMetrics,
        ticker: str = "",
        on_progress: ProgressCallback | None = None,
    ) -> FundamentalAnalysis:
        report = on_progress or noop_progress
        ticker = ticker or metrics.ticker

        report(ticker, Stage.AGGREGATE)
        try:
            client = self.client
        except RuntimeError as e:
            logger.warning("LLM scoring unavailable for %s: %s", ticker, e)
            return FundamentalAnalysis.llm_fallback(str(e))
        try:
            response = client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": self._user_prompt(metrics, ticker)}],
            )
            body = "".join(
                block.text for block in response.content if block.type == "text"
            )
            return parse_analysis(body)
        except anthropic.APIError as e:
            logger.warning("LLM call failed for %s: %s", ticker, e)
            return FundamentalAnalysis.llm_fallback(f"LLM call failed: {e}")
        except (ValueError, ValidationError) as e:
            logger.warning("Unparseable LLM response for %s: %s", ticker, e)
            return FundamentalAnalysis.llm_fallback("Unparseable LLM response")

    @staticmethod
    def _user_prompt(metrics: FinancialMetrics, ticker: str) -> str:
        values = metrics.model_dump(exclude={"ticker", "period_end"})
        return USER_PROMPT.format(
            ticker=ticker or "UNKNOWN",
            period_end=metrics.period_end.isoformat() if metrics.period_end else "latest",
            metrics_json=json.dumps(values, indent=2),
        )
