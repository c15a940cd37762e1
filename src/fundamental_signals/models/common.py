from datetime import date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Signal(StrEnum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"

    @staticmethod
    def from_points(points: int) -> "Signal":
        if points >= 2:
            return Signal.BULLISH
        if points == 0:
            return Signal.BEARISH
        return Signal.NEUTRAL


class AnalysisSource(StrEnum):
    RULES = "rules"
    LLM = "llm"
    LLM_FALLBACK = "llm_fallback"
    UNAVAILABLE = "unavailable"


class CategorySignal(BaseModel):
    model_config = ConfigDict(frozen=True)

    signal: Signal
    details: str = ""
    points: int | None = Field(default=None, ge=0, le=3)

    @field_validator("signal", mode="before")
    @classmethod
    def _normalize_signal(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class AnalysisRequest(BaseModel):
    tickers: list[str] = Field(min_length=1)
    end_date: date = Field(default_factory=date.today)
    limit: int = Field(default=10, ge=1)
