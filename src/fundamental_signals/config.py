import os

from pydantic import BaseModel, Field

DEFAULT_LLM_MODEL = "claude-sonnet-4-20250514"


class Thresholds(BaseModel):
    """Scoring bounds, compared raw against ``FinancialMetrics`` values.

    ``MetricsProvider`` emits profitability and growth in percent (ROE 20.0
    means 20%) while these defaults are fractions, so any positive percentage
    clears them. Inject percent bounds (e.g. ``return_on_equity=15.0``) to
    score provider output on a percent scale.
    """

    # Profitability: points when above
    return_on_equity: float = 0.15
    net_margin: float = 0.20
    operating_margin: float = 0.15

    # Growth: points when above
    revenue_growth: float = 0.10
    earnings_growth: float = 0.10
    book_value_growth: float = 0.10

    # Financial health
    current_ratio: float = 1.5  # above
    debt_to_equity: float = 0.5  # below
    fcf_to_eps: float = 0.8  # FCF/share above EPS * this

    # Price ratios: points when above
    price_to_earnings: float = 25.0
    price_to_book: float = 3.0
    price_to_sales: float = 5.0


class AnalysisConfig(BaseModel):
    period: str = "annual"  # "annual" or "quarterly"
    limit: int = Field(default=10, ge=1)
    max_workers: int = Field(default=4, ge=1)

    use_llm: bool = False
    llm_model: str = DEFAULT_LLM_MODEL
    anthropic_api_key: str = Field(
        default_factory=lambda: os.environ.get("ANTHROPIC_API_KEY", "")
    )

    thresholds: Thresholds = Field(default_factory=Thresholds)
