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
    TickerResult,
)

__all__ = [
    "AnalysisRequest",
    "AnalysisSource",
    "CategorySignal",
    "FinancialMetrics",
    "FundamentalAnalysis",
    "FundamentalReasoning",
    "Signal",
    "TickerResult",
]
