"""Progress checkpoints reported while a ticker is analysed."""

import logging
from collections.abc import Callable
from enum import StrEnum

logger = logging.getLogger(__name__)


class Stage(StrEnum):
    FETCHING_METRICS = "fetching_metrics"
    PROFITABILITY = "profitability"
    GROWTH = "growth"
    FINANCIAL_HEALTH = "financial_health"
    PRICE_RATIOS = "price_ratios"
    AGGREGATE = "aggregate"
    DONE = "done"

    @property
    def label(self) -> str:
        labels = {
            Stage.FETCHING_METRICS: "Fetching financial metrics",
            Stage.PROFITABILITY: "Analyzing profitability",
            Stage.GROWTH: "Analyzing growth",
            Stage.FINANCIAL_HEALTH: "Analyzing financial health",
            Stage.PRICE_RATIOS: "Analyzing valuation ratios",
            Stage.AGGREGATE: "Calculating final signal",
            Stage.DONE: "Done",
        }
        return labels[self]


ProgressCallback = Callable[[str, Stage], None]


def noop_progress(ticker: str, stage: Stage) -> None:
    return None


def logging_progress(ticker: str, stage: Stage) -> None:
    logger.info("%s - %s", ticker or "?", stage.label)
