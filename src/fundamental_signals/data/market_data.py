import logging
import math
from collections.abc import Callable
from datetime import date

import pandas as pd

from fundamental_signals.config import AnalysisConfig
from fundamental_signals.data.errors import MetricsUnavailableError
from fundamental_signals.data.yfinance_client import YFinanceClient
from fundamental_signals.models.fundamental import FinancialMetrics

logger = logging.getLogger(__name__)

REVENUE = ["Total Revenue", "Operating Revenue"]
NET_INCOME = ["Net Income", "Net Income Common Stockholders"]
OPERATING_INCOME = ["Operating Income", "EBIT"]
EQUITY = [
    "Stockholders Equity",
    "Total Stockholder Equity",
    "Common Stock Equity",
]
CURRENT_ASSETS = ["Current Assets", "Total Current Assets"]
CURRENT_LIABILITIES = ["Current Liabilities", "Total Current Liabilities"]
LONG_TERM_DEBT = ["Long Term Debt"]
FREE_CASH_FLOW = ["Free Cash Flow"]


def _safe_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def _safe_get(d: dict, *keys: str) -> float | None:
    for k in keys:
        val = _safe_float(d.get(k))
        if val is not None:
            return val
    return None


def _line_item(df: pd.DataFrame, labels: list[str], column: object) -> float | None:
    if df.empty or column is None or column not in df.columns:
        return None
    for label in labels:
        if label in df.index:
            val = df.loc[label, column]
            if isinstance(val, pd.Series):
                val = val.iloc[0] if not val.empty else None
            val = _safe_float(val)
            if val is not None:
                return val
    return None


def _ratio(
    numerator: float | None,
    denominator: float | None,
    scale: float = 1.0,
) -> float | None:
    if numerator is None or denominator is None or denominator == 0:
        return None
    return numerator / denominator * scale


def _growth(current: float | None, previous: float | None) -> float | None:
    if current is None or previous is None or previous == 0:
        return None
    return (current - previous) / previous * 100.0


def _column_date(column: object) -> date | None:
    try:
        ts = pd.Timestamp(column)
    except (TypeError, ValueError):
        return None
    if pd.isna(ts):
        return None
    return ts.date()


def period_columns(df: pd.DataFrame, end_date: date) -> list:
    """Statement columns dated on or before ``end_date``, newest first."""
    if df is None or df.empty:
        return []
    dated = [(c, _column_date(c)) for c in df.columns]
    kept = [(c, d) for c, d in dated if d is not None and d <= end_date]
    kept.sort(key=lambda pair: pair[1], reverse=True)
    return [c for c, _ in kept]


class MetricsProvider:
    """Builds FinancialMetrics records from yfinance statements."""

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        client_factory: Callable[[str], YFinanceClient] = YFinanceClient,
    ) -> None:
        self.config = config or AnalysisConfig()
        self._client_factory = client_factory

    def get_financial_metrics(
        self,
        ticker: str,
        end_date: date,
        limit: int | None = None,
    ) -> list[FinancialMetrics]:
        symbol = (ticker or "").strip().upper()
        if not symbol:
            raise MetricsUnavailableError(ticker, "invalid ticker symbol")
        limit = limit or self.config.limit

        client = self._client_factory(symbol)
        info = client.get_info()
        if not info:
            raise MetricsUnavailableError(symbol, "no quote data found")

        period = self.config.period
        income = client.get_income_statement(period)
        balance = client.get_balance_sheet(period)
        cashflow = client.get_cashflow(period)

        columns = period_columns(income, end_date) or period_columns(
            balance, end_date
        )
        if not columns:
            logger.info("No statements on or before %s for %s", end_date, symbol)
            return [self._quote_only(symbol, info)]

        records: list[FinancialMetrics] = []
        for i, column in enumerate(columns[:limit]):
            previous = columns[i + 1] if i + 1 < len(columns) else None
            records.append(
                self._build_record(
                    symbol,
                    info,
                    income,
                    balance,
                    cashflow,
                    column,
                    previous,
                    latest=(i == 0),
                )
            )
        logger.debug("Extracted %d metric record(s) for %s", len(records), symbol)
        return records

    def _quote_only(self, symbol: str, info: dict) -> FinancialMetrics:
        return FinancialMetrics(ticker=symbol, **self._quote_fields(info))

    @staticmethod
    def _quote_fields(info: dict) -> dict[str, float | None]:
        return {
            "earnings_per_share": _safe_get(info, "forwardEps"),
            "price_to_earnings_ratio": _safe_get(info, "forwardPE"),
            "price_to_book_ratio": _safe_get(info, "priceToBook"),
            "price_to_sales_ratio": _safe_get(info, "priceToSalesTrailing12Months"),
        }

    def _build_record(
        self,
        symbol: str,
        info: dict,
        income: pd.DataFrame,
        balance: pd.DataFrame,
        cashflow: pd.DataFrame,
        column: object,
        previous: object | None,
        latest: bool,
    ) -> FinancialMetrics:
        revenue = _line_item(income, REVENUE, column)
        net_income = _line_item(income, NET_INCOME, column)
        operating_income = _line_item(income, OPERATING_INCOME, column)
        equity = _line_item(balance, EQUITY, column)

        fcf = _line_item(cashflow, FREE_CASH_FLOW, column)
        shares = _safe_get(info, "sharesOutstanding")

        quote = self._quote_fields(info) if latest else {}

        return FinancialMetrics(
            ticker=symbol,
            period_end=_column_date(column),
            return_on_equity=_ratio(net_income, equity, 100.0),
            net_margin=_ratio(net_income, revenue, 100.0),
            operating_margin=_ratio(operating_income, revenue, 100.0),
            revenue_growth=_growth(revenue, _line_item(income, REVENUE, previous)),
            earnings_growth=_growth(
                net_income, _line_item(income, NET_INCOME, previous)
            ),
            book_value_growth=_growth(
                equity, _line_item(balance, EQUITY, previous)
            ),
            current_ratio=_ratio(
                _line_item(balance, CURRENT_ASSETS, column),
                _line_item(balance, CURRENT_LIABILITIES, column),
            ),
            debt_to_equity=_ratio(
                _line_item(balance, LONG_TERM_DEBT, column),
                equity,
            ),
            free_cash_flow_per_share=_ratio(fcf, shares),
            **quote,
        )
