import logging

import pandas as pd
import yfinance as yf

logger = logging.getLogger(__name__)


class YFinanceClient:
    def __init__(self, ticker: str) -> None:
        self.ticker_symbol = ticker.upper()
        self._ticker: yf.Ticker | None = None

    @property
    def ticker(self) -> yf.Ticker:
        if self._ticker is None:
            self._ticker = yf.Ticker(self.ticker_symbol)
        return self._ticker

    def get_info(self) -> dict:
        try:
            info = self.ticker.info
            return dict(info) if info else {}
        except Exception:
            logger.warning("Failed to fetch info for %s", self.ticker_symbol)
            return {}

    def get_income_statement(self, period: str = "annual") -> pd.DataFrame:
        try:
            if period == "quarterly":
                df = self.ticker.quarterly_financials
            else:
                df = self.ticker.financials
            return df if df is not None else pd.DataFrame()
        except Exception:
            logger.warning(
                "Failed to fetch income statement for %s",
                self.ticker_symbol,
            )
            return pd.DataFrame()

    def get_balance_sheet(self, period: str = "annual") -> pd.DataFrame:
        try:
            if period == "quarterly":
                df = self.ticker.quarterly_balance_sheet
            else:
                df = self.ticker.balance_sheet
            return df if df is not None else pd.DataFrame()
        except Exception:
            logger.warning(
                "Failed to fetch balance sheet for %s",
                self.ticker_symbol,
            )
            return pd.DataFrame()

    def get_cashflow(self, period: str = "annual") -> pd.DataFrame:
        try:
            if period == "quarterly":
                df = self.ticker.quarterly_cashflow
            else:
                df = self.ticker.cashflow
            return df if df is not None else pd.DataFrame()
        except Exception:
            logger.warning(
                "Failed to fetch cashflow for %s",
                self.ticker_symbol,
            )
            return pd.DataFrame()
