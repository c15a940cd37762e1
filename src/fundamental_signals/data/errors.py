class MetricsUnavailableError(Exception):
    """No usable metrics could be produced for a ticker."""

    def __init__(self, ticker: str, reason: str) -> None:
        self.ticker = ticker
        self.reason = reason
        super().__init__(f"Metrics unavailable for {ticker or '<empty>'}: {reason}")
