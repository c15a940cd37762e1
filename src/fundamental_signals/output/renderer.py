import json

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from fundamental_signals.models.fundamental import (
    FinancialMetrics,
    FundamentalAnalysis,
    TickerResult,
)
from fundamental_signals.output.formatters import (
    confidence_bar,
    fmt_number,
    fmt_pct,
    fmt_ratio,
    signal_color,
    source_label,
)

CATEGORY_NAMES = {
    "profitability_signal": "Profitability",
    "growth_signal": "Growth",
    "financial_health_signal": "Financial Health",
    "price_ratios_signal": "Price Ratios",
}


def to_json(results: dict[str, TickerResult], indent: int | None = 2) -> str:
    """Serialize as ``{ticker: analysis}``."""
    payload = {
        ticker: r.analysis.model_dump(mode="json") for ticker, r in results.items()
    }
    return json.dumps(payload, indent=indent)


class AnalysisRenderer:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render(self, results: dict[str, TickerResult]) -> None:
        for result in results.values():
            self._render_header(result)
            if result.metrics:
                self._render_metrics(result.metrics)
            self._render_categories(result.analysis)
            self._render_verdict(result.ticker, result.analysis)
        if len(results) > 1:
            self._render_summary(results)

    def _render_header(self, result: TickerResult) -> None:
        period = ""
        if result.metrics and result.metrics.period_end:
            period = f", period ending {result.metrics.period_end.isoformat()}"
        self.console.print()
        self.console.print(
            Panel(
                f"[bold]{result.ticker}[/bold]{period}",
                title="Fundamental Analysis",
                style="cyan",
            )
        )

    def _render_metrics(self, m: FinancialMetrics) -> None:
        table = Table(title="Raw Financial Metrics", show_header=True)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")

        rows = [
            ("ROE", fmt_pct(m.return_on_equity), "Net Margin", fmt_pct(m.net_margin)),
            (
                "Op Margin",
                fmt_pct(m.operating_margin),
                "Rev Growth",
                fmt_pct(m.revenue_growth),
            ),
            (
                "EPS Growth",
                fmt_pct(m.earnings_growth),
                "Book Value Growth",
                fmt_pct(m.book_value_growth),
            ),
            (
                "Current Ratio",
                fmt_ratio(m.current_ratio),
                "D/E",
                fmt_ratio(m.debt_to_equity),
            ),
            (
                "FCF / Share",
                fmt_number(m.free_cash_flow_per_share),
                "Fwd EPS",
                fmt_number(m.earnings_per_share),
            ),
            (
                "P/E",
                fmt_number(m.price_to_earnings_ratio),
                "P/B",
                fmt_number(m.price_to_book_ratio),
            ),
            ("P/S", fmt_number(m.price_to_sales_ratio), "", ""),
        ]
        for r in rows:
            table.add_row(*r)
        self.console.print(table)

    def _render_categories(self, analysis: FundamentalAnalysis) -> None:
        table = Table(title="Category Signals", show_header=True)
        table.add_column("Category", style="cyan")
        table.add_column("Signal")
        table.add_column("Points", justify="right")
        table.add_column("Details")

        for key, name in CATEGORY_NAMES.items():
            cat = getattr(analysis.reasoning, key)
            points = f"{cat.points}/3" if cat.points is not None else "-"
            table.add_row(
                name,
                Text(cat.signal.value, style=signal_color(cat.signal)),
                points,
                cat.details,
            )
        self.console.print(table)

    def _render_verdict(self, ticker: str, analysis: FundamentalAnalysis) -> None:
        sig = analysis.signal
        body = Text()
        body.append(f"{ticker}: ")
        body.append(sig.value.upper(), style=signal_color(sig))
        body.append(
            f"   {confidence_bar(analysis.confidence)} {analysis.confidence}%\n"
        )
        body.append(f"Source: {source_label(analysis.source)}", style="dim")
        if analysis.note:
            body.append(f"\n{analysis.note}", style="dim")
        self.console.print(Panel(body, title="Verdict", style=signal_color(sig)))

    def _render_summary(self, results: dict[str, TickerResult]) -> None:
        table = Table(title="Summary", show_header=True)
        table.add_column("Ticker", style="cyan")
        table.add_column("Signal")
        table.add_column("Confidence", justify="right")
        table.add_column("Source")
        for ticker, r in results.items():
            a = r.analysis
            table.add_row(
                ticker,
                Text(a.signal.value, style=signal_color(a.signal)),
                f"{a.confidence}%",
                source_label(a.source),
            )
        self.console.print()
        self.console.print(table)
