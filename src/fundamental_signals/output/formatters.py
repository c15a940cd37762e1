from fundamental_signals.models.common import AnalysisSource, Signal


def fmt_pct(value: float | None, decimals: int = 2) -> str:
    if value is None:
        return "N/A"
    return f"{value:+.{decimals}f}%"


def fmt_number(value: float | None, decimals: int = 2) -> str:
    if value is None:
        return "N/A"
    return f"{value:,.{decimals}f}"


def fmt_ratio(value: float | None, decimals: int = 2) -> str:
    if value is None:
        return "N/A"
    return f"{value:.{decimals}f}x"


def signal_color(signal: Signal) -> str:
    colors = {
        Signal.BULLISH: "bold green",
        Signal.NEUTRAL: "yellow",
        Signal.BEARISH: "bold red",
    }
    return colors.get(signal, "white")


def source_label(source: AnalysisSource) -> str:
    labels = {
        AnalysisSource.RULES: "rule-based",
        AnalysisSource.LLM: "LLM",
        AnalysisSource.LLM_FALLBACK: "LLM fallback",
        AnalysisSource.UNAVAILABLE: "placeholder (metrics unavailable)",
    }
    return labels.get(source, str(source))


def confidence_bar(confidence: int, width: int = 10) -> str:
    filled = round(confidence / 100 * width)
    return "█" * filled + "░" * (width - filled)
