import re

_TICKER_TOKEN = re.compile(r"\$([A-Za-z]+)")


def normalize_tickers(tickers: list[str]) -> list[str]:
    """Upper-case, strip a leading ``$`` and drop blanks and duplicates."""
    seen: set[str] = set()
    result: list[str] = []
    for t in tickers:
        symbol = t.replace("$", "").strip().upper()
        if symbol and symbol not in seen:
            seen.add(symbol)
            result.append(symbol)
    return result


def extract_tickers(text: str) -> list[str]:
    """Find ``$TICKER`` mentions in free text, in order of appearance."""
    return normalize_tickers(_TICKER_TOKEN.findall(text))
