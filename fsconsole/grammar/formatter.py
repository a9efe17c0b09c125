# fsconsole/grammar/formatter.py
from __future__ import annotations

from typing import Callable, Dict, Mapping

FLAG_VALUE = "true"

ValueQuoter = Callable[[str], str]


def quote_whitespace(value: str) -> str:
    """
    Wrap values containing whitespace (or a quote character) in quotes.

    Double quotes are preferred; single quotes are used when the value holds a
    double quote. A value holding both kinds is split into adjacent quoted
    runs (`"it's "'"hi"'`), which the tokenizer joins back into one token.
    """
    if not any(ch.isspace() or ch in "\"'" for ch in value):
        return value
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"

    runs = []
    current = ""
    for ch in value:
        if ch in "\"'" and _opposite(ch) in current:
            runs.append(current)
            current = ""
        current += ch
    runs.append(current)
    return "".join(f"'{run}'" if '"' in run else f'"{run}"' for run in runs)


def _opposite(quote: str) -> str:
    return "'" if quote == '"' else '"'


def percent_encode_whitespace(value: str) -> str:
    """Replace whitespace with %20 instead of quoting (legacy backend contract)."""
    return "".join("%20" if ch.isspace() else ch for ch in value)


QUOTE_STRATEGIES: Dict[str, ValueQuoter] = {
    "quote": quote_whitespace,
    "percent20": percent_encode_whitespace,
}


def quote_strategy(name: str) -> ValueQuoter:
    try:
        return QUOTE_STRATEGIES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown quote style '{name}' (valid: {', '.join(sorted(QUOTE_STRATEGIES))})"
        ) from None


def format_command(
    command: str,
    parameters: Mapping[str, str],
    *,
    quote: ValueQuoter = quote_whitespace,
) -> str:
    """
    Serialize a structured command back to canonical text.

    Flags (value exactly "true") are emitted as bare `-name`.
    """
    parts = [command]
    for name, value in parameters.items():
        if value == FLAG_VALUE:
            parts.append(f"-{name}")
        else:
            parts.append(f"-{name}={quote(value)}")
    return " ".join(parts)
