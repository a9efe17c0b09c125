# fsconsole/grammar/tokenizer.py
from __future__ import annotations

from typing import List

from .errors import UnbalancedQuoteError

QUOTES = ('"', "'")


def tokenize(line: str) -> List[str]:
    """
    Split a command line on un-quoted whitespace.

    A quoted run may start anywhere inside a token (`-path="/a b"`); the quote
    characters are stripped and whitespace inside is kept. Only the opening
    character closes a run, so `"it's"` is a single token. Empty tokens are
    dropped.

    Raises UnbalancedQuoteError for an unterminated quote.
    """
    tokens: List[str] = []
    current: List[str] = []
    quote = ""
    quote_col = -1

    for col, ch in enumerate(line):
        if quote:
            if ch == quote:
                quote = ""
            else:
                current.append(ch)
        elif ch in QUOTES:
            quote = ch
            quote_col = col
        elif ch.isspace():
            if current:
                tokens.append("".join(current))
                current = []
        else:
            current.append(ch)

    if quote:
        raise UnbalancedQuoteError(quote, quote_col)

    if current:
        tokens.append("".join(current))

    return tokens
