# fsconsole/grammar/errors.py

class GrammarError(Exception):
    """Base for command-line grammar failures (quoting/tokenization)."""

class UnbalancedQuoteError(GrammarError):
    def __init__(self, quote: str, column: int):
        super().__init__(f"unterminated {quote} quote starting at column {column}")
        self.quote = quote
        self.column = column
