# fsconsole/grammar/__init__.py

from .errors import GrammarError, UnbalancedQuoteError
from .formatter import format_command, quote_strategy, quote_whitespace, percent_encode_whitespace
from .parser import CommandParser, ParsedCommand, ValidatedCommand
from .schema import CommandRegistry, CommandSpec, ParameterSpec, ParamKind
from .tokenizer import tokenize

__all__ = [
    "GrammarError", "UnbalancedQuoteError",
    "format_command", "quote_strategy", "quote_whitespace", "percent_encode_whitespace",
    "CommandParser", "ParsedCommand", "ValidatedCommand",
    "CommandRegistry", "CommandSpec", "ParameterSpec", "ParamKind",
    "tokenize",
]
