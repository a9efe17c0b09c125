# fsconsole/grammar/parser.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import GrammarError
from .formatter import ValueQuoter, format_command, quote_whitespace, FLAG_VALUE
from .schema import CommandRegistry, CommandSpec, ParamKind
from .tokenizer import tokenize


@dataclass
class ParsedCommand:
    """Result of one parse call. Inert (must not be executed) when errors is non-empty."""
    command: str
    parameters: Dict[str, str] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class ValidatedCommand:
    original: str
    formatted: str
    errors: Tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


class CommandParser:
    """
    Schema-driven parser/validator for `<command> (-<param>[=<value>])*` lines.

    parse() never raises: grammar errors fail the whole line with a single
    error, validation errors are accumulated so every problem surfaces at once.
    """

    def __init__(
        self,
        registry: Optional[CommandRegistry] = None,
        *,
        quote: ValueQuoter = quote_whitespace,
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = registry or CommandRegistry.default()
        self.quote = quote
        self._log = logger or logging.getLogger(__name__)

    def parse(self, line: str) -> ParsedCommand:
        text = line.strip()
        if not text:
            return ParsedCommand(command="", errors=["empty command"])

        try:
            tokens = tokenize(text)
        except GrammarError as e:
            self._log.debug("GRAMMAR_ERROR line=%r err=%s", text, e)
            return ParsedCommand(command=text.split()[0].lower(), errors=[str(e)])

        if not tokens:
            return ParsedCommand(command="", errors=["invalid command"])

        name = tokens[0].lower()
        spec = self.registry.get(name)
        if spec is None:
            return ParsedCommand(command=name, errors=[f"unknown command: {name}"])

        parameters, errors = self.parse_parameters(tokens[1:])
        errors.extend(self.validate(parameters, spec))

        return ParsedCommand(
            command=name,
            parameters=self.apply_defaults(parameters, spec),
            errors=errors,
        )

    @staticmethod
    def parse_parameters(tokens: Sequence[str]) -> Tuple[Dict[str, str], List[str]]:
        parameters: Dict[str, str] = {}
        errors: List[str] = []

        for token in tokens:
            if not token.startswith("-"):
                errors.append(f"invalid token (must start with -): {token}")
                continue

            name, sep, value = token[1:].partition("=")
            if not name:
                errors.append(f"empty parameter name in: {token}")
                continue

            parameters[name.lower()] = value if sep else FLAG_VALUE

        return parameters, errors

    @staticmethod
    def validate(parameters: Dict[str, str], spec: CommandSpec) -> List[str]:
        errors: List[str] = []

        for pname in spec.required:
            if pname not in parameters:
                errors.append(f"missing required parameter: -{pname}")

        for pname, value in parameters.items():
            pspec = spec.parameters.get(pname)
            if pspec is None:
                errors.append(f"unknown parameter: -{pname}")
                continue

            if pspec.kind is ParamKind.NUMBER and not _is_positive_number(value):
                errors.append(f"parameter -{pname} must be a positive number greater than zero")
            elif pspec.kind is ParamKind.ENUM and not pspec.accepts(value):
                errors.append(
                    f"invalid value for -{pname}. Allowed values: {', '.join(pspec.allowed_values)}"
                )

        return errors

    @staticmethod
    def apply_defaults(parameters: Dict[str, str], spec: CommandSpec) -> Dict[str, str]:
        result = dict(parameters)
        for pname, pspec in spec.parameters.items():
            if pname not in result and pspec.default is not None:
                result[pname] = pspec.default
        return result

    def format(self, parsed: ParsedCommand) -> str:
        return format_command(parsed.command, parsed.parameters, quote=self.quote)

    def validate_and_format(self, line: str) -> ValidatedCommand:
        parsed = self.parse(line)
        return ValidatedCommand(
            original=line,
            formatted=self.format(parsed),
            errors=tuple(parsed.errors),
        )

    def help(self, name: str) -> str:
        return self.registry.describe(name)


def _is_positive_number(value: str) -> bool:
    try:
        number = float(value)
    except ValueError:
        return False
    return math.isfinite(number) and number > 0
