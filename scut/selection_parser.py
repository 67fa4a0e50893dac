"""Selection parsing: turns ``1-2,7-15`` style specs into a :class:`ColumnSet`."""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import ValidationError

from .models import ColumnSet, SelectionTerm

LOGGER = logging.getLogger(__name__)

_TERM_SEPARATOR = ","
_RANGE_SEPARATOR = "-"


class InvalidSelectionError(ValueError):
    pass


class ParserState(str, Enum):
    TERM_START = "term_start"
    ACCUMULATING_DIGITS = "accumulating_digits"
    AWAITING_RANGE_END = "awaiting_range_end"


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def validate(spec: str) -> None:
    """Syntactic pre-check; numeric bounds and range direction are checked by ``parse``."""
    if not spec:
        raise InvalidSelectionError("Invalid selection: empty selection.")
    if not _is_digit(spec[0]) or not _is_digit(spec[-1]):
        raise InvalidSelectionError(
            f"Invalid selection '{spec}': must start and end with a digit."
        )
    for position, char in enumerate(spec[1:-1], start=2):
        if not (_is_digit(char) or char in {_TERM_SEPARATOR, _RANGE_SEPARATOR}):
            raise InvalidSelectionError(
                f"Invalid selection '{spec}': unexpected character {char!r} at position {position}."
            )


class _SelectionScanner:
    def __init__(self, spec: str) -> None:
        self.spec = spec
        self.state = ParserState.TERM_START
        self.digits = ""
        self.pending_start: int | None = None
        self.terms: list[SelectionTerm] = []

    def _fail(self, position: int, message: str) -> InvalidSelectionError:
        return InvalidSelectionError(
            f"Invalid selection '{self.spec}' at position {position}: {message}"
        )

    def feed(self, char: str, position: int) -> None:
        if _is_digit(char):
            self.digits += char
            if self.state == ParserState.TERM_START:
                self.state = ParserState.ACCUMULATING_DIGITS
            return

        if char == _RANGE_SEPARATOR:
            if not self.digits:
                raise self._fail(position, "range is missing its start column.")
            if self.pending_start is not None:
                raise self._fail(position, "a term may contain only one '-'.")
            self.pending_start = int(self.digits)
            self.digits = ""
            self.state = ParserState.AWAITING_RANGE_END
            return

        if char == _TERM_SEPARATOR:
            self._close_term(position)
            return

        raise self._fail(position, f"unexpected character {char!r}.")

    def _close_term(self, position: int) -> None:
        if not self.digits:
            if self.state == ParserState.AWAITING_RANGE_END:
                raise self._fail(position, "range is missing its end column.")
            raise self._fail(position, "empty term.")

        end = int(self.digits)
        start = end if self.pending_start is None else self.pending_start
        try:
            term = SelectionTerm(start=start, end=end)
        except ValidationError as error:
            label = SelectionTerm.model_construct(start=start, end=end)
            reason = error.errors()[0]["msg"]
            raise self._fail(position, f"term '{label}' rejected: {reason}") from error

        self.terms.append(term)
        self.digits = ""
        self.pending_start = None
        self.state = ParserState.TERM_START

    def finish(self) -> list[SelectionTerm]:
        self._close_term(len(self.spec) + 1)
        return self.terms


def parse_terms(spec: str) -> list[SelectionTerm]:
    if not spec:
        raise InvalidSelectionError("Invalid selection: empty selection.")
    scanner = _SelectionScanner(spec)
    for position, char in enumerate(spec, start=1):
        scanner.feed(char, position)
    return scanner.finish()


def parse(spec: str, max_column: int | None = None) -> ColumnSet:
    """Parse ``spec`` into sorted, de-duplicated columns.

    ``max_column`` caps range expansion, see :meth:`ColumnSet.from_terms`.
    """
    terms = parse_terms(spec)
    columns = ColumnSet.from_terms(terms, max_column=max_column)
    LOGGER.debug(
        "Selection %r parsed into term(s) %s, %s column(s), max column %s.",
        spec,
        ", ".join(str(term) for term in terms),
        len(columns),
        columns.max_column,
    )
    return columns
