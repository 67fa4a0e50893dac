from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator

from .models import ColumnSet, DelimiterMode

LOGGER = logging.getLogger(__name__)

OUTPUT_SEPARATOR = " "


class ColumnScanner(ABC):
    """Walks one line as a sequence of columns and keeps the selected ones."""

    @abstractmethod
    def iter_units(self, line: str) -> Iterator[str]:
        """Yield the columns of ``line`` in order, lazily."""

    def extract(self, line: str, columns: ColumnSet) -> str:
        wanted = iter(columns)
        target = next(wanted, None)
        selected: list[str] = []

        for position, unit in enumerate(self.iter_units(line), start=1):
            if target is None:
                break
            if position == target:
                selected.append(unit)
                target = next(wanted, None)

        return OUTPUT_SEPARATOR.join(selected)


class FixedWidthScanner(ColumnScanner):
    def iter_units(self, line: str) -> Iterator[str]:
        return iter(line)


class DelimitedFieldScanner(ColumnScanner):
    """Fields are the runs between single delimiter characters, empty runs included."""

    def __init__(self, delimiter: str) -> None:
        if len(delimiter) != 1:
            raise ValueError(f"Delimiter must be a single character, got {delimiter!r}.")
        self.delimiter = delimiter

    def iter_units(self, line: str) -> Iterator[str]:
        field_start = 0
        while True:
            boundary = line.find(self.delimiter, field_start)
            if boundary == -1:
                yield line[field_start:]
                return
            yield line[field_start:boundary]
            field_start = boundary + 1


_SCANNERS: dict[DelimiterMode, ColumnScanner] = {
    mode: FixedWidthScanner() if mode.delimiter is None else DelimitedFieldScanner(mode.delimiter)
    for mode in DelimiterMode
}


def scanner_for(mode: DelimiterMode) -> ColumnScanner:
    try:
        return _SCANNERS[mode]
    except KeyError as error:
        raise ValueError(f"Unsupported delimiter mode: {mode!r}") from error


def extract(line: str, mode: DelimiterMode, columns: ColumnSet) -> str:
    return scanner_for(mode).extract(line, columns)
