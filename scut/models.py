from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class DelimiterMode(str, Enum):
    FIXED_WIDTH = "fixed_width"
    WHITESPACE = "whitespace"
    COMMA_SEPARATED = "comma_separated"

    @property
    def delimiter(self) -> str | None:
        return _MODE_DELIMITERS[self]


_MODE_DELIMITERS = {
    DelimiterMode.FIXED_WIDTH: None,
    DelimiterMode.WHITESPACE: " ",
    DelimiterMode.COMMA_SEPARATED: ",",
}


class SelectionTerm(BaseModel):
    """One term of a selection: a single column ``a`` or an inclusive run ``a-b``."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=1)
    end: int = Field(ge=1)

    @model_validator(mode="after")
    def validate_direction(self) -> "SelectionTerm":
        if self.end < self.start:
            raise ValueError(f"Reversed range {self.start}-{self.end}: start must be <= end.")
        return self

    def columns(self, max_column: int | None = None) -> range:
        end = self.end
        if max_column is not None:
            # The start always survives so single columns past the bound are kept.
            end = max(self.start, min(self.end, max_column))
        return range(self.start, end + 1)

    def __str__(self) -> str:
        if self.end != self.start:
            return f"{self.start}-{self.end}"
        return str(self.start)


class ColumnSet(BaseModel):
    """Strictly ascending 1-based column indices requested by a selection."""

    model_config = ConfigDict(frozen=True)

    columns: tuple[int, ...] = Field(min_length=1)

    @field_validator("columns")
    @classmethod
    def validate_ascending(cls, columns: tuple[int, ...]) -> tuple[int, ...]:
        previous = 0
        for column in columns:
            if column < 1:
                raise ValueError(f"Columns are numbered from 1, got {column}.")
            if column <= previous:
                raise ValueError(
                    f"Columns must be strictly ascending: {column} follows {previous}."
                )
            previous = column
        return columns

    @classmethod
    def from_terms(cls, terms: Iterable[SelectionTerm], max_column: int | None = None) -> "ColumnSet":
        """Expand, sort and de-duplicate ``terms``.

        With ``max_column`` set, ranges stop at that column. Columns past it
        can never match a bounded line, so dropping them changes no output.
        """
        expanded: set[int] = set()
        for term in terms:
            expanded.update(term.columns(max_column))
        return cls(columns=tuple(sorted(expanded)))

    @property
    def max_column(self) -> int:
        return self.columns[-1]

    def __iter__(self) -> Iterator[int]:  # type: ignore[override]
        return iter(self.columns)

    def __len__(self) -> int:
        return len(self.columns)
