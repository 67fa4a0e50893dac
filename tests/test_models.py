"""
Tests for the data model.
"""

import pytest
from pydantic import ValidationError

from scut.models import ColumnSet, DelimiterMode, SelectionTerm


class TestDelimiterMode:
    """Delimiter characters per mode."""

    def test_delimiters(self):
        assert DelimiterMode.FIXED_WIDTH.delimiter is None
        assert DelimiterMode.WHITESPACE.delimiter == " "
        assert DelimiterMode.COMMA_SEPARATED.delimiter == ","


class TestSelectionTerm:
    """Range terms and their bounds."""

    def test_columns_inclusive(self):
        assert list(SelectionTerm(start=3, end=5).columns()) == [3, 4, 5]

    def test_string_form(self):
        assert str(SelectionTerm(start=7, end=7)) == "7"
        assert str(SelectionTerm(start=7, end=9)) == "7-9"

    def test_reversed_range_rejected(self):
        with pytest.raises(ValidationError, match="Reversed range"):
            SelectionTerm(start=5, end=2)

    def test_zero_rejected(self):
        with pytest.raises(ValidationError):
            SelectionTerm(start=0, end=1)

    def test_large_indices_accepted(self):
        term = SelectionTerm(start=2_000_000, end=2_000_000)
        assert list(term.columns()) == [2_000_000]

    def test_columns_capped_by_max_column(self):
        assert list(SelectionTerm(start=3, end=10**9).columns(max_column=5)) == [3, 4, 5]

    def test_start_past_cap_is_kept(self):
        assert list(SelectionTerm(start=50, end=10**9).columns(max_column=5)) == [50]


class TestColumnSet:
    """Ascending-order contract of column sets."""

    def test_from_terms_sorts_and_deduplicates(self):
        terms = [SelectionTerm(start=4, end=6), SelectionTerm(start=1, end=1), SelectionTerm(start=5, end=5)]
        columns = ColumnSet.from_terms(terms)
        assert columns.columns == (1, 4, 5, 6)
        assert columns.max_column == 6
        assert len(columns) == 4

    def test_from_terms_with_cap(self):
        terms = [SelectionTerm(start=1, end=3), SelectionTerm(start=2, end=10**9), SelectionTerm(start=7, end=7)]
        assert ColumnSet.from_terms(terms, max_column=4).columns == (1, 2, 3, 4, 7)

    def test_rejects_unsorted(self):
        with pytest.raises(ValidationError, match="strictly ascending"):
            ColumnSet(columns=(3, 1))

    def test_rejects_duplicates(self):
        with pytest.raises(ValidationError, match="strictly ascending"):
            ColumnSet(columns=(1, 1))

    def test_rejects_zero(self):
        with pytest.raises(ValidationError, match="numbered from 1"):
            ColumnSet(columns=(0, 1))

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            ColumnSet(columns=())

    def test_is_frozen(self):
        columns = ColumnSet(columns=(1, 2))
        with pytest.raises(ValidationError):
            columns.columns = (3,)
