"""Streaming column extraction for line-oriented text."""

from .extractor import extract
from .models import ColumnSet, DelimiterMode, SelectionTerm
from .selection_parser import InvalidSelectionError, parse, validate

__all__ = [
    "ColumnSet",
    "DelimiterMode",
    "InvalidSelectionError",
    "SelectionTerm",
    "extract",
    "parse",
    "validate",
]
