"""Composable pipeline utilities for the schema evaluator."""

from .claim_builder import ClaimBuilder
from .context import ResolutionIssue, RowContribution, TermEntry
from .value_resolution import ValueResolver

__all__ = [
    "ClaimBuilder",
    "ResolutionIssue",
    "RowContribution",
    "TermEntry",
    "ValueResolver",
]
