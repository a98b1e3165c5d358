"""Mapping layer turning table rows into Wikibase item updates.

This module provides functionality to:
- Resolve value templates against rows
- Build statements with qualifiers, references and ranks
- Group statements into one item update per subject
"""

from .pipeline import ClaimBuilder, ResolutionIssue, ValueResolver
from .processor import EvaluationResult, SchemaEvaluator

__all__ = [
    "ClaimBuilder",
    "EvaluationResult",
    "ResolutionIssue",
    "SchemaEvaluator",
    "ValueResolver",
]
