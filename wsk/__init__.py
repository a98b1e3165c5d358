"""Wikibase Schema Kit - evaluate Wikibase schemas against tabular data."""

__version__ = "0.1.0"
