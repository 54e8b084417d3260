"""Improvement suggestion interfaces."""

from pob_advisor.suggesters.aggregator import aggregate_suggestions, suggest_improvements

__all__ = [
    "aggregate_suggestions",
    "suggest_improvements",
]
