"""Relation statistics package."""

from recordlink.queries.stats import field_stats, summarize_relations

__all__ = ["field_stats", "summarize_relations"]
