"""
Relation Resolution Package

Option index building, value normalization, the match pipeline, the
batch orchestrator and the interactive lookup factory.
"""

from recordlink.resolution.labels import build_option, build_options, format_label
from recordlink.resolution.lookup import RelationLookup, create_relation_lookup
from recordlink.resolution.matching import (
    BATCH_PIPELINE,
    INTERACTIVE_PIPELINE,
    MatchPipeline,
    split_compound,
)
from recordlink.resolution.normalizer import date_candidates, normalize, parse_date
from recordlink.resolution.options import OptionIndexBuilder, fetch_relation_options
from recordlink.resolution.orchestrator import (
    RelationResolver,
    resolve_relation_references,
)

__all__ = [
    "BATCH_PIPELINE",
    "INTERACTIVE_PIPELINE",
    "MatchPipeline",
    "OptionIndexBuilder",
    "RelationLookup",
    "RelationResolver",
    "build_option",
    "build_options",
    "create_relation_lookup",
    "date_candidates",
    "fetch_relation_options",
    "format_label",
    "normalize",
    "parse_date",
    "resolve_relation_references",
    "split_compound",
]
