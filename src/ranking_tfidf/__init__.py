"""
TF-IDF weighting schemes for a text-retrieval engine.

A scheme turns the statistics gathered while evaluating a query term into a
per-document score contribution, declares which statistics it needs, bounds
its own contribution for top-k pruning, and serializes its configuration so
remote shards score identically.
"""

from ranking_tfidf.config import DEFAULT_DELTA, DEFAULT_NORMALS, DEFAULT_SLOPE, SchemeConfig
from ranking_tfidf.corpus import Corpus, TfIdfRanker, tokenize
from ranking_tfidf.errors import InvalidConfigurationError, RankingError, SerializationError
from ranking_tfidf.normalization import IdfNorm, WdfNorm, WtNorm
from ranking_tfidf.registry import (
    available_schemes,
    create_scheme,
    deserialize_scheme,
    get_scheme,
    register_scheme,
)
from ranking_tfidf.stats import Stat, TermStatistics, declare_requirements
from ranking_tfidf.tfidf import TfIdfWeight
from ranking_tfidf.weight import Weight

__version__ = "0.1.0"

__all__ = [
    "Weight",
    "TfIdfWeight",
    "SchemeConfig",
    "WdfNorm",
    "IdfNorm",
    "WtNorm",
    "Stat",
    "TermStatistics",
    "declare_requirements",
    "RankingError",
    "InvalidConfigurationError",
    "SerializationError",
    "register_scheme",
    "get_scheme",
    "available_schemes",
    "create_scheme",
    "deserialize_scheme",
    "Corpus",
    "TfIdfRanker",
    "tokenize",
    "DEFAULT_NORMALS",
    "DEFAULT_SLOPE",
    "DEFAULT_DELTA",
]
