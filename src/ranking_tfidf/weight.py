"""
Base contract shared by all weighting schemes.

The query executor drives a scheme like this, once per query term:

    weight = scheme.clone()
    stats = collect(weight.requirements)   # only what the scheme asked for
    weight.prepare(stats, factor)          # bind + init
    for posting in postings:
        score += weight.score_term(posting.wdf, posting.doclen, posting.unique_terms)

and uses ``max_contribution()`` / ``max_extra_contribution()`` to prune
documents that cannot reach the top-k.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from ranking_tfidf.stats import Stat, TermStatistics


class Weight(ABC):
    """Abstract weighting scheme."""

    #: Fully-qualified scheme name, used to look the scheme up when deserializing.
    name: str = ""
    #: Short name used in configuration and on the command line.
    short_name: str = ""

    def __init__(self) -> None:
        self.requirements: Stat = Stat.NONE
        self._stats = TermStatistics()

    # ----- Statistic negotiation -----

    def need_stat(self, stat: Stat) -> bool:
        """Whether the executor must supply ``stat``."""
        return stat in self.requirements

    def bind(self, stats: TermStatistics) -> None:
        """Attach the statistics gathered for this term."""
        self._stats = stats

    def prepare(self, stats: TermStatistics, factor: float) -> None:
        self.bind(stats)
        self.init(factor)

    # ----- Statistics accessors -----

    def term_frequency(self) -> int:
        return self._stats.term_frequency

    def collection_size(self) -> int:
        return self._stats.collection_size

    def query_term_frequency(self) -> int:
        return self._stats.query_term_frequency

    def wdf_upper_bound(self) -> int:
        return self._stats.wdf_upper_bound

    def doclength_lower_bound(self) -> int:
        return self._stats.doclength_lower_bound

    def doclength_upper_bound(self) -> int:
        return self._stats.doclength_upper_bound

    def average_length(self) -> float:
        return self._stats.average_length

    # ----- Scheme contract -----

    @abstractmethod
    def clone(self) -> Weight:
        """Copy of the configuration with fresh runtime state."""

    @abstractmethod
    def init(self, factor: float) -> None:
        """
        Per-term initialisation, called once after statistics are bound.

        A ``factor`` of 0.0 means this instance only computes the
        term-independent contribution.
        """

    @abstractmethod
    def score_term(self, wdf: int, doclen: int, unique_terms: int) -> float:
        """Contribution of the term to a document's score."""

    def score_terms(self, wdfs, doclens, unique_terms) -> np.ndarray:
        """:meth:`score_term` over aligned posting arrays."""
        return np.fromiter(
            (
                self.score_term(int(wdf), int(doclen), int(uniq))
                for wdf, doclen, uniq in zip(wdfs, doclens, unique_terms)
            ),
            dtype=np.float64,
            count=len(wdfs),
        )

    @abstractmethod
    def max_contribution(self) -> float:
        """Upper bound on :meth:`score_term` for this term."""

    @abstractmethod
    def extra_contribution(self, doclen: int, unique_terms: int) -> float:
        """Term-independent contribution to a document's score."""

    @abstractmethod
    def max_extra_contribution(self) -> float:
        """Upper bound on :meth:`extra_contribution`."""

    @abstractmethod
    def serialize(self) -> bytes:
        """Encode the scheme's parameters."""

    @classmethod
    @abstractmethod
    def deserialize(cls, data: bytes) -> Weight:
        """Rebuild a scheme from :meth:`serialize` output."""

    @classmethod
    @abstractmethod
    def create_from_parameters(cls, params: str) -> Weight:
        """Build a scheme from a textual parameter string."""

    def explain(self, wdf: int, doclen: int, unique_terms: int) -> dict[str, Any]:
        return {
            "score": self.score_term(wdf, doclen, unique_terms),
            "description": self.short_name or type(self).__name__,
        }


__all__ = ["Weight"]
