"""
Statistic negotiation between a weighting scheme and the query executor.

A scheme declares up front which corpus and document statistics its formulas
read. The executor may skip computing anything not declared; such a statistic
is left at zero in the :class:`TermStatistics` handed to the scheme.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Flag
from typing import TYPE_CHECKING

from ranking_tfidf.normalization import IdfNorm, WdfNorm

if TYPE_CHECKING:
    from ranking_tfidf.config import SchemeConfig


class Stat(Flag):
    """Statistics a weighting scheme can ask the executor for."""

    NONE = 0
    TERM_FREQUENCY = 1    # documents indexed by the term
    COLLECTION_SIZE = 2   # documents in the collection
    WDF = 4               # within-document frequency, per posting
    WDF_MAX = 8           # upper bound on the term's wdf
    WQF = 16              # within-query frequency
    AVERAGE_LENGTH = 32   # average document length
    DOC_LENGTH = 64       # document length, per posting
    DOC_LENGTH_MIN = 128  # lower bound on document length
    DOC_LENGTH_MAX = 256  # upper bound on document length
    UNIQUE_TERMS = 512    # distinct terms in the document, per posting

    ALL = (
        TERM_FREQUENCY | COLLECTION_SIZE | WDF | WDF_MAX | WQF | AVERAGE_LENGTH
        | DOC_LENGTH | DOC_LENGTH_MIN | DOC_LENGTH_MAX | UNIQUE_TERMS
    )


def declare_requirements(config: SchemeConfig) -> Stat:
    """Statistics read by the TF-IDF formulas for ``config``."""
    needed = Stat.WDF | Stat.WDF_MAX | Stat.WQF
    if config.idf_norm is not IdfNorm.NONE:
        needed |= Stat.TERM_FREQUENCY
    if config.idf_norm not in (IdfNorm.NONE, IdfNorm.FREQ):
        needed |= Stat.COLLECTION_SIZE
    if config.wdf_norm is WdfNorm.PIVOTED or config.idf_norm is IdfNorm.PIVOTED:
        needed |= Stat.AVERAGE_LENGTH | Stat.DOC_LENGTH | Stat.DOC_LENGTH_MIN
    if config.wdf_norm is WdfNorm.LOG_AVERAGE:
        needed |= (
            Stat.DOC_LENGTH | Stat.DOC_LENGTH_MIN | Stat.DOC_LENGTH_MAX | Stat.UNIQUE_TERMS
        )
    return needed


@dataclass(frozen=True)
class TermStatistics:
    """
    Term- and collection-level statistics for one query term.

    Attributes:
        term_frequency: Number of documents indexed by the term.
        collection_size: Number of documents in the collection.
        query_term_frequency: Occurrences of the term in the query.
        wdf_upper_bound: Largest wdf of the term in any document.
        doclength_lower_bound: Shortest length of a document indexed by the term.
        doclength_upper_bound: Longest length of a document indexed by the term.
        average_length: Average document length in the collection.
    """

    term_frequency: int = 0
    collection_size: int = 0
    query_term_frequency: int = 0
    wdf_upper_bound: int = 0
    doclength_lower_bound: int = 0
    doclength_upper_bound: int = 0
    average_length: float = 0.0


__all__ = ["Stat", "TermStatistics", "declare_requirements"]
