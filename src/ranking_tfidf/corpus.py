"""
In-memory corpus and ranker driving a weighting scheme end to end.

The corpus plays the query executor's part: it gathers only the statistics a
scheme declares, hands them over, and feeds posting lists to the scheme.

Usage:
    corpus = Corpus([tokenize(text) for text in texts])
    ranker = TfIdfRanker(corpus, TfIdfWeight("ltn"))
    indices, scores = ranker.rank(tokenize("information retrieval"), top_k=10)
"""

from __future__ import annotations

import logging
import re
import warnings
from collections import Counter
from typing import TYPE_CHECKING

import numpy as np
from scipy.sparse import csr_matrix

from ranking_tfidf.stats import Stat, TermStatistics
from ranking_tfidf.tfidf import TfIdfWeight

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from ranking_tfidf.weight import Weight

logger = logging.getLogger(__name__)


def tokenize(text: str) -> list[str]:
    """Tokenizes the input text into a list of lowercase terms."""
    return re.findall(r"\w+", text.lower())


# -----------------------------------------------------------------------------
# Corpus
# -----------------------------------------------------------------------------


class Corpus:
    """
    Tokenized documents with the statistics a weighting scheme may ask for.

    Args:
        documents (list[list[str]]): Tokenized documents.

    Attributes:
        N (int): Number of documents.
        doc_lengths (NDArray[np.int64]): Length of each document.
        unique_terms (NDArray[np.int64]): Distinct terms in each document.
        tf_matrix (csr_matrix): Term-document wdf matrix (vocab_size, N).
    """

    def __init__(self, documents: list[list[str]]):
        self.N = len(documents)
        self.doc_lengths = np.array([len(d) for d in documents], dtype=np.int64)
        self.average_length = float(np.mean(self.doc_lengths)) if self.N > 0 else 0.0

        self._vocab: dict[str, int] = {}
        rows: list[int] = []
        cols: list[int] = []
        wdfs: list[int] = []
        unique_terms: list[int] = []
        for doc_idx, doc in enumerate(documents):
            term_counts = Counter(doc)
            unique_terms.append(len(term_counts))
            for term, count in term_counts.items():
                tid = self._vocab.setdefault(term, len(self._vocab))
                rows.append(tid)
                cols.append(doc_idx)
                wdfs.append(count)

        self.unique_terms = np.array(unique_terms, dtype=np.int64)
        self.vocab_size = len(self._vocab)
        self.tf_matrix = csr_matrix(
            (
                np.array(wdfs, dtype=np.int64),
                (np.array(rows, dtype=np.int64), np.array(cols, dtype=np.int64)),
            ),
            shape=(self.vocab_size, self.N),
        )
        self.tf_matrix.sort_indices()
        self._df = np.diff(self.tf_matrix.indptr)
        logger.debug("Built corpus: %d documents, %d terms", self.N, self.vocab_size)

    def __len__(self) -> int:
        return self.N

    @classmethod
    def from_texts(cls, texts: list[str]) -> Corpus:
        return cls([tokenize(text) for text in texts])

    def get_term_id(self, term: str) -> int | None:
        return self._vocab.get(term)

    def get_df(self, term: str) -> int:
        tid = self._vocab.get(term)
        return int(self._df[tid]) if tid is not None else 0

    def postings(self, term: str) -> tuple[NDArray[np.int64], NDArray[np.int64]]:
        """Documents indexed by ``term`` and the term's wdf in each, by document index."""
        tid = self._vocab.get(term)
        if tid is None:
            return np.array([], dtype=np.int64), np.array([], dtype=np.int64)
        start, end = self.tf_matrix.indptr[tid], self.tf_matrix.indptr[tid + 1]
        return (
            self.tf_matrix.indices[start:end].astype(np.int64),
            self.tf_matrix.data[start:end].astype(np.int64),
        )

    def term_statistics(
        self,
        term: str,
        wqf: int = 1,
        needed: Stat = Stat.ALL,
    ) -> TermStatistics:
        """
        Gather the statistics in ``needed`` for one query term.

        Statistics outside ``needed`` are not computed and stay zero. Length
        bounds are taken over the documents indexed by the term, which is
        tighter than, and still valid as, a collection-wide bound.
        """
        docs, wdfs = self.postings(term)
        values: dict[str, float] = {}
        if Stat.TERM_FREQUENCY in needed:
            values["term_frequency"] = len(docs)
        if Stat.COLLECTION_SIZE in needed:
            values["collection_size"] = self.N
        if Stat.WQF in needed:
            values["query_term_frequency"] = wqf
        if Stat.AVERAGE_LENGTH in needed:
            values["average_length"] = self.average_length
        if len(docs):
            lengths = self.doc_lengths[docs]
            if Stat.WDF_MAX in needed:
                values["wdf_upper_bound"] = int(wdfs.max())
            if Stat.DOC_LENGTH_MIN in needed:
                values["doclength_lower_bound"] = int(lengths.min())
            if Stat.DOC_LENGTH_MAX in needed:
                values["doclength_upper_bound"] = int(lengths.max())
        return TermStatistics(**values)


# -----------------------------------------------------------------------------
# Ranker
# -----------------------------------------------------------------------------


class TfIdfRanker:
    """
    Ranks corpus documents by summing per-term scheme contributions.

    Args:
        corpus (Corpus): Corpus to rank.
        scheme (Weight | None): Prototype scheme, cloned for every query term.
            Defaults to ``TfIdfWeight()``.
        factor (float): Query-level normalization factor passed to ``init``.
    """

    def __init__(self, corpus: Corpus, scheme: Weight | None = None, factor: float = 1.0):
        self.corpus = corpus
        self.scheme = scheme if scheme is not None else TfIdfWeight()
        self.factor = factor

    def term_weight(self, term: str, wqf: int = 1) -> Weight:
        """A scheme instance initialised for one query term."""
        weight = self.scheme.clone()
        stats = self.corpus.term_statistics(term, wqf, weight.requirements)
        weight.prepare(stats, self.factor)
        return weight

    def score(self, query: list[str], index: int) -> float:
        """Score a single document."""
        doclen = int(self.corpus.doc_lengths[index])
        unique_terms = int(self.corpus.unique_terms[index])
        total = 0.0
        for term, wqf in Counter(query).items():
            tid = self.corpus.get_term_id(term)
            if tid is None:
                continue
            wdf = int(self.corpus.tf_matrix[tid, index])
            if wdf == 0:
                continue
            total += self.term_weight(term, wqf).score_term(wdf, doclen, unique_terms)
        return total

    def max_scores(self, query: list[str]) -> dict[str, float]:
        """Upper bound on each query term's contribution."""
        return {
            term: self.term_weight(term, wqf).max_contribution()
            for term, wqf in Counter(query).items()
        }

    def rank(
        self,
        query: list[str],
        top_k: int | None = None,
    ) -> tuple[np.ndarray, np.ndarray]:
        if self.corpus.N == 0:
            warnings.warn("Ranking an empty corpus; no documents to score.")
            return np.array([], dtype=np.int64), np.array([], dtype=np.float64)

        scores = np.zeros(self.corpus.N, dtype=np.float64)
        for term, wqf in Counter(query).items():
            docs, wdfs = self.corpus.postings(term)
            if len(docs) == 0:
                continue
            weight = self.term_weight(term, wqf)
            scores[docs] += weight.score_terms(
                wdfs, self.corpus.doc_lengths[docs], self.corpus.unique_terms[docs]
            )

        sorted_indices = np.argsort(-scores, kind="stable").astype(np.int64)
        sorted_scores = scores[sorted_indices]
        if top_k is not None:
            sorted_indices = sorted_indices[:top_k]
            sorted_scores = sorted_scores[:top_k]
        return sorted_indices, sorted_scores

    def batch_rank(
        self,
        queries: list[list[str]],
        top_k: int | None = None,
    ) -> list[tuple[np.ndarray, np.ndarray]]:
        return [self.rank(query, top_k) for query in queries]


__all__ = ["Corpus", "TfIdfRanker", "tokenize"]
