"""
TF-IDF normalization variants.

Three independent families of normalization are combined into a term weight:

    wdfn = normalize_wdf(wdf, doclen, unique_terms)   # within-document frequency
    idfn = normalize_idf(termfreq, N)                  # inverse document frequency
    weight = normalize_wt(wdfn * idfn) * wqf * factor

Each family is an enum whose integer values double as the one-byte wire tags
used when a scheme is serialized, and whose code characters are the letters of
the SMART-style normalization string (e.g. "ntn", "Ptn", "lpn").

wdf variants:
    n  NONE         wdf
    b  BOOLEAN      1 if wdf > 0
    s  SQUARE       wdf^2
    l  LOG          1 + ln(wdf)
    P  PIVOTED      (1 + ln(1 + ln(wdf))) / (1 - slope + slope * doclen / avgdl) + delta
    L  LOG_AVERAGE  (1 + ln(wdf)) / (1 + ln(doclen / unique_terms))

idf variants:
    n  NONE         1
    t  TFIDF        ln(N / termfreq)
    s  SQUARE       ln(N / termfreq)^2
    f  FREQ         1 / termfreq
    p  PROB         ln((N - termfreq) / termfreq)
    P  PIVOTED      ln((N + 1) / termfreq)

wt variants:
    n  NONE         identity
"""

from __future__ import annotations

import math
from enum import IntEnum
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


# =============================================================================
# Variants
# =============================================================================


class WdfNorm(IntEnum):
    """Within-document frequency normalization."""

    NONE = 1
    BOOLEAN = 2
    SQUARE = 3
    LOG = 4
    PIVOTED = 5
    LOG_AVERAGE = 6


class IdfNorm(IntEnum):
    """Inverse document frequency normalization."""

    NONE = 1
    TFIDF = 2
    SQUARE = 3
    FREQ = 4
    PROB = 5
    PIVOTED = 6


class WtNorm(IntEnum):
    """Normalization applied to the combined weight (currently only identity)."""

    NONE = 1


# Code characters of the normalization string, in string position order.
WDF_CODES: dict[str, WdfNorm] = {
    "n": WdfNorm.NONE,
    "b": WdfNorm.BOOLEAN,
    "s": WdfNorm.SQUARE,
    "l": WdfNorm.LOG,
    "P": WdfNorm.PIVOTED,
    "L": WdfNorm.LOG_AVERAGE,
}

IDF_CODES: dict[str, IdfNorm] = {
    "n": IdfNorm.NONE,
    "t": IdfNorm.TFIDF,
    "s": IdfNorm.SQUARE,
    "f": IdfNorm.FREQ,
    "p": IdfNorm.PROB,
    "P": IdfNorm.PIVOTED,
}

WT_CODES: dict[str, WtNorm] = {
    "n": WtNorm.NONE,
}


def _invert(codes: dict) -> dict:
    return {norm: char for char, norm in codes.items()}


WDF_CHARS: dict[WdfNorm, str] = _invert(WDF_CODES)
IDF_CHARS: dict[IdfNorm, str] = _invert(IDF_CODES)
WT_CHARS: dict[WtNorm, str] = _invert(WT_CODES)


# =============================================================================
# Scalar normalization
# =============================================================================


def _length_ratio(doclen: float, average_length: float) -> float:
    # An average of zero means every document is empty.
    if average_length <= 0:
        return 1.0
    return doclen / average_length


def pivot_denominator(doclen: float, average_length: float, slope: float) -> float:
    """
    Length pivot ``1 - slope + slope * doclen / avgdl`` of PIVOTED wdf.

    Increases with doclen. With slope > 1 it is zero or negative for documents
    shorter than (slope - 1) / slope of the average length.
    """
    return 1.0 - slope + slope * _length_ratio(doclen, average_length)


def normalize_wdf(
    wdf: float,
    doclen: float,
    unique_terms: float,
    wdf_norm: WdfNorm,
    *,
    slope: float,
    delta: float,
    average_length: float = 0.0,
) -> float:
    """
    Normalize a within-document frequency.

    Args:
        wdf: Occurrences of the term in the document.
        doclen: Length of the document.
        unique_terms: Number of distinct terms in the document.
        wdf_norm: Variant to apply.
        slope: Pivoted normalization slope.
        delta: Pivoted normalization offset.
        average_length: Average document length (only read by PIVOTED).

    Returns:
        The normalized wdf. Zero whenever wdf is zero.
    """
    if wdf_norm is WdfNorm.BOOLEAN:
        return 0.0 if wdf == 0 else 1.0
    if wdf_norm is WdfNorm.SQUARE:
        return float(wdf) * wdf
    if wdf_norm is WdfNorm.LOG:
        if wdf == 0:
            return 0.0
        return 1.0 + math.log(wdf)
    if wdf_norm is WdfNorm.PIVOTED:
        if wdf == 0:
            return 0.0
        pivot = pivot_denominator(doclen, average_length, slope)
        norm_factor = 1.0 / pivot if pivot != 0 else math.inf
        return (1.0 + math.log(1.0 + math.log(wdf))) * norm_factor + delta
    if wdf_norm is WdfNorm.LOG_AVERAGE:
        if wdf == 0:
            return 0.0
        wdf_avg = doclen / unique_terms if doclen > 0 and unique_terms > 0 else 1.0
        return (1.0 + math.log(wdf)) / (1.0 + math.log(wdf_avg))
    return float(wdf)


def normalize_idf(idf_norm: IdfNorm, termfreq: float, collection_size: float) -> float:
    """
    Normalize the document frequency of a term into its idf factor.

    A term that indexes no document, or (for PROB) every document, has no
    discriminative power and gets an idf of zero.
    """
    if idf_norm is IdfNorm.NONE:
        return 1.0
    if termfreq <= 0:
        return 0.0
    N = float(collection_size)
    if idf_norm is IdfNorm.PROB:
        if N <= termfreq:
            return 0.0
        return math.log((N - termfreq) / termfreq)
    if idf_norm is IdfNorm.FREQ:
        return 1.0 / termfreq
    if idf_norm is IdfNorm.SQUARE:
        return math.log(N / termfreq) ** 2
    if idf_norm is IdfNorm.PIVOTED:
        return math.log((N + 1.0) / termfreq)
    return math.log(N / termfreq)


def normalize_wt(weight: float, wt_norm: WtNorm) -> float:
    """Normalize a combined wdf * idf weight. Identity for every current variant."""
    return weight


# =============================================================================
# Vectorized normalization (whole posting lists)
# =============================================================================


def normalize_wdf_array(
    wdf: ArrayLike,
    doclen: ArrayLike,
    unique_terms: ArrayLike,
    wdf_norm: WdfNorm,
    *,
    slope: float,
    delta: float,
    average_length: float = 0.0,
) -> NDArray[np.float64]:
    """Vectorized :func:`normalize_wdf` over aligned posting arrays."""
    wdf = np.asarray(wdf, dtype=np.float64)
    doclen = np.asarray(doclen, dtype=np.float64)
    unique_terms = np.asarray(unique_terms, dtype=np.float64)
    present = wdf > 0

    # Masked-out entries may hit log(0) or 0/0 before np.where discards them.
    with np.errstate(divide="ignore", invalid="ignore"):
        if wdf_norm is WdfNorm.BOOLEAN:
            return present.astype(np.float64)
        if wdf_norm is WdfNorm.SQUARE:
            return wdf * wdf
        if wdf_norm is WdfNorm.LOG:
            return np.where(present, 1.0 + np.log(wdf), 0.0)
        if wdf_norm is WdfNorm.PIVOTED:
            if average_length > 0:
                ratio = doclen / average_length
            else:
                ratio = np.ones_like(doclen)
            norm_factor = 1.0 / (1.0 - slope + slope * ratio)
            pivoted = (1.0 + np.log(1.0 + np.log(wdf))) * norm_factor + delta
            return np.where(present, pivoted, 0.0)
        if wdf_norm is WdfNorm.LOG_AVERAGE:
            wdf_avg = np.where(
                (doclen > 0) & (unique_terms > 0), doclen / unique_terms, 1.0
            )
            return np.where(present, (1.0 + np.log(wdf)) / (1.0 + np.log(wdf_avg)), 0.0)
    return wdf.copy()


__all__ = [
    "WdfNorm",
    "IdfNorm",
    "WtNorm",
    "WDF_CODES",
    "IDF_CODES",
    "WT_CODES",
    "WDF_CHARS",
    "IDF_CHARS",
    "WT_CHARS",
    "pivot_denominator",
    "normalize_wdf",
    "normalize_idf",
    "normalize_wt",
    "normalize_wdf_array",
]
