"""
TF-IDF weighting scheme with SMART-style normalization selectors.

    weight(t, d) = wt( wdfn(wdf, doclen, unique_terms) * idfn(termfreq, N) ) * wqf * factor

The scheme is configured by a three-character normalization string, e.g.:

    "ntn"   raw wdf, ln(N / termfreq)              (default)
    "ltn"   1 + ln(wdf), ln(N / termfreq)
    "Ptn"   pivoted wdf, ln(N / termfreq)
    "bpn"   boolean wdf, probabilistic idf

See :mod:`ranking_tfidf.normalization` for the full list of variants.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any

import numpy as np

from ranking_tfidf.config import DEFAULT_DELTA, DEFAULT_NORMALS, DEFAULT_SLOPE, SchemeConfig
from ranking_tfidf.normalization import (
    IdfNorm,
    WdfNorm,
    WtNorm,
    normalize_idf,
    normalize_wdf,
    normalize_wdf_array,
    normalize_wt,
    pivot_denominator,
)
from ranking_tfidf.serialization import decode_config, encode_config
from ranking_tfidf.stats import Stat, declare_requirements
from ranking_tfidf.weight import Weight

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

logger = logging.getLogger(__name__)


class TfIdfWeight(Weight):
    """
    TF-IDF weighting scheme.

    Args:
        normals (str): Normalization string ``[wdf][idf][wt]``.
        slope (float): Slope of pivoted normalization (> 0).
        delta (float): Offset of pivoted wdf normalization (> 0).

    Raises:
        InvalidConfigurationError: If the normalization string or a parameter
            is invalid.
    """

    name = "ranking_tfidf.TfIdfWeight"
    short_name = "tfidf"

    def __init__(
        self,
        normals: str = DEFAULT_NORMALS,
        slope: float = DEFAULT_SLOPE,
        delta: float = DEFAULT_DELTA,
    ):
        self._setup(SchemeConfig.from_normals(normals, slope, delta))

    @classmethod
    def from_norms(
        cls,
        wdf_norm: WdfNorm,
        idf_norm: IdfNorm,
        wt_norm: WtNorm = WtNorm.NONE,
        slope: float = DEFAULT_SLOPE,
        delta: float = DEFAULT_DELTA,
    ) -> TfIdfWeight:
        """Build a scheme from explicit normalization variants."""
        return cls.from_config(SchemeConfig(wdf_norm, idf_norm, wt_norm, slope, delta))

    @classmethod
    def from_config(cls, config: SchemeConfig) -> TfIdfWeight:
        weight = cls.__new__(cls)
        weight._setup(config)
        return weight

    def _setup(self, config: SchemeConfig) -> None:
        super().__init__()
        self.config = config
        self.requirements = declare_requirements(config)
        self.idfn = 0.0
        self.wqf_factor = 0.0

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.config.normals!r}, "
            f"slope={self.config.slope!r}, delta={self.config.delta!r})"
        )

    @property
    def normals(self) -> str:
        return self.config.normals

    # ----- Lifecycle -----

    def clone(self) -> TfIdfWeight:
        return type(self).from_config(self.config)

    def init(self, factor: float) -> None:
        if factor == 0.0:
            # Term-independent contribution, which is always zero here.
            return

        self.wqf_factor = self.query_term_frequency() * factor
        if self.need_stat(Stat.COLLECTION_SIZE):
            N = self.collection_size()
        else:
            N = 1
        termfreq = self.term_frequency() if self.need_stat(Stat.TERM_FREQUENCY) else 1
        self.idfn = normalize_idf(self.config.idf_norm, termfreq, N)
        logger.debug(
            "init %s: termfreq=%d N=%d idfn=%.6g wqf_factor=%.6g",
            self.normals, termfreq, N, self.idfn, self.wqf_factor,
        )

    # ----- Scoring -----

    def _wdfn(self, wdf, doclen, unique_terms) -> float:
        return normalize_wdf(
            wdf,
            doclen,
            unique_terms,
            self.config.wdf_norm,
            slope=self.config.slope,
            delta=self.config.delta,
            average_length=self.average_length(),
        )

    def score_term(self, wdf: int, doclen: int, unique_terms: int) -> float:
        if self.idfn == 0.0:
            # Also covers an infinite wdfn at the pivot pole.
            return 0.0
        wdfn = self._wdfn(wdf, doclen, unique_terms)
        return normalize_wt(wdfn * self.idfn, self.config.wt_norm) * self.wqf_factor

    def score_terms(
        self,
        wdfs: ArrayLike,
        doclens: ArrayLike,
        unique_terms: ArrayLike,
    ) -> NDArray[np.float64]:
        """Score every posting of a posting list at once."""
        wdfn = normalize_wdf_array(
            wdfs,
            doclens,
            unique_terms,
            self.config.wdf_norm,
            slope=self.config.slope,
            delta=self.config.delta,
            average_length=self.average_length(),
        )
        if self.idfn == 0.0:
            return np.zeros_like(wdfn)
        return normalize_wt(wdfn * self.idfn, self.config.wt_norm) * self.wqf_factor

    def max_contribution(self) -> float:
        # termfreq and N are fixed for the term, so the bound only depends on
        # the largest wdf and the shortest document.
        len_min = self.doclength_lower_bound()
        if self.idfn * self.wqf_factor == 0.0:
            return 0.0
        if self.config.wdf_norm is WdfNorm.PIVOTED and self.wdf_upper_bound() > 0:
            # Past the pole of the pivot (slope > 1) scores are unbounded.
            if pivot_denominator(len_min, self.average_length(), self.config.slope) <= 0:
                return math.inf
        wdfn = self._wdfn(self.wdf_upper_bound(), len_min, len_min)
        bound = normalize_wt(wdfn * self.idfn, self.config.wt_norm) * self.wqf_factor
        if self.idfn < 0:
            # wdfn >= 0 here, so every score is <= 0.
            return max(bound, 0.0)
        return bound

    def extra_contribution(self, doclen: int, unique_terms: int) -> float:
        return 0.0

    def max_extra_contribution(self) -> float:
        return 0.0

    def explain(self, wdf: int, doclen: int, unique_terms: int) -> dict[str, Any]:
        wdfn = self._wdfn(wdf, doclen, unique_terms)
        score = self.score_term(wdf, doclen, unique_terms)
        return {
            "score": score,
            "description": (
                f"TfIdf[{self.normals}](wdf={wdf}, doclen={doclen}, "
                f"unique_terms={unique_terms})"
            ),
            "details": {
                "normals": self.normals,
                "slope": self.config.slope,
                "delta": self.config.delta,
                "wdfn": wdfn,
                "idfn": self.idfn,
                "wqf_factor": self.wqf_factor,
            },
        }

    # ----- Serialization -----

    def serialize(self) -> bytes:
        return encode_config(self.config)

    @classmethod
    def deserialize(cls, data: bytes) -> TfIdfWeight:
        return cls.from_config(decode_config(data))

    @classmethod
    def create_from_parameters(cls, params: str) -> TfIdfWeight:
        params = params.strip()
        if not params:
            return cls()
        return cls(params)


__all__ = ["TfIdfWeight"]
