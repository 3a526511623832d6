"""Scheme configuration: normalization selectors and tunable parameters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from ranking_tfidf.errors import InvalidConfigurationError
from ranking_tfidf.normalization import (
    IDF_CHARS,
    IDF_CODES,
    WDF_CHARS,
    WDF_CODES,
    WT_CHARS,
    WT_CODES,
    IdfNorm,
    WdfNorm,
    WtNorm,
)

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

DEFAULT_NORMALS = "ntn"
DEFAULT_SLOPE = 0.2   # pivoted normalization slope
DEFAULT_DELTA = 1.0   # pivoted normalization offset


def parse_normals(normals: str) -> tuple[WdfNorm, IdfNorm, WtNorm]:
    """
    Split a three-character normalization string into its variants.

    Raises:
        InvalidConfigurationError: If the string is not exactly three
            characters or a character is not a known code for its position.
    """
    if not isinstance(normals, str) or len(normals) != 3:
        raise InvalidConfigurationError(
            f"Normalization string must have exactly 3 characters, got {normals!r}"
        )
    wdf_char, idf_char, wt_char = normals
    if wdf_char not in WDF_CODES or idf_char not in IDF_CODES or wt_char not in WT_CODES:
        raise InvalidConfigurationError(f"Normalization string {normals!r} is invalid")
    return WDF_CODES[wdf_char], IDF_CODES[idf_char], WT_CODES[wt_char]


def _coerce(enum_type, value, label: str):
    # A member of another family shares integer values but not meaning.
    if isinstance(value, IntEnum) and not isinstance(value, enum_type):
        raise InvalidConfigurationError(f"Invalid {label} normalization: {value!r}")
    try:
        return enum_type(value)
    except ValueError:
        raise InvalidConfigurationError(f"Invalid {label} normalization: {value!r}") from None


def _positive(value, label: str) -> float:
    # Only real numbers; "0.5" and None are not parameters.
    if isinstance(value, (str, bytes, bool)):
        raise InvalidConfigurationError(f"Parameter {label} is invalid: {value!r}")
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"Parameter {label} is invalid: {value!r}") from None
    # `not x > 0` also rejects NaN.
    if not value > 0:
        raise InvalidConfigurationError(f"Parameter {label} is invalid: {value!r}")
    return value


@dataclass(frozen=True)
class SchemeConfig:
    """
    Immutable configuration of a TF-IDF weighting scheme.

    Attributes:
        wdf_norm: Within-document frequency normalization.
        idf_norm: Inverse document frequency normalization.
        wt_norm: Final weight normalization.
        slope: Slope of pivoted normalization, must be > 0.
        delta: Offset of pivoted wdf normalization, must be > 0.
    """

    wdf_norm: WdfNorm = WdfNorm.NONE
    idf_norm: IdfNorm = IdfNorm.TFIDF
    wt_norm: WtNorm = WtNorm.NONE
    slope: float = DEFAULT_SLOPE
    delta: float = DEFAULT_DELTA

    def __post_init__(self) -> None:
        object.__setattr__(self, "wdf_norm", _coerce(WdfNorm, self.wdf_norm, "wdf"))
        object.__setattr__(self, "idf_norm", _coerce(IdfNorm, self.idf_norm, "idf"))
        object.__setattr__(self, "wt_norm", _coerce(WtNorm, self.wt_norm, "wt"))
        object.__setattr__(self, "slope", _positive(self.slope, "slope"))
        object.__setattr__(self, "delta", _positive(self.delta, "delta"))

    @classmethod
    def from_normals(
        cls,
        normals: str = DEFAULT_NORMALS,
        slope: float = DEFAULT_SLOPE,
        delta: float = DEFAULT_DELTA,
    ) -> SchemeConfig:
        wdf_norm, idf_norm, wt_norm = parse_normals(normals)
        return cls(wdf_norm, idf_norm, wt_norm, slope, delta)

    @property
    def normals(self) -> str:
        """The normalization string describing this configuration."""
        return WDF_CHARS[self.wdf_norm] + IDF_CHARS[self.idf_norm] + WT_CHARS[self.wt_norm]


__all__ = [
    "DEFAULT_NORMALS",
    "DEFAULT_SLOPE",
    "DEFAULT_DELTA",
    "SchemeConfig",
    "parse_normals",
]
