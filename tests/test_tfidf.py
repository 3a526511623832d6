import itertools
import math

import numpy as np
import pytest

from ranking_tfidf import (
    IdfNorm,
    InvalidConfigurationError,
    SchemeConfig,
    Stat,
    TermStatistics,
    TfIdfWeight,
    WdfNorm,
    WtNorm,
    declare_requirements,
)
from ranking_tfidf.normalization import IDF_CODES, WDF_CODES

ALL_NORMALS = [w + i + "n" for w, i in itertools.product(WDF_CODES, IDF_CODES)]

STATS = TermStatistics(
    term_frequency=10,
    collection_size=1000,
    query_term_frequency=1,
    wdf_upper_bound=12,
    doclength_lower_bound=5,
    doclength_upper_bound=300,
    average_length=40.0,
)


def prepared(normals: str, stats: TermStatistics = STATS, factor: float = 1.0) -> TfIdfWeight:
    weight = TfIdfWeight(normals)
    weight.prepare(stats, factor)
    return weight


# ----- Construction -----


def test_default_scheme():
    weight = TfIdfWeight()
    assert weight.normals == "ntn"
    assert weight.config == SchemeConfig(WdfNorm.NONE, IdfNorm.TFIDF, WtNorm.NONE, 0.2, 1.0)


@pytest.mark.parametrize("normals", ALL_NORMALS)
def test_both_construction_paths_agree(normals):
    by_code = TfIdfWeight(normals, slope=0.3, delta=1.5)
    by_enum = TfIdfWeight.from_norms(
        WDF_CODES[normals[0]], IDF_CODES[normals[1]], WtNorm.NONE, slope=0.3, delta=1.5
    )
    assert by_code.config == by_enum.config
    assert by_enum.normals == normals


@pytest.mark.parametrize("normals", ["", "nt", "ntnn", "xtn", "nxn", "ntt", "NTN"])
def test_invalid_normals(normals):
    with pytest.raises(InvalidConfigurationError):
        TfIdfWeight(normals)


@pytest.mark.parametrize("slope, delta", [(0.0, 1.0), (-0.5, 1.0), (0.2, 0.0), (0.2, -1.0), (math.nan, 1.0)])
def test_invalid_parameters(slope, delta):
    with pytest.raises(InvalidConfigurationError):
        TfIdfWeight("Ptn", slope=slope, delta=delta)
    with pytest.raises(InvalidConfigurationError):
        TfIdfWeight.from_norms(WdfNorm.PIVOTED, IdfNorm.TFIDF, WtNorm.NONE, slope, delta)


@pytest.mark.parametrize("value", ["0.5", b"0.5", None, [0.5], True])
def test_non_numeric_parameters(value):
    with pytest.raises(InvalidConfigurationError, match="slope"):
        TfIdfWeight("Ptn", slope=value)
    with pytest.raises(InvalidConfigurationError, match="delta"):
        TfIdfWeight("Ptn", delta=value)
    with pytest.raises(InvalidConfigurationError):
        SchemeConfig(WdfNorm.PIVOTED, IdfNorm.TFIDF, WtNorm.NONE, value, 1.0)


def test_integer_parameters_are_stored_as_floats():
    config = SchemeConfig(WdfNorm.PIVOTED, IdfNorm.TFIDF, WtNorm.NONE, 1, 2)
    assert config.slope == 1.0 and isinstance(config.slope, float)
    assert config.delta == 2.0 and isinstance(config.delta, float)


def test_from_norms_rejects_mismatched_variant():
    with pytest.raises(InvalidConfigurationError):
        TfIdfWeight.from_norms(IdfNorm.PROB, IdfNorm.TFIDF)


def test_invalid_configuration_is_a_value_error():
    with pytest.raises(ValueError):
        TfIdfWeight("nt")


def test_identification():
    weight = TfIdfWeight()
    assert weight.short_name == "tfidf"
    assert weight.name == "ranking_tfidf.TfIdfWeight"


# ----- Statistic negotiation -----


@pytest.mark.parametrize("normals", ALL_NORMALS)
def test_requirements_table(normals):
    weight = TfIdfWeight(normals)
    wdf_char, idf_char = normals[0], normals[1]

    expected = Stat.WDF | Stat.WDF_MAX | Stat.WQF
    if idf_char != "n":
        expected |= Stat.TERM_FREQUENCY
    if idf_char not in ("n", "f"):
        expected |= Stat.COLLECTION_SIZE
    if wdf_char == "P" or idf_char == "P":
        expected |= Stat.AVERAGE_LENGTH | Stat.DOC_LENGTH | Stat.DOC_LENGTH_MIN
    if wdf_char == "L":
        expected |= Stat.DOC_LENGTH | Stat.DOC_LENGTH_MIN | Stat.DOC_LENGTH_MAX | Stat.UNIQUE_TERMS

    assert weight.requirements == expected
    assert declare_requirements(weight.config) == expected


def test_need_stat():
    weight = TfIdfWeight("nnn")
    assert weight.need_stat(Stat.WQF)
    assert not weight.need_stat(Stat.TERM_FREQUENCY)
    assert not weight.need_stat(Stat.COLLECTION_SIZE)


def test_frequency_idf_ignores_collection_size():
    # Only termfreq is supplied; the collection size is never read.
    stats = TermStatistics(term_frequency=4, query_term_frequency=1)
    weight = prepared("nfn", stats)
    assert weight.idfn == pytest.approx(0.25)


# ----- Initialisation and scoring -----


def test_concrete_tfidf_score():
    stats = TermStatistics(term_frequency=10, collection_size=1000, query_term_frequency=1)
    weight = prepared("ntn", stats)

    assert weight.idfn == pytest.approx(math.log(100.0))
    assert weight.idfn == pytest.approx(4.6052, abs=1e-4)
    assert weight.score_term(3, 20, 10) == pytest.approx(3 * math.log(100.0))
    assert weight.score_term(3, 20, 10) == pytest.approx(13.8155, abs=1e-4)


def test_wqf_and_factor_scale_the_score():
    stats = TermStatistics(term_frequency=10, collection_size=1000, query_term_frequency=2)
    weight = prepared("ltn", stats, factor=0.5)
    assert weight.wqf_factor == 1.0
    assert weight.score_term(4, 10, 5) == pytest.approx((1 + math.log(4)) * math.log(100.0))


@pytest.mark.parametrize("normals", ALL_NORMALS)
def test_zero_factor_leaves_scheme_inert(normals):
    weight = prepared(normals, factor=0.0)
    assert weight.idfn == 0.0
    assert weight.wqf_factor == 0.0
    assert weight.score_term(5, 30, 12) == 0.0
    assert weight.max_contribution() == 0.0


@pytest.mark.parametrize("normals", ALL_NORMALS)
def test_extra_contribution_is_zero(normals):
    weight = prepared(normals)
    assert weight.extra_contribution(30, 12) == 0.0
    assert weight.extra_contribution(0, 0) == 0.0
    assert weight.max_extra_contribution() == 0.0


@pytest.mark.parametrize("wdf_char", ["b", "s", "l", "P", "L", "n"])
def test_zero_wdf_contributes_nothing(wdf_char):
    weight = prepared(wdf_char + "tn")
    assert weight.score_term(0, 30, 12) == 0.0


def test_probabilistic_idf_for_term_in_every_document():
    stats = TermStatistics(term_frequency=50, collection_size=50, query_term_frequency=1)
    weight = prepared("npn", stats)
    assert weight.idfn == 0.0
    assert weight.score_term(3, 10, 5) == 0.0


def test_score_terms_matches_score_term():
    weight = prepared("Ptn")
    wdfs = np.array([1, 2, 5, 12])
    doclens = np.array([5, 40, 80, 300])
    unique_terms = np.array([5, 20, 33, 150])

    expected = [weight.score_term(*posting) for posting in zip(wdfs, doclens, unique_terms)]
    assert np.allclose(weight.score_terms(wdfs, doclens, unique_terms), expected, rtol=1e-12)


# ----- Upper bound -----


@pytest.mark.parametrize("slope", [0.2, 1.5, 2.0])
@pytest.mark.parametrize("normals", ALL_NORMALS)
def test_max_contribution_bounds_every_score(normals, slope):
    weight = TfIdfWeight(normals, slope=slope)
    weight.prepare(STATS, 1.0)
    bound = weight.max_contribution()
    for wdf in range(0, STATS.wdf_upper_bound + 1):
        for doclen in (5, 6, 40, 120, 300):
            for unique_terms in (1, doclen // 2, doclen):
                score = weight.score_term(wdf, doclen, unique_terms)
                assert score <= bound, f"{normals}: {score} > {bound} at {(wdf, doclen, unique_terms)}"


SHORT_DOCS = TermStatistics(
    term_frequency=10,
    collection_size=1000,
    query_term_frequency=1,
    wdf_upper_bound=3,
    doclength_lower_bound=1,
    doclength_upper_bound=40,
    average_length=10.0,
)


@pytest.mark.parametrize("slope", [1.5, 2.0])
def test_steep_pivot_bound_is_unbounded_for_short_documents(slope):
    weight = TfIdfWeight("Ptn", slope=slope)
    weight.prepare(SHORT_DOCS, 1.0)

    # 1 - slope + slope * 1 / 10 < 0 for the shortest document.
    assert weight.max_contribution() == math.inf
    assert weight.score_term(3, 20, 10) > 0
    assert weight.score_term(3, 4, 4) > 0
    assert weight.score_term(3, 20, 10) <= weight.max_contribution()


def test_steep_pivot_bound_when_pivot_stays_positive():
    stats = TermStatistics(
        term_frequency=10,
        collection_size=1000,
        query_term_frequency=1,
        wdf_upper_bound=3,
        doclength_lower_bound=8,
        doclength_upper_bound=40,
        average_length=10.0,
    )
    weight = TfIdfWeight("Ptn", slope=1.5)
    weight.prepare(stats, 1.0)

    bound = weight.max_contribution()
    assert math.isfinite(bound)
    assert bound == pytest.approx(weight.score_term(3, 8, 8))
    for doclen in range(8, 41):
        assert weight.score_term(3, doclen, doclen) <= bound


def test_pivot_pole_scores_zero_without_idf():
    # Every document holds the term, so probabilistic idf is 0.
    stats = TermStatistics(
        term_frequency=1000,
        collection_size=1000,
        query_term_frequency=1,
        wdf_upper_bound=3,
        doclength_lower_bound=1,
        doclength_upper_bound=40,
        average_length=10.0,
    )
    weight = TfIdfWeight("Ppn", slope=2.0)
    weight.prepare(stats, 1.0)

    # doclen 5 is exactly on the pole: 1 - 2 + 2 * 5 / 10 == 0.
    assert weight.score_term(3, 5, 5) == 0.0
    np.testing.assert_array_equal(weight.score_terms([3, 1], [5, 20], [5, 10]), [0.0, 0.0])
    assert weight.max_contribution() == 0.0


def test_max_contribution_is_attained():
    weight = prepared("ltn")
    assert weight.max_contribution() == pytest.approx(weight.score_term(12, 5, 5))


def test_max_contribution_with_negative_idf():
    stats = TermStatistics(
        term_frequency=900, collection_size=1000, query_term_frequency=1, wdf_upper_bound=4
    )
    weight = prepared("lpn", stats)
    assert weight.idfn < 0.0
    assert weight.max_contribution() == 0.0
    assert weight.score_term(4, 10, 5) < 0.0


# ----- Clone and explain -----


def test_clone_copies_configuration_not_state():
    weight = prepared("Lpn")
    copy = weight.clone()
    assert copy is not weight
    assert copy.config == weight.config
    assert copy.requirements == weight.requirements
    assert copy.idfn == 0.0
    assert copy.wqf_factor == 0.0
    assert copy.score_term(3, 10, 5) == 0.0


def test_explain():
    weight = prepared("ltn")
    explanation = weight.explain(3, 20, 10)
    assert explanation["score"] == weight.score_term(3, 20, 10)
    assert explanation["details"]["normals"] == "ltn"
    assert explanation["details"]["wdfn"] == pytest.approx(1 + math.log(3))
    assert "ltn" in explanation["description"]


def test_repr():
    assert repr(TfIdfWeight("Ptn", 0.25, 2.0)) == "TfIdfWeight('Ptn', slope=0.25, delta=2.0)"
