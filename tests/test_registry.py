import pytest

from ranking_tfidf import TfIdfWeight, Weight
from ranking_tfidf.registry import (
    available_schemes,
    create_scheme,
    deserialize_scheme,
    get_scheme,
    register_scheme,
)


def test_tfidf_registered_under_both_names():
    assert get_scheme("tfidf") is TfIdfWeight
    assert get_scheme("ranking_tfidf.TfIdfWeight") is TfIdfWeight
    assert {"tfidf", "ranking_tfidf.TfIdfWeight"} <= set(available_schemes())


def test_unknown_scheme():
    with pytest.raises(KeyError):
        get_scheme("bm25")


@pytest.mark.parametrize(
    "params, normals",
    [("", "ntn"), ("   ", "ntn"), ("Ptn", "Ptn"), (" lpn\n", "lpn")],
)
def test_create_scheme(params, normals):
    weight = create_scheme("tfidf", params)
    assert isinstance(weight, TfIdfWeight)
    assert weight.normals == normals


def test_deserialize_by_name():
    original = TfIdfWeight("Lsn", slope=0.4, delta=3.0)
    restored = deserialize_scheme(original.name, original.serialize())
    assert restored.config == original.config


def test_register_is_idempotent():
    assert register_scheme(TfIdfWeight) is TfIdfWeight


def test_register_rejects_name_clash():
    class Impostor(TfIdfWeight):
        short_name = "tfidf"
        name = "tests.Impostor"

    with pytest.raises(ValueError):
        register_scheme(Impostor)
    assert get_scheme("tfidf") is TfIdfWeight


def test_register_requires_a_name():
    class Nameless(TfIdfWeight):
        name = ""
        short_name = ""

    with pytest.raises(ValueError):
        register_scheme(Nameless)


def test_registered_schemes_satisfy_contract():
    for name in available_schemes():
        assert issubclass(get_scheme(name), Weight)
