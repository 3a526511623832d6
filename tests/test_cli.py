import pytest

from ranking_tfidf.cli import main


@pytest.fixture
def documents_file(tmp_path):
    path = tmp_path / "docs.txt"
    path.write_text(
        "information retrieval is the activity of obtaining information\n"
        "python is widely used for text processing\n"
        "retrieval retrieval retrieval\n"
    )
    return path


def test_ranks_documents(documents_file, capsys):
    assert main([str(documents_file), "retrieval", "--normals", "ltn"]) == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert [line.split("\t")[:2] for line in lines] == [["1", "3"], ["2", "1"]]


def test_top_k(documents_file, capsys):
    assert main([str(documents_file), "information retrieval", "--top-k", "1"]) == 0
    assert len(capsys.readouterr().out.strip().splitlines()) == 1


def test_invalid_normals(documents_file, capsys):
    assert main([str(documents_file), "retrieval", "--normals", "xx"]) == 2
    assert "Normalization string" in capsys.readouterr().err


def test_invalid_slope(documents_file, capsys):
    assert main([str(documents_file), "retrieval", "--normals", "Ptn", "--slope", "0"]) == 2
    assert "slope" in capsys.readouterr().err


def test_missing_documents_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.txt"), "retrieval"]) == 1
    assert "not found" in capsys.readouterr().err
