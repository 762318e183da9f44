import csv
import pytest
from entrate.io import load_sequence, write_csv_rows


def test_load_sequence_one_per_line(tmp_path):
    path = tmp_path / "seq.txt"
    path.write_text("1\n3\n1\n\n2\n")
    assert load_sequence(path) == [1, 3, 1, 2]


def test_load_sequence_string_labels(tmp_path):
    path = tmp_path / "seq.txt"
    path.write_text("rest\ngroom\nrest\n")
    assert load_sequence(str(path)) == ["rest", "groom", "rest"]


def test_load_sequence_csv_column(tmp_path):
    path = tmp_path / "events.csv"
    path.write_text("t,state\n0,2\n1,1\n2,2\n")
    assert load_sequence(path, column="state") == [2, 1, 2]
    assert load_sequence(path, column=1) == [2, 1, 2]
    assert load_sequence(path, column=0) == [0, 1, 2]

    with pytest.raises(ValueError):
        load_sequence(path, column="missing")
    with pytest.raises(ValueError):
        load_sequence(path, column=5)


def test_load_sequence_empty_csv(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")
    with pytest.raises(ValueError):
        load_sequence(path, column=0)


def test_write_csv_rows(tmp_path):
    path = tmp_path / "out" / "rows.csv"
    rows = [{"n": 50, "mean": 0.5}, {"n": 100, "mean": 0.6}]
    write_csv_rows(path, rows)
    write_csv_rows(path, [{"n": 200, "mean": 0.7}], append=True)
    with path.open() as f:
        data = list(csv.DictReader(f))
    assert [r["n"] for r in data] == ["50", "100", "200"]

    with pytest.raises(ValueError):
        write_csv_rows(path, [{"other": 1}], append=True)

    # Nothing to write leaves the file untouched
    write_csv_rows(tmp_path / "none.csv", [])
    assert not (tmp_path / "none.csv").exists()
