from __future__ import annotations

import json

import pandas as pd
import pytest

from resolution_stability.errors import InputFormatError
from resolution_stability.genealogy import build_genealogy
from resolution_stability.io import (
    load_input,
    load_resolution_csv,
    load_sweep_tsv,
    parse_resolution_row,
    save_genealogy,
)


@pytest.mark.unit
def test_parse_row_groups_items() -> None:
    data = parse_resolution_row(["0.1", "0", "0", "1", "1"])
    assert data.resolution == 0.1
    assert data.number_of_clusters == 2
    assert data.cluster_cells == [frozenset({1, 2}), frozenset({3, 4})]


@pytest.mark.unit
@pytest.mark.parametrize("row", [["abc", "0"], ["0.1", "x"], ["0.1"], []])
def test_parse_row_rejects_bad_values(row) -> None:
    with pytest.raises(InputFormatError):
        parse_resolution_row(row)


@pytest.mark.integration
def test_load_csv_rows(tmp_path) -> None:
    path = tmp_path / "sample.csv"
    path.write_text("0.1,0,0,1,1\n0.5, 0, 1 ,1,0\n1.0,0,1,2,3\n")

    resolutions = load_resolution_csv(path)

    assert [d.resolution for d in resolutions] == [0.1, 0.5, 1.0]
    assert [d.number_of_clusters for d in resolutions] == [2, 2, 4]
    assert resolutions[1].cluster_cells == [frozenset({1, 4}), frozenset({2, 3})]


@pytest.mark.integration
@pytest.mark.parametrize("content", [
    "0.1,0,0,1,1\n0.5,0,1\n",
    "0.1,0,1\n0.5,0,1,1,0\n",
])
def test_load_csv_rejects_ragged_rows(tmp_path, content) -> None:
    path = tmp_path / "ragged.csv"
    path.write_text(content)
    with pytest.raises(InputFormatError):
        load_resolution_csv(path)


@pytest.mark.integration
def test_load_csv_empty_file(tmp_path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text("")
    assert load_resolution_csv(path) == []


@pytest.mark.integration
def test_load_sweep_table(tmp_path) -> None:
    path = tmp_path / "clusters_sweep.tsv"
    pd.DataFrame({
        "id": ["a", "b", "c", "d"],
        "r_0.1000": [0, 0, 0, 0],
        "r_0.5000": [0, 0, 1, 1],
    }).to_csv(path, sep="\t", index=False)

    resolutions = load_sweep_tsv(path)

    assert [d.resolution for d in resolutions] == [0.1, 0.5]
    assert resolutions[1].cluster_cells == [frozenset({1, 2}), frozenset({3, 4})]
    assert [d.resolution for d in load_input(str(path))] == [0.1, 0.5]


@pytest.mark.integration
def test_load_sweep_table_without_resolution_columns(tmp_path) -> None:
    path = tmp_path / "clusters.tsv"
    pd.DataFrame({"id": ["a"], "cluster": [0]}).to_csv(path, sep="\t", index=False)
    with pytest.raises(InputFormatError):
        load_sweep_tsv(path)


@pytest.mark.unit
def test_load_input_rejects_unknown_extension() -> None:
    with pytest.raises(ValueError, match="Unsupported input format"):
        load_input("clusters.parquet")


@pytest.mark.integration
def test_save_genealogy_writes_records(tmp_path, make_resolution) -> None:
    entries = build_genealogy([make_resolution(0.1, [0, 0]), make_resolution(0.2, [0, 1])])
    path = tmp_path / "genealogy.json"

    save_genealogy(entries, path)

    records = json.loads(path.read_text())
    assert [r["number_of_clusters"] for r in records] == [1, 2]
    assert records[0]["nodes"] == [{"cluster_id": 0, "child_clusters": [0, 1]}]
