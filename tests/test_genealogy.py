from __future__ import annotations

import pytest

from resolution_stability.data import Cluster
from resolution_stability.errors import EmptyChildCluster, MissingResolutionInPool, NoMatchingParent
from resolution_stability.genealogy import (
    best_parent,
    branch_to_resolution_data,
    build_genealogy,
    genealogy_to_records,
)
from resolution_stability.graph import ResolutionNode


def _cluster(cluster_id, cells):
    return Cluster(cluster_id=cluster_id, cells=frozenset(cells), total_cell_count=9)


COARSE = [_cluster(0, {0, 3, 6}), _cluster(1, {1, 4, 7}), _cluster(2, {2, 5, 8})]


@pytest.mark.unit
def test_best_parent_picks_largest_overlap() -> None:
    assert best_parent(_cluster(5, {0, 1, 4, 7}), COARSE) == 1


@pytest.mark.unit
def test_best_parent_ties_resolve_to_first() -> None:
    assert best_parent(_cluster(5, {0, 1, 2}), COARSE) == 0


@pytest.mark.unit
def test_best_parent_without_candidates() -> None:
    with pytest.raises(NoMatchingParent):
        best_parent(_cluster(5, {0, 1}), [])


@pytest.mark.unit
def test_best_parent_of_empty_cluster() -> None:
    with pytest.raises(EmptyChildCluster):
        best_parent(_cluster(5, set()), COARSE)


@pytest.mark.unit
def test_build_genealogy_links_children(make_resolution) -> None:
    coarse = make_resolution(0.1, [0, 0, 0, 0, 1, 1, 1, 1])
    fine = make_resolution(0.8, [7, 7, 3, 3, 5, 5, 1, 1])

    entries = build_genealogy([fine, coarse])

    assert [e.number_of_clusters for e in entries] == [2, 4]
    assert [e.resolution for e in entries] == [0.1, 0.8]
    top, bottom = entries
    assert [(n.cluster_id, n.child_clusters) for n in top.nodes] == [(0, [3, 7]), (1, [1, 5])]
    assert [(n.cluster_id, n.child_clusters) for n in bottom.nodes] == [(1, []), (3, []), (5, []), (7, [])]


@pytest.mark.unit
def test_build_genealogy_over_three_resolutions(make_resolution) -> None:
    data = [
        make_resolution(0.5, [0, 0, 1, 1, 2, 2]),
        make_resolution(0.1, [0] * 6),
        make_resolution(1.0, [0, 1, 2, 3, 4, 5]),
    ]

    entries = build_genealogy(data)

    assert [e.number_of_clusters for e in entries] == [1, 3, 6]
    assert entries[0].nodes[0].child_clusters == [0, 1, 2]
    assert [n.child_clusters for n in entries[1].nodes] == [[0, 1], [2, 3], [4, 5]]


@pytest.mark.unit
def test_build_genealogy_empty() -> None:
    assert build_genealogy([]) == []


@pytest.mark.unit
def test_records_use_stable_field_names(make_resolution) -> None:
    entries = build_genealogy([
        make_resolution(0.1, [0, 0, 1, 1]),
        make_resolution(0.3, [0, 1, 2, 3]),
    ])

    records = genealogy_to_records(entries)

    assert records[0] == {
        "number_of_clusters": 2,
        "resolution": 0.1,
        "nodes": [
            {"cluster_id": 0, "child_clusters": [0, 1]},
            {"cluster_id": 1, "child_clusters": [2, 3]},
        ],
    }
    assert records[1]["nodes"][0] == {"cluster_id": 0, "child_clusters": []}


@pytest.mark.unit
def test_branch_lookup_uses_exact_resolution(make_resolution) -> None:
    pool = [make_resolution(0.1, [0, 0, 1]), make_resolution(0.3, [0, 1, 2])]
    branch = [
        ResolutionNode(resolution=0.3, number_of_clusters=3, optimal_parent=0,
                       optimal_stability=1.0, total_stability=1.0, depth=1),
        ResolutionNode(resolution=0.1, number_of_clusters=2),
    ]

    selected = branch_to_resolution_data(branch, pool)

    assert [d.resolution for d in selected] == [0.3, 0.1]
    with pytest.raises(MissingResolutionInPool):
        branch_to_resolution_data([ResolutionNode(resolution=0.1 + 1e-12, number_of_clusters=2)], pool)
