# resolution_stability/genealogy.py

from dataclasses import dataclass, field
from typing import List

from resolution_stability.errors import MissingResolutionInPool, NoMatchingParent
from resolution_stability.overlap import overlaps_relative


# ---------------------------------------------------------
# Cluster relation tree over the retained resolutions
# ---------------------------------------------------------
@dataclass
class GenealogyNode:
    """A cluster and the ids of its child clusters at the next finer resolution."""

    cluster_id: int
    child_clusters: List[int] = field(default_factory=list)

    def add_child_cluster(self, child_cluster_id):
        self.child_clusters.append(child_cluster_id)

    def to_record(self):
        return {
            "cluster_id": self.cluster_id,
            "child_clusters": sorted(self.child_clusters),
        }


@dataclass
class GenealogyEntry:
    """All cluster nodes sampled at one resolution."""

    resolution: float
    number_of_clusters: int
    nodes: List[GenealogyNode]

    @classmethod
    def from_nodes(cls, resolution_data, nodes):
        nodes = sorted(nodes, key=lambda node: node.cluster_id)
        for node in nodes:
            node.child_clusters.sort()
        return cls(
            resolution=resolution_data.resolution,
            number_of_clusters=resolution_data.number_of_clusters,
            nodes=nodes,
        )

    def to_record(self):
        return {
            "number_of_clusters": self.number_of_clusters,
            "resolution": self.resolution,
            "nodes": [node.to_record() for node in self.nodes],
        }


def branch_to_resolution_data(branch, resolutions):
    """
    Look up the resolution data of every node of a branch.

    Resolution values are compared for exact equality, since they are carried
    through the pipeline unchanged.

    Raises
    ------
    MissingResolutionInPool
        If a branch resolution is not found in `resolutions`
    """
    selected = []
    for node in branch:
        match = next((data for data in resolutions if data.resolution == node.resolution), None)
        if match is None:
            raise MissingResolutionInPool(node.resolution)
        selected.append(match)
    return selected


def best_parent(cluster, parent_clusters):
    """
    Index of the parent cluster holding the largest share of `cluster`.

    Ties resolve to the first maximum in the order of `parent_clusters`.

    Raises
    ------
    NoMatchingParent
        If there are no parent clusters
    EmptyChildCluster
        If `cluster` has no cells
    """
    if len(parent_clusters) == 0:
        raise NoMatchingParent(cluster.cluster_id)
    overlaps = overlaps_relative([parent.cells for parent in parent_clusters], cluster.cells)
    best = 0
    for index, overlap in enumerate(overlaps):
        if overlap > overlaps[best]:
            best = index
    return best


def build_genealogy(resolution_data):
    """
    Build the parent/children relation of clusters across resolutions.

    Starting at the finest clustering, every cluster is attached as a child
    of its best parent in the next coarser clustering.

    Parameters
    ----------
    resolution_data : list of ResolutionData
        Clusterings of the retained branch, in any order

    Returns
    -------
    list of GenealogyEntry
        One entry per resolution, fewest clusters first
    """
    if not resolution_data:
        return []

    ordered = sorted(resolution_data, key=lambda data: data.number_of_clusters, reverse=True)

    finest = ordered[0]
    open_nodes = [(GenealogyNode(cluster.cluster_id), cluster) for cluster in finest.clusters]
    entries = [GenealogyEntry.from_nodes(finest, [node for node, _ in open_nodes])]

    for coarser in ordered[1:]:
        parent_nodes = [(GenealogyNode(cluster.cluster_id), cluster) for cluster in coarser.clusters]
        for node, cluster in open_nodes:
            index = best_parent(cluster, coarser.clusters)
            parent_nodes[index][0].add_child_cluster(node.cluster_id)
        entries.append(GenealogyEntry.from_nodes(coarser, [node for node, _ in parent_nodes]))
        open_nodes = parent_nodes

    entries.sort(key=lambda entry: entry.number_of_clusters)
    return entries


def genealogy_to_records(entries):
    """Plain nested records of the genealogy, ready for JSON export."""
    return [entry.to_record() for entry in entries]
