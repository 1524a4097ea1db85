# resolution_stability/overlap.py

import numpy as np

from resolution_stability.errors import EmptyChildCluster, EqualClusterCounts


# ---------------------------------------------------------
# Overlap between clusters given as sets of item ids
# ---------------------------------------------------------
def overlap_absolute(cluster_a, cluster_b):
    """Number of items shared by both clusters."""
    if not isinstance(cluster_a, (set, frozenset)):
        cluster_a = frozenset(cluster_a)
    return len(cluster_a.intersection(cluster_b))


def overlap_relative(cluster_parent, cluster_child):
    """
    Fraction of the child cluster contained in the parent cluster.

    Raises
    ------
    EmptyChildCluster
        If the child cluster has no items
    """
    if len(cluster_child) == 0:
        raise EmptyChildCluster()
    return overlap_absolute(cluster_parent, cluster_child) / len(cluster_child)


def overlaps_relative(clusters_parent, cluster_child):
    """Relative overlap of the child cluster with each of the parent clusters."""
    if len(cluster_child) == 0:
        raise EmptyChildCluster()
    child_size = len(cluster_child)
    return [
        overlap_absolute(parent, cluster_child) / child_size
        for parent in clusters_parent
    ]


def stability(clusters_parent, cluster_child):
    """
    Stability of a child cluster against the parent clustering.

    Sum of squared relative overlaps: 1.0 when the child lies wholly inside
    one parent, 1/k when it is split evenly over k parents.
    """
    overlaps = np.asarray(overlaps_relative(clusters_parent, cluster_child), dtype=float)
    return float(np.sum(overlaps ** 2))


# ---------------------------------------------------------
# Stability between two whole clusterings
# ---------------------------------------------------------
def mean_stability(resolution_a, resolution_b):
    """
    Mean stability of the finer clustering against the coarser one.

    The resolution with more clusters is taken as the child; every one of its
    clusters is scored against all clusters of the other resolution.

    Parameters
    ----------
    resolution_a, resolution_b : ResolutionData
        The two clusterings to relate, in any order

    Returns
    -------
    float
        Mean of the per-cluster stabilities of the child clustering

    Raises
    ------
    EqualClusterCounts
        If both clusterings have the same number of clusters
    """
    n_a = resolution_a.number_of_clusters
    n_b = resolution_b.number_of_clusters
    if n_a == n_b:
        raise EqualClusterCounts(n_a)

    parent, child = (resolution_a, resolution_b) if n_a < n_b else (resolution_b, resolution_a)
    parent_cells = parent.cluster_cells
    stabilities = [stability(parent_cells, cluster.cells) for cluster in child.clusters]
    return float(np.mean(stabilities))
