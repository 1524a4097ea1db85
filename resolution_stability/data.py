# resolution_stability/data.py

from dataclasses import dataclass

import numpy as np


# ---------------------------------------------------------
# Clusters of item ids sampled at one resolution
# ---------------------------------------------------------
@dataclass(frozen=True)
class Cluster:
    """
    Items sharing one label at a single resolution.

    Attributes
    ----------
    cluster_id : int
        The original cluster label
    cells : frozenset of int
        Ids of the items assigned to the cluster
    total_cell_count : int
        Number of items clustered at this resolution
    """

    cluster_id: int
    cells: frozenset
    total_cell_count: int

    def __len__(self):
        return len(self.cells)


@dataclass(frozen=True)
class ResolutionData:
    """A clustering of the population at one resolution, clusters ordered by id."""

    resolution: float
    clusters: tuple

    @property
    def number_of_clusters(self):
        return len(self.clusters)

    @property
    def cluster_cells(self):
        return [cluster.cells for cluster in self.clusters]

    @classmethod
    def from_labels(cls, resolution, ids, labels):
        """
        Build resolution data from per-item cluster labels.

        Parameters
        ----------
        resolution : float
            Resolution the labels were obtained at, kept unchanged
        ids : array-like
            Item ids
        labels : array-like
            Cluster label of each item, same order as ids
        """
        return cls(resolution=resolution, clusters=group_by_cluster(ids, labels))


def group_by_cluster(ids, labels):
    """
    Group item ids by their cluster label.

    Returns a tuple of Cluster ordered by ascending cluster id.
    """
    ids = np.asarray(ids)
    labels = np.asarray(labels)
    if ids.shape != labels.shape:
        raise ValueError(
            f"Got {ids.size} item ids but {labels.size} cluster labels"
        )
    if labels.size == 0:
        return tuple()

    order = np.argsort(labels, kind="stable")
    unique, starts = np.unique(labels[order], return_index=True)
    groups = np.split(ids[order], starts[1:])

    total = int(labels.size)
    return tuple(
        Cluster(
            cluster_id=int(cl),
            cells=frozenset(int(i) for i in members),
            total_cell_count=total,
        )
        for cl, members in zip(unique, groups)
    )
