# resolution_stability/graph.py

from dataclasses import dataclass
from typing import List, Optional

from tqdm import tqdm

from resolution_stability.overlap import mean_stability


# ---------------------------------------------------------
# Nodes of the resolution graph
# ---------------------------------------------------------
@dataclass(frozen=True)
class ResolutionNode:
    """
    One clustering placed into the resolution graph.

    `optimal_parent` is the handle (index into `ResolutionGraph.nodes`) of the
    best matching node in the preceding layer, None for a root.
    """

    resolution: float
    number_of_clusters: int
    optimal_parent: Optional[int] = None
    optimal_stability: Optional[float] = None
    total_stability: float = 0.0
    depth: int = 0

    @property
    def is_root(self):
        return self.optimal_parent is None


@dataclass
class ResolutionGraph:
    """Arena of resolution nodes, layered by ascending number of clusters."""

    nodes: List[ResolutionNode]
    layers: List[List[int]]

    def __len__(self):
        return len(self.nodes)

    def __getitem__(self, handle):
        return self.nodes[handle]

    @property
    def roots(self):
        return list(self.layers[0]) if self.layers else []

    @property
    def leaves(self):
        return list(self.layers[-1]) if self.layers else []

    def branch(self, handle):
        """Nodes from `handle` up to its root, most clusters first."""
        chain = []
        current = handle
        while current is not None:
            node = self.nodes[current]
            chain.append(node)
            current = node.optimal_parent
        return chain

    def best_leaf(self):
        """Handle of the leaf with the highest total stability, None if empty."""
        leaves = self.leaves
        if not leaves:
            return None
        # equal leaves resolve to the last one in layer order
        return max(reversed(leaves), key=lambda h: self.nodes[h].total_stability)

    def best_branch(self):
        leaf = self.best_leaf()
        return [] if leaf is None else self.branch(leaf)


# ---------------------------------------------------------
# Graph construction
# ---------------------------------------------------------
def aggregate_by_number_of_clusters(resolutions):
    """Group resolution data by number of clusters, keeping input order per group."""
    layers = {}
    for data in resolutions:
        layers.setdefault(data.number_of_clusters, []).append(data)
    return layers


def _parent_key(candidate):
    # (total stability through the parent, parent resolution)
    parent, weight = candidate
    return (parent.total_stability + weight, parent.resolution)


def build_graph(resolutions, progress=False):
    """
    Build the resolution graph and its optimal paths.

    Clusterings are layered by number of clusters. Every node of a layer is
    connected to the node of the preceding layer maximising the cumulative
    stability of the path to a root; ties prefer the larger parent
    resolution. Since edges only point to the preceding layer a single
    ascending pass yields the optimal paths.

    Parameters
    ----------
    resolutions : iterable of ResolutionData
        Clusterings of the same population, in any order
    progress : bool
        Show a progress bar over the layers

    Returns
    -------
    ResolutionGraph
        Graph whose last layer holds the leaves
    """
    layer_map = aggregate_by_number_of_clusters(resolutions)
    keys = sorted(layer_map)

    nodes = []
    layers = []
    previous_data = None
    previous_handles = None

    for key in tqdm(keys, desc="Resolution layers", disable=not progress):
        layer_data = layer_map[key]
        handles = []

        for data in layer_data:
            if previous_data is None:
                node = ResolutionNode(
                    resolution=data.resolution,
                    number_of_clusters=data.number_of_clusters,
                )
            else:
                # candidates are aligned by position with the previous layer
                candidates = [
                    (nodes[handle], mean_stability(data, parent_data))
                    for handle, parent_data in zip(previous_handles, previous_data)
                ]
                best = max(range(len(candidates)), key=lambda i: _parent_key(candidates[i]))
                parent, weight = candidates[best]
                node = ResolutionNode(
                    resolution=data.resolution,
                    number_of_clusters=data.number_of_clusters,
                    optimal_parent=previous_handles[best],
                    optimal_stability=weight,
                    total_stability=parent.total_stability + weight,
                    depth=parent.depth + 1,
                )
            nodes.append(node)
            handles.append(len(nodes) - 1)

        layers.append(handles)
        previous_data = layer_data
        previous_handles = handles

    return ResolutionGraph(nodes=nodes, layers=layers)
