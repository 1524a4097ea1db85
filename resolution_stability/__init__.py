# resolution_stability/__init__.py
# expose functions at the package level
from .errors import (
    ResolutionStabilityError,
    EmptyChildCluster,
    EqualClusterCounts,
    NoMatchingParent,
    MissingResolutionInPool,
    InputFormatError,
)
from .data import Cluster, ResolutionData, group_by_cluster
from .overlap import overlap_absolute, overlap_relative, overlaps_relative, stability, mean_stability
from .graph import ResolutionNode, ResolutionGraph, build_graph
from .regression import ClusterStabilityRegression
from .selection import trim_branch, recommend_resolution, branch_summary
from .genealogy import GenealogyNode, GenealogyEntry, build_genealogy, branch_to_resolution_data
from .io import load_input, save_genealogy

__version__ = "0.1.0"
