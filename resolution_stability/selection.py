import numpy as np
import pandas as pd

from resolution_stability.regression import ClusterStabilityRegression

DEFAULT_STABILITY_THRESHOLD = 0.95


def trim_branch(branch, threshold=DEFAULT_STABILITY_THRESHOLD, regression=None):
    """
    Keep the stable prefix of a branch.

    Nodes are scanned by increasing number of clusters and kept while the
    regressed stability stays at or above `threshold`. The scan stops at the
    first node below the threshold; later nodes are discarded even if their
    prediction passes again. Root nodes have no stability of their own and
    are always kept.

    Parameters
    ----------
    branch : list of ResolutionNode
        Branch as returned by ResolutionGraph.branch
    threshold : float
        Minimum predicted stability
    regression : ClusterStabilityRegression, optional
        Fitted regression to use; fitted on the branch when omitted

    Returns
    -------
    list of ResolutionNode
        Retained nodes, fewest clusters first
    """
    if regression is None:
        regression = ClusterStabilityRegression(branch)

    ordered = sorted(branch, key=lambda node: node.number_of_clusters)
    trimmed = []
    for node in ordered:
        if node.is_root or regression.predict(node.number_of_clusters) >= threshold:
            trimmed.append(node)
        else:
            break
    return trimmed


def recommend_resolution(trimmed_branch):
    """Resolution of the finest clustering that is still stable, None if empty."""
    if not trimmed_branch:
        return None
    finest = max(trimmed_branch, key=lambda node: node.number_of_clusters)
    return finest.resolution


def branch_summary(branch, regression=None, threshold=DEFAULT_STABILITY_THRESHOLD):
    """
    Tabulate a branch with its regressed stability and trimming outcome.

    Returns a dataframe sorted by number of clusters with columns
    resolution, n_clusters, depth, stability, total_stability,
    predicted_stability and kept.
    """
    if regression is None:
        regression = ClusterStabilityRegression(branch)

    kept = {id(node) for node in trim_branch(branch, threshold, regression=regression)}
    ordered = sorted(branch, key=lambda node: node.number_of_clusters)

    rows = []
    for node in ordered:
        rows.append({
            "resolution": node.resolution,
            "n_clusters": node.number_of_clusters,
            "depth": node.depth,
            "stability": np.nan if node.optimal_stability is None else node.optimal_stability,
            "total_stability": node.total_stability,
            "predicted_stability": np.nan if node.is_root else regression.predict(node.number_of_clusters),
            "kept": id(node) in kept,
        })

    columns = ["resolution", "n_clusters", "depth", "stability",
               "total_stability", "predicted_stability", "kept"]
    return pd.DataFrame(rows, columns=columns)
