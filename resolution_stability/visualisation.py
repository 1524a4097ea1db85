import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from resolution_stability.regression import ClusterStabilityRegression

sns.set(style="white")

# factor a plot axis is extended beyond its maximum value
AXIS_EXTENSION = 1.03
# x axis maximum used when the branch is empty
AXIS_X_DEFAULT = 100.0
# number of points used to draw the regression line
REGRESSION_STEPS = 1000


# ---------------------------------------------------------
# Stability of the best branch vs number of clusters
# ---------------------------------------------------------
def plot_branch(
    branch,
    regression=None,
    threshold=None,
    output_dir=".",
    save_name="stability_graph.png",
    title="Cluster stability",
):
    """
    Plot observed edge stability and the regressed stability curve of a branch.

    Returns the path of the saved figure.
    """
    observed = sorted(
        (node.number_of_clusters, node.optimal_stability)
        for node in branch
        if node.optimal_stability is not None
    )
    if regression is None:
        regression = ClusterStabilityRegression(branch)

    if branch:
        max_x = max(node.number_of_clusters for node in branch) * AXIS_EXTENSION
    else:
        max_x = AXIS_X_DEFAULT * AXIS_EXTENSION

    curve_x = np.linspace(0.0, max_x, REGRESSION_STEPS + 1)
    curve_y = np.asarray(regression.predict(curve_x), dtype=float)
    # hide the asymptote of the rational model
    curve_y[~np.isfinite(curve_y)] = np.nan

    plt.figure(figsize=(9, 6))
    ax = plt.gca()
    if observed:
        xs, ys = zip(*observed)
        ax.plot(xs, ys, color="black", marker="o", markersize=3, label="observed")
    ax.plot(curve_x, curve_y, color="red", label="regression")
    if threshold is not None:
        ax.axhline(threshold, color="grey", linestyle="--", linewidth=1, label=f"threshold {threshold:g}")

    ax.set_xlim(0, max_x)
    ax.set_ylim(0, AXIS_EXTENSION)
    ax.set_xlabel("Number of clusters", fontsize=10)
    ax.set_ylabel("Stability", fontsize=10)
    ax.set_title(title, fontsize=12)
    ax.grid(False)
    plt.legend(loc="lower left", fontsize=8)

    plt.tight_layout()
    os.makedirs(output_dir, exist_ok=True)
    save_path = os.path.join(output_dir, save_name)
    plt.savefig(save_path, dpi=300)
    plt.close()
    return save_path
