#!/usr/bin/env python

import argparse
import os

from resolution_stability.errors import ResolutionStabilityError
from resolution_stability.genealogy import branch_to_resolution_data, build_genealogy
from resolution_stability.graph import build_graph
from resolution_stability.io import load_input, save_branch_summary, save_genealogy
from resolution_stability.regression import ClusterStabilityRegression
from resolution_stability.selection import (
    DEFAULT_STABILITY_THRESHOLD,
    branch_summary,
    recommend_resolution,
    trim_branch,
)
from resolution_stability.utils.logging_utils import info, section, set_verbose, warn
from resolution_stability.utils.timing import PipelineTracker
from resolution_stability.visualisation import plot_branch


# ---------------------------------------------------------
def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Select the most stable resolution of a clustering resolution sweep"
    )
    parser.add_argument("-i", "--input", required=True,
                        help="CSV file (resolution, cluster of each item per row) "
                             "or sweep TSV (id, r_<resolution> columns)")
    parser.add_argument("-o", "--output", required=True,
                        help="Output directory for the genealogy, branch table and plot")
    parser.add_argument("--prefix", type=str, default=None,
                        help="Optional prefix for all output files")
    parser.add_argument("-t", "--threshold", type=float, default=DEFAULT_STABILITY_THRESHOLD,
                        help="Minimum regressed stability of retained resolutions")
    parser.add_argument("--no-plot", action="store_true",
                        help="Do not draw the stability plot")
    parser.add_argument("--progress", action="store_true",
                        help="Show a progress bar while building the resolution graph")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Only print warnings")
    return parser.parse_args(argv)


# ---------------------------------------------------------
def run(args):
    set_verbose(not args.quiet)
    os.makedirs(args.output, exist_ok=True)
    prefix = args.prefix or os.path.splitext(os.path.basename(args.input))[0]

    def out_path(fname):
        return os.path.join(args.output, f"{prefix}_{fname}")

    tracker = PipelineTracker()

    section("Data loading")
    with tracker.track("load_data"):
        resolutions = load_input(args.input)
    info(f"{len(resolutions)} resolutions loaded")

    section("Resolution graph construction")
    with tracker.track("graph_build"):
        graph = build_graph(resolutions, progress=args.progress)
        branch = graph.best_branch()
    info(f"{len(graph.layers)} layers, {len(graph)} nodes")
    if not branch:
        warn("no resolutions to analyse")
    else:
        info(f"best branch: {len(branch)} resolutions, total stability {branch[0].total_stability:.4f}")

    section("Stability regression")
    with tracker.track("regression"):
        regression = ClusterStabilityRegression(branch)
    info("parameters: " + ", ".join(f"{p:.4f}" for p in regression.parameters))

    if not args.no_plot:
        with tracker.track("plot"):
            plot_path = plot_branch(branch, regression=regression, threshold=args.threshold,
                                    output_dir=args.output, save_name=f"{prefix}_stability_graph.png")
        info(f"stability plot saved: {plot_path}")

    section("Branch trimming")
    with tracker.track("trimming"):
        trimmed = trim_branch(branch, args.threshold, regression=regression)
        summary_df = branch_summary(branch, regression=regression, threshold=args.threshold)
    save_branch_summary(summary_df, out_path("branch.tsv"))
    recommended = recommend_resolution(trimmed)
    info(f"{len(trimmed)} of {len(branch)} resolutions retained")
    if recommended is not None:
        info(f"Recommended resolution: {recommended}")

    section("Cluster genealogy")
    with tracker.track("genealogy"):
        entries = build_genealogy(branch_to_resolution_data(trimmed, resolutions))
    save_genealogy(entries, out_path("genealogy.json"))
    info(f"genealogy saved: {out_path('genealogy.json')}")

    tracker.save(out_path("runtime.tsv"))
    section("Pipeline finished")
    return recommended


def main(argv=None):
    args = parse_args(argv)
    try:
        run(args)
    except ResolutionStabilityError as e:
        warn(str(e))
        raise


if __name__ == "__main__":
    main()
