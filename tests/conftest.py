"""Shared fixtures for the resolution stability tests."""
from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resolution_stability.data import ResolutionData
from resolution_stability.graph import ResolutionNode


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Fast tests with no I/O")
    config.addinivalue_line("markers", "integration: Tests touching the file system")


@pytest.fixture
def make_resolution():
    """Build ResolutionData from labels of items numbered 1..n."""

    def _make(resolution, labels):
        ids = np.arange(1, len(labels) + 1)
        return ResolutionData.from_labels(resolution, ids, labels)

    return _make


@pytest.fixture
def make_branch():
    """Build a root-to-leaf chain of nodes from (n_clusters, stability) pairs, leaf first."""

    def _make(points, root_clusters=1):
        nodes = [ResolutionNode(resolution=0.0, number_of_clusters=root_clusters)]
        total = 0.0
        for depth, (n_clusters, stab) in enumerate(points, start=1):
            total += stab
            nodes.append(ResolutionNode(
                resolution=depth / 10,
                number_of_clusters=n_clusters,
                optimal_parent=depth - 1,
                optimal_stability=stab,
                total_stability=total,
                depth=depth,
            ))
        return list(reversed(nodes))

    return _make


@pytest.fixture
def sweep_labels():
    """Cluster labels of 12 items at resolutions giving 1, 2, 2, 3 and 4 clusters."""
    return {
        0.1: [0] * 12,
        0.2: [0] * 6 + [1] * 6,
        0.25: [0, 1] * 6,
        0.3: [0] * 4 + [1] * 4 + [2] * 4,
        0.4: [0] * 3 + [1] * 3 + [2] * 3 + [3] * 3,
    }
