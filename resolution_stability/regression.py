# resolution_stability/regression.py

import numpy as np
from scipy.optimize import least_squares

from resolution_stability.utils.logging_utils import warn

# Initial parameter estimates for the model fit
INITIAL_PARAMETER_ESTIMATES = (1.0, 1.0, -1.0, 0.5)
# Iteration budget of the Levenberg-Marquardt fit. The solver caps function
# evaluations, which rejected steps also consume, so each iteration is given
# one evaluation per parameter plus one.
MAX_ITERATIONS = 50


# ---------------------------------------------------------
# Stability decay model
# ---------------------------------------------------------
def model_function(params, x):
    """Rational decay p0 / (x * p1 + p2) + p3 of stability with the number of clusters."""
    p0, p1, p2, p3 = params
    with np.errstate(divide="ignore", invalid="ignore"):
        return p0 / (x * p1 + p2) + p3


def _model_jacobian(params, x):
    p0, p1, p2, _ = params
    with np.errstate(divide="ignore", invalid="ignore"):
        denom = x * p1 + p2
        inv = 1.0 / denom
        inv_sq = inv ** 2
        return np.column_stack((
            inv,
            -p0 * x * inv_sq,
            -p0 * inv_sq,
            np.ones_like(x),
        ))


def branch_observations(branch):
    """(number of clusters, edge stability) pairs of the non-root nodes of a branch."""
    points = [
        (node.number_of_clusters, node.optimal_stability)
        for node in branch
        if node.optimal_stability is not None
    ]
    x = np.array([p[0] for p in points], dtype=float)
    y = np.array([p[1] for p in points], dtype=float)
    return x, y


# ---------------------------------------------------------
# Regression of stability on the number of clusters
# ---------------------------------------------------------
class ClusterStabilityRegression:
    """
    Non-linear least squares fit of the stability decay model to a branch.

    Parameters
    ----------
    branch : list of ResolutionNode
        Branch to fit; root nodes carry no stability and are ignored
    initial_parameters : sequence of float
        Starting point of the fit
    max_iterations : int
        Iteration budget of the solver
    """

    def __init__(self, branch, initial_parameters=INITIAL_PARAMETER_ESTIMATES,
                 max_iterations=MAX_ITERATIONS):
        self.initial_parameters = np.asarray(initial_parameters, dtype=float)
        self.max_iterations = max_iterations
        self.x, self.y = branch_observations(branch)
        self.method = None
        self.status = None
        self.parameters = self._estimate_parameters()

    @property
    def n_observations(self):
        return int(self.x.size)

    @property
    def max_evaluations(self):
        return self.max_iterations * (self.initial_parameters.size + 1)

    def _estimate_parameters(self):
        if self.x.size == 0:
            warn("No stability observations on the branch; keeping initial regression parameters.")
            return self.initial_parameters.copy()

        # MINPACK's LM needs at least as many residuals as parameters
        self.method = "lm" if self.x.size >= self.initial_parameters.size else "trf"

        def residuals(params):
            return model_function(params, self.x) - self.y

        def jacobian(params):
            return _model_jacobian(params, self.x)

        result = least_squares(
            residuals,
            self.initial_parameters,
            jac=jacobian,
            method=self.method,
            max_nfev=self.max_evaluations,
        )
        self.status = result.status
        if result.status == 0:
            warn(f"Stability regression stopped after {result.nfev} evaluations without converging.")
        return np.asarray(result.x, dtype=float)

    def predict(self, x):
        """Predicted stability at `x` clusters (scalar or array-like)."""
        values = model_function(self.parameters, np.asarray(x, dtype=float))
        if np.ndim(values) == 0:
            return float(values)
        return values
