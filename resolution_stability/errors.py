# resolution_stability/errors.py


class ResolutionStabilityError(Exception):
    """Base class for failures that abort a stability run."""


class EmptyChildCluster(ResolutionStabilityError):
    """A stability or overlap was requested for a cluster without cells."""

    def __init__(self, message="The child cluster is empty."):
        super().__init__(message)


class EqualClusterCounts(ResolutionStabilityError):
    """Two resolutions with the same number of clusters were compared."""

    def __init__(self, number_of_clusters):
        self.number_of_clusters = number_of_clusters
        super().__init__(
            f"Both resolutions have {number_of_clusters} clusters, "
            "so there is no parent/child direction between them."
        )


class NoMatchingParent(ResolutionStabilityError):
    """A best parent search ran against zero candidate clusters."""

    def __init__(self, cluster_id):
        self.cluster_id = cluster_id
        super().__init__(f"No parent cluster candidates for cluster {cluster_id}.")


class MissingResolutionInPool(ResolutionStabilityError):
    """A branch resolution does not occur in the resolution pool."""

    def __init__(self, resolution):
        self.resolution = resolution
        super().__init__(
            f"The resolution pool does not contain branch resolution {resolution!r}."
        )


class InputFormatError(ResolutionStabilityError, ValueError):
    """The clustering table could not be parsed."""
