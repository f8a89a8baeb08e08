from __future__ import annotations


class ClusterNotFoundError(LookupError):
    """
    A zoom index, cluster id or cluster's children could not be resolved.
    """
