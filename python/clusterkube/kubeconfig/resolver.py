"""
clusterkube/kubeconfig/resolver.py

Maps a cluster name to the master node that serves its admin kubeconfig.
Both functions are read-only and must run before any remote connection.
"""

from __future__ import annotations

import logging

from clusterkube.errors import ClusterNotFoundError, InvalidClusterError
from clusterkube.models.cluster import Cluster, ClusterDirectory, ClusterNode

logger = logging.getLogger(__name__)


def validate_cluster_name(directory: ClusterDirectory, name: str) -> Cluster:
    """
    Check that `name` is non-empty and names exactly one known cluster.

    Raises:
        InvalidClusterError: if `name` is empty.
        ClusterNotFoundError: if no cluster has that name.
    """
    if not name:
        raise InvalidClusterError("a cluster name is required")

    idx, cluster = directory.find_cluster_by_name(name)
    if idx == -1 or cluster is None:
        raise ClusterNotFoundError(name)
    return cluster


def resolve_master_node(directory: ClusterDirectory, name: str) -> ClusterNode:
    """
    Return the master node of cluster `name`.

    Raises:
        InvalidClusterError: empty name, or the cluster has no master node.
        ClusterNotFoundError: unknown cluster.
    """
    cluster = validate_cluster_name(directory, name)
    master = cluster.master_node()
    if master is None:
        raise InvalidClusterError(f"cluster '{name}' has no master node")

    logger.debug(
        "Resolved cluster '%s' to master %s (%s / %s).",
        name,
        master.name,
        master.public_address,
        master.private_address,
    )
    return master
