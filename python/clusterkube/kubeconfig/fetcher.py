"""
clusterkube/kubeconfig/fetcher.py

Reads the admin kubeconfig from a master node. One attempt; any failure is
surfaced to the caller.
"""

from __future__ import annotations

import logging

from clusterkube.errors import RemoteError
from clusterkube.executor import RemoteExecutor
from clusterkube.models.cluster import ClusterNode

logger = logging.getLogger(__name__)

DEFAULT_REMOTE_KUBECONFIG = "/etc/kubernetes/admin.conf"


async def fetch_kubeconfig(
    executor: RemoteExecutor,
    node: ClusterNode,
    remote_path: str = DEFAULT_REMOTE_KUBECONFIG,
) -> str:
    """
    Authenticate with the node's SSH key, then `cat` the kubeconfig.

    Args:
        executor: The remote executor to use.
        node: The master node.
        remote_path: Location of the admin kubeconfig on the node.

    Returns:
        The complete file content, unstripped.

    Raises:
        AuthError: propagated from the executor.
        RemoteError: the command failed or printed nothing.
    """
    await executor.authenticate(node.ssh_key_name)

    logger.info("Fetching %s from %s.", remote_path, node.public_address)
    content = await executor.run(node, ["cat", remote_path])

    if not content.strip():
        raise RemoteError(f"{remote_path} on {node.name} is empty")
    return content
