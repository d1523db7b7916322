"""
clusterkube/kubeconfig/pipeline.py

The kubeconfig command end to end: resolve the master node, fetch its admin
kubeconfig, rewrite the server address, then print or install the result.
Everything the pipeline needs is passed in a KubeconfigContext.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

from clusterkube.executor import RemoteExecutor
from clusterkube.kubeconfig.confirm import ConfirmProvider, prompt_confirmation
from clusterkube.kubeconfig.fetcher import fetch_kubeconfig
from clusterkube.kubeconfig.installer import (
    install_kubeconfig,
    print_kubeconfig,
    rewrite_server_address,
)
from clusterkube.kubeconfig.resolver import resolve_master_node
from clusterkube.models.cluster import ClusterDirectory
from clusterkube.models.settings import ClusterKubeSettings, InstallOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KubeconfigContext:
    """
    Collaborators for one kubeconfig invocation.

    Attributes:
        directory: Known clusters and SSH keys.
        executor: Runs commands on the master node.
        settings: Paths and SSH defaults.
        confirm: Asked before overwriting an existing kubeconfig.
        output: Stream for print mode; stdout if None.
    """

    directory: ClusterDirectory
    executor: RemoteExecutor
    settings: ClusterKubeSettings
    confirm: ConfirmProvider = prompt_confirmation
    output: Optional[TextIO] = None


async def run_kubeconfig(
    ctx: KubeconfigContext,
    name: str,
    options: InstallOptions,
) -> Optional[Path]:
    """
    Fetch the kubeconfig of cluster `name` and print or install it.

    Returns:
        The installed path, or None in print mode.

    Raises:
        KubeconfigError: any failure; the name is validated before any
            remote call is made.
    """
    node = resolve_master_node(ctx.directory, name)

    content = await fetch_kubeconfig(
        ctx.executor, node, ctx.settings.remote_kubeconfig_path
    )
    content = rewrite_server_address(content, node)

    if options.print_only:
        print_kubeconfig(content, ctx.output)
        return None

    return await install_kubeconfig(content, ctx.settings, options, ctx.confirm)
