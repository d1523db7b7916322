"""
Shared pytest fixtures for clusterkube tests.

This module provides:
- SpyExecutor: a RemoteExecutor that records calls and returns canned output
- A demo cluster directory and settings rooted in tmp_path
"""

from pathlib import Path
from typing import List, Optional, Tuple

import pytest

from clusterkube.errors import AuthError
from clusterkube.executor import RemoteExecutor
from clusterkube.models.cluster import Cluster, ClusterDirectory, ClusterNode
from clusterkube.models.settings import ClusterKubeSettings
from clusterkube.models.ssh import SSHKey

DEMO_KUBECONFIG = """\
apiVersion: v1
kind: Config
clusters:
- name: kubernetes
  cluster:
    certificate-authority-data: LS0tLS1CRUdJTg==
    server: https://10.0.0.5:6443
contexts:
- name: kubernetes-admin@kubernetes
  context:
    cluster: kubernetes
    user: kubernetes-admin
current-context: kubernetes-admin@kubernetes
preferences: {}
users:
- name: kubernetes-admin
  user:
    client-certificate-data: LS0tLS1DRVJU
    client-key-data: LS0tLS1LRVk=
"""


class SpyExecutor(RemoteExecutor):
    """Records every call; returns `output` from run()."""

    def __init__(
        self,
        output: str = "server: https://10.0.0.5:6443\n",
        auth_error: Optional[Exception] = None,
        run_error: Optional[Exception] = None,
    ) -> None:
        self.output = output
        self.auth_error = auth_error
        self.run_error = run_error
        self.calls: List[Tuple[str, object]] = []

    async def authenticate(self, key_name: str) -> None:
        self.calls.append(("authenticate", key_name))
        if self.auth_error is not None:
            raise self.auth_error

    async def run(self, node: ClusterNode, command: List[str]) -> str:
        self.calls.append(("run", (node.name, command)))
        if self.run_error is not None:
            raise self.run_error
        return self.output


@pytest.fixture
def demo_node() -> ClusterNode:
    return ClusterNode(
        name="demo-master-01",
        node_type="master",
        ip_address="203.0.113.9",
        private_ip_address="10.0.0.5",
        ssh_key_name="admin",
    )


@pytest.fixture
def directory(demo_node: ClusterNode, tmp_path: Path) -> ClusterDirectory:
    worker = ClusterNode(
        name="demo-worker-01",
        node_type="worker",
        ip_address="203.0.113.10",
        private_ip_address="10.0.0.6",
        ssh_key_name="admin",
    )
    return ClusterDirectory(
        ssh_keys=[
            SSHKey(name="admin", private_key_path=str(tmp_path / "keys" / "id_admin"))
        ],
        clusters=[
            Cluster(name="demo", nodes=[worker, demo_node]),
            Cluster(name="workers-only", nodes=[worker]),
        ],
    )


@pytest.fixture
def settings(tmp_path: Path) -> ClusterKubeSettings:
    shm = tmp_path / "shm"
    shm.mkdir()
    return ClusterKubeSettings(
        config_path=str(tmp_path / "clusterkube" / "config.yaml"),
        kube_dir=str(tmp_path / "home" / ".kube"),
        ephemeral_dir=str(shm),
    )


@pytest.fixture
def spy_executor() -> SpyExecutor:
    return SpyExecutor()


@pytest.fixture
def failing_auth_executor() -> SpyExecutor:
    return SpyExecutor(auth_error=AuthError("wrong passphrase"))


@pytest.fixture
def make_executor():
    """Factory for SpyExecutor with custom output or errors."""
    return SpyExecutor
