"""
clusterkube/models/cluster.py

Pydantic models for the cluster directory: the local registry of clusters,
their nodes and the SSH keys used to reach them.

    ssh_keys:
      - name: admin
        private_key_path: ~/.ssh/id_ed25519
    clusters:
      - name: demo
        nodes:
          - name: demo-master-01
            node_type: master
            ip_address: 203.0.113.9
            private_ip_address: 10.0.0.5
            ssh_key_name: admin
"""

from __future__ import annotations

from typing import List, Literal, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from clusterkube.models.ssh import SSHKey

NodeType = Literal["master", "worker", "etcd"]


class ClusterNode(BaseModel):
    """
    A single node of a cluster.

    Attributes:
        name: Node (server) name.
        node_type: Role of the node; the master serves admin.conf.
        ip_address: Public address, reachable from the operator's machine.
        private_ip_address: Address on the cluster's internal network.
        ssh_key_name: Name of the SSHKey used to log in.
        host_keys: known_hosts lines for strict host key checking, if known.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    node_type: NodeType = "worker"
    ip_address: str
    private_ip_address: str = ""
    ssh_key_name: str
    host_keys: Optional[List[str]] = None

    @property
    def is_master(self) -> bool:
        return self.node_type == "master"

    @property
    def public_address(self) -> str:
        return self.ip_address

    @property
    def private_address(self) -> str:
        return self.private_ip_address

    @property
    def credential_key_name(self) -> str:
        return self.ssh_key_name


class Cluster(BaseModel):
    """A named cluster and its nodes, in declaration order."""

    name: str
    nodes: List[ClusterNode] = Field(default_factory=list)

    def master_node(self) -> Optional[ClusterNode]:
        """
        Return the first master node, or None if the cluster has none.
        HA clusters declare several masters; any of them serves admin.conf.
        """
        return next((node for node in self.nodes if node.is_master), None)


class ClusterDirectory(BaseModel):
    """
    The set of known clusters and SSH keys. Cluster names must be unique.
    """

    ssh_keys: List[SSHKey] = Field(default_factory=list)
    clusters: List[Cluster] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_names(self) -> ClusterDirectory:
        names = [cluster.name for cluster in self.clusters]
        if len(names) != len(set(names)):
            raise ValueError("Duplicate cluster name(s) in the cluster directory.")
        return self

    def find_cluster_by_name(self, name: str) -> Tuple[int, Optional[Cluster]]:
        """
        Look up a cluster by exact name.

        Returns:
            (index, cluster) on a hit, (-1, None) on a miss.
        """
        for idx, cluster in enumerate(self.clusters):
            if cluster.name == name:
                return idx, cluster
        return -1, None

    def find_ssh_key(self, name: str) -> Optional[SSHKey]:
        return next((key for key in self.ssh_keys if key.name == name), None)

    def to_yaml(self, *, sort_keys: bool = False) -> str:
        """
        Serialize the directory to a YAML string using PyYAML.
        """
        return yaml.safe_dump(
            self.model_dump(exclude_none=True), sort_keys=sort_keys
        )

    @classmethod
    def from_yaml(cls, yaml_str: str) -> ClusterDirectory:
        """
        Deserialize a directory from a YAML string. An empty document is an
        empty directory.
        """
        data = yaml.safe_load(yaml_str)
        return cls.model_validate(data or {})
