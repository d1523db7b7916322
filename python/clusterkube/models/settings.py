# clusterkube/models/settings.py

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings


class ClusterKubeSettings(BaseSettings):
    """
    Pydantic settings for locating the cluster directory, reaching master
    nodes and installing the kubeconfig. These fields map to environment
    variables prefixed with `CLUSTERKUBE_`, e.g. `CLUSTERKUBE_KUBE_DIR`.
    """

    config_path: str = "~/.clusterkube/config.yaml"
    kube_dir: str = "~/.kube"
    kubeconfig_name: str = "config"
    ssh_user: str = "root"
    ssh_port: int = 22
    remote_kubeconfig_path: str = "/etc/kubernetes/admin.conf"
    ephemeral_dir: str = "/dev/shm"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    class Config:
        env_prefix = "CLUSTERKUBE_"

    def kube_dir_path(self) -> Path:
        return Path(self.kube_dir).expanduser()

    def kubeconfig_path(self) -> Path:
        return self.kube_dir_path() / self.kubeconfig_name

    def config_file_path(self) -> Path:
        return Path(self.config_path).expanduser()


class InstallOptions(BaseModel):
    """
    Per-invocation switches for the install/print step.

    Attributes:
        print_only: Render the kubeconfig to stdout instead of installing it.
        force: Overwrite an existing kubeconfig without asking.
        backup: Reserved; accepted but no backup is written.
    """

    model_config = ConfigDict(frozen=True)

    print_only: bool = False
    force: bool = False
    backup: bool = False
