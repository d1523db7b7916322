"""
clusterkube/executor.py

The remote-execution capability used to fetch a kubeconfig. RemoteExecutor
exposes exactly two operations, `authenticate` and `run`, so the pipeline
never needs to know which concrete client it holds.

SSHExecutor unlocks keys from the cluster directory (asking for a passphrase
once per key if needed) and runs commands through the OpenSSH client.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from getpass import getpass
from typing import Dict, List, Optional

from clusterkube.errors import AuthError, RemoteError
from clusterkube.models.cluster import ClusterDirectory, ClusterNode
from clusterkube.models.settings import ClusterKubeSettings
from clusterkube.models.ssh import SSHConfig
from clusterkube.secrets.ssh_keys import PassphraseProvider, unlock_private_key
from clusterkube.utils.async_command_runner import CommandError
from clusterkube.utils.ssh import run_ssh_command

logger = logging.getLogger(__name__)

SSH_CONNECTION_ERROR = 255


def prompt_passphrase(key_name: str) -> str:
    """Ask for a key passphrase on the controlling terminal."""
    return getpass(f"Enter passphrase for SSH key '{key_name}': ")


class RemoteExecutor(ABC):
    """Abstract capability for running commands on cluster nodes."""

    @abstractmethod
    async def authenticate(self, key_name: str) -> None:
        """
        Make the credential named `key_name` usable for later `run` calls,
        obtaining any interactive secret it needs.

        Raises:
            AuthError: if the credential cannot be unlocked.
        """

    @abstractmethod
    async def run(self, node: ClusterNode, command: List[str]) -> str:
        """
        Run `command` on `node` and return its complete stdout.

        Raises:
            AuthError: if the node rejects the credential.
            RemoteError: if the command cannot run or fails.
        """


class SSHExecutor(RemoteExecutor):
    """RemoteExecutor backed by the OpenSSH client."""

    def __init__(
        self,
        directory: ClusterDirectory,
        settings: ClusterKubeSettings,
        passphrase_provider: Optional[PassphraseProvider] = None,
    ) -> None:
        """
        Args:
            directory: Source of SSHKey definitions.
            settings: SSH user, port and ephemeral directory.
            passphrase_provider: Called with a key name when that key is
                encrypted. Defaults to a getpass prompt.
        """
        self.directory = directory
        self.settings = settings
        self.passphrase_provider = passphrase_provider or prompt_passphrase
        self._unlocked: Dict[str, str] = {}

    async def authenticate(self, key_name: str) -> None:
        if key_name in self._unlocked:
            return

        key = self.directory.find_ssh_key(key_name)
        if key is None:
            raise AuthError(f"SSH key '{key_name}' is not defined")

        self._unlocked[key_name] = unlock_private_key(key, self.passphrase_provider)
        logger.debug("SSH key '%s' unlocked.", key_name)

    def ssh_config_for(self, node: ClusterNode) -> SSHConfig:
        """
        Build the SSHConfig for `node` from its unlocked key.

        Raises:
            AuthError: if `authenticate` was not called for the node's key.
        """
        private_key = self._unlocked.get(node.ssh_key_name)
        if private_key is None:
            raise AuthError(
                f"SSH key '{node.ssh_key_name}' has not been authenticated"
            )
        return SSHConfig(
            user=self.settings.ssh_user,
            hostname=node.public_address,
            port=self.settings.ssh_port,
            private_key=private_key,
            host_keys=node.host_keys,
        )

    async def run(self, node: ClusterNode, command: List[str]) -> str:
        ssh_config = self.ssh_config_for(node)
        try:
            return await run_ssh_command(
                ssh_config=ssh_config,
                remote_command=command,
                sensitive=True,
                strip_output=False,
                ephemeral_dir=self.settings.ephemeral_dir,
            )
        except CommandError as exc:
            if (
                exc.return_code == SSH_CONNECTION_ERROR
                and "permission denied" in exc.stderr.lower()
            ):
                raise AuthError(
                    f"{ssh_config.user}@{node.public_address} rejected SSH key "
                    f"'{node.ssh_key_name}'"
                ) from exc
            reason = exc.stderr or str(exc)
            raise RemoteError(
                f"command on {node.name} ({node.public_address}) failed: {reason}",
                exc.return_code,
            ) from exc
        except OSError as exc:
            raise RemoteError(f"cannot start ssh: {exc}") from exc
