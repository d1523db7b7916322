"""
clusterkube/errors.py

Error hierarchy for fetching and installing a cluster kubeconfig. Every
failure is terminal for a single invocation; the CLI is the only place that
turns these into exit codes.
"""

from __future__ import annotations

from typing import Optional


class KubeconfigError(Exception):
    """Base class for every failure raised by clusterkube."""


class InvalidClusterError(KubeconfigError, ValueError):
    """The cluster name is empty or the cluster cannot serve a kubeconfig."""


class ClusterNotFoundError(InvalidClusterError):
    """No cluster with the given name exists in the cluster directory.

    Attributes:
        name: The cluster name that was looked up.
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"cluster '{name}' not found")
        self.name = name


class ConfigError(KubeconfigError, ValueError):
    """The cluster directory file is missing or malformed."""


class AuthError(KubeconfigError):
    """The SSH key could not be unlocked or the remote host refused it."""


class RemoteError(KubeconfigError):
    """The remote command could not run or returned no usable output.

    Attributes:
        return_code: The ssh exit code, if the command ran at all.
    """

    def __init__(self, message: str, return_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.return_code = return_code


class ParseError(KubeconfigError, ValueError):
    """The kubeconfig document could not be parsed for display."""


class ConfirmationDeclinedError(KubeconfigError):
    """The operator declined to overwrite the existing kubeconfig."""

    def __init__(self, path: str) -> None:
        super().__init__("aborted")
        self.path = path


class InstallError(KubeconfigError, OSError):
    """Creating the kube directory or writing the kubeconfig failed."""
