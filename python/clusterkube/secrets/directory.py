"""
clusterkube/secrets/directory.py

Loading and saving the cluster directory file (clusters, nodes, SSH keys).
"""

from __future__ import annotations

import os

import aiofiles
import aiofiles.os
import aiofiles.ospath
import yaml
from pydantic import ValidationError

from clusterkube.errors import ConfigError
from clusterkube.models.cluster import ClusterDirectory


async def load_cluster_directory(path: str) -> ClusterDirectory:
    """
    Read and validate the cluster directory YAML at `path` (`~` is expanded).

    Raises:
        ConfigError: if the file is missing, unreadable or invalid.
    """
    full_path = os.path.expanduser(path)
    if not await aiofiles.ospath.exists(full_path):
        raise ConfigError(f"cluster directory not found at {full_path}")

    try:
        async with aiofiles.open(full_path, "r", encoding="utf-8") as fh:
            content = await fh.read()
    except OSError as exc:
        raise ConfigError(f"cannot read cluster directory {full_path}: {exc}") from exc

    try:
        return ClusterDirectory.from_yaml(content)
    except (yaml.YAMLError, ValidationError, ValueError) as exc:
        raise ConfigError(f"invalid cluster directory {full_path}: {exc}") from exc


async def save_cluster_directory(directory: ClusterDirectory, path: str) -> None:
    """
    Write `directory` to `path` as YAML, creating the parent directory (0700).
    """
    full_path = os.path.expanduser(path)
    parent = os.path.dirname(full_path)
    if parent:
        await aiofiles.os.makedirs(parent, mode=0o700, exist_ok=True)
    async with aiofiles.open(full_path, "w", encoding="utf-8") as fh:
        await fh.write(directory.to_yaml())
