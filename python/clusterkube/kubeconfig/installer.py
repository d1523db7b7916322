"""
clusterkube/kubeconfig/installer.py

Turns a fetched admin kubeconfig into something usable from the operator's
machine and puts it where kubectl looks for it:
  - rewrite_server_address: swap the master's private address for its public one
  - print_kubeconfig: parse and render the document to a stream
  - install_kubeconfig: write ~/.kube/config, asking before overwriting

The address rewrite is a plain substring replacement. If the private address
also occurs inside an unrelated token (e.g. "10.0.0.5" inside "10.0.0.50")
that token is rewritten too.
"""

from __future__ import annotations

import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Optional, TextIO

import aiofiles
import aiofiles.os
import aiofiles.ospath

from clusterkube.errors import ConfirmationDeclinedError, InstallError, ParseError
from clusterkube.kubeconfig.confirm import ConfirmProvider
from clusterkube.models.cluster import ClusterNode
from clusterkube.models.kubeconfig import parse_kubeconfig, render_kubeconfig
from clusterkube.models.settings import ClusterKubeSettings, InstallOptions

logger = logging.getLogger(__name__)

KUBE_DIR_MODE = 0o700
KUBECONFIG_MODE = 0o600

OVERWRITE_PROMPT = (
    "There already exists a kubeconfig at {path}. "
    "Overwrite? (use -f to suppress this question) [yN]: "
)


def rewrite_server_address(content: str, node: ClusterNode) -> str:
    """
    Replace every occurrence of the node's private address with its public
    address. Applying it twice gives the same result as applying it once.
    """
    if (
        not node.private_address
        or not node.public_address
        or node.private_address == node.public_address
    ):
        return content
    return content.replace(node.private_address, node.public_address)


def print_kubeconfig(content: str, out: Optional[TextIO] = None) -> None:
    """
    Parse `content` and write its rendered form to `out` (default stdout).

    Raises:
        ParseError: the document could not be parsed; nothing is written.
    """
    try:
        doc = parse_kubeconfig(content)
    except ParseError as exc:
        logger.error("Cannot display kubeconfig: %s", exc)
        raise

    (out or sys.stdout).write(render_kubeconfig(doc))


async def _ensure_kube_dir(kube_dir: Path) -> None:
    if await aiofiles.ospath.isdir(kube_dir):
        return
    try:
        await aiofiles.os.makedirs(kube_dir, mode=KUBE_DIR_MODE, exist_ok=True)
    except OSError as exc:
        raise InstallError(f"cannot create {kube_dir}: {exc}") from exc
    logger.info("Created %s.", kube_dir)


async def _write_replace(target: Path, content: str) -> None:
    """
    Write `content` to a temp file beside `target` and move it into place,
    so `target` holds either the old or the complete new document.
    """
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}-", suffix=".tmp"
        )
    except OSError as exc:
        raise InstallError(f"cannot write to {target.parent}: {exc}") from exc
    os.close(fd)

    try:
        os.chmod(tmp_path, KUBECONFIG_MODE)
        async with aiofiles.open(tmp_path, "w", encoding="utf-8", newline="") as fh:
            await fh.write(content)
        await aiofiles.os.replace(tmp_path, target)
    except OSError as exc:
        raise InstallError(f"cannot write {target}: {exc}") from exc
    finally:
        # Also runs on cancellation; the temp file is gone after a replace
        if os.path.lexists(tmp_path):
            os.remove(tmp_path)


async def install_kubeconfig(
    content: str,
    settings: ClusterKubeSettings,
    options: InstallOptions,
    confirm: ConfirmProvider,
) -> Path:
    """
    Install `content` as the local kubeconfig.

    The kube directory is created (0700) if missing. An existing kubeconfig
    is only replaced if `options.force` is set or `confirm` returns True;
    `confirm` is not called otherwise.

    Returns:
        The path that was written.

    Raises:
        ConfirmationDeclinedError: the operator declined; nothing was written.
        InstallError: the directory or file could not be written.
    """
    kube_dir = settings.kube_dir_path()
    target = settings.kubeconfig_path()

    await _ensure_kube_dir(kube_dir)

    if await aiofiles.ospath.exists(target):
        if options.backup:
            # TODO: copy the existing kubeconfig aside once a backup naming scheme is agreed.
            logger.warning("--backup is not implemented; %s will not be saved.", target)
        if not options.force and not confirm(OVERWRITE_PROMPT.format(path=target)):
            raise ConfirmationDeclinedError(str(target))

    await _write_replace(target, content)
    logger.info("Wrote kubeconfig to %s.", target)
    return target
