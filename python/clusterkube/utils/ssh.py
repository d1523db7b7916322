"""
clusterkube/utils/ssh.py

Runs commands on a remote node through the OpenSSH client, leveraging
ephemeral known_hosts and private keys stored in /dev/shm:
  - build_ssh_args: the ssh argument vector for one connection.
  - run_ssh_command: run a remote command and capture its stdout.

If the SSHConfig carries host_keys we connect with StrictHostKeyChecking=yes.
Otherwise the node's key is accepted on first use (accept-new) against an
empty, throwaway known_hosts file, so nothing is recorded between runs.
"""

from __future__ import annotations

import logging
import os
import shlex
import aiofiles
from typing import List, Optional

from clusterkube.models.ssh import SSHConfig
from clusterkube.utils.async_command_runner import run_command
from clusterkube.utils.ephemeral_file import ephemeral_manager

logger = logging.getLogger(__name__)


def build_ssh_args(
    ssh_config: SSHConfig,
    *,
    private_key_path: str,
    known_hosts_path: str,
    remote_command: List[str],
) -> List[str]:
    """
    Build the full ssh argument list for one non-interactive command.

    Args:
      ssh_config: user, hostname, port and optional host_keys
      private_key_path: path of the (unencrypted) identity file
      known_hosts_path: path of the known_hosts file to use
      remote_command: remote command tokens; quoted into one string

    Returns:
      The argument vector, starting with "ssh".
    """
    host_key_checking = "yes" if ssh_config.host_keys else "accept-new"
    return [
        "ssh",
        "-p",
        str(ssh_config.port),
        "-i",
        private_key_path,
        "-o",
        "BatchMode=yes",
        "-o",
        "IdentitiesOnly=yes",
        "-o",
        f"StrictHostKeyChecking={host_key_checking}",
        "-o",
        f"UserKnownHostsFile={known_hosts_path}",
        "-o",
        "GlobalKnownHostsFile=/dev/null",
        f"{ssh_config.user}@{ssh_config.hostname}",
        " ".join(shlex.quote(x) for x in remote_command),
    ]


async def run_ssh_command(
    ssh_config: SSHConfig,
    remote_command: List[str],
    *,
    sensitive: bool = True,
    strip_output: bool = True,
    successful_return_codes: Optional[List[int]] = None,
    ephemeral_dir: str = "/dev/shm",
) -> str:
    """
    Run a command on the remote host and return its stdout. A single attempt.

    Args:
      ssh_config: Must have user, hostname, port, private_key
      remote_command: The actual remote command tokens
      sensitive: If True, hides details on error
      strip_output: If False, stdout is returned byte-for-byte
      successful_return_codes: Exit codes considered "non-error", default [0]
      ephemeral_dir: Parent directory for the key and known_hosts files

    Returns:
      captured stdout from the remote command

    Raises:
      CommandError: if ssh or the remote command exits with a failing code.
      OSError: if the ssh binary cannot be started.
    """
    if not ssh_config.host_keys:
        logger.info(
            "No host keys known for %s; accepting the presented key for this run.",
            ssh_config.hostname,
        )

    async with ephemeral_manager(
        "ssh_known_hosts", prefix="sshkh-", parent_dir=ephemeral_dir
    ) as kh_path:
        async with ephemeral_manager(
            "ssh_idkey", prefix="sshpk-", parent_dir=ephemeral_dir
        ) as pk_path:
            # Write known_hosts (possibly empty)
            async with aiofiles.open(kh_path, "w", encoding="utf-8") as fkh:
                for line in ssh_config.host_keys or []:
                    await fkh.write(line + "\n")

            # Write private key; ssh rejects keys readable by others
            async with aiofiles.open(pk_path, "wb") as fpk:
                key_text = ssh_config.private_key
                if not key_text.endswith("\n"):
                    key_text += "\n"
                await fpk.write(key_text.encode("utf-8"))
            os.chmod(pk_path, 0o600)

            ssh_cmd = build_ssh_args(
                ssh_config,
                private_key_path=pk_path,
                known_hosts_path=kh_path,
                remote_command=remote_command,
            )
            logger.debug(
                "Running remote command on %s@%s:%d",
                ssh_config.user,
                ssh_config.hostname,
                ssh_config.port,
            )

            return await run_command(
                ssh_cmd,
                sensitive=sensitive,
                strip_output=strip_output,
                successful_return_codes=successful_return_codes,
            )
