"""
clusterkube/utils/async_command_runner.py

Provides an asynchronous command runner used for every ssh invocation.

We keep an optional argument for `successful_return_codes`, which indicates
which return codes won't be treated as errors (defaults to [0]), and
`strip_output` so callers that need byte-exact stdout (file contents) can
opt out of whitespace stripping.

Usage example:
    from clusterkube.utils.async_command_runner import run_command, CommandError

    try:
        output = await run_command(["ssh", "...", "cat /etc/hostname"])
        print(output)
    except CommandError as err:
        print(f"Command failed: {err}")
"""

from __future__ import annotations

import os
import asyncio
from typing import Dict, List, Optional

from clusterkube.utils.async_retry import async_retry


class CommandError(Exception):
    """Represents a failure when executing a shell command.

    Attributes:
        message (str): The error message describing the command failure.
        return_code (Optional[int]): The exit code if available.
        stderr (str): Captured stderr, kept even for sensitive commands so
            callers can classify the failure without printing it.
    """

    def __init__(
        self, message: str, return_code: Optional[int] = None, stderr: str = ""
    ) -> None:
        super().__init__(message)
        self.return_code = return_code
        self.stderr = stderr


async def run_command(
    command: List[str],
    *,
    sensitive: bool = True,
    env: Optional[Dict[str, str]] = None,
    cwd: Optional[str] = None,
    input_data: Optional[str] = None,
    successful_return_codes: Optional[List[int]] = None,
    strip_output: bool = True,
    retries: int = 1,
    retry_delay: float = 1.0,
) -> str:
    """
    Executes a local command in a subprocess, asynchronously.

    If the command fails (return code not in successful_return_codes), we raise
    CommandError. When `sensitive=True`, we omit the command, stdout, and stderr
    from the error message.

    Args:
        command (List[str]):
            The command and arguments to execute.
        sensitive (bool):
            If True, hides command details in the raised error.
        env (Optional[Dict[str, str]]):
            Additional environment variables to add or override.
        cwd (Optional[str]):
            Working directory for the command.
        input_data (Optional[str]):
            If provided, passed to stdin.
        successful_return_codes (Optional[List[int]]):
            Which return codes won't be treated as errors. Defaults to [0].
        strip_output (bool):
            If True, strips surrounding whitespace from stdout.
        retries (int):
            Total attempts. Defaults to 1 (no retry).
        retry_delay (float):
            Delay in seconds between attempts.

    Returns:
        str: The captured stdout of the command on success.

    Raises:
        CommandError: If the command returns a code not in
            `successful_return_codes` on the last attempt.
        OSError: If the executable cannot be started.
    """
    ok_codes = successful_return_codes if successful_return_codes is not None else [0]

    @async_retry(retries=retries, delay=retry_delay, retry_on=(CommandError,))
    async def _inner_run_command() -> str:
        proc_env = None
        if env:
            proc_env = os.environ.copy()
            proc_env.update(env)

        stdin = asyncio.subprocess.PIPE if input_data else asyncio.subprocess.DEVNULL

        proc = await asyncio.create_subprocess_exec(
            *command,
            stdin=stdin,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=proc_env,
            cwd=cwd,
        )

        stdout_bytes, stderr_bytes = await proc.communicate(
            input=input_data.encode() if input_data else None
        )
        stdout_str = stdout_bytes.decode(errors="replace")
        stderr_str = stderr_bytes.decode(errors="replace").strip()

        if proc.returncode not in ok_codes:
            detail = ""
            if not sensitive:
                detail = (
                    f"\nCommand: {' '.join(command)}"
                    f"\nStdout: {stdout_str.strip()}"
                    f"\nStderr: {stderr_str}"
                )

            raise CommandError(
                f"Command failed with return code {proc.returncode}.{detail}",
                proc.returncode,
                stderr_str,
            )

        return stdout_str.strip() if strip_output else stdout_str

    return await _inner_run_command()
