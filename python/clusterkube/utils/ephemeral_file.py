"""
clusterkube/utils/ephemeral_file.py

Provides an async context manager for ephemeral files in `/dev/shm`, used to
hand private keys and known_hosts to the ssh binary without them touching
persistent storage. The directory and everything in it is removed on exit.
"""

import os
import tempfile
from contextlib import asynccontextmanager
from typing import AsyncGenerator


@asynccontextmanager
async def ephemeral_manager(
    file_name: str,
    *,
    prefix: str = "ephemeral-",
    parent_dir: str = "/dev/shm",
) -> AsyncGenerator[str, None]:
    """
    Create a private (0700) ephemeral directory under `parent_dir` and yield
    the path of `file_name` inside it. The file itself is not created.

    Args:
        file_name: The ephemeral filename.
        prefix: Prefix for the ephemeral directory name.
        parent_dir: Where to place the ephemeral directory, default `/dev/shm`.

    Yields:
        The ephemeral file path as a string.
    """
    if not file_name or os.sep in file_name:
        raise ValueError(f"Invalid ephemeral file name: {file_name!r}")

    ephemeral_dir = tempfile.mkdtemp(dir=parent_dir, prefix=prefix)

    try:
        yield os.path.join(ephemeral_dir, file_name)
    finally:
        if os.path.isdir(ephemeral_dir):
            for item in os.listdir(ephemeral_dir):
                item_path = os.path.join(ephemeral_dir, item)
                if os.path.isfile(item_path) or os.path.islink(item_path):
                    os.remove(item_path)
            os.rmdir(ephemeral_dir)
