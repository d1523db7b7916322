#!/usr/bin/env python3
"""
clusterkube/cli/kubeconfig.py

Fetches the admin kubeconfig of a cluster (e.g. for usage with kubectl) and
saves it to ~/.kube/config, or prints it.

    python -m clusterkube.cli.kubeconfig my-cluster        # install
    python -m clusterkube.cli.kubeconfig -n my-cluster -f  # install, no question
    python -m clusterkube.cli.kubeconfig my-cluster -p     # print to stdout
    python -m clusterkube.cli.kubeconfig my-cluster -p > my-conf.yaml

The cluster directory (clusters, nodes, SSH keys) is read from
~/.clusterkube/config.yaml unless --config or CLUSTERKUBE_CONFIG_PATH says
otherwise. Usage errors (such as a missing cluster name) exit with status 2
before any file is read; any other failure prints a message to stderr and
exits with status 1.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from clusterkube.errors import ConfirmationDeclinedError, KubeconfigError
from clusterkube.executor import SSHExecutor
from clusterkube.kubeconfig.pipeline import KubeconfigContext, run_kubeconfig
from clusterkube.models.settings import ClusterKubeSettings, InstallOptions
from clusterkube.secrets.directory import load_cluster_directory


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clusterkube.cli.kubeconfig",
        description="Set up the kubeconfig of a cluster on the local machine.",
    )
    parser.add_argument("cluster", nargs="?", default=None, help="Name of the cluster.")
    parser.add_argument(
        "-n", "--name", default=None, help="Name of the cluster (legacy form)."
    )
    parser.add_argument(
        "-p", "--print", dest="print_only", action="store_true",
        help="Print the kubeconfig to stdout instead of installing it.",
    )
    parser.add_argument(
        "-b", "--backup", action="store_true",
        help="Save the existing kubeconfig (reserved, not implemented).",
    )
    parser.add_argument(
        "-f", "--force", action="store_true",
        help="Don't ask before overwriting an existing kubeconfig.",
    )
    parser.add_argument(
        "--config", default=None, help="Path of the cluster directory file."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    return parser


def cluster_name_from_args(
    parser: argparse.ArgumentParser, args: argparse.Namespace
) -> str:
    """
    Pick the cluster name from the positional argument or --name. Giving
    two different names is a usage error.
    """
    if args.cluster and args.name and args.cluster != args.name:
        parser.error(
            f"conflicting cluster names '{args.cluster}' and '{args.name}'"
        )
    return args.cluster or args.name or ""


async def _run_kubeconfig(
    settings: ClusterKubeSettings, name: str, options: InstallOptions
) -> Optional[Path]:
    """
    1) Load the cluster directory
    2) Build the SSH executor
    3) Resolve, fetch, rewrite, then print or install
    """
    directory = await load_cluster_directory(settings.config_path)
    ctx = KubeconfigContext(
        directory=directory,
        executor=SSHExecutor(directory, settings),
        settings=settings,
    )
    return await run_kubeconfig(ctx, name, options)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    name = cluster_name_from_args(parser, args)
    if not name:
        parser.error("a cluster name is required")

    try:
        settings = ClusterKubeSettings()
    except ValueError as exc:
        print(f"ERROR: invalid CLUSTERKUBE_* setting: {exc}", file=sys.stderr)
        return 1
    if args.config:
        settings = settings.model_copy(update={"config_path": args.config})

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    options = InstallOptions(
        print_only=args.print_only, force=args.force, backup=args.backup
    )

    try:
        path = asyncio.run(_run_kubeconfig(settings, name, options))
    except ConfirmationDeclinedError:
        print("aborted", file=sys.stderr)
        return 1
    except KubeconfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:
        print(f"ERROR: unexpected failure: {exc}", file=sys.stderr)
        return 1

    if path is not None:
        print(f"kubeconfig configured at {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
