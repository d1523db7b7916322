import sys
import subprocess

SUBCOMMANDS = ("kubeconfig",)


def main() -> None:
    if len(sys.argv) < 2 or sys.argv[1] not in SUBCOMMANDS:
        print(f"Usage: clusterctl {{{','.join(SUBCOMMANDS)}}} [args...]")
        sys.exit(1)

    subcommand = sys.argv[1]
    subcommand_args = sys.argv[2:]

    cmd = [sys.executable, "-m", f"clusterkube.cli.{subcommand}"] + subcommand_args
    sys.exit(subprocess.call(cmd))
