import shutil
import subprocess

import rupin.logging


class CommandError(RuntimeError):
    pass


def run_command(args: list[str]) -> str:
    """
    Run a command found on PATH and return its standard output.
    """

    cmd = shutil.which(args[0])
    if cmd is None:
        raise CommandError(f"{args[0]} is not found in PATH")

    rupin.logging.debug("Executing %s", " ".join(args))
    result = subprocess.run([cmd, *args[1:]], text=True, capture_output=True)
    if result.returncode != 0:
        raise CommandError(
            f"{' '.join(args)} exited with code {result.returncode}: {result.stderr.strip()}"
        )

    return result.stdout
