# file: module5_wrap/fetch.py
"""
Running the wrapped command.

The command is executed without a shell. Two special cases are
recognized from argv:
    - a download tool that writes to stdout (curl without -o/-O/--output)
      is run with stdout captured, and the captured bytes are the output
    - `git clone <url> [dir]` narrows the diff to the clone directory
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Optional, Sequence

from .errors import CommandFailedError

logger = logging.getLogger(__name__)

_CURL_OUTPUT_FLAGS = ('-o', '-O', '--output', '--remote-name', '--remote-name-all', '--output-dir')

# git clone options that consume the following argument
_GIT_CLONE_VALUE_OPTIONS = frozenset({
    '-b', '--branch', '-o', '--origin', '-c', '--config', '-j', '--jobs',
    '-u', '--upload-pack', '--depth', '--reference', '--reference-if-able',
    '--separate-git-dir', '--template', '--filter', '--shallow-since',
    '--shallow-exclude', '--server-option', '--bundle-uri',
})


@dataclass(frozen=True)
class FetchResult:
    returncode: int
    stdout_bytes: Optional[bytes] = None


def writes_to_disk(argv: Sequence[str]) -> bool:
    """
    False only for curl invocations that print the body to stdout.

    Every other command is assumed to write files.
    """
    if not argv:
        return True
    if PurePath(argv[0]).name != 'curl':
        return True

    for arg in argv[1:]:
        if arg in _CURL_OUTPUT_FLAGS:
            return True
        if arg.startswith('--output=') or arg.startswith('--output-dir='):
            return True
        # Combined short flags, e.g. -sLo or -LO
        if arg.startswith('-') and not arg.startswith('--') and ('o' in arg[1:] or 'O' in arg[1:]):
            return True
    return False


def git_clone_target(argv: Sequence[str]) -> Optional[PurePath]:
    """
    Directory a `git clone` will create, relative to the working dir.

    Returns None if argv is not a git clone.
    """
    if len(argv) < 3 or PurePath(argv[0]).name != 'git' or argv[1] != 'clone':
        return None

    positional = []
    args = iter(argv[2:])
    for arg in args:
        if arg in _GIT_CLONE_VALUE_OPTIONS:
            next(args, None)
        elif not arg.startswith('-'):
            positional.append(arg)
    if not positional:
        return None

    if len(positional) >= 2:
        return PurePath(positional[1])

    url = positional[0].rstrip('/')
    name = url.rsplit('/', 1)[-1].rsplit(':', 1)[-1]
    if name.endswith('.git'):
        name = name[:-len('.git')]
    return PurePath(name) if name else None


def run_command(argv: Sequence[str], cwd: Path, capture_stdout: bool = False) -> FetchResult:
    """
    Run a command to completion in `cwd`.

    Args:
        argv: Program and arguments
        cwd: Working directory
        capture_stdout: Collect stdout instead of passing it through

    Returns:
        FetchResult (stdout_bytes set when captured)

    Raises:
        CommandFailedError: Command could not start or exited non-zero
    """
    if not argv:
        raise CommandFailedError("No command given", command=argv)

    logger.info("Running: %s", ' '.join(argv))

    try:
        completed = subprocess.run(
            list(argv),
            cwd=str(cwd),
            stdout=subprocess.PIPE if capture_stdout else None,
            check=False,
        )
    except OSError as e:
        raise CommandFailedError(
            f"Command failed to start: {argv[0]}: {e}", command=argv
        ) from e

    if completed.returncode != 0:
        raise CommandFailedError(
            f"Command exited with status {completed.returncode}: {' '.join(argv)}",
            command=argv,
            returncode=completed.returncode,
        )

    return FetchResult(
        returncode=completed.returncode,
        stdout_bytes=completed.stdout if capture_stdout else None,
    )
