from __future__ import annotations

import subprocess
from typing import Sequence

from colgen.errors import FormatError

DEFAULT_FORMAT_COMMAND = ("gofmt",)


def format_source(source: str, command: Sequence[str] = DEFAULT_FORMAT_COMMAND) -> str:
    """Pipe Go source through an external formatter and return its stdout."""
    if not command:
        raise FormatError("<empty command>")
    try:
        completed = subprocess.run(
            list(command),
            input=source,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise FormatError(command[0], where=str(exc)) from exc

    if completed.returncode != 0:
        raise FormatError(command[0], where=completed.stderr.strip() or f"exit code {completed.returncode}")
    return completed.stdout
