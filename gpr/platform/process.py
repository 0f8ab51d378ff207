"""Subprocess execution with Result-based error handling.

Inspection tools (aapt, bundletool) are run through ``run``; their
stdout is the payload, and on failure both streams are kept for
diagnosis.

Usage:
    match run(["aapt", "dump", "badging", "app.apk"]):
        case Ok(stdout):
            parse(stdout)
        case Err(error):
            print(error.output)
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from gpr.core.result import Err, Ok, Result

__all__ = ["ProcessError", "Runner", "run"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code (-1 when the process could not be started).
        stdout: Standard output (may be empty).
        stderr: Standard error.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"

    @property
    def output(self) -> str:
        """Both streams joined, for error reports."""
        return "\n".join(s for s in (self.stdout.strip(), self.stderr.strip()) if s)


Runner = Callable[[list[str]], Result[str, ProcessError]]


def run(
    cmd: list[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return stdout or error.

    No timeout is applied; the CI step timeout bounds the run.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory (None for the current one).
        env: Environment variables (uses current env if None).

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            env=env,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)
