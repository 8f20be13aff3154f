"""Subprocess execution shared by the source-control, build, and launch providers."""

from __future__ import annotations

__all__ = ["CommandResult", "run_command"]

import logging
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Captured result of a command execution."""

    command: list[str]
    cwd: str
    exit_code: int
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def success(self) -> bool:
        """Return whether the command completed successfully."""
        return self.exit_code == 0 and not self.timed_out

    @property
    def output(self) -> str:
        """Return stdout followed by any stderr."""
        if self.stdout and self.stderr:
            return f"{self.stdout.rstrip()}\n{self.stderr}"
        return self.stdout or self.stderr


def _normalize_args(args: list[str] | tuple[str, ...]) -> list[str]:
    """Coerce *args* to a validated ``list[str]``, rejecting non-string items."""
    normalized: list[str] = []
    for value in args:
        if not isinstance(value, str):
            msg = "command must contain only strings"
            raise TypeError(msg)
        normalized.append(value)
    if not normalized:
        raise ValueError("command must be non-empty")
    return normalized


def run_command(
    command: list[str] | tuple[str, ...],
    *,
    cwd: Path,
    timeout_s: float | None = None,
    env: Mapping[str, str] | None = None,
    combine_output: bool = False,
) -> CommandResult:
    """Execute *command* in *cwd*, capturing its output.

    With ``combine_output`` stderr is interleaved into stdout, the way a
    terminal would show it. There is no timeout unless ``timeout_s`` is given.

    Raises:
        FileNotFoundError: If the executable does not exist.
    """
    args = _normalize_args(command)
    if timeout_s is not None and timeout_s <= 0:
        raise ValueError("timeout_s must be > 0")

    logger.debug("Running %s in %s", args, cwd)
    try:
        completed = subprocess.run(
            args,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if combine_output else subprocess.PIPE,
            text=True,
            check=False,
            timeout=timeout_s,
            env=dict(env) if env is not None else None,
        )
    except subprocess.TimeoutExpired as exc:
        stdout = exc.stdout if isinstance(exc.stdout, str) else ""
        stderr = exc.stderr if isinstance(exc.stderr, str) else ""
        timeout_note = f"command timed out after {timeout_s}s"
        stderr = f"{stderr}\n{timeout_note}".strip()
        return CommandResult(
            command=args,
            cwd=str(cwd),
            exit_code=124,
            stdout=stdout,
            stderr=stderr,
            timed_out=True,
        )

    return CommandResult(
        command=args,
        cwd=str(cwd),
        exit_code=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        timed_out=False,
    )
