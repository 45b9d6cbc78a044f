from __future__ import annotations

import logging
import shlex
import subprocess
import time
from dataclasses import dataclass, field
from typing import Callable, Sequence

log = logging.getLogger("check_apt.runner")


class CommandError(Exception):
    pass


class CommandTimeout(CommandError):
    pass


class Deadline:
    """A single wall-clock budget shared by every command of one run."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        self.seconds = seconds
        self._clock = clock
        self._expires_at = clock() + seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0


@dataclass(frozen=True)
class Output:
    lines: list[str] = field(default_factory=list)
    buflen: int = 0

    @classmethod
    def from_bytes(cls, data: bytes | None) -> Output:
        raw = data or b""
        text = raw.decode("utf-8", errors="replace")
        # newline only; form feeds and the like stay inside a line
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        return cls(lines=lines, buflen=len(raw))


@dataclass(frozen=True)
class CommandResult:
    argv: tuple[str, ...]
    returncode: int
    stdout: Output
    stderr: Output

    @property
    def command(self) -> str:
        return shlex.join(self.argv)


def run_command(argv: Sequence[str], deadline: Deadline) -> CommandResult:
    argv = tuple(argv)
    cmd = shlex.join(argv)
    remaining = deadline.remaining()
    if remaining <= 0:
        raise CommandTimeout(f"'{cmd}' not started, timeout of {deadline.seconds:g}s already reached")

    log.debug("exec_start cmd=%s timeout_s=%.1f", cmd, remaining)
    try:
        p = subprocess.run(
            list(argv),
            check=False,
            capture_output=True,
            stdin=subprocess.DEVNULL,
            timeout=remaining,
        )
    except subprocess.TimeoutExpired as e:
        log.warning("exec_timeout cmd=%s timeout_s=%.1f", cmd, remaining)
        raise CommandTimeout(f"'{cmd}' timed out after {deadline.seconds:g}s") from e
    except OSError as e:
        log.warning("exec_failed cmd=%s error=%s", cmd, e)
        raise CommandError(f"'{cmd}' could not be executed: {e.strerror or e}") from e

    result = CommandResult(
        argv=argv,
        returncode=p.returncode,
        stdout=Output.from_bytes(p.stdout),
        stderr=Output.from_bytes(p.stderr),
    )
    log.info(
        "exec_done cmd=%s rc=%d stdout_lines=%d stderr_bytes=%d",
        cmd,
        result.returncode,
        len(result.stdout.lines),
        result.stderr.buflen,
    )
    return result
