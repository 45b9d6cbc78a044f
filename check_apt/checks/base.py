from __future__ import annotations

import logging
import sys
from typing import Iterable

from check_apt.runner import CommandError, CommandResult
from check_apt.status import CheckResult, State, max_state

log = logging.getLogger("check_apt.checks")


def echo(lines: Iterable[str]) -> None:
    for line in lines:
        print(line)


def exec_failed(name: str, err: CommandError) -> CheckResult:
    log.warning("check_exec_failed check=%s error=%s", name, err)
    print(str(err), file=sys.stderr)
    return CheckResult(name=name, state=State.UNKNOWN, details="exec_failed", exec_warning=True)


def exit_state(res: CommandResult, hint: str = "") -> tuple[State, bool]:
    # apt-get only changes its exit status on an internal error
    if res.returncode == 0:
        return State.OK, False
    msg = f"'{res.command}' exited with non-zero status."
    if hint:
        msg += f"\n{hint}"
    print(msg, file=sys.stderr)
    return State.UNKNOWN, True


def stderr_state(res: CommandResult, state: State, verbose: int) -> tuple[State, bool]:
    if not res.stderr.buflen:
        return state, False
    if verbose:
        echo(res.stderr.lines)
    return max_state(state, State.WARNING), True
