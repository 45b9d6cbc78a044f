from __future__ import annotations

import logging

from check_apt.checks.base import echo, exec_failed, exit_state, stderr_state
from check_apt.runner import CommandError, Deadline, run_command
from check_apt.status import CheckResult

log = logging.getLogger("check_apt.checks.update")

APT_GET = "/usr/bin/apt-get"
UPDATE_CMD = (APT_GET, "-o", "Debug::NoLocking=true", "-q", "update")


def check_update(deadline: Deadline, verbose: int = 0) -> CheckResult:
    try:
        res = run_command(UPDATE_CMD, deadline)
    except CommandError as e:
        return exec_failed("update", e)

    state, exec_warning = exit_state(res)
    if verbose:
        echo(res.stdout.lines)
    state, stderr_warning = stderr_state(res, state, verbose)

    log.info("update_done rc=%d state=%s", res.returncode, state.text)
    return CheckResult(
        name="update",
        state=state,
        details=f"rc={res.returncode}",
        stderr_warning=stderr_warning,
        exec_warning=exec_warning,
    )
