from __future__ import annotations

import logging
from typing import Iterable

from check_apt.checks.base import exec_failed, exit_state, stderr_state
from check_apt.checks.update import APT_GET
from check_apt.runner import CommandError, Deadline, run_command
from check_apt.status import CheckResult

log = logging.getLogger("check_apt.checks.upgrade")

UPGRADE_CMD = (APT_GET, "-o", "Debug::NoLocking=true", "-s", "-qq", "upgrade")
DIST_UPGRADE_CMD = (APT_GET, "-o", "Debug::NoLocking=true", "-s", "-qq", "dist-upgrade")

# "Conf" lines only repeat packages already listed as "Inst"
INST_MARKER = "Inst"


def count_pending(lines: Iterable[str], verbose: int = 0) -> tuple[int, list[str]]:
    count = 0
    names: list[str] = []
    for line in lines:
        if not line.startswith(INST_MARKER):
            continue
        if verbose:
            print(line)
        count += 1
        parts = line.split()
        if len(parts) >= 2:
            names.append(parts[1])
    return count, names


def check_upgrade(deadline: Deadline, verbose: int = 0, dist_upgrade: bool = False) -> CheckResult:
    name = "dist-upgrade" if dist_upgrade else "upgrade"
    try:
        res = run_command(DIST_UPGRADE_CMD if dist_upgrade else UPGRADE_CMD, deadline)
    except CommandError as e:
        return exec_failed(name, e)

    state, exec_warning = exit_state(res, hint="Run again with -v for more info.")
    count, names = count_pending(res.stdout.lines, verbose)
    state, stderr_warning = stderr_state(res, state, verbose)

    log.info("upgrade_done mode=%s rc=%d pending=%d state=%s", name, res.returncode, count, state.text)
    if names:
        log.debug("upgrade_pending packages=%s", ",".join(sorted(set(names))[:50]))
    return CheckResult(
        name=name,
        state=state,
        details=f"pending={count}",
        packages=count,
        stderr_warning=stderr_warning,
        exec_warning=exec_warning,
    )
