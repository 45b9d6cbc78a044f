from __future__ import annotations

from check_apt.status import State, Summary

STDERR_NOTICE = "warning, output detected on stderr. re-run with -v for more information."


def format_summary(summary: Summary) -> str:
    mode = "dist-upgrade" if summary.dist_upgrade else "upgrade"
    notes: list[str] = []
    if summary.stderr_warning:
        notes.append(" (warnings detected)")
    if summary.exec_warning:
        notes.append(" (errors detected)")
    return f"APT {summary.state.text}: {summary.packages} packages available for {mode}.{','.join(notes)}"


def timeout_message(seconds: int) -> str:
    return f"APT {State.UNKNOWN.text}: plugin timed out after {seconds} seconds"


def internal_error_message(err: BaseException) -> str:
    return f"APT {State.UNKNOWN.text}: internal error ({err})"
