from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable


class State(IntEnum):
    """Plugin states, ordered so that the larger value is the more severe."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @property
    def text(self) -> str:
        return self.name


def max_state(*states: State) -> State:
    if not states:
        return State.OK
    return State(max(states))


def pending_floor(state: State, packages: int) -> State:
    return max_state(state, State.WARNING if packages > 0 else State.OK)


@dataclass(frozen=True)
class CheckResult:
    name: str
    state: State
    details: str
    packages: int = 0
    stderr_warning: bool = False
    exec_warning: bool = False


@dataclass(frozen=True)
class Summary:
    state: State
    packages: int
    dist_upgrade: bool
    stderr_warning: bool = False
    exec_warning: bool = False


def summarize(results: Iterable[CheckResult], dist_upgrade: bool = False) -> Summary:
    results = list(results)
    # nothing ran yet: undetermined
    state = max_state(*[r.state for r in results]) if results else State.UNKNOWN
    packages = sum(r.packages for r in results)
    return Summary(
        state=pending_floor(state, packages),
        packages=packages,
        dist_upgrade=dist_upgrade,
        stderr_warning=any(r.stderr_warning for r in results),
        exec_warning=any(r.exec_warning for r in results),
    )
