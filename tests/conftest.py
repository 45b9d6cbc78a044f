from __future__ import annotations

from typing import Callable

import pytest

from check_apt.runner import CommandResult, Output


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.setenv("CHECK_APT_ROOT", str(tmp_path))
    monkeypatch.delenv("CHECK_APT_CONFIG", raising=False)
    monkeypatch.delenv("CHECK_APT_TIMEOUT", raising=False)
    return tmp_path


def _output(lines: list[str]) -> Output:
    data = "".join(f"{line}\n" for line in lines).encode("utf-8")
    return Output.from_bytes(data)


@pytest.fixture()
def make_result() -> Callable[..., CommandResult]:
    def factory(argv=("apt-get",), returncode: int = 0, stdout=(), stderr=()) -> CommandResult:
        return CommandResult(
            argv=tuple(argv),
            returncode=returncode,
            stdout=_output(list(stdout)),
            stderr=_output(list(stderr)),
        )

    return factory


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
