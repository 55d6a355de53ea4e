"""Shared test fixtures."""

from __future__ import annotations

import os
import subprocess
from typing import Callable

import pytest

from service_checker.config import Settings


class FakeClock:
    """Monotonic clock that only advances when something sleeps on it."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeRunner:
    """Stands in for subprocess.run; answers from a callable and records every command with its keyword arguments."""

    def __init__(self, respond: Callable[[list[str]], tuple[int, str]] | None = None) -> None:
        self.calls: list[list[str]] = []
        self.kwargs: list[dict] = []
        self._respond = respond or (lambda cmd: (0, ""))

    def __call__(self, cmd, **kwargs) -> subprocess.CompletedProcess:
        self.calls.append(list(cmd))
        self.kwargs.append(kwargs)
        returncode, stdout = self._respond(list(cmd))
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr="")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep SERVICE_CHECKER_* variables from the host out of the tests."""
    for key in list(os.environ):
        if key.startswith("SERVICE_CHECKER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, init_system="systemd", wait_seconds=0, max_attempts=3)


@pytest.fixture
def make_runner() -> type[FakeRunner]:
    return FakeRunner
