"""Shared test fixtures."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from packerconfig import Config


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(tmp_path / "config.json")


@pytest.fixture
def fake_packer(
    monkeypatch: pytest.MonkeyPatch,
) -> Callable[..., list[dict[str, Any]]]:
    """Replace ``subprocess.run`` with a stub returning a fixed result."""

    def install(returncode: int = 0, stdout: str = "output", stderr: str = "error") -> list[dict[str, Any]]:
        calls: list[dict[str, Any]] = []

        def fake_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
            calls.append({"cmd": cmd, **kwargs})
            return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)

        monkeypatch.setattr("packerconfig.runner.subprocess.run", fake_run)
        return calls

    return install
