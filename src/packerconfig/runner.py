"""Subprocess execution of the packer command line tool.

The runner only passes a template path and options to ``packer`` and reads
back the exit status plus captured output. Interpreting the build log is left
to the caller.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Self

from packerconfig.errors import BuildError

DEFAULT_EXECUTABLE = "packer"
EXECUTABLE_ENV_VAR = "PACKER_BIN"


@dataclass(frozen=True, slots=True)
class ToolSettings:
    executable: str = DEFAULT_EXECUTABLE
    options: tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=dict)
    cwd: Path | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        source = os.environ if environ is None else environ
        executable = source.get(EXECUTABLE_ENV_VAR) or DEFAULT_EXECUTABLE
        return cls(executable=executable)

    def with_options(self, *options: str) -> ToolSettings:
        return ToolSettings(
            executable=self.executable,
            options=(*self.options, *options),
            env=self.env,
            cwd=self.cwd,
        )


@dataclass(frozen=True, slots=True)
class BuildResult:
    command: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def packer_command(
    subcommand: str,
    template: str | Path,
    *,
    settings: ToolSettings,
    args: tuple[str, ...] = (),
) -> tuple[str, ...]:
    return (settings.executable, subcommand, *settings.options, *args, str(template))


def run_packer(
    subcommand: str,
    template: str | Path,
    *,
    settings: ToolSettings,
    args: tuple[str, ...] = (),
) -> BuildResult:
    """Run ``packer <subcommand> [options] <template>`` and block until it exits."""
    command = packer_command(subcommand, template, settings=settings, args=args)
    env = None
    if settings.env:
        env = dict(os.environ)
        env.update(settings.env)

    try:
        result = subprocess.run(
            list(command),
            cwd=str(settings.cwd) if settings.cwd is not None else None,
            env=env,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as exc:
        raise BuildError(
            f"Cannot run `{settings.executable}`.",
            returncode=127,
            stderr=str(exc),
            hint=f"Install packer or set {EXECUTABLE_ENV_VAR} to its path.",
            context={"command": " ".join(command), "missing": str(exc.filename or "")},
        ) from exc
    return BuildResult(
        command=command,
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )
