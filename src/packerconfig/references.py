"""Template reference formatters resolved by packer at build time."""

from __future__ import annotations

from collections.abc import Mapping

from packerconfig.errors import UndefinedVariableError


def variable_reference(name: str, variables: Mapping[str, str]) -> str:
    """Return a ``{{user `name`}}`` token for a variable declared in *variables*."""
    if name not in variables:
        raise UndefinedVariableError(name)
    return f"{{{{user `{name}`}}}}"


def env_reference(name: str) -> str:
    """Return a ``{{env `name`}}`` token; the variable is looked up by packer."""
    return f"{{{{env `{name}`}}}}"


def macro_reference(name: str) -> str:
    return f"{{{{ .{name} }}}}"
