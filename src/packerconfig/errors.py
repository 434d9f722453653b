"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers used across API surfaces."""

    UNKNOWN_TYPE = "E_UNKNOWN_TYPE"
    VALIDATION = "E_VALIDATION"
    UNDEFINED_VARIABLE = "E_UNDEFINED_VARIABLE"
    UNSUPPORTED_FORMAT = "E_UNSUPPORTED_FORMAT"
    BUILD = "E_BUILD"


class PackerConfigError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class UnknownTypeError(PackerConfigError):
    """Raised when a type tag is not registered for a record category."""

    def __init__(
        self,
        message: str,
        *,
        tag: str,
        category: str,
        hint: str | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.UNKNOWN_TYPE,
            hint=hint,
            context={"tag": tag, "category": category},
        )
        self.tag = tag
        self.category = category


class DataValidationError(PackerConfigError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.VALIDATION, hint=hint, context=context)


class UndefinedVariableError(PackerConfigError):
    def __init__(self, name: str, *, hint: str | None = None) -> None:
        super().__init__(
            f"Variable `{name}` is not defined in this configuration.",
            code=ErrorCode.UNDEFINED_VARIABLE,
            hint=hint or "Call add_variable() before referencing the variable.",
            context={"variable": name},
        )
        self.name = name


class UnsupportedFormatError(PackerConfigError):
    def __init__(self, fmt: str, *, supported: tuple[str, ...]) -> None:
        super().__init__(
            "Unsupported template format.",
            code=ErrorCode.UNSUPPORTED_FORMAT,
            hint=f"Use one of: {', '.join(supported)}.",
            context={"format": fmt},
        )
        self.format = fmt


class BuildError(PackerConfigError):
    """Raised when the external build tool exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int,
        stderr: str,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        merged = {"returncode": str(returncode), "stderr": stderr[:2000]}
        merged.update(context or {})
        super().__init__(message, code=ErrorCode.BUILD, hint=hint, context=merged)
        self.returncode = returncode
        self.stderr = stderr


__all__ = [
    "BuildError",
    "DataValidationError",
    "ErrorCode",
    "PackerConfigError",
    "UndefinedVariableError",
    "UnknownTypeError",
    "UnsupportedFormatError",
]
