"""Packer template aggregate: records, variables, serialization, and build."""

from __future__ import annotations

import json
import warnings
from dataclasses import dataclass, field
from pathlib import Path

import cbor2

from .errors import BuildError, DataValidationError, UnsupportedFormatError
from .observability import StructuredLogger
from .records import Builder, JsonValue, PostProcessor, Provisioner
from .references import env_reference, macro_reference, variable_reference
from .registry import BUILDERS, POST_PROCESSORS, PROVISIONERS, R, Registry
from .runner import BuildResult, ToolSettings, run_packer

SUPPORTED_FORMATS: tuple[str, ...] = ("json",)


@dataclass(slots=True)
class Config:
    """A packer template written to ``config_path`` and built from there."""

    config_path: Path
    builders: list[Builder] = field(default_factory=list)
    provisioners: list[Provisioner] = field(default_factory=list)
    postprocessors: list[PostProcessor] = field(default_factory=list)
    variables: dict[str, str] = field(default_factory=dict)
    description: str | None = None
    min_packer_version: str | None = None
    settings: ToolSettings = field(default_factory=ToolSettings)
    logger: StructuredLogger = field(default_factory=StructuredLogger)

    def __post_init__(self) -> None:
        self.config_path = Path(self.config_path)

    def add_builder(self, tag: str) -> Builder:
        return self._add_record(BUILDERS, tag, self.builders)

    def add_provisioner(self, tag: str) -> Provisioner:
        return self._add_record(PROVISIONERS, tag, self.provisioners)

    def add_postprocessor(self, tag: str) -> PostProcessor:
        return self._add_record(POST_PROCESSORS, tag, self.postprocessors)

    def add_variable(self, name: str, value: str) -> None:
        if not isinstance(name, str) or not name:
            raise DataValidationError(
                "Variable names must be non-empty strings.",
                context={"variable": repr(name)},
            )
        if not isinstance(value, str):
            raise DataValidationError(
                "Variable values must be strings.",
                hint="Convert the value with str() or json.dumps() before adding it.",
                context={"variable": name, "value": repr(value)},
            )
        # existing names keep their position; dict assignment does not reorder
        self.variables[name] = value

    def variable(self, name: str) -> str:
        return variable_reference(name, self.variables)

    def envvar(self, name: str) -> str:
        return env_reference(name)

    def macro(self, name: str) -> str:
        return macro_reference(name)

    def validate(self) -> bool:
        if len(self.builders) < 1:
            raise DataValidationError(
                "At least one builder is required.",
                hint="Call add_builder() before validating or building the template.",
                context={"path": str(self.config_path), "operation": "validate"},
            )
        return True

    def to_document(self) -> dict[str, JsonValue]:
        document: dict[str, JsonValue] = {
            "variables": dict(self.variables),
            "builders": [record.as_document() for record in self.builders],
            "provisioners": [record.as_document() for record in self.provisioners],
            "post-processors": [record.as_document() for record in self.postprocessors],
        }
        if self.description is not None:
            document["description"] = self.description
        if self.min_packer_version is not None:
            document["min_packer_version"] = self.min_packer_version
        return document

    def dump(self, fmt: str = "json", *, pretty: bool = False) -> str:
        if fmt not in SUPPORTED_FORMATS:
            raise UnsupportedFormatError(fmt, supported=SUPPORTED_FORMATS)
        document = self.to_document()
        try:
            if pretty:
                return json.dumps(document, indent=2, allow_nan=False)
            return json.dumps(document, separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError) as exc:
            # fields mutated directly, bypassing TypedRecord.set
            raise DataValidationError(
                "Template contains a value that cannot be written as JSON.",
                hint=str(exc),
                context={"path": str(self.config_path), "operation": "dump"},
            ) from exc

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        encoded = cbor2.dumps(self.to_document(), canonical=True)
        if path is not None:
            Path(path).write_bytes(encoded)
        return encoded

    def write(self, fmt: str = "json") -> Path:
        payload = self.dump(fmt)
        self.config_path.write_text(payload, encoding="utf-8")
        self.logger.log(
            operation="write",
            message="Wrote template.",
            extra={"path": str(self.config_path), "bytes": len(payload.encode("utf-8"))},
        )
        return self.config_path

    def build(
        self,
        *,
        machine_readable: bool = False,
        args: tuple[str, ...] = (),
    ) -> BuildResult:
        self.validate()
        self.write()

        build_args = list(args)
        if machine_readable:
            if "-machine-readable" in self.settings.options:
                warnings.warn(
                    "-machine-readable is already set in ToolSettings.options.",
                    UserWarning,
                    stacklevel=2,
                )
            else:
                build_args.insert(0, "-machine-readable")

        self.logger.log(
            operation="build_start",
            message="Starting packer build.",
            extra={"path": str(self.config_path), "builders": [b.type for b in self.builders]},
        )
        result = run_packer(
            "build",
            self.config_path,
            settings=self.settings,
            args=tuple(build_args),
        )
        if not result.ok:
            self.logger.log(
                operation="build_failed",
                message="packer build failed.",
                level="error",
                extra={"returncode": result.returncode},
            )
            raise BuildError(
                "packer build failed.",
                returncode=result.returncode,
                stderr=result.stderr,
                hint="Check packer output for details.",
                context={
                    "path": str(self.config_path),
                    "command": " ".join(result.command),
                },
            )

        self.logger.log(
            operation="build_complete",
            message="Completed packer build.",
            extra={"path": str(self.config_path)},
        )
        return result

    def _add_record(
        self,
        registry: Registry[R],
        tag: str,
        collection: list[R],
    ) -> R:
        record = registry.create(tag)
        collection.append(record)
        self.logger.log(
            operation="add_record",
            message=f"Added {registry.category}.",
            category=registry.category,
            record_type=record.type,
        )
        return record
