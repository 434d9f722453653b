"""Public package entrypoint for building and running packer templates."""

from .config import SUPPORTED_FORMATS, Config
from .errors import (
    BuildError,
    DataValidationError,
    ErrorCode,
    PackerConfigError,
    UndefinedVariableError,
    UnknownTypeError,
    UnsupportedFormatError,
)
from .observability import StructuredLogger
from .records import Builder, PostProcessor, Provisioner, TypedRecord
from .references import env_reference, macro_reference, variable_reference
from .registry import BUILDERS, POST_PROCESSORS, PROVISIONERS, Registry, get_registry
from .runner import BuildResult, ToolSettings, run_packer

__all__ = [
    "BUILDERS",
    "BuildError",
    "BuildResult",
    "Builder",
    "Config",
    "DataValidationError",
    "ErrorCode",
    "POST_PROCESSORS",
    "PROVISIONERS",
    "PackerConfigError",
    "PostProcessor",
    "Provisioner",
    "Registry",
    "SUPPORTED_FORMATS",
    "StructuredLogger",
    "ToolSettings",
    "TypedRecord",
    "UndefinedVariableError",
    "UnknownTypeError",
    "UnsupportedFormatError",
    "env_reference",
    "get_registry",
    "macro_reference",
    "run_packer",
    "variable_reference",
]
