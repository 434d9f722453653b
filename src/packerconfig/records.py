"""Typed records for builders, provisioners, and post-processors."""

from __future__ import annotations

import copy
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import ClassVar, Self

from packerconfig.errors import DataValidationError

JsonValue = str | int | float | bool | None | list["JsonValue"] | dict[str, "JsonValue"]

TYPE_KEY = "type"


@dataclass(slots=True)
class TypedRecord:
    """Mutable field bag with a fixed ``type`` discriminator."""

    category: ClassVar[str] = "record"

    _type: str
    fields: dict[str, JsonValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self._type, str) or not self._type:
            raise DataValidationError(
                "Record type must be a non-empty string.",
                context={"category": self.category, "type": repr(self._type)},
            )

    @property
    def type(self) -> str:
        return self._type

    def set(self, key: str, value: JsonValue) -> Self:
        self._check_key(key)
        self._check_value(key, value)
        self.fields[key] = value
        return self

    def get(self, key: str, default: JsonValue = None) -> JsonValue:
        if key == TYPE_KEY:
            return self._type
        return self.fields.get(key, default)

    def unset(self, key: str) -> Self:
        self._check_key(key)
        self.fields.pop(key, None)
        return self

    def __contains__(self, key: object) -> bool:
        return key == TYPE_KEY or key in self.fields

    def set_string(self, key: str, value: object) -> Self:
        if value is None or isinstance(value, (list, dict, tuple, set)):
            raise self._type_error(key, "string", value)
        if isinstance(value, bool):
            return self.set(key, "true" if value else "false")
        return self.set(key, str(value))

    def set_integer(self, key: str, value: object) -> Self:
        # bool is an int subclass
        if isinstance(value, bool):
            raise self._type_error(key, "integer", value)
        try:
            return self.set(key, int(value))  # type: ignore[call-overload]
        except (TypeError, ValueError) as exc:
            raise self._type_error(key, "integer", value) from exc

    def set_boolean(self, key: str, value: object) -> Self:
        if not isinstance(value, bool):
            raise self._type_error(key, "boolean", value)
        return self.set(key, value)

    def set_string_list(self, key: str, values: Iterable[object]) -> Self:
        if isinstance(values, (str, bytes, Mapping)):
            raise self._type_error(key, "list of strings", values)
        items: list[JsonValue] = []
        for item in values:
            if item is None or isinstance(item, (list, dict, tuple, set)):
                raise self._type_error(key, "list of strings", item)
            if isinstance(item, bool):
                items.append("true" if item else "false")
            else:
                items.append(str(item))
        return self.set(key, items)

    def set_mapping(self, key: str, value: Mapping[str, JsonValue]) -> Self:
        if not isinstance(value, Mapping):
            raise self._type_error(key, "mapping", value)
        for inner_key in value:
            if not isinstance(inner_key, str):
                raise self._type_error(key, "mapping with string keys", inner_key)
        return self.set(key, copy.deepcopy(dict(value)))

    def as_document(self) -> dict[str, JsonValue]:
        document: dict[str, JsonValue] = {TYPE_KEY: self._type}
        document.update(copy.deepcopy(self.fields))
        return document

    def _check_key(self, key: str) -> None:
        if not isinstance(key, str) or not key:
            raise DataValidationError(
                "Field keys must be non-empty strings.",
                context={"category": self.category, "type": self._type, "key": repr(key)},
            )
        if key == TYPE_KEY:
            raise DataValidationError(
                "The `type` field is fixed at construction.",
                hint="Create a new record through the registry to change its type.",
                context={"category": self.category, "type": self._type},
            )

    def _check_value(self, key: str, value: object) -> None:
        if value is None or isinstance(value, (str, bool, int)):
            return
        if isinstance(value, float):
            if not math.isfinite(value):
                raise self._type_error(key, "finite number", value)
            return
        if isinstance(value, list):
            for item in value:
                self._check_value(key, item)
            return
        if isinstance(value, dict):
            for inner_key, inner_value in value.items():
                if not isinstance(inner_key, str):
                    raise self._type_error(key, "mapping with string keys", inner_key)
                self._check_value(key, inner_value)
            return
        raise self._type_error(key, "JSON value", value)

    def _type_error(self, key: str, expected: str, value: object) -> DataValidationError:
        return DataValidationError(
            f"Field `{key}` expects a {expected}.",
            context={
                "category": self.category,
                "type": self._type,
                "key": key,
                "value": repr(value),
            },
        )


@dataclass(slots=True)
class Builder(TypedRecord):
    category: ClassVar[str] = "builder"

    def name(self, value: str) -> Self:
        """Name the builder so provisioners can target it with ``only``/``except``."""
        return self.set_string("name", value)


@dataclass(slots=True)
class Provisioner(TypedRecord):
    category: ClassVar[str] = "provisioner"

    def only(self, *builder_names: str) -> Self:
        return self.set_string_list("only", builder_names)

    def except_(self, *builder_names: str) -> Self:
        return self.set_string_list("except", builder_names)

    def pause_before(self, duration: str) -> Self:
        return self.set_string("pause_before", duration)

    def override(self, builder_name: str, values: Mapping[str, JsonValue]) -> Self:
        overrides = self.fields.get("override")
        merged = dict(overrides) if isinstance(overrides, dict) else {}
        merged[builder_name] = copy.deepcopy(dict(values))
        return self.set_mapping("override", merged)


@dataclass(slots=True)
class PostProcessor(TypedRecord):
    category: ClassVar[str] = "post-processor"

    def only(self, *builder_names: str) -> Self:
        return self.set_string_list("only", builder_names)

    def except_(self, *builder_names: str) -> Self:
        return self.set_string_list("except", builder_names)

    def keep_input_artifact(self, keep: bool = True) -> Self:
        return self.set_boolean("keep_input_artifact", keep)
