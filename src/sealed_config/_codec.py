"""JSON document codec for pydantic models.

Maps model instances to a document tree (``dict``) and JSON text, and back.
Top-level keys follow the field policies: a ``ConfigEntry`` rename is used
verbatim, otherwise the field's alias, otherwise its name passed through the
configured key naming (camelCase by default).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel, to_pascal, to_snake

from ._policy import FieldPolicy, KeyNaming, resolve_policies
from ._types import ConfigInputError, ConfigParseError, ConfigValidationError

TModel = TypeVar("TModel", bound=BaseModel)

Naming = Literal["camel", "pascal", "snake", "preserve"]

_NAMING_FUNCTIONS: dict[str, KeyNaming | None] = {
    "camel": to_camel,
    "pascal": to_pascal,
    "snake": to_snake,
    "preserve": None,
}


@dataclass(frozen=True)
class CodecConfig:
    """Options for ``JsonConfigCodec``."""

    naming: Naming = "camel"
    case_insensitive: bool = True  # applies to top-level keys on read
    indent: int | None = 2

    def __post_init__(self):
        if self.naming not in _NAMING_FUNCTIONS:
            raise ValueError(
                f"naming must be one of {sorted(_NAMING_FUNCTIONS)}, got {self.naming!r}"
            )
        if self.indent is not None and self.indent < 0:
            raise ValueError("indent must be >= 0")

    @property
    def naming_function(self) -> KeyNaming | None:
        return _NAMING_FUNCTIONS[self.naming]


@runtime_checkable
class ConfigCodec(Protocol):
    """What ``ConfigManager`` needs from a document format."""

    def policies(self, model: type[BaseModel]) -> tuple[FieldPolicy, ...]:
        ...

    def serialize(self, instance: BaseModel) -> str:
        ...

    def deserialize(self, text: str, model: type[TModel]) -> TModel:
        ...

    def parse(self, text: str) -> dict[str, Any]:
        ...

    def flatten(self, tree: dict[str, Any]) -> str:
        ...

    def canonicalize(self, tree: dict[str, Any], model: type[BaseModel]) -> dict[str, Any]:
        ...

    def to_tree(self, instance: BaseModel) -> dict[str, Any]:
        ...

    def from_tree(self, tree: dict[str, Any], model: type[TModel]) -> TModel:
        ...


def _input_key(attribute: str, model: type[BaseModel]) -> str:
    """Key pydantic expects for *attribute* when validating by alias."""
    info = model.model_fields[attribute]
    alias = info.validation_alias if isinstance(info.validation_alias, str) else info.alias
    return alias or attribute


def _output_key(attribute: str, model: type[BaseModel]) -> str:
    """Key ``model_dump(by_alias=True)`` emits for *attribute*."""
    info = model.model_fields[attribute]
    return info.serialization_alias or info.alias or attribute


class JsonConfigCodec:
    """Indented JSON with configurable key casing."""

    def __init__(self, config: CodecConfig | None = None) -> None:
        self.config = config or CodecConfig()

    def __repr__(self) -> str:
        return f"JsonConfigCodec({self.config!r})"

    def policies(self, model: type[BaseModel]) -> tuple[FieldPolicy, ...]:
        return resolve_policies(model, self.config.naming_function)

    # -- text <-> tree ------------------------------------------------------

    def parse(self, text: str) -> dict[str, Any]:
        try:
            tree = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigParseError(f"Invalid JSON format: {exc}") from exc
        if not isinstance(tree, dict):
            raise ConfigParseError(
                f"Top-level JSON value must be an object, got {type(tree).__name__}"
            )
        return tree

    def flatten(self, tree: dict[str, Any]) -> str:
        return json.dumps(tree, indent=self.config.indent, ensure_ascii=False)

    # -- instance <-> tree --------------------------------------------------

    def to_tree(self, instance: BaseModel) -> dict[str, Any]:
        if not isinstance(instance, BaseModel):
            raise ConfigInputError(f"{type(instance).__name__} is not a pydantic model")

        model = type(instance)
        dumped = instance.model_dump(mode="json", by_alias=True)

        tree: dict[str, Any] = {}
        for policy in self.policies(model):
            key = _output_key(policy.attribute, model)
            if key in dumped:
                tree[policy.logical_name] = dumped[key]
        return tree

    def canonicalize(self, tree: dict[str, Any], model: type[BaseModel]) -> dict[str, Any]:
        """Return a copy of *tree* whose top-level keys use the policy names.

        With ``case_insensitive`` on, ``"ApiKey"`` becomes ``"apiKey"`` so
        that every later step sees the key under its logical name. Keys that
        match no field are kept as they are.
        """
        if not self.config.case_insensitive:
            return dict(tree)

        names = {
            policy.logical_name.casefold(): policy.logical_name
            for policy in self.policies(model)
        }
        canonical: dict[str, Any] = {}
        for key, value in tree.items():
            canonical[names.get(key.casefold(), key)] = value
        return canonical

    def from_tree(self, tree: dict[str, Any], model: type[TModel]) -> TModel:
        policies = self.policies(model)
        tree = self.canonicalize(tree, model)

        # A required field that is null, or absent with nothing to fall back
        # on, is a validation failure rather than a malformed document.
        for policy in policies:
            if not policy.required:
                continue
            if policy.logical_name in tree:
                if tree[policy.logical_name] is None:
                    raise ConfigValidationError(policy.attribute)
            elif model.model_fields[policy.attribute].is_required():
                raise ConfigValidationError(policy.attribute)

        by_name = {policy.logical_name: policy for policy in policies}
        data: dict[str, Any] = {}
        for key, value in tree.items():
            policy = by_name.get(key)
            if policy is None:
                # Unknown keys are handed to the model as-is so its own
                # ``extra`` setting decides what happens to them.
                data.setdefault(key, value)
                continue
            data[_input_key(policy.attribute, model)] = value

        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise ConfigParseError(
                f"Document does not match {model.__name__}: {exc}"
            ) from exc

    # -- instance <-> text --------------------------------------------------

    def serialize(self, instance: BaseModel) -> str:
        return self.flatten(self.to_tree(instance))

    def deserialize(self, text: str, model: type[TModel]) -> TModel:
        return self.from_tree(self.parse(text), model)
