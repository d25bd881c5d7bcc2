"""Per-field persistence policies.

Fields declare their policy with a ``ConfigEntry`` inside ``Annotated``::

    class ServiceConfig(BaseModel):
        api_key: Annotated[str, ConfigEntry(encrypt=True)]
        region: Annotated[str | None, ConfigEntry(required=False)] = None
        db_url: Annotated[str, ConfigEntry(name="database")]

Fields without a ``ConfigEntry`` are required, stored in plaintext, and keep
the document key the codec gives them.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ._types import ConfigInputError

KeyNaming = Callable[[str], str]


@dataclass(frozen=True)
class ConfigEntry:
    """Declarative metadata attached to a model field.

    Attributes:
        name: Document key to use instead of the field's own name.
        required: Whether ``None`` is rejected on load and save.
        encrypt: Whether the field's scalar value is stored encrypted.
    """

    name: str | None = None
    required: bool = True
    encrypt: bool = False

    @property
    def has_rename(self) -> bool:
        return bool(self.name)


_DEFAULT_ENTRY = ConfigEntry()


@dataclass(frozen=True)
class FieldPolicy:
    """Resolved policy for one model field."""

    attribute: str
    logical_name: str
    encrypted: bool = False
    required: bool = True


def entry_for(info: FieldInfo) -> ConfigEntry | None:
    """Return the ``ConfigEntry`` attached to a pydantic field, if any."""
    for item in info.metadata:
        if isinstance(item, ConfigEntry):
            return item
    return None


def document_key(attribute: str, info: FieldInfo, naming: KeyNaming | None = None) -> str:
    """Document key for a field that has no explicit rename.

    An explicit pydantic alias wins over *naming*.
    """
    alias = info.serialization_alias or info.alias
    if isinstance(alias, str) and alias:
        return alias
    if naming is None:
        return attribute
    return naming(attribute)


def _check_model(model: Any) -> type[BaseModel]:
    if not (isinstance(model, type) and issubclass(model, BaseModel)):
        raise ConfigInputError(f"{model!r} is not a pydantic model class")
    return model


@lru_cache(maxsize=256)
def _resolve_cached(model: type[BaseModel], naming: KeyNaming | None) -> tuple[FieldPolicy, ...]:
    policies = []
    for attribute, info in model.model_fields.items():
        entry = entry_for(info) or _DEFAULT_ENTRY
        if entry.has_rename:
            logical_name = entry.name
        else:
            logical_name = document_key(attribute, info, naming)
        policies.append(
            FieldPolicy(
                attribute=attribute,
                logical_name=logical_name,
                encrypted=entry.encrypt,
                required=entry.required,
            )
        )
    return tuple(policies)


def resolve_policies(
    model: type[BaseModel],
    naming: KeyNaming | None = None,
) -> tuple[FieldPolicy, ...]:
    """Return one ``FieldPolicy`` per declared field, in declaration order.

    Args:
        model: Pydantic model class to inspect.
        naming: Key-casing function applied to fields without an alias or
            rename (e.g. ``pydantic.alias_generators.to_camel``).
    """
    return _resolve_cached(_check_model(model), naming)


def field_policy_table(
    model: type[BaseModel],
    naming: KeyNaming | None = None,
) -> dict[str, FieldPolicy]:
    """Policies keyed by attribute name."""
    return {policy.attribute: policy for policy in resolve_policies(model, naming)}
