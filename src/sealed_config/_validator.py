"""Required-field checks on fully decrypted model instances."""

from __future__ import annotations

from typing import Any, Iterable

from ._policy import FieldPolicy
from ._types import UNSET, ConfigValidationError


def validate_required(instance: Any, policies: Iterable[FieldPolicy]) -> None:
    """Raise ``ConfigValidationError`` for the first required field that is unset.

    A field counts as unset when its value is ``None`` or the attribute does
    not exist on *instance*.
    """
    for policy in policies:
        if not policy.required:
            continue
        value = getattr(instance, policy.attribute, UNSET)
        if value is None or value is UNSET:
            raise ConfigValidationError(policy.attribute)
