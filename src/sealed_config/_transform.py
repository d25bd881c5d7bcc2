"""Selective encryption of top-level document fields.

Only the first level of the document is scanned. Nested objects are never
searched for encrypted fields.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from ._crypto import EncryptionProvider
from ._policy import FieldPolicy
from ._tree import DocumentTree, NodeKind, scalar_text
from ._types import ConfigInputError, EncryptionError, PolicyError

logger = logging.getLogger(__name__)


def _targets(tree: DocumentTree, policies: Iterable[FieldPolicy]) -> list[FieldPolicy]:
    """Encrypted policies whose node is present and populated.

    Raises ``PolicyError`` when an encrypted field holds an array or object.
    """
    targets = []
    for policy in policies:
        if not policy.encrypted:
            continue
        kind = tree.kind(policy.logical_name)
        if kind is None or kind is NodeKind.null:
            continue
        if not kind.is_scalar:
            raise PolicyError(
                policy.logical_name,
                f"only scalar values can be encrypted, found {kind.value}",
            )
        targets.append(policy)
    return targets


def _packet(tree: DocumentTree, policy: FieldPolicy) -> str:
    try:
        return tree.get_string(policy.logical_name)
    except TypeError as exc:
        raise EncryptionError(
            "decryption", "encrypted value must be a string", field=policy.logical_name
        ) from exc


class SelectiveFieldTransformer:
    """Encrypts and decrypts the fields marked ``encrypted`` in a document tree."""

    def __init__(self, engine: EncryptionProvider) -> None:
        self.engine = engine

    # -- blocking -----------------------------------------------------------

    def transform_for_save(
        self,
        tree: dict[str, Any],
        policies: Iterable[FieldPolicy],
        password: str,
    ) -> dict[str, Any]:
        """Return a copy of *tree* with every marked scalar encrypted."""
        _require_password(password)
        document = DocumentTree(tree)
        targets = _targets(document, policies)
        for policy in targets:
            plaintext = scalar_text(document.get(policy.logical_name))
            if not plaintext:
                continue
            document.set_string(policy.logical_name, self.engine.encrypt(plaintext, password))
        logger.debug("Encrypted %d field(s)", len(targets))
        return document.to_dict()

    def transform_for_load(
        self,
        tree: dict[str, Any],
        policies: Iterable[FieldPolicy],
        password: str,
    ) -> dict[str, Any]:
        """Return a copy of *tree* with every marked field decrypted.

        The first field that fails aborts the load; no partially decrypted
        tree is returned.
        """
        _require_password(password)
        document = DocumentTree(tree)
        targets = _targets(document, policies)
        for policy in targets:
            packet = _packet(document, policy)
            if not packet:
                continue
            document.set_string(policy.logical_name, self._decrypt(packet, password, policy))
        logger.debug("Decrypted %d field(s)", len(targets))
        return document.to_dict()

    def _decrypt(self, packet: str, password: str, policy: FieldPolicy) -> str:
        try:
            return self.engine.decrypt(packet, password)
        except EncryptionError as exc:
            raise _field_error(exc, policy) from exc

    # -- non-blocking -------------------------------------------------------

    async def atransform_for_save(
        self,
        tree: dict[str, Any],
        policies: Iterable[FieldPolicy],
        password: str,
    ) -> dict[str, Any]:
        _require_password(password)
        document = DocumentTree(tree)
        targets = _targets(document, policies)
        for policy in targets:
            plaintext = scalar_text(document.get(policy.logical_name))
            if not plaintext:
                continue
            packet = await self.engine.aencrypt(plaintext, password)
            document.set_string(policy.logical_name, packet)
        logger.debug("Encrypted %d field(s)", len(targets))
        return document.to_dict()

    async def atransform_for_load(
        self,
        tree: dict[str, Any],
        policies: Iterable[FieldPolicy],
        password: str,
    ) -> dict[str, Any]:
        _require_password(password)
        document = DocumentTree(tree)
        targets = _targets(document, policies)
        for policy in targets:
            packet = _packet(document, policy)
            if not packet:
                continue
            try:
                plaintext = await self.engine.adecrypt(packet, password)
            except EncryptionError as exc:
                raise _field_error(exc, policy) from exc
            document.set_string(policy.logical_name, plaintext)
        logger.debug("Decrypted %d field(s)", len(targets))
        return document.to_dict()


def _require_password(password: str) -> None:
    if not password:
        raise ConfigInputError("Password cannot be empty")


def _field_error(exc: EncryptionError, policy: FieldPolicy) -> EncryptionError:
    return EncryptionError(exc.operation, "Failed to decrypt data", field=policy.logical_name)
