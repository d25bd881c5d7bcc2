"""``ConfigManager``: load and save typed configuration files.

Save pipeline::

    policies -> validate -> to_tree / serialize -> encrypt (whole or selective) -> write

Load pipeline::

    read -> decrypt (whole or selective) -> from_tree / deserialize -> validate

Every call is independent; the manager only holds its immutable collaborators.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Iterator, TypeVar

from pydantic import BaseModel

from ._codec import ConfigCodec, JsonConfigCodec
from ._crypto import AesEncryptionEngine, EncryptionProvider
from ._policy import FieldPolicy
from ._storage import ConfigStorage, FileConfigStorage
from ._transform import SelectiveFieldTransformer
from ._types import (
    ConfigError,
    ConfigInputError,
    ConfigParseError,
    ConfigReadError,
    ConfigWriteError,
    PersistenceMode,
)
from ._validator import validate_required

logger = logging.getLogger(__name__)

TModel = TypeVar("TModel", bound=BaseModel)


# ---------------------------------------------------------------------------
# Argument checks
# ---------------------------------------------------------------------------


def _check_path(path: Any) -> str:
    if path is None:
        raise ConfigInputError("File path cannot be null or empty")
    try:
        path = os.fspath(path)
    except TypeError as exc:
        raise ConfigInputError(f"Invalid file path: {path!r}") from exc
    if not isinstance(path, str) or not path.strip():
        raise ConfigInputError("File path cannot be null or empty")
    return path


def _check_instance(instance: Any) -> BaseModel:
    if instance is None:
        raise ConfigInputError("Configuration data cannot be null")
    if not isinstance(instance, BaseModel):
        raise ConfigInputError(f"{type(instance).__name__} is not a pydantic model")
    return instance


@contextmanager
def _error_boundary(
    path: str,
    error: type[ConfigReadError] | type[ConfigWriteError],
    action: str,
) -> Iterator[None]:
    """Wrap foreign exceptions into *error*; let ``ConfigError`` through."""
    try:
        yield
    except ConfigParseError as exc:
        if exc.path is not None:
            raise
        raise exc.with_path(path) from exc.__cause__
    except ConfigError:
        raise
    except Exception as exc:
        raise error(path, f"Unexpected error occurred while {action} configuration") from exc


# ---------------------------------------------------------------------------
# Manager
# ---------------------------------------------------------------------------


class ConfigManager:
    """Persists pydantic models as JSON, optionally encrypted.

    Args:
        mode: ``plain``, ``whole_document`` (one encrypted blob) or
            ``selective`` (only ``ConfigEntry(encrypt=True)`` fields encrypted).
        password: Default password; required for the encrypting modes.
        codec: Document codec. Defaults to camelCase indented JSON.
        engine: Encryption engine. Defaults to ``AesEncryptionEngine``.
        storage: Text storage. Defaults to the local filesystem.

    Example::

        manager = ConfigManager(PersistenceMode.selective, password="pw1")
        manager.save("service.json", ServiceConfig(api_key="sk-123"))
        cfg = manager.load("service.json", ServiceConfig)
    """

    def __init__(
        self,
        mode: PersistenceMode | str = PersistenceMode.selective,
        password: str | None = None,
        *,
        codec: ConfigCodec | None = None,
        engine: EncryptionProvider | None = None,
        storage: ConfigStorage | None = None,
    ) -> None:
        try:
            self.mode = PersistenceMode(mode)
        except ValueError as exc:
            raise ConfigInputError(f"Unknown persistence mode: {mode!r}") from exc

        if self.mode.encrypts and not password:
            raise ConfigInputError(f"A password is required for {self.mode.value} mode")

        self._password = password
        self.codec: ConfigCodec = codec or JsonConfigCodec()
        self.engine: EncryptionProvider = engine or AesEncryptionEngine()
        self.storage: ConfigStorage = storage or FileConfigStorage()
        self.transformer = SelectiveFieldTransformer(self.engine)

    def __repr__(self) -> str:
        return f"ConfigManager(mode={self.mode.value!r}, codec={self.codec!r}, engine={self.engine!r})"

    def _password_for(self, override: str | None) -> str:
        if override is None:
            return self._password or ""
        if not override:
            raise ConfigInputError("Password cannot be empty")
        return override

    # -- blocking API -------------------------------------------------------

    def load(
        self,
        path: str | os.PathLike[str],
        model: type[TModel],
        *,
        password: str | None = None,
    ) -> TModel:
        """Read, decrypt, deserialize and validate the config stored at *path*."""
        path = _check_path(path)
        policies = self.codec.policies(model)
        secret = self._password_for(password)
        logger.debug("Loading %s from %s (%s)", model.__name__, path, self.mode.value)

        with _error_boundary(path, ConfigReadError, "loading"):
            text = self.storage.read_text(path)
            if self.mode is PersistenceMode.selective:
                tree = self.codec.canonicalize(self.codec.parse(text), model)
                tree = self.transformer.transform_for_load(tree, policies, secret)
                instance = self.codec.from_tree(tree, model)
            else:
                if self.mode is PersistenceMode.whole_document:
                    text = self.engine.decrypt(text.strip(), secret)
                instance = self.codec.deserialize(text, model)
            validate_required(instance, policies)

        logger.debug("Loaded %s from %s", model.__name__, path)
        return instance

    def save(
        self,
        path: str | os.PathLike[str],
        instance: BaseModel,
        *,
        password: str | None = None,
    ) -> None:
        """Validate, serialize, encrypt and write *instance* to *path*."""
        path = _check_path(path)
        instance = _check_instance(instance)
        policies = self.codec.policies(type(instance))
        secret = self._password_for(password)
        logger.debug("Saving %s to %s (%s)", type(instance).__name__, path, self.mode.value)

        with _error_boundary(path, ConfigWriteError, "saving"):
            validate_required(instance, policies)
            if self.mode is PersistenceMode.selective:
                tree = self.transformer.transform_for_save(
                    self.codec.to_tree(instance), policies, secret
                )
                text = self.codec.flatten(tree)
            else:
                text = self.codec.serialize(instance)
                if self.mode is PersistenceMode.whole_document:
                    text = self.engine.encrypt(text, secret)
            self.storage.write_text(path, text)

        logger.debug("Saved %s to %s", type(instance).__name__, path)

    # -- non-blocking API ---------------------------------------------------

    async def aload(
        self,
        path: str | os.PathLike[str],
        model: type[TModel],
        *,
        password: str | None = None,
    ) -> TModel:
        """Async form of :meth:`load`."""
        path = _check_path(path)
        policies = self.codec.policies(model)
        secret = self._password_for(password)
        logger.debug("Loading %s from %s (%s)", model.__name__, path, self.mode.value)

        with _error_boundary(path, ConfigReadError, "loading"):
            text = await self.storage.aread_text(path)
            if self.mode is PersistenceMode.selective:
                tree = self.codec.canonicalize(self.codec.parse(text), model)
                tree = await self.transformer.atransform_for_load(tree, policies, secret)
                instance = self.codec.from_tree(tree, model)
            else:
                if self.mode is PersistenceMode.whole_document:
                    text = await self.engine.adecrypt(text.strip(), secret)
                instance = self.codec.deserialize(text, model)
            validate_required(instance, policies)

        logger.debug("Loaded %s from %s", model.__name__, path)
        return instance

    async def asave(
        self,
        path: str | os.PathLike[str],
        instance: BaseModel,
        *,
        password: str | None = None,
    ) -> None:
        """Async form of :meth:`save`."""
        path = _check_path(path)
        instance = _check_instance(instance)
        policies = self.codec.policies(type(instance))
        secret = self._password_for(password)
        logger.debug("Saving %s to %s (%s)", type(instance).__name__, path, self.mode.value)

        with _error_boundary(path, ConfigWriteError, "saving"):
            validate_required(instance, policies)
            if self.mode is PersistenceMode.selective:
                tree = await self.transformer.atransform_for_save(
                    self.codec.to_tree(instance), policies, secret
                )
                text = self.codec.flatten(tree)
            else:
                text = self.codec.serialize(instance)
                if self.mode is PersistenceMode.whole_document:
                    text = await self.engine.aencrypt(text, secret)
            await self.storage.awrite_text(path, text)

        logger.debug("Saved %s to %s", type(instance).__name__, path)

    # -- helpers ------------------------------------------------------------

    def policies(self, model: type[BaseModel]) -> tuple[FieldPolicy, ...]:
        """Field policies this manager applies to *model*."""
        return self.codec.policies(model)
