"""Typed configuration files with whole-document or per-field encryption.

Persists pydantic models as JSON. Fields marked ``ConfigEntry(encrypt=True)``
are stored as AES-256-CBC packets while the rest of the file stays readable,
or the whole document can be sealed as a single packet.
"""

from ._codec import CodecConfig, ConfigCodec, JsonConfigCodec
from ._crypto import AesEncryptionEngine, EncryptionProvider
from ._manager import ConfigManager
from ._policy import ConfigEntry, FieldPolicy, field_policy_table, resolve_policies
from ._storage import ConfigStorage, FakeConfigStorage, FileConfigStorage
from ._transform import SelectiveFieldTransformer
from ._tree import DocumentTree, NodeKind
from ._types import (
    ConfigError,
    ConfigInputError,
    ConfigParseError,
    ConfigReadError,
    ConfigValidationError,
    ConfigWriteError,
    EncryptionError,
    PersistenceMode,
    PolicyError,
)
from ._validator import validate_required

__version__ = "0.1.0"

__all__ = [
    # Core
    "ConfigManager",
    "PersistenceMode",
    # Policies
    "ConfigEntry",
    "FieldPolicy",
    "resolve_policies",
    "field_policy_table",
    "validate_required",
    # Encryption
    "AesEncryptionEngine",
    "EncryptionProvider",
    "SelectiveFieldTransformer",
    # Documents
    "CodecConfig",
    "ConfigCodec",
    "JsonConfigCodec",
    "DocumentTree",
    "NodeKind",
    # Storage
    "ConfigStorage",
    "FileConfigStorage",
    "FakeConfigStorage",
    # Errors
    "ConfigError",
    "ConfigInputError",
    "ConfigReadError",
    "ConfigParseError",
    "EncryptionError",
    "ConfigValidationError",
    "ConfigWriteError",
    "PolicyError",
]
