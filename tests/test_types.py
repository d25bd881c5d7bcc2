"""Tests for _types.py: UNSET, PersistenceMode and the error hierarchy."""

import pytest

from sealed_config._types import (
    UNSET,
    ConfigError,
    ConfigInputError,
    ConfigParseError,
    ConfigReadError,
    ConfigValidationError,
    ConfigWriteError,
    EncryptionError,
    PersistenceMode,
    PolicyError,
    _Unset,
)


class TestUnset:
    def test_singleton(self):
        assert _Unset() is UNSET

    def test_falsy(self):
        assert not UNSET

    def test_repr(self):
        assert repr(UNSET) == "UNSET"


class TestPersistenceMode:
    def test_values(self):
        assert PersistenceMode("selective") is PersistenceMode.selective
        assert PersistenceMode("whole_document") is PersistenceMode.whole_document

    def test_encrypts(self):
        assert not PersistenceMode.plain.encrypts
        assert PersistenceMode.selective.encrypts
        assert PersistenceMode.whole_document.encrypts


class TestErrors:
    @pytest.mark.parametrize(
        "error",
        [
            ConfigInputError("x"),
            ConfigReadError("a.json", "x"),
            ConfigWriteError("a.json", "x"),
            ConfigParseError("x"),
            EncryptionError("decryption", "x"),
            ConfigValidationError("field"),
            PolicyError("field", "x"),
        ],
    )
    def test_all_inherit_config_error(self, error):
        assert isinstance(error, ConfigError)

    def test_input_error_is_value_error(self):
        assert issubclass(ConfigInputError, ValueError)

    def test_read_error_cites_path(self):
        err = ConfigReadError("/etc/app.json", "File does not exist")
        assert err.path == "/etc/app.json"
        assert "/etc/app.json" in str(err)

    def test_write_error_cites_path(self):
        assert "out.json" in str(ConfigWriteError("out.json", "Access denied"))

    def test_encryption_error_tags(self):
        err = EncryptionError("decryption", "bad", field="apiKey")
        assert err.operation == "decryption"
        assert err.field == "apiKey"
        assert "apiKey" in str(err)

    def test_validation_error_names_field(self):
        err = ConfigValidationError("database_connection")
        assert err.field == "database_connection"
        assert "database_connection" in str(err)

    def test_parse_error_with_path(self):
        err = ConfigParseError("Invalid JSON format")
        located = err.with_path("app.json")
        assert located.path == "app.json"
        assert "app.json" in str(located)
        assert located.with_path("other.json") is located
