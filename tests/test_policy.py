"""Tests for _policy.py: ConfigEntry metadata and policy resolution."""

from typing import Annotated

import pytest
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sealed_config._policy import (
    ConfigEntry,
    FieldPolicy,
    field_policy_table,
    resolve_policies,
)
from sealed_config._types import ConfigInputError


class ServiceConfig(BaseModel):
    database_connection: str
    api_key: Annotated[str, ConfigEntry(encrypt=True)]
    region: Annotated[str | None, ConfigEntry(required=False)] = None
    db_password: Annotated[str, ConfigEntry(name="DB_PASS", encrypt=True)] = "x"


class TestConfigEntry:
    def test_defaults(self):
        entry = ConfigEntry()
        assert entry.name is None
        assert entry.required is True
        assert entry.encrypt is False
        assert entry.has_rename is False

    def test_has_rename(self):
        assert ConfigEntry(name="other").has_rename is True

    def test_is_frozen(self):
        with pytest.raises(AttributeError):
            ConfigEntry().encrypt = True  # type: ignore[misc]


class TestResolvePolicies:
    def test_declaration_order(self):
        policies = resolve_policies(ServiceConfig)
        assert [p.attribute for p in policies] == [
            "database_connection",
            "api_key",
            "region",
            "db_password",
        ]

    def test_defaults_without_metadata(self):
        policy = resolve_policies(ServiceConfig)[0]
        assert policy == FieldPolicy(
            attribute="database_connection",
            logical_name="database_connection",
            encrypted=False,
            required=True,
        )

    def test_flags_from_metadata(self):
        table = field_policy_table(ServiceConfig)
        assert table["api_key"].encrypted is True
        assert table["api_key"].required is True
        assert table["region"].required is False
        assert table["region"].encrypted is False

    def test_rename_is_used_verbatim(self):
        table = field_policy_table(ServiceConfig, to_camel)
        assert table["db_password"].logical_name == "DB_PASS"

    def test_naming_applies_to_plain_fields(self):
        table = field_policy_table(ServiceConfig, to_camel)
        assert table["database_connection"].logical_name == "databaseConnection"
        assert table["api_key"].logical_name == "apiKey"

    def test_explicit_alias_wins_over_naming(self):
        class Aliased(BaseModel):
            api_key: str = Field(alias="key")

        assert resolve_policies(Aliased, to_camel)[0].logical_name == "key"

    def test_alias_generator_is_respected(self):
        class Generated(BaseModel):
            model_config = ConfigDict(alias_generator=to_camel)

            max_retries: int = 3

        assert resolve_policies(Generated)[0].logical_name == "maxRetries"

    def test_results_are_cached(self):
        assert resolve_policies(ServiceConfig, to_camel) is resolve_policies(
            ServiceConfig, to_camel
        )

    def test_subclass_fields_follow_parent_fields(self):
        class Extended(ServiceConfig):
            timeout: int = 30

        assert resolve_policies(Extended)[-1].attribute == "timeout"

    @pytest.mark.parametrize("model", [dict, "ServiceConfig", ServiceConfig(database_connection="a", api_key="b")])
    def test_rejects_non_models(self, model):
        with pytest.raises(ConfigInputError):
            resolve_policies(model)
