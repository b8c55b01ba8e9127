import os
import re
from pathlib import Path
from typing import Any

import yaml
from humps import decamelize
from pydantic import BaseModel
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

PROVIDER_WRAPPER_PATTERN = r"{{ from (.*) }}"
PROVIDER_CONFIG_PATTERN = r"^[a-zA-Z0-9]+ .*$"


def read_yaml_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    return yaml.safe_load(path.read_text("utf-8")) or {}


def parse_config_provider(value: str) -> tuple[str, str]:
    match = re.match(PROVIDER_CONFIG_PATTERN, value)
    if not match:
        raise ValueError(
            f"Invalid pattern: {value}. Pattern should match: {PROVIDER_CONFIG_PATTERN}"
        )

    provider_type, provider_value = value.split(" ", 1)

    return provider_type, provider_value


def load_from_config_provider(config_provider: str) -> Any:
    provider_type, value = parse_config_provider(config_provider)
    if provider_type == "env":
        result = os.environ.get(value)
        if result is None:
            raise ValueError(f"Environment variable not found: {value}")
        return result
    else:
        raise ValueError(f"Invalid provider type: {provider_type}")


def parse_providers(config: dict[str, Any]) -> dict[str, Any]:
    """
    Resolve `{{ from env NAME }}` placeholders, dropping the keys whose provider cannot be loaded
    so the field falls back to its default (or fails as missing)
    """
    result: dict[str, Any] = {}
    for key, value in config.items():
        if isinstance(value, dict):
            result[key] = parse_providers(value)
        elif isinstance(value, str) and (
            provider_match := re.match(PROVIDER_WRAPPER_PATTERN, value)
        ):
            try:
                result[key] = load_from_config_provider(provider_match.group(1))
            except ValueError:
                pass
        else:
            result[key] = value
    return result


def decamelize_config(config: dict[str, Any]) -> dict[str, Any]:
    """
    Normalizing the config yaml file to work with snake_case
    """
    result = {}
    for key, value in config.items():
        if isinstance(value, dict):
            result[decamelize(key)] = decamelize_config(value)
        else:
            result[decamelize(key)] = value
    return result


class YamlProvidersSettingsSource(PydanticBaseSettingsSource):
    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        super().__init__(settings_cls)
        self.yaml_file = self.config.get("yaml_file")
        assert self.yaml_file, "Settings yaml_file not properly configured"

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        # The whole document is returned from __call__
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        data = read_yaml_config(Path(str(self.yaml_file)))
        return parse_providers(decamelize_config(data))


class BaseDashboardSettings(BaseSettings):
    model_config = SettingsConfigDict(
        yaml_file="./config.yaml",
        env_prefix="GITNOTIFY_DASHBOARD__",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def get_sensitive_fields_data(self) -> set[str]:
        return _get_sensitive_information(self)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlProvidersSettingsSource(settings_cls),
        )


class BaseDashboardModel(BaseModel):
    def get_sensitive_fields_data(self) -> set[str]:
        return _get_sensitive_information(self)


def _is_sensitive(field: FieldInfo) -> bool:
    extra = field.json_schema_extra
    return isinstance(extra, dict) and bool(extra.get("sensitive", False))


def _get_sensitive_information(
    model: BaseDashboardModel | BaseSettings,
) -> set[str]:
    fields = type(model).model_fields
    sensitive_set = {
        str(getattr(model, field_name))
        for field_name, field in fields.items()
        if _is_sensitive(field) and getattr(model, field_name) is not None
    }

    for field_name in fields:
        value = getattr(model, field_name)
        if isinstance(value, BaseDashboardModel):
            sensitive_set.update(value.get_sensitive_fields_data())

    return sensitive_set
