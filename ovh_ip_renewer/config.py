import os
from typing import Annotated, Literal

from pydantic import AliasChoices, Field, PositiveFloat, PositiveInt
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .client.public_ip_client import DEFAULT_IPV4_URL, DEFAULT_IPV6_URL

CONFIG_PATH = os.environ.get("OIR_CONFIG_PATH", "config.yaml")

NonEmptyStr = Annotated[str, Field(min_length=1)]


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        yaml_file=CONFIG_PATH,
        populate_by_name=True,
    )

    domain: NonEmptyStr
    ovh_endpoint: NonEmptyStr
    ovh_app_key: NonEmptyStr
    ovh_app_secret: NonEmptyStr
    ovh_consumer_key: NonEmptyStr
    poll_interval: PositiveInt = Field(
        validation_alias=AliasChoices("poll_interval", "time_interval")
    )
    request_timeout: PositiveFloat = 5
    ipv4_url: str = DEFAULT_IPV4_URL
    ipv6_url: str = DEFAULT_IPV6_URL
    logging_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, YamlConfigSettingsSource(settings_cls))
