from pathlib import Path

import pytest
from pydantic import ValidationError
from pydantic_settings import SettingsConfigDict

from ovh_ip_renewer.__main__ import DEBUG_FLAG_LEVELS, parse_args
from ovh_ip_renewer.client.public_ip_client import DEFAULT_IPV4_URL
from ovh_ip_renewer.config import Config

ENV = {
    "DOMAIN": "example.com",
    "OVH_ENDPOINT": "ovh-eu",
    "OVH_APP_KEY": "app-key",
    "OVH_APP_SECRET": "app-secret",
    "OVH_CONSUMER_KEY": "consumer-key",
}

ALL_KEYS = [
    *ENV,
    "POLL_INTERVAL",
    "TIME_INTERVAL",
    "REQUEST_TIMEOUT",
    "IPV4_URL",
    "IPV6_URL",
    "LOGGING_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    monkeypatch.chdir(tmp_path)
    for key in ALL_KEYS:
        monkeypatch.delenv(key, raising=False)
    for key, value in ENV.items():
        monkeypatch.setenv(key, value)
    return monkeypatch


def test_from_environment(clean_env: pytest.MonkeyPatch):
    clean_env.setenv("POLL_INTERVAL", "300")

    config = Config()  # type: ignore

    assert config.domain == "example.com"
    assert config.ovh_consumer_key == "consumer-key"
    assert config.poll_interval == 300
    assert config.request_timeout == 5
    assert config.ipv4_url == DEFAULT_IPV4_URL
    assert config.logging_level == "INFO"


def test_legacy_interval_name(clean_env: pytest.MonkeyPatch):
    clean_env.setenv("TIME_INTERVAL", "60")

    assert Config().poll_interval == 60  # type: ignore


@pytest.mark.parametrize(
    "key, value",
    [
        ("POLL_INTERVAL", "0"),
        ("POLL_INTERVAL", "-5"),
        ("POLL_INTERVAL", "often"),
        ("DOMAIN", ""),
        ("REQUEST_TIMEOUT", "0"),
        ("LOGGING_LEVEL", "TRACE"),
    ],
)
def test_invalid_values(clean_env: pytest.MonkeyPatch, key: str, value: str):
    clean_env.setenv("POLL_INTERVAL", "60")
    clean_env.setenv(key, value)

    with pytest.raises(ValidationError):
        Config()  # type: ignore


def test_missing_required(clean_env: pytest.MonkeyPatch):
    clean_env.setenv("POLL_INTERVAL", "60")
    clean_env.delenv("OVH_APP_SECRET")

    with pytest.raises(ValidationError):
        Config()  # type: ignore


def test_yaml_file_with_env_override(clean_env: pytest.MonkeyPatch, tmp_path: Path):
    config_file = tmp_path / "renewer.yaml"
    config_file.write_text(
        "domain: from-yaml.example\npoll_interval: 120\nlogging_level: DEBUG\n"
    )
    clean_env.delenv("DOMAIN")
    clean_env.setenv("LOGGING_LEVEL", "WARNING")

    class YamlConfig(Config):
        model_config = SettingsConfigDict(yaml_file=config_file)

    config = YamlConfig()  # type: ignore

    assert config.domain == "from-yaml.example"
    assert config.poll_interval == 120
    assert config.logging_level == "WARNING"


def test_debug_flag():
    assert parse_args([]).debug is None
    assert DEBUG_FLAG_LEVELS[parse_args(["-d", "-1"]).debug] == "DEBUG"
    assert DEBUG_FLAG_LEVELS[parse_args(["--debug", "3"]).debug] == "ERROR"

    with pytest.raises(SystemExit):
        parse_args(["-d", "6"])
