"""Configuration loading tests"""

import pytest

from image_relay.config import DEFAULT_ASSET_URL, RelayConfig


def test_defaults():
    config = RelayConfig.from_env({})

    assert config.port == 3000
    assert config.timeout_ms == 20000
    assert config.timeout_seconds == 20.0
    assert config.max_bytes == 10 * 1024 * 1024
    assert config.max_redirects == 20
    assert config.static_dir == "public"
    assert config.asset_url == DEFAULT_ASSET_URL


def test_overrides():
    config = RelayConfig.from_env({
        "PORT": "8080",
        "RELAY_TIMEOUT_MS": "1500",
        "RELAY_MAX_BYTES": "2048",
        "RELAY_STATIC_DIR": "/srv/www",
        "RELAY_ASSET_NAME": "",
    })

    assert config.port == 8080
    assert config.timeout_seconds == 1.5
    assert config.max_bytes == 2048
    assert config.static_dir == "/srv/www"
    assert config.asset_name == ""


def test_bad_integer_fails_fast():
    with pytest.raises(ValueError):
        RelayConfig.from_env({"PORT": "http"})


def test_is_immutable():
    config = RelayConfig()
    with pytest.raises(AttributeError):
        config.port = 1
