"""
Image relay test configuration.

Origins are simulated with httpx.MockTransport, so no test touches the
network. Each test gets its own config pointing at a temporary static dir.
"""

import dataclasses
import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest

# Make the backend packages importable without an install
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from image_relay.config import RelayConfig  # noqa: E402
from image_relay.fetcher import ImageRelay  # noqa: E402


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(256))


@pytest.fixture
def relay_config(tmp_path) -> RelayConfig:
    """Small limits and a disabled asset bootstrap."""
    return RelayConfig(
        timeout_ms=2000,
        max_bytes=1024,
        static_dir=str(tmp_path / "public"),
        asset_name="",
        asset_url="",
    )


@pytest.fixture
def make_relay(relay_config) -> Callable[..., ImageRelay]:
    """
    Build an ImageRelay whose outbound requests go to `handler`.

    Usage:
        relay = make_relay(lambda request: httpx.Response(200))
        relay = make_relay(handler, max_bytes=16)
    """
    def _make(handler, **overrides) -> ImageRelay:
        config = dataclasses.replace(relay_config, **overrides)
        return ImageRelay(config, transport=httpx.MockTransport(handler))

    return _make


def image_response(body: bytes = PNG_BYTES, content_type: str = "image/png") -> httpx.Response:
    return httpx.Response(200, headers={"content-type": content_type}, content=body)
