"""
Startup asset bootstrap tests

Run:
    pytest tests/test_asset_bootstrap.py -v
"""

import dataclasses
from pathlib import Path

import httpx
import pytest

from image_relay.asset_bootstrap import ensure_asset


@pytest.fixture
def asset_config(relay_config):
    return dataclasses.replace(
        relay_config,
        asset_name="tesseract.min.js",
        asset_url="https://cdn.example/tesseract.min.js",
    )


@pytest.mark.asyncio
async def test_downloads_missing_asset(asset_config):
    requested = []

    def handler(request):
        requested.append(str(request.url))
        return httpx.Response(200, content=b"console.log('ocr')")

    path = await ensure_asset(asset_config, transport=httpx.MockTransport(handler))

    assert path == Path(asset_config.static_dir) / "tesseract.min.js"
    assert path.read_bytes() == b"console.log('ocr')"
    assert requested == ["https://cdn.example/tesseract.min.js"]


@pytest.mark.asyncio
async def test_existing_asset_is_kept(asset_config):
    target = Path(asset_config.static_dir) / "tesseract.min.js"
    target.parent.mkdir(parents=True)
    target.write_text("local copy")

    def handler(request):
        pytest.fail("asset should not be downloaded again")

    path = await ensure_asset(asset_config, transport=httpx.MockTransport(handler))

    assert path == target
    assert target.read_text() == "local copy"


@pytest.mark.asyncio
async def test_http_error_is_not_fatal(asset_config):
    transport = httpx.MockTransport(lambda request: httpx.Response(503))

    path = await ensure_asset(asset_config, transport=transport)

    assert path is None
    assert not (Path(asset_config.static_dir) / "tesseract.min.js").exists()


@pytest.mark.asyncio
async def test_transport_error_is_not_fatal(asset_config):
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    assert await ensure_asset(asset_config, transport=httpx.MockTransport(handler)) is None


@pytest.mark.asyncio
async def test_disabled_without_url(relay_config):
    assert await ensure_asset(relay_config) is None
