"""
Image Relay Core Logic

Handles:
- Validating the target URL
- Fetching it with browser-like headers (and an optional Referer)
- Enforcing timeout, content-type and size policy
- Encoding the image as a base64 data URL

Every outcome, including transport errors, comes back as a ProxyResult.
"""

import asyncio
import base64
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Mapping, Optional

import httpx

from .config import RelayConfig
from .models import ErrorKind, ProxyFailure, ProxyRequest, ProxyResult, ProxySuccess

logger = logging.getLogger(__name__)

# Browser-like headers to get past hotlink protection and UA filtering
BROWSER_HEADERS: Dict[str, str] = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/117.0.0.0 Safari/537.36",
    "Accept": "image/avif,image/webp,image/apng,image/*,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

# Schemes whose URLs are only well-formed with a host
NETWORK_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})

SNIPPET_READ_BYTES = 512
SNIPPET_MAX_CHARS = 300


# ============================================
# Helpers
# ============================================

def build_outbound_headers(
    base_headers: Mapping[str, str],
    referer: Optional[str] = None,
) -> Dict[str, str]:
    """Outbound header set. Referer is only sent when the caller supplied one."""
    headers = dict(base_headers)
    if referer:
        headers["Referer"] = referer
    return headers


def is_image_content_type(content_type: Optional[str]) -> bool:
    return bool(content_type) and content_type.strip().lower().startswith("image/")


def parse_target_url(raw: str) -> Optional[httpx.URL]:
    """
    Parse an absolute URL. Returns None when there is no scheme, or when a
    network scheme (http, https, ws, wss, ftp) has no host.

    Other schemes (file:, data:, mailto:) parse fine and fail later at the
    transport.
    """
    try:
        url = httpx.URL(raw)
    except (httpx.InvalidURL, ValueError, TypeError):
        return None
    if not url.scheme:
        return None
    if url.scheme in NETWORK_SCHEMES and not url.host:
        return None
    return url


def to_data_url(content_type: str, data: bytes) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


@asynccontextmanager
async def fetch_deadline(seconds: float) -> AsyncIterator[None]:
    """
    Cancel the enclosed block once `seconds` have elapsed.

    Expiry raises TimeoutError out of the block. The timer is removed on
    every exit path.
    """
    async with asyncio.timeout(seconds):
        yield


async def read_snippet(response: httpx.Response) -> Optional[str]:
    """
    Best-effort preview of a non-image body.

    Reads at most SNIPPET_READ_BYTES, decodes leniently and trims to
    SNIPPET_MAX_CHARS. Returns None if nothing could be read.
    """
    try:
        buffer = bytearray()
        async for chunk in response.aiter_bytes():
            buffer.extend(chunk)
            if len(buffer) >= SNIPPET_READ_BYTES:
                break
        text = bytes(buffer[:SNIPPET_READ_BYTES]).decode("utf-8", errors="replace")
    except Exception as e:
        logger.debug(f"[ImageRelay] Snippet unavailable: {e}")
        return None
    return text[:SNIPPET_MAX_CHARS] or None


async def read_capped_body(response: httpx.Response, max_bytes: int) -> Optional[bytes]:
    """Buffer the body. Returns None as soon as it grows past max_bytes."""
    buffer = bytearray()
    async for chunk in response.aiter_bytes():
        buffer.extend(chunk)
        if len(buffer) > max_bytes:
            return None
    return bytes(buffer)


# ============================================
# Relay
# ============================================

class ImageRelay:
    """
    Fetches remote images and returns them as data URLs.

    Holds only immutable configuration. Each fetch opens and closes its own
    HTTP client, so concurrent calls share nothing.

    Usage:
        relay = ImageRelay(RelayConfig.from_env())
        result = await relay.handle("https://example.com/a.png")
    """

    def __init__(
        self,
        config: Optional[RelayConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or RelayConfig()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self._transport,
            follow_redirects=True,
            max_redirects=self.config.max_redirects,
            timeout=self.config.timeout_seconds,
        )

    async def handle(self, url: Optional[str], referer: Optional[str] = None) -> ProxyResult:
        """Validate the query parameters, then fetch."""
        if not url:
            return ProxyFailure(400, ErrorKind.MISSING_PARAMETER, "Missing ?url parameter")

        if parse_target_url(url) is None:
            return ProxyFailure(400, ErrorKind.INVALID_URL, "Invalid URL format")

        return await self.fetch(ProxyRequest(target_url=url, referer=referer or None))

    async def fetch(self, request: ProxyRequest) -> ProxyResult:
        """
        Fetch one image. Makes exactly one attempt (redirects aside).

        Returns:
            ProxySuccess with the data URL, or ProxyFailure describing why not.
        """
        url = request.target_url
        headers = build_outbound_headers(BROWSER_HEADERS, request.referer)

        try:
            logger.info(f"[ImageRelay] Fetching: {url[:60]}...")
            async with fetch_deadline(self.config.timeout_seconds):
                async with self._client() as client:
                    async with client.stream("GET", url, headers=headers) as response:
                        return await self._evaluate(url, response)

        except (TimeoutError, httpx.TimeoutException):
            logger.error(f"[ImageRelay] Timeout: {url[:60]}...")
            return ProxyFailure(504, ErrorKind.TIMEOUT, "Fetch timed out")

        except httpx.HTTPError as e:
            logger.error(f"[ImageRelay] Fetch error: {url[:60]}... - {e}")
            return ProxyFailure(500, ErrorKind.FETCH_ERROR, str(e) or e.__class__.__name__)

        except Exception as e:
            logger.exception(f"[ImageRelay] Unexpected error: {url[:60]}...")
            return ProxyFailure(500, ErrorKind.FETCH_ERROR, str(e) or e.__class__.__name__)

    async def _evaluate(self, url: str, response: httpx.Response) -> ProxyResult:
        """Apply status, content-type and size checks in that order."""
        if not response.is_success:
            logger.warning(f"[ImageRelay] HTTP error {response.status_code}: {url[:60]}...")
            return ProxyFailure(
                response.status_code,
                ErrorKind.UPSTREAM_ERROR,
                f"Remote fetch failed with status {response.status_code} {response.reason_phrase}",
            )

        content_type = response.headers.get("content-type", "")
        if not is_image_content_type(content_type):
            logger.warning(f"[ImageRelay] Non-image content-type: {content_type!r} for {url[:60]}...")
            return ProxyFailure(
                400,
                ErrorKind.NOT_AN_IMAGE,
                "Remote URL did not return an image (content-type != image/*)",
                content_type=content_type,
                snippet=await read_snippet(response),
            )

        data = await read_capped_body(response, self.config.max_bytes)
        if data is None:
            logger.warning(f"[ImageRelay] Too large (> {self.config.max_bytes} bytes): {url[:60]}...")
            return ProxyFailure(413, ErrorKind.PAYLOAD_TOO_LARGE, "Image too large")

        logger.info(f"[ImageRelay] Relayed: {url[:60]}... ({len(data)} bytes)")
        return ProxySuccess(content_type=content_type, data_url=to_data_url(content_type, data))
