"""
Image Relay Module

Fetches remote images on behalf of browser clients and returns them as
base64 data URLs, working around CORS and hotlink protection.

Features:
- Browser-like request headers with an optional forwarded Referer
- Timeout with active abort of the outbound request
- Content-type gate and size limit
- Structured JSON errors for every failure
"""

from .config import RelayConfig
from .fetcher import ImageRelay, build_outbound_headers
from .models import ErrorKind, ProxyFailure, ProxyRequest, ProxyResult, ProxySuccess

__all__ = [
    "RelayConfig",
    "ImageRelay",
    "build_outbound_headers",
    "ErrorKind",
    "ProxyRequest",
    "ProxyResult",
    "ProxySuccess",
    "ProxyFailure",
]
