"""
Image Relay Data Models

Contains:
- ErrorKind: failure classes of a proxy fetch
- ProxyRequest: validated inbound request
- ProxySuccess / ProxyFailure: the two shapes of a ProxyResult
- ProxySuccessBody / ProxyErrorBody: JSON bodies returned by /proxy
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Why a proxy fetch failed."""
    MISSING_PARAMETER = "MissingParameter"
    INVALID_URL = "InvalidURL"
    UPSTREAM_ERROR = "UpstreamError"    # Origin answered non-2xx
    NOT_AN_IMAGE = "NotAnImage"         # Content-type gate failed
    PAYLOAD_TOO_LARGE = "PayloadTooLarge"
    TIMEOUT = "Timeout"
    FETCH_ERROR = "FetchError"          # Any other transport/runtime failure


# ============================================
# Handler Types
# ============================================

@dataclass(frozen=True)
class ProxyRequest:
    """A target URL that already parsed as absolute, plus an optional referer."""
    target_url: str
    referer: Optional[str] = None


@dataclass(frozen=True)
class ProxySuccess:
    content_type: str
    data_url: str

    @property
    def http_status(self) -> int:
        return 200

    def to_body(self) -> "ProxySuccessBody":
        return ProxySuccessBody(contentType=self.content_type, base64=self.data_url)


@dataclass(frozen=True)
class ProxyFailure:
    http_status: int
    error_kind: ErrorKind
    message: str
    content_type: Optional[str] = None
    snippet: Optional[str] = None

    def to_body(self) -> "ProxyErrorBody":
        return ProxyErrorBody(
            error=self.message,
            contentType=self.content_type,
            snippet=self.snippet,
        )


ProxyResult = Union[ProxySuccess, ProxyFailure]


# ============================================
# Response Bodies
# ============================================

class ProxySuccessBody(BaseModel):
    """Body of a successful /proxy response."""
    ok: bool = True
    contentType: str
    base64: str = Field(..., description="data:<contentType>;base64,<payload>")


class ProxyErrorBody(BaseModel):
    """Body of a failed /proxy response. Unset optional fields are omitted."""
    ok: bool = False
    error: str
    contentType: Optional[str] = None
    snippet: Optional[str] = Field(None, description="Start of a non-image body, for debugging")
