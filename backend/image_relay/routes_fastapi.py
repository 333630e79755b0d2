"""
Image Relay API Routes

Provides:
- GET /proxy?url=<image-url>&referer=<optional-referer>

Always answers with JSON; failures carry ok=false and a status code that
reflects the failure class.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from .fetcher import ImageRelay
from .models import ProxyErrorBody, ProxySuccessBody

router = APIRouter(tags=["Image Relay"])


def get_relay(request: Request) -> ImageRelay:
    return request.app.state.relay


@router.get(
    "/proxy",
    response_model=ProxySuccessBody,
    responses={
        400: {"model": ProxyErrorBody},
        413: {"model": ProxyErrorBody},
        500: {"model": ProxyErrorBody},
        504: {"model": ProxyErrorBody},
    },
)
async def proxy_image(
    url: Optional[str] = Query(None, description="URL of the image to fetch"),
    referer: Optional[str] = Query(None, description="Referer to forward to the origin"),
    relay: ImageRelay = Depends(get_relay),
):
    """
    Fetch a remote image and return it as a base64 data URL.

    Example:
        GET /proxy?url=https://example.com/image.jpg
    """
    result = await relay.handle(url, referer)
    return JSONResponse(
        status_code=result.http_status,
        content=result.to_body().model_dump(exclude_none=True),
    )
