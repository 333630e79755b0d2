"""
Startup Asset Bootstrap

Makes sure a named client asset exists in the static directory. If it is
missing it is downloaded once from a fixed URL. Failures are logged and
never stop the service from starting.
"""

import logging
from pathlib import Path
from typing import Optional

import httpx

from .config import RelayConfig
from .fetcher import BROWSER_HEADERS

logger = logging.getLogger(__name__)


async def ensure_asset(
    config: RelayConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[Path]:
    """
    Download the configured asset into static_dir if it is not there yet.

    Returns:
        Path to the asset, or None if the bootstrap is disabled or failed.
    """
    if not config.asset_name or not config.asset_url:
        return None

    target = Path(config.static_dir) / config.asset_name
    if target.exists():
        logger.debug(f"[AssetBootstrap] Present: {target}")
        return target

    try:
        logger.info(f"[AssetBootstrap] Downloading {config.asset_name} from {config.asset_url[:80]}...")
        async with httpx.AsyncClient(
            transport=transport,
            follow_redirects=True,
            timeout=config.timeout_seconds,
            headers=BROWSER_HEADERS,
        ) as client:
            response = await client.get(config.asset_url)
            response.raise_for_status()

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(response.content)
        logger.info(f"[AssetBootstrap] Saved {target} ({len(response.content)} bytes)")
        return target

    except httpx.HTTPStatusError as e:
        logger.error(f"[AssetBootstrap] HTTP error {e.response.status_code} for {config.asset_url[:80]}")
    except Exception as e:
        logger.error(f"[AssetBootstrap] Failed to fetch {config.asset_name}: {e}")
    return None
