"""
Image Relay Configuration

Process-wide settings, read once from the environment at startup and
passed explicitly to the fetcher, the router and the asset bootstrap.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


DEFAULT_ASSET_URL = "https://cdn.jsdelivr.net/npm/tesseract.js@5/dist/tesseract.min.js"


@dataclass(frozen=True)
class RelayConfig:
    """Configuration for the image relay service."""
    # Server settings
    host: str = "0.0.0.0"
    port: int = 3000

    # Fetch settings
    timeout_ms: int = 20000                 # Whole fetch, body included
    max_bytes: int = 10 * 1024 * 1024       # 10MB
    max_redirects: int = 20

    # Static files
    static_dir: str = "public"
    asset_name: str = "tesseract.min.js"    # Empty disables the bootstrap
    asset_url: str = DEFAULT_ASSET_URL

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RelayConfig":
        """
        Build a config from environment variables.

        Unset variables fall back to the defaults above. Integers that fail
        to parse raise ValueError so a bad deployment fails at startup.
        """
        env = os.environ if environ is None else environ
        return cls(
            host=env.get("HOST", cls.host),
            port=int(env.get("PORT", cls.port)),
            timeout_ms=int(env.get("RELAY_TIMEOUT_MS", cls.timeout_ms)),
            max_bytes=int(env.get("RELAY_MAX_BYTES", cls.max_bytes)),
            max_redirects=int(env.get("RELAY_MAX_REDIRECTS", cls.max_redirects)),
            static_dir=env.get("RELAY_STATIC_DIR", cls.static_dir),
            asset_name=env.get("RELAY_ASSET_NAME", cls.asset_name),
            asset_url=env.get("RELAY_ASSET_URL", cls.asset_url),
        )
