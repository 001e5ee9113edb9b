"""
Configuration for the Nemlig MCP server

Values come from the environment, with a local .env file loaded first.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://www.nemlig.com/webapi"


@dataclass
class RateLimitConfig:
    """Outbound request budget (1 request/second with a burst of 2)"""
    requests_per_second: float = 1
    burst_size: int = 2


@dataclass
class NemligConfig:
    api_url: str = DEFAULT_API_URL
    username: Optional[str] = None
    password: Optional[str] = None
    timeout_ms: int = 30000
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.username.strip()
                    and self.password and self.password.strip())


@dataclass
class ServerConfig:
    name: str = "nemlig-mcp"
    version: str = "1.0.0"
    log_level: str = "INFO"


@dataclass
class Config:
    nemlig: NemligConfig = field(default_factory=NemligConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        logger.warning(f"Ignoring invalid value for {name}: {raw!r} (using {default})")
        return default


def load_config(env_file: Optional[str] = None) -> Config:
    """Build the configuration from .env and the process environment.

    Variables already set in the environment win over the .env file.
    """
    load_dotenv(env_file)

    return Config(
        nemlig=NemligConfig(
            api_url=os.getenv("NEMLIG_API_URL", DEFAULT_API_URL).rstrip("/"),
            username=os.getenv("NEMLIG_USERNAME"),
            password=os.getenv("NEMLIG_PASSWORD"),
            timeout_ms=_env_number("NEMLIG_TIMEOUT", 30000, int),
            rate_limit=RateLimitConfig(
                requests_per_second=_env_number("NEMLIG_REQUESTS_PER_SECOND", 1, float),
                burst_size=_env_number("NEMLIG_BURST_SIZE", 2, int),
            ),
        ),
        server=ServerConfig(
            name=os.getenv("SERVER_NAME", "nemlig-mcp"),
            version=os.getenv("SERVER_VERSION", "1.0.0"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        ),
    )
