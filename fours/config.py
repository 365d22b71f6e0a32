"""Configuration and environment settings for fours."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class FourChanConfig:
    """4chan API configuration.  Respects the 1-request-per-second guideline."""
    api_base: str = "https://a.4cdn.org"
    image_base: str = "https://i.4cdn.org"
    boards_base: str = "https://boards.4chan.org"
    request_delay: float = 1.0  # seconds between API requests
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> FourChanConfig:
        return cls(
            api_base=os.getenv("FOURS_API_BASE", "https://a.4cdn.org"),
            image_base=os.getenv("FOURS_IMAGE_BASE", "https://i.4cdn.org"),
            boards_base=os.getenv("FOURS_BOARDS_BASE", "https://boards.4chan.org"),
            request_delay=float(os.getenv("FOURS_REQUEST_DELAY", "1.0")),
            timeout=float(os.getenv("FOURS_TIMEOUT", "30.0")),
        )


@dataclass(frozen=True)
class FoursConfig:
    fourchan: FourChanConfig = field(default_factory=FourChanConfig)
    width: int = 69
    poll_interval: float = 0.05  # seconds; upper bound on a key poll
    output_dir: Path = Path("/tmp")
    banner: bool = False

    @classmethod
    def from_env(cls) -> FoursConfig:
        return cls(
            fourchan=FourChanConfig.from_env(),
            width=int(os.getenv("FOURS_WIDTH", "69")),
            output_dir=Path(os.getenv("FOURS_OUTPUT_DIR", "/tmp")),
            banner=os.getenv("FOURS_BANNER", "false").lower() == "true",
        )
