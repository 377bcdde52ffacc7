"""Configuration for the OKC/Tulsa show calendar."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# ---------------------------------------------------------------------------
# Output locations
# ---------------------------------------------------------------------------
DOCS_DIR = PROJECT_ROOT / "docs"
SNAPSHOT_PATH = DOCS_DIR / "shows.json"
OVERRIDES_PATH = PROJECT_ROOT / "image_overrides.json"
LOG_DIR = PROJECT_ROOT / "logs"

# ---------------------------------------------------------------------------
# Venues are all in Oklahoma (Central time). "Today" for year-less dates is
# the calendar day here, not UTC.
# ---------------------------------------------------------------------------
LOCAL_TZ = ZoneInfo("America/Chicago")

# ---------------------------------------------------------------------------
# HTTP politeness
# ---------------------------------------------------------------------------
USER_AGENT = (
    "Mozilla/5.0 (compatible; okladiy-scraper/1.0; "
    "+https://github.com/local/okladiy)"
)
HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml",
}
REQUEST_TIMEOUT = 15.0  # seconds, per request
JITTER_SECONDS = (0.3, 0.9)  # random pause before each outbound request
DETAIL_BATCH_SIZE = 8  # concurrent detail-page requests per batch
BATCH_PAUSE_SECONDS = (0.4, 0.6)  # pause between detail batches
RENDER_TIMEOUT = 30.0  # seconds, headless browser page load


@dataclass(frozen=True)
class PipelineConfig:
    """Everything a pipeline run needs, passed in explicitly."""
    output_path: Path = SNAPSHOT_PATH
    overrides_path: Path = OVERRIDES_PATH
    log_dir: Optional[Path] = LOG_DIR
    request_timeout: float = REQUEST_TIMEOUT
    jitter_min: float = JITTER_SECONDS[0]
    jitter_max: float = JITTER_SECONDS[1]
    detail_batch_size: int = DETAIL_BATCH_SIZE
    batch_pause_min: float = BATCH_PAUSE_SECONDS[0]
    batch_pause_max: float = BATCH_PAUSE_SECONDS[1]
    render_timeout: float = RENDER_TIMEOUT

    def __post_init__(self):
        if self.detail_batch_size < 1:
            raise ValueError("detail_batch_size must be at least 1")
        if self.jitter_min > self.jitter_max:
            raise ValueError("jitter_min must not exceed jitter_max")
        if self.batch_pause_min > self.batch_pause_max:
            raise ValueError("batch_pause_min must not exceed batch_pause_max")

    @classmethod
    def from_env(cls, **overrides) -> "PipelineConfig":
        """Build a config from OKLADIY_* environment variables.

        Keyword arguments win over the environment (used by the CLI flags).
        """
        values = {}
        if os.environ.get("OKLADIY_OUTPUT_PATH"):
            values["output_path"] = Path(os.environ["OKLADIY_OUTPUT_PATH"])
        if os.environ.get("OKLADIY_OVERRIDES_PATH"):
            values["overrides_path"] = Path(os.environ["OKLADIY_OVERRIDES_PATH"])
        if os.environ.get("OKLADIY_LOG_DIR"):
            values["log_dir"] = Path(os.environ["OKLADIY_LOG_DIR"])
        if os.environ.get("OKLADIY_TIMEOUT"):
            values["request_timeout"] = float(os.environ["OKLADIY_TIMEOUT"])
        if os.environ.get("OKLADIY_BATCH_SIZE"):
            values["detail_batch_size"] = int(os.environ["OKLADIY_BATCH_SIZE"])
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
