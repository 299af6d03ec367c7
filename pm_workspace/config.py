# pm_workspace_core/pm_workspace/config.py

from typing import List, Optional, TextIO
import logging
import re
import sys

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from pythonjsonlogger.json import JsonFormatter

load_dotenv()

# Custom JSON formatter that excludes null/None fields
class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter that only includes fields with non-None values."""

    def add_fields(self, log_record, record, message_dict):
        """Override to filter out None values before adding to JSON output."""
        super().add_fields(log_record, record, message_dict)

        # Remove keys with None values
        log_record_copy = dict(log_record)
        for key, value in log_record_copy.items():
            if value is None:
                del log_record[key]

def setup_json_logging(log_level: int = logging.INFO, stream: Optional[TextIO] = None) -> None:
    """Initialize JSON logging configuration for the library (stdout unless a stream is given)."""
    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)

    # JSON formatter with common fields used across the timeline, scoring and markdown layers
    formatter = CustomJsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s "
        "%(roadmap_id)s %(item_id)s %(lane_id)s %(action)s "
        "%(count)s %(total)s %(applied)s %(skipped)s "
        "%(scale)s %(reason)s %(warning)s %(rice_score)s"
    )

    handler.setFormatter(formatter)

    root_logger = logging.getLogger("pm_workspace")
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers = []

    root_logger.addHandler(handler)

    # Prevent propagation to avoid duplicate logs
    root_logger.propagate = False


_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


class Settings(BaseSettings):
    # App
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Roadmap defaults
    DEFAULT_TIME_SCALE: str = "monthly"  # used when a persisted scale code is unknown
    LANE_COLORS: List[str] = [
        "#3b82f6",  # blue
        "#8b5cf6",  # violet
        "#f59e0b",  # amber
        "#10b981",  # emerald
        "#ef4444",  # red
        "#ec4899",  # pink
        "#06b6d4",  # cyan
        "#f97316",  # orange
    ]
    ROW_HEIGHT_PX: int = 52

    # Import from feature tree
    IMPORT_SPAN_DAYS: int = 14  # calendar days, inclusive of start and end
    IMPORT_STAGGER_DAYS: int = 7

    # Pointer gestures
    DRAG_ACTIVATION_DISTANCE_PX: float = 5.0

    # Sync coalescing window before the external sync call
    SYNC_DEBOUNCE_MS: int = 300

    # Roadmap pulse: "upcoming" window for non-done items
    DEADLINE_HORIZON_DAYS: int = 14

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("DEFAULT_TIME_SCALE")
    @classmethod
    def validate_time_scale(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if v not in {"weekly", "monthly", "quarterly"}:
            raise ValueError("DEFAULT_TIME_SCALE must be one of weekly, monthly, quarterly")
        return v

    @field_validator("IMPORT_SPAN_DAYS", "IMPORT_STAGGER_DAYS", "ROW_HEIGHT_PX", "DEADLINE_HORIZON_DAYS")
    @classmethod
    def positive_int(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("value must be > 0")
        return v

    @field_validator("SYNC_DEBOUNCE_MS")
    @classmethod
    def non_negative_window(cls, v: int) -> int:
        if v < 0:
            raise ValueError("SYNC_DEBOUNCE_MS must be >= 0")
        return v

    @field_validator("LANE_COLORS")
    @classmethod
    def validate_lane_colors(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("LANE_COLORS must contain at least one colour")
        bad = [c for c in v if not _HEX_COLOR.match(c)]
        if bad:
            raise ValueError(f"LANE_COLORS entries must be #rrggbb hex strings, got {bad}")
        return v


settings = Settings()
