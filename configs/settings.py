"""
Runtime settings for the site timeclock.

Values come from the environment, optionally seeded from a ``.env`` file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from aws import config as aws_config

WEEKDAYS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}

DEFAULT_ANNOUNCEMENTS = (
    ("warning", "Remember to wear proper PPE at all times"),
    ("info", "Site inspection scheduled for tomorrow"),
    ("alert", "Heavy machinery in operation in Zone B"),
)


@dataclass(frozen=True)
class Settings:
    storage_backend: str = "memory"
    aws_region: str = aws_config.AWS_REGION
    events_table: str = aws_config.EVENTS_TABLE
    identities_table: str = aws_config.IDENTITIES_TABLE
    match_threshold: float = 0.6
    timezone: str = "UTC"
    first_day_of_week: int = WEEKDAYS["sunday"]
    log_level: str = "INFO"
    announcements: tuple = field(default=DEFAULT_ANNOUNCEMENTS)

    def __post_init__(self) -> None:
        if self.storage_backend not in {"memory", "dynamodb"}:
            raise ValueError(f"Unsupported storage_backend: {self.storage_backend}")
        if not self.match_threshold > 0:
            raise ValueError("match_threshold must be positive")
        if not 0 <= self.first_day_of_week <= 6:
            raise ValueError("first_day_of_week must be between 0 (Monday) and 6 (Sunday)")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {self.timezone}") from exc

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        load_dotenv(env_file)

        weekday_name = os.getenv("FIRST_DAY_OF_WEEK", "sunday").strip().lower()
        if weekday_name not in WEEKDAYS:
            raise ValueError(f"Unknown FIRST_DAY_OF_WEEK: {weekday_name}")

        raw_threshold = os.getenv("MATCH_THRESHOLD", "0.6")
        try:
            threshold = float(raw_threshold)
        except ValueError as exc:
            raise ValueError(f"MATCH_THRESHOLD must be a number, got {raw_threshold!r}") from exc

        return cls(
            storage_backend=os.getenv("STORAGE_BACKEND", "memory").strip().lower(),
            aws_region=os.getenv("AWS_REGION", aws_config.AWS_REGION),
            events_table=os.getenv("EVENTS_TABLE", aws_config.EVENTS_TABLE),
            identities_table=os.getenv("IDENTITIES_TABLE", aws_config.IDENTITIES_TABLE),
            match_threshold=threshold,
            timezone=os.getenv("TIMECLOCK_TIMEZONE", "UTC"),
            first_day_of_week=WEEKDAYS[weekday_name],
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
