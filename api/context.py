from __future__ import annotations

from datetime import datetime, timezone

from configs.logging_config import setup_logging
from configs.settings import Settings
from core.system import TimeclockSystem

settings = Settings.from_env()
setup_logging(settings.log_level)

system = TimeclockSystem(settings=settings)

startup_time = datetime.now(timezone.utc)
