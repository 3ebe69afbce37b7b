"""Runtime settings, overridable through environment variables."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DATA_DIR = Path("data")
DEFAULT_ALERT_THRESHOLD = 0.8
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    alert_threshold: float = DEFAULT_ALERT_THRESHOLD
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            data_dir=Path(os.getenv("BUDGETTRACKER_DATA_DIR", DEFAULT_DATA_DIR)),
            alert_threshold=float(
                os.getenv("BUDGETTRACKER_ALERT_THRESHOLD", DEFAULT_ALERT_THRESHOLD)
            ),
            log_level=os.getenv("BUDGETTRACKER_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
