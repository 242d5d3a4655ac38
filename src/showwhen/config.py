"""CLI configuration and logging setup.

The expression core reads no configuration; only the command line tools do.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@dataclass
class CliConfig:
    """Settings for the showwhen command line tools."""

    log_level: str = "WARNING"
    rules_path: Path = Path("rules")

    @classmethod
    def from_env(cls) -> CliConfig:
        """Create config from environment variables.

        - SHOWWHEN_LOG_LEVEL: logging level name (default WARNING)
        - SHOWWHEN_RULES_PATH: rule file or directory (default ./rules)
        """
        return cls(
            log_level=os.environ.get("SHOWWHEN_LOG_LEVEL", "WARNING").upper(),
            rules_path=Path(os.environ.get("SHOWWHEN_RULES_PATH", "rules")),
        )


def configure_logging(level: str) -> None:
    """Configure logging for command line use.

    Installs a stderr handler on the root logger (if none is configured yet)
    and sets the level of the showwhen package logger.

    Raises:
        ValueError: For unknown level names.
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("showwhen").setLevel(numeric)
