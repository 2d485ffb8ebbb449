"""Module for the Config class."""
import logging
import logging.config
from pathlib import Path
from typing import Any

import yaml

from assignment_transfer.core.types import DurationLimits, UserId

logger = logging.getLogger(__name__)

LOG_DIRECTORY = Path(".local") / "share" / "assignment-transfer"


class Config:  # pylint: disable=too-few-public-methods
    """A class to store the configuration."""

    def __init__(self) -> None:
        self.database_path = Path("assignments.db")
        self.current_user_id: UserId | None = None
        self.language = "en"
        self.duration_limits = DurationLimits()
        self.default_accept_duration = 7
        self.logging_config: dict[str, Any] | None = None

    def __parse_yaml(self, yaml_path: Path) -> None:
        """Parse a YAML configuration file."""
        with open(yaml_path, encoding="utf-8") as file:
            config = yaml.safe_load(file) or {}

        if (database_path := config.get("database_path")) is not None:
            self.database_path = Path(database_path)
        if (user_id := config.get("current_user_id")) is not None:
            self.current_user_id = str(user_id)
        if (language := config.get("language")) is not None:
            self.language = language
        if (limits := config.get("duration_limits")) is not None:
            self.duration_limits = DurationLimits(
                minimum=limits.get("min", self.duration_limits.minimum),
                maximum=limits.get("max", self.duration_limits.maximum),
            )
        if (default_duration := config.get("default_accept_duration")) is not None:
            self.default_accept_duration = int(default_duration)
        if (logging_config := config.get("logging")) is not None:
            self.logging_config = logging_config

    def parse(self, config_path: Path) -> None:
        """Parse a configuration file."""
        if config_path.suffix in (".yaml", ".yml"):
            self.__parse_yaml(config_path)
        else:
            raise ValueError(f"Unsupported file format: '{config_path.suffix}'")

    def setup_logging(self) -> None:
        """Configure logging from the parsed config, or log to a file by default."""
        if self.logging_config is None:
            log_dir = Path.home() / LOG_DIRECTORY
            log_dir.mkdir(parents=True, exist_ok=True)
            logging.basicConfig(
                filename=log_dir / "assignment-transfer.log",
                level=logging.INFO,
                format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            )
            return

        try:
            logging.config.dictConfig(self.logging_config)
        except (ValueError, TypeError, AttributeError, ImportError) as e:
            logging.basicConfig(level=logging.INFO)
            logger.warning("Invalid logging configuration, using defaults: %s", e)

