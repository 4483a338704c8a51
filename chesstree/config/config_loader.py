"""Configuration loader with strict validation."""

import json
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

from chesstree.utils.path_resolver import get_app_resource_path


DEFAULT_CONFIG_PATH = "chesstree/config/config.json"

# Keys that must be present, as paths into the nested configuration dictionary
REQUIRED_KEYS: List[List[str]] = [
    ["logging", "console", "enabled"],
    ["logging", "console", "level"],
    ["logging", "file", "enabled"],
    ["logging", "file", "level"],
    ["logging", "file", "filename"],
    ["pgn", "training_color_header"],
    ["pgn", "priority_nags", "train_first"],
    ["pgn", "priority_nags", "train_last"],
]

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ConfigLoader:
    """Loads config.json and validates it.

    Validation is strict: a missing section or key raises ValueError naming
    the dotted path of the missing key, so a broken configuration is caught
    at startup instead of deep inside the editor.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None) -> None:
        """Initialize the config loader.

        Args:
            config_path: Optional path to a configuration file. Defaults to the
                bundled chesstree/config/config.json.
        """
        if config_path is None:
            self.config_path = get_app_resource_path(DEFAULT_CONFIG_PATH)
        else:
            self.config_path = Path(config_path)

    def load(self) -> Dict[str, Any]:
        """Load and validate the configuration.

        Returns:
            Configuration dictionary.

        Raises:
            FileNotFoundError: If the configuration file does not exist.
            ValueError: If the file is not valid JSON or fails validation.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, "r", encoding="utf-8") as f:
            try:
                config = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {self.config_path}: {e}") from e

        self.validate(config)
        return config

    @staticmethod
    def validate(config: Dict[str, Any]) -> None:
        """Validate a configuration dictionary.

        Args:
            config: Configuration dictionary to validate.

        Raises:
            ValueError: If a required key is missing or a value is invalid.
        """
        if not isinstance(config, dict):
            raise ValueError("Configuration root must be a JSON object")

        for key_path in REQUIRED_KEYS:
            current: Any = config
            for i, key in enumerate(key_path):
                if not isinstance(current, dict) or key not in current:
                    dotted = ".".join(key_path[:i + 1])
                    raise ValueError(f"{dotted} is required in config.json")
                current = current[key]

        logging_config = config["logging"]
        for handler_name in ("console", "file"):
            level = logging_config[handler_name]["level"]
            if str(level).upper() not in VALID_LOG_LEVELS:
                raise ValueError(f"logging.{handler_name}.level has invalid value: {level}")

        priority_nags = config["pgn"]["priority_nags"]
        if priority_nags["train_first"] == priority_nags["train_last"]:
            raise ValueError("pgn.priority_nags.train_first and train_last must differ")
