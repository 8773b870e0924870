"""Configuration management for tab_practice components."""

import copy
import json
from pathlib import Path
from typing import Dict, Any, Optional

from ..logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIGS: Dict[str, Dict[str, Any]] = {
    "practice": {
        "loop_tempo": 1.0,
        "gradual_increase": False,
        "tempo_increment": 0.05,
        "max_tempo": 1.0,
        "count_in": False,
        "start_delay": 0.05,
        "start_bar": 1,
        "end_bar": 4,
    },
    "fretboard": {
        "num_frets": 22,
        "default_num_strings": 6,
        # Standard guitar tuning, string 1 (low E) first
        "tuning": [40, 45, 50, 55, 59, 64],
    },
}


class ConfigManager:
    """Configuration manager for tab_practice components.

    Sections start from built-in defaults and are overlaid with
    ``<config_dir>/<name>.json`` when such a file exists. Changes are kept in
    memory only.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory holding configuration files, or None to use defaults only
        """
        self.config_dir = Path(config_dir) if config_dir is not None else None
        self.default_configs = copy.deepcopy(DEFAULT_CONFIGS)

        self.configs = {}
        for config_name, default_config in self.default_configs.items():
            self.configs[config_name] = self.load_config(config_name, default_config)

    def load_config(self, name: str, default_config: Dict[str, Any]) -> Dict[str, Any]:
        """Load configuration from file or fall back to the defaults.

        Args:
            name: Configuration name
            default_config: Default configuration to use if file doesn't exist

        Returns:
            Configuration dictionary
        """
        if self.config_dir is None:
            return copy.deepcopy(default_config)

        config_file = self.config_dir / f"{name}.json"
        if not config_file.exists():
            return copy.deepcopy(default_config)

        try:
            with open(config_file, "r") as f:
                config = json.load(f)
            logger.info(f"Loaded configuration from {config_file}")
        except (OSError, ValueError) as e:
            logger.error(f"Error loading configuration from {config_file}: {e}")
            return copy.deepcopy(default_config)

        # Ensure all default keys are present
        for key, value in default_config.items():
            if key not in config:
                config[key] = copy.deepcopy(value)
        return config

    def get_config(self, name: str) -> Dict[str, Any]:
        """Get configuration by name.

        Args:
            name: Configuration name

        Returns:
            Configuration dictionary

        Raises:
            ValueError: If the configuration is unknown
        """
        if name not in self.configs:
            raise ValueError(f"Unknown configuration: {name}")
        return copy.deepcopy(self.configs[name])

    def update_config(self, name: str, updates: Dict[str, Any]) -> bool:
        """Update configuration in memory.

        Args:
            name: Configuration name
            updates: Dictionary of updates to apply

        Returns:
            True if updated, False if the configuration is unknown
        """
        if name not in self.configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        self.configs[name].update(updates)
        return True

    def reset_config(self, name: str) -> bool:
        """Reset configuration to default.

        Args:
            name: Configuration name

        Returns:
            True if reset successfully, False otherwise
        """
        if name not in self.default_configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        self.configs[name] = copy.deepcopy(self.default_configs[name])
        return True
