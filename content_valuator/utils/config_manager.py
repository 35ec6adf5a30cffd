"""YAML configuration manager"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from content_valuator.utils.logger import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "CONTENT_VALUATOR_"


class ConfigManager:
    """
    Loads and serves the YAML configuration files.

    - dot-notation access: config.get("valuation.min_value")
    - environment overrides: CONTENT_VALUATOR_VALUATION_MIN_VALUE
    - keeps each file separately and a merged view of all of them
    """

    def __init__(self, config_dir: Optional[str] = None) -> None:
        """
        Args:
            config_dir: Configuration directory. Uses the bundled directory when None.
        """
        if config_dir is None:
            config_dir = str(Path(__file__).parent.parent / "config")

        self._config_dir = config_dir
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._merged: Dict[str, Any] = {}
        self._load_all()

    @property
    def config_dir(self) -> str:
        return self._config_dir

    def _load_all(self) -> None:
        """Load every YAML file in the config directory."""
        config_path = Path(self._config_dir)
        if not config_path.exists():
            logger.warning("Config directory does not exist: %s", self._config_dir)
            return

        for yaml_file in sorted(config_path.glob("*.yaml")):
            if yaml_file.name.startswith("logging"):
                continue  # handled by setup_logging
            try:
                data = self.load(str(yaml_file))
                filename = yaml_file.stem
                self._configs[filename] = data
                self._merged.update(data)
                logger.debug("Loaded config file: %s", yaml_file.name)
            except (OSError, yaml.YAMLError) as e:
                logger.error("Failed to load config file: %s - %s", yaml_file.name, e)

    def load(self, filepath: str) -> Dict[str, Any]:
        """
        Load a single YAML file.

        Args:
            filepath: Absolute or relative path of the YAML file.

        Returns:
            Parsed dictionary (empty for an empty file).
        """
        with open(filepath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if data is not None else {}

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Look up a value by dot-notation path.
        Environment overrides win over file values and are parsed as YAML
        scalars, so "120.5" comes back as a float.

        Args:
            key_path: Path such as "valuation.max_value".
            default: Returned when the key is missing.
        """
        env_value = self._env_override(key_path)
        if env_value is not None:
            return env_value

        keys = key_path.split(".")
        current = self._merged
        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Return a top-level section with environment overrides applied.

        Every scalar leaf can be overridden the same way `get` does it, so
        CONTENT_VALUATOR_VALUATION_MAX_VALUE also shows up in
        get_section("valuation")["max_value"]. Lists are returned as loaded.

        Args:
            section: Top-level key (e.g. "valuation", "portfolio").

        Returns:
            A copy of the section dictionary, or an empty dict.
        """
        data = self._merged.get(section, {})
        if not isinstance(data, dict):
            return {}
        return self._with_overrides(section, data)

    def get_file_config(self, filename: str) -> Dict[str, Any]:
        """
        Return the whole content of one file.

        Args:
            filename: File name without extension, e.g. "rate_tables", "signatures".

        Returns:
            The file dictionary, or an empty dict.
        """
        return self._configs.get(filename, {})

    def _env_override(self, key_path: str) -> Optional[Any]:
        """
        "valuation.max_value" -> "CONTENT_VALUATOR_VALUATION_MAX_VALUE"
        """
        env_key = ENV_PREFIX + key_path.upper().replace(".", "_")
        raw = os.environ.get(env_key)
        if raw is None:
            return None
        try:
            return yaml.safe_load(raw)
        except yaml.YAMLError:
            return raw

    def _with_overrides(self, key_path: str, data: Dict[str, Any]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key, value in data.items():
            child_path = f"{key_path}.{key}"
            if isinstance(value, dict):
                result[key] = self._with_overrides(child_path, value)
                continue
            env_value = None if isinstance(value, list) else self._env_override(child_path)
            result[key] = env_value if env_value is not None else value
        return result
