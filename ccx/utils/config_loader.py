"""
Configuration Loader Module

Loads the optional ccx configuration file, applies environment variable
substitution and validates it against a schema with defaults.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .file_utils import FileUtils
from ..core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_NAME = "config"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class ConfigValidationRule:
    """Configuration validation rule."""
    field_path: str
    required: bool = True
    field_type: type = str
    default_value: Any = None
    allowed_values: Optional[List[Any]] = None
    min_value: Optional[Union[int, float]] = None
    max_value: Optional[Union[int, float]] = None
    case_insensitive: bool = False


@dataclass
class ConfigSchema:
    """Configuration schema definition."""
    name: str
    version: str
    rules: List[ConfigValidationRule] = field(default_factory=list)

    def add_rule(self, **kwargs) -> 'ConfigSchema':
        """Add validation rule."""
        self.rules.append(ConfigValidationRule(**kwargs))
        return self


def build_ccx_schema() -> ConfigSchema:
    """Schema for the ccx configuration file, with every default."""
    schema = ConfigSchema("ccx", "1.0")
    schema.add_rule(
        field_path="tmux.binary",
        field_type=str,
        default_value="tmux"
    ).add_rule(
        field_path="tmux.command_timeout",
        field_type=float,
        default_value=10.0,
        min_value=0.5,
        max_value=300.0
    ).add_rule(
        field_path="tmux.send_enter_delay",
        field_type=float,
        default_value=0.5,
        min_value=0.0,
        max_value=10.0
    ).add_rule(
        field_path="session.prefix",
        field_type=str,
        default_value="ccx-"
    ).add_rule(
        field_path="agent.command",
        field_type=str,
        default_value="claude"
    ).add_rule(
        field_path="status.lines",
        field_type=int,
        default_value=10,
        min_value=1
    ).add_rule(
        field_path="watch.interval",
        field_type=float,
        default_value=2.0,
        min_value=0.1
    ).add_rule(
        field_path="watch.capture_lines",
        field_type=int,
        default_value=20,
        min_value=1
    ).add_rule(
        field_path="watch.tail_lines",
        field_type=int,
        default_value=15,
        min_value=1
    ).add_rule(
        field_path="logging.level",
        field_type=str,
        default_value="WARNING",
        allowed_values=LOG_LEVELS,
        case_insensitive=True
    )
    return schema


@dataclass(frozen=True)
class Settings:
    """Validated ccx settings."""
    tmux_binary: str = "tmux"
    command_timeout: float = 10.0
    send_enter_delay: float = 0.5
    session_prefix: str = "ccx-"
    agent_command: str = "claude"
    status_lines: int = 10
    watch_interval: float = 2.0
    watch_capture_lines: int = 20
    watch_tail_lines: int = 15
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'Settings':
        """Build settings from a validated configuration mapping."""
        return cls(
            tmux_binary=config["tmux"]["binary"],
            command_timeout=float(config["tmux"]["command_timeout"]),
            send_enter_delay=float(config["tmux"]["send_enter_delay"]),
            session_prefix=config["session"]["prefix"],
            agent_command=config["agent"]["command"],
            status_lines=config["status"]["lines"],
            watch_interval=float(config["watch"]["interval"]),
            watch_capture_lines=config["watch"]["capture_lines"],
            watch_tail_lines=config["watch"]["tail_lines"],
            log_level=config["logging"]["level"].upper()
        )


def default_config_dir() -> Path:
    """Config directory: $CCX_CONFIG_DIR, else $XDG_CONFIG_HOME/ccx, else ~/.config/ccx."""
    override = os.environ.get("CCX_CONFIG_DIR")
    if override:
        return Path(override).expanduser()

    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_home).expanduser() if xdg_home else Path.home() / ".config"
    return base / "ccx"


class ConfigLoader:
    """
    Configuration loader with validation and schema support.

    Features:
    - JSON and YAML configuration support
    - Schema validation with detailed error reporting
    - Environment variable substitution
    - Default value handling
    """

    def __init__(self, config_dir: Optional[Path] = None, schema: Optional[ConfigSchema] = None):
        """
        Initialize config loader.

        Args:
            config_dir: Directory searched for config.{json,yaml,yml}
            schema: Schema to validate against (defaults to the ccx schema)
        """
        self.config_dir = config_dir or default_config_dir()
        self.schema = schema or build_ccx_schema()

    def find_config_file(self) -> Optional[Path]:
        """Return the first existing config file in the config directory."""
        for suffix in (".json", ".yaml", ".yml"):
            path = self.config_dir / f"{CONFIG_NAME}{suffix}"
            if path.exists():
                return path
        return None

    def load_config(self, config_path: Optional[Path] = None) -> Dict[str, Any]:
        """
        Load, substitute and validate configuration.

        Args:
            config_path: Explicit config file; searched for when omitted

        Returns:
            Dict containing the validated configuration with defaults filled

        Raises:
            ConfigError: If an explicit file is missing, unreadable or invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise ConfigError(f"Config file not found: {config_path}")
            path = config_path
        else:
            path = self.find_config_file()

        if path is None:
            logger.debug(f"No config file in {self.config_dir}, using defaults")
            config_data: Dict[str, Any] = {}
        elif path.suffix == ".json":
            config_data = FileUtils.read_json(path)
        else:
            config_data = FileUtils.read_yaml(path)

        config_data = self._substitute_environment_variables(config_data)
        self.validate_config(config_data)

        if path is not None:
            logger.info(f"Loaded config: {path}")
        return config_data

    def load_settings(self, config_path: Optional[Path] = None) -> Settings:
        """Load configuration and return it as Settings."""
        return Settings.from_dict(self.load_config(config_path))

    def validate_config(self, config_data: Dict[str, Any]) -> None:
        """
        Validate configuration against the schema, filling in defaults.

        Raises:
            ConfigError: Listing every validation failure
        """
        validation_errors = []

        for rule in self.schema.rules:
            value = self._get_nested_value(config_data, rule.field_path)

            if value is None:
                if rule.default_value is not None:
                    self._set_nested_value(config_data, rule.field_path, rule.default_value)
                elif rule.required:
                    validation_errors.append(f"Required field missing: {rule.field_path}")
                continue

            value = self._coerce(value, rule.field_type)
            if value is None:
                actual = self._get_nested_value(config_data, rule.field_path)
                validation_errors.append(
                    f"Field {rule.field_path} must be {rule.field_type.__name__}, got {type(actual).__name__}"
                )
                continue
            if rule.case_insensitive and isinstance(value, str):
                value = value.upper()
            self._set_nested_value(config_data, rule.field_path, value)

            if rule.allowed_values and value not in rule.allowed_values:
                validation_errors.append(
                    f"Field {rule.field_path} must be one of {rule.allowed_values}, got {value}"
                )

            if rule.min_value is not None and value < rule.min_value:
                validation_errors.append(
                    f"Field {rule.field_path} must be >= {rule.min_value}, got {value}"
                )

            if rule.max_value is not None and value > rule.max_value:
                validation_errors.append(
                    f"Field {rule.field_path} must be <= {rule.max_value}, got {value}"
                )

        if validation_errors:
            raise ConfigError(
                f"Config validation failed for schema {self.schema.name}: " + "; ".join(validation_errors)
            )

    @staticmethod
    def _coerce(value: Any, field_type: type) -> Any:
        """Return value as field_type, or None if it doesn't fit."""
        if isinstance(value, bool) and field_type is not bool:
            return None
        if field_type is float and isinstance(value, int):
            return float(value)
        if isinstance(value, field_type):
            return value
        return None

    def _get_nested_value(self, data: Dict[str, Any], path: str) -> Any:
        """Get nested value using dot notation."""
        keys = path.split('.')
        current = data

        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return None

        return current

    def _set_nested_value(self, data: Dict[str, Any], path: str, value: Any) -> None:
        """Set nested value using dot notation."""
        keys = path.split('.')
        current = data

        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _substitute_environment_variables(self, data: Any) -> Any:
        """Recursively substitute environment variables in configuration."""
        if isinstance(data, dict):
            return {k: self._substitute_environment_variables(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [self._substitute_environment_variables(item) for item in data]
        elif isinstance(data, str):
            # Replace ${VAR_NAME} or $VAR_NAME patterns
            def replace_env_var(match):
                var_name = match.group(1) or match.group(2)
                return os.environ.get(var_name, match.group(0))

            pattern = r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}|\$([A-Za-z_][A-Za-z0-9_]*)'
            return re.sub(pattern, replace_env_var, data)
        else:
            return data
