"""
File Utilities Module

Configuration file readers for ccx.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from ..core.exceptions import ConfigError

logger = logging.getLogger(__name__)


class FileUtils:
    """
    File reading helpers that turn parse errors into ConfigError.
    """

    @staticmethod
    def read_json(file_path: Path) -> Dict[str, Any]:
        """
        Read a JSON mapping.

        Args:
            file_path: Path to JSON file

        Returns:
            Dict containing JSON data

        Raises:
            ConfigError: If the file can't be read or isn't a JSON object
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {file_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Error reading {file_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping at the top of {file_path}")
        return data

    @staticmethod
    def read_yaml(file_path: Path) -> Dict[str, Any]:
        """
        Read a YAML mapping. An empty document reads as an empty dict.

        Raises:
            ConfigError: If the file can't be read or isn't a YAML mapping
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {file_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Error reading YAML {file_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping at the top of {file_path}")
        return data
