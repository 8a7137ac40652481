"""
Configuration management for lameness service.
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

import lib.utils as utils

logger = logging.getLogger(__name__)


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Replace environment variable placeholders with actual values.

    Args:
        match: A regex match object containing the environment variable name.

    Returns:
        str: The value of the environment variable or the original placeholder
             if the variable is not set.
    """
    key = match.group(1)
    return os.getenv(key, match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute environment variable placeholders in configuration values.

    Placeholders have the ${VAR_NAME} format. Strings, dictionaries and lists are
    processed recursively, other values are returned unchanged.

    Args:
        value: The configuration value to process.

    Returns:
        The processed value with environment variables substituted
    """
    if isinstance(value, str):
        return re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}", replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


class ConfigManager:
    """Manages configuration loading for lameness service."""

    def __init__(
        self, configPath: str = "config.toml", configDirs: Optional[List[str]] = None, dotEnvFile: str = ".env"
    ):
        """Initialize ConfigManager with config file path and optional config directories."""
        self.config_path = configPath
        self.config_dirs = configDirs or []
        utils.load_dotenv(path=dotEnvFile)
        self.config = substituteEnvVars(self._loadConfig())

        rootDir = self.config.get("application", {}).get("root-dir", None)
        if rootDir is not None:
            os.chdir(rootDir)
            logger.info(f"Changed root directory to {rootDir}")

    def _findTomlFilesRecursive(self, directory: str) -> List[Path]:
        """Recursively find all .toml files in a directory, dood!"""
        toml_files = []
        dir_path = Path(directory)

        if not dir_path.exists():
            logger.warning(f"Config directory {directory} does not exist, skipping, dood!")
            return toml_files

        if not dir_path.is_dir():
            logger.warning(f"Config path {directory} is not a directory, skipping, dood!")
            return toml_files

        for toml_file in dir_path.rglob("*.toml"):
            if toml_file.is_file():
                toml_files.append(toml_file)
                logger.debug(f"Found config file: {toml_file}")

        return sorted(toml_files)

    def _mergeConfigs(self, base_config: Dict[str, Any], new_config: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge two configuration dictionaries, dood!"""
        merged = base_config.copy()

        for key, value in new_config.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._mergeConfigs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _loadConfig(self) -> Dict[str, Any]:
        """
        Load configuration from TOML file and optional config directories.

        Files found in config directories are merged on top of the main config
        in sorted order, so later files win. Broken files in config directories
        are logged and skipped.

        Returns:
            Dict[str, Any]: The loaded and merged configuration dictionary.

        Raises:
            SystemExit: If the main configuration file is not found and no config
                directories are provided, or if the main file can't be parsed.
        """
        config_file = Path(self.config_path)
        hasConfigFile = config_file.exists()
        if not hasConfigFile and not self.config_dirs:
            logger.error(f"Configuration file {self.config_path} not found!")
            sys.exit(1)

        try:
            config: Dict[str, Any] = {}
            if hasConfigFile:
                with open(config_file, "rb") as f:
                    config = tomli.load(f)
                logger.info(f"Loaded main config from {self.config_path}")

            if self.config_dirs:
                logger.info(f"Scanning {len(self.config_dirs)} config directories for .toml files, dood!")

                for config_dir in self.config_dirs:
                    toml_files = self._findTomlFilesRecursive(config_dir)
                    logger.info(f"Found {len(toml_files)} .toml files in {config_dir}")

                    for toml_file in toml_files:
                        try:
                            with open(toml_file, "rb") as f:
                                dir_config = tomli.load(f)

                            config = self._mergeConfigs(config, dir_config)
                            logger.info(f"Merged config from {toml_file}")

                        except (OSError, tomli.TOMLDecodeError) as e:
                            logger.error(f"Failed to load config file {toml_file}: {e}")

            logger.info("Configuration loaded and merged successfully, dood!")
            return config

        except (OSError, tomli.TOMLDecodeError) as e:
            logger.error(f"Failed to load configuration: {e}")
            sys.exit(1)

    def get(self, key: str, default=None) -> Any:
        """Get configuration value by key."""
        return self.config.get(key, default)

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get logging-specific configuration."""
        return self.get("logging", {})

    def getLamenessConfig(self) -> Dict[str, Any]:
        """
        Get lameness configuration

        Returns:
            Dict with lameness settings:
            - self-training: Train classifiers with their own isLame() predictions
            - classifier: Naive Bayes settings (alpha, max-tokens-per-text)
            - tokenizer: Tokenizer settings (min-token-length, max-token-length, use-bigrams, ...)
        """
        return self.get("lameness", {})

    def getStorageConfig(self) -> Dict[str, Any]:
        """
        Get snapshot storage configuration.

        Returns a dictionary with the following structure:
        - type: Backend type ("fs", "memory", or "null")
        - io-retries: How many times a failed read/write is retried
        - retry-delay: Base delay between retries in seconds
        - fs: Filesystem backend configuration (if type is "fs")
            - base-dir: Base directory path for snapshots

        Example:
            {
                "type": "fs",
                "io-retries": 3,
                "fs": {"base-dir": "./tmp/lameness_data"}
            }
        """
        return self.get("storage", {})
