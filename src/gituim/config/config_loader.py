"""
Configuration loader for gituim.

Settings come from, in increasing priority: schema defaults, a YAML file and
environment variables.

"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from xdg.BaseDirectory import xdg_config_home

from gituim.config.config_schema import AppConfigSchema

logger = logging.getLogger(__name__)

LOCAL_CONFIG_FILE = ".gituim.yml"

# Environment variable -> dotted path in the configuration
ENV_OVERRIDES = {
	"GITUIM_REPOSITORY_PREFIX": ("repository_root",),
	"GITUIM_HOST": ("server", "host"),
	"GITUIM_PORT": ("server", "port"),
	"GITUIM_LOG_LEVEL": ("log_level",),
}


class ConfigError(Exception):
	"""Exception raised for configuration errors."""


class ConfigParsingError(ConfigError):
	"""Exception raised when configuration cannot be parsed."""


class ConfigLoader:
	"""Loads configuration from a YAML file and the environment into AppConfigSchema."""

	def __init__(self, config_file: Path | None = None, env: dict[str, str] | None = None) -> None:
		"""
		Initialize the configuration loader.

		Args:
			config_file: Path to configuration file (optional)
			env: Environment mapping (defaults to ``os.environ``)

		"""
		self._env = os.environ if env is None else env
		self._resolved_config_file = self._resolve_config_file(config_file)
		self._app_config = self._load_config()

	@staticmethod
	def _resolve_config_file(config_file: Path | None = None) -> Path | None:
		"""
		Resolve the configuration file path.

		If a config file is specified, use that. Otherwise, look in:
		1. ./.gituim.yml in the current directory
		2. $XDG_CONFIG_HOME/gituim/config.yml

		Returns:
			Resolved config file path or None if no suitable file found

		"""
		if config_file:
			return config_file.expanduser().resolve()

		local_config = Path(LOCAL_CONFIG_FILE)
		if local_config.exists():
			return local_config

		xdg_config_file = Path(xdg_config_home) / "gituim" / "config.yml"
		if xdg_config_file.exists():
			return xdg_config_file

		return None

	@staticmethod
	def _parse_yaml_file(file_path: Path) -> dict[str, Any]:
		"""
		Parse a YAML file into a dictionary.

		Raises:
			yaml.YAMLError: If the file does not hold a YAML mapping

		"""
		with file_path.open(encoding="utf-8") as f:
			content = yaml.safe_load(f)
			if content is None:
				return {}
			if not isinstance(content, dict):
				msg = f"File {file_path} does not contain a valid YAML dictionary"
				raise yaml.YAMLError(msg)
			return content

	def _apply_env_overrides(self, config: dict[str, Any]) -> None:
		for var, keys in ENV_OVERRIDES.items():
			value = self._env.get(var)
			if value is None:
				continue
			section = config
			for key in keys[:-1]:
				section = section.setdefault(key, {})
			section[keys[-1]] = value
			logger.debug("Configuration %s overridden by %s", ".".join(keys), var)

	def _load_config(self) -> AppConfigSchema:
		"""
		Load configuration from file and environment.

		Raises:
			ConfigParsingError: If the file cannot be read or parsed, or the
				result does not validate

		"""
		config: dict[str, Any] = {}
		if self._resolved_config_file:
			if self._resolved_config_file.exists():
				try:
					config = self._parse_yaml_file(self._resolved_config_file)
				except yaml.YAMLError as e:
					msg = f"Configuration file {self._resolved_config_file} does not contain a valid YAML dictionary."
					logger.exception(msg)
					raise ConfigParsingError(msg) from e
				except OSError as e:
					msg = f"Error accessing configuration file {self._resolved_config_file}: {e}"
					logger.exception(msg)
					raise ConfigParsingError(msg) from e
				logger.info("Loaded configuration from %s", self._resolved_config_file)
			else:
				logger.warning("Configuration file not found: %s. Using defaults.", self._resolved_config_file)

		self._apply_env_overrides(config)

		try:
			return AppConfigSchema(**config)
		except ValidationError as e:
			msg = f"Error parsing configuration into schema: {e}"
			logger.exception(msg)
			raise ConfigParsingError(msg) from e

	@property
	def get(self) -> AppConfigSchema:
		"""The loaded application configuration."""
		return self._app_config
