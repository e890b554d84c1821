"""Configuration for gituim."""

from gituim.config.config_loader import ConfigError, ConfigLoader, ConfigParsingError
from gituim.config.config_schema import AppConfigSchema, CorsConfigSchema, ServerConfigSchema

__all__ = [
	"AppConfigSchema",
	"ConfigError",
	"ConfigLoader",
	"ConfigParsingError",
	"CorsConfigSchema",
	"ServerConfigSchema",
]
