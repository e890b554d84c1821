"""Pydantic schemas for gituim configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class CorsConfigSchema(BaseModel):
	"""CORS settings for the HTTP API."""

	allow_cors: bool = False
	origins: list[str] = Field(default_factory=lambda: ["*"])


class ServerConfigSchema(BaseModel):
	"""HTTP server settings."""

	host: str = "0.0.0.0"  # noqa: S104
	port: int = Field(default=8080, ge=1, le=65535)
	graceful_timeout: float = Field(default=15.0, ge=0, description="Seconds to wait for connections on shutdown")
	cors: CorsConfigSchema = Field(default_factory=CorsConfigSchema)


class AppConfigSchema(BaseModel):
	"""Top-level gituim configuration."""

	repository_root: Path = Field(default_factory=Path.cwd, description="Directory holding the repositories")
	server: ServerConfigSchema = Field(default_factory=ServerConfigSchema)
	log_level: LogLevel = "INFO"

	model_config = {"frozen": True}

	@field_validator("log_level", mode="before")
	@classmethod
	def _upper_log_level(cls, value: object) -> object:
		return value.upper() if isinstance(value, str) else value
