from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_core.core_schema import ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv


def load_env(env_file: str | Path | None = None) -> None:
	"""Load environment variables from an `.env` file if present."""
	env_path = Path(env_file) if env_file else Path(".env")
	if env_path.exists():
		load_dotenv(env_path)


class Config(BaseSettings):
	"""Runtime configuration loaded from environment variables."""

	model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

	openai_api_key: str | None = Field(
	    default=None,
	    alias="OPENAI_API_KEY",
	    description="API key for the OpenAI-compatible transport",
	)
	openai_base_url: str = Field(
	    "https://api.openai.com/v1",
	    alias="OPENAI_BASE_URL",
	    description="Base URL of the OpenAI-compatible chat completions API",
	)
	openai_model: str = Field(
	    "gpt-4o-mini",
	    alias="OPENAI_MODEL",
	    description="Model used by preset agents",
	)
	cli_url: str | None = Field(
	    default=None,
	    alias="COPILOT_CLI_URL",
	    description=
	    "External Copilot CLI server URL. If unset, spawns native CLI via stdio.",
	)
	github_token: str | None = Field(
	    default=None,
	    alias="GITHUB_TOKEN",
	    description="GitHub token used to authenticate the Copilot CLI",
	)
	copilot_model: str = Field(
	    "Claude Sonnet 4.5",
	    alias="COPILOT_MODEL",
	    description="Fallback model name for copilot agents",
	)
	trace_dir: str = Field(".mas/traces", alias="TRACE_DIR",
	                       description="Directory for run trace records")
	log_level: str = Field("info", alias="LOG_LEVEL",
	                       description="Log level for mas-heavy and Copilot")
	max_in_flight_per_provider: int = Field(
	    2,
	    alias="MAX_IN_FLIGHT_PER_PROVIDER",
	    description="Default concurrent calls allowed per provider",
	)
	agent_timeout_ms: int = Field(
	    60000,
	    alias="AGENT_TIMEOUT_MS",
	    description="Default per-call timeout in milliseconds",
	)
	retry_max_retries: int = Field(
	    3,
	    alias="RETRY_MAX_RETRIES",
	    description="Retries after the first attempt for transient errors",
	)
	retry_base_delay_ms: int = Field(500, alias="RETRY_BASE_DELAY_MS",
	                                 description="First backoff delay")
	retry_max_delay_ms: int = Field(5000, alias="RETRY_MAX_DELAY_MS",
	                                description="Backoff delay cap")
	max_repair_attempts: int = Field(
	    2,
	    alias="MAX_REPAIR_ATTEMPTS",
	    description="Extra calls allowed to repair invalid structured output",
	)

	@field_validator("max_in_flight_per_provider", "agent_timeout_ms",
	                 "retry_base_delay_ms", "retry_max_delay_ms")
	@classmethod
	def validate_positive(cls, v: Any, info: ValidationInfo) -> Any:
		if v is None:
			return v
		if int(v) <= 0:
			raise ValueError(f"{info.field_name} must be > 0")
		return v

	@field_validator("retry_max_retries", "max_repair_attempts")
	@classmethod
	def validate_non_negative(cls, v: Any, info: ValidationInfo) -> Any:
		if int(v) < 0:
			raise ValueError(f"{info.field_name} must be >= 0")
		return v

	@property
	def use_native_cli(self) -> bool:
		"""Return True when using native stdio mode (no external server)."""
		return not self.cli_url

	@property
	def trace_path(self) -> Path:
		"""Return trace_dir as Path."""
		return Path(self.trace_dir)


__all__ = ["Config", "load_env"]
