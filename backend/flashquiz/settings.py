from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field

class Settings(BaseSettings):
	# API_KEY is accepted for parity with the browser build's environment
	gemini_api_key: str | None = Field(default=None, validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"))
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	# Model to use, default to Gemini 2.5 Flash
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	# Vertex configuration
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	# Extraction tuning
	gemini_temperature: float = Field(default=0.2, validation_alias="GEMINI_TEMPERATURE")
	# PDFs take a while to read; this is the transport timeout, the core imposes none
	gemini_timeout_seconds: float = Field(default=120.0, validation_alias="GEMINI_TIMEOUT_SECONDS")

	# Upload limits (per file)
	max_upload_mb: int = Field(default=20, validation_alias="MAX_UPLOAD_MB")

	# Per-browser controllers hold uploaded bytes; cap how many live and for how long
	max_sessions: int = Field(default=200, validation_alias="MAX_SESSIONS")
	session_idle_minutes: int = Field(default=60, validation_alias="SESSION_IDLE_MINUTES")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
