from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
	# SQL row store; in-memory SQLite so the package can boot without .env
	DATABASE_URL: str = "sqlite:///:memory:"

	# Reject get/set of undeclared attribute names unless a type opts out
	STRICT_ATTRIBUTES: bool = True

	# Observability flags
	ENABLE_STORE_LOGGING: bool = True
	LOG_LEVEL: str = "INFO"

	model_config = SettingsConfigDict(
		env_file=".env",
		env_prefix="INFUSER_",
		extra="ignore",
		case_sensitive=False,
	)

settings = Settings()
