from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Menu API"
    environment: str = "local"
    log_level: str = "INFO"
    log_request_bodies: bool = True
    menu_rate_limit: str = "120/minute"
    sentry_dsn: str | None = None
    sentry_environment: str | None = None


settings = Settings()
