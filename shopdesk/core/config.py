from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    BUSINESS_TIMEZONE: str = "Asia/Taipei"

    SHEETS_API_URL: str | None = None
    INVENTORY_API_URL: str | None = None
    SHEETS_TIMEOUT_SECONDS: float = 15.0

    SESSION_FILE: str = "./data/session.json"
    PRODUCT_SALES_ENABLED: bool = True

    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL_EXPAND: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE_EXPAND: float = 0.7
    OPENAI_MODEL_IMAGE: str = "gpt-image-1"
    OPENAI_MODEL_SPEECH: str = "gpt-4o-mini-tts"
    OPENAI_VOICE: str = "alloy"


settings = Settings()
