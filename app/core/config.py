from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Clinic Scheduling"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # "memory" | "json"; empty picks json for dev/local and memory elsewhere
    STORE_PROVIDER: str = ""
    DATA_DIR: str = "./data"
    DOCTORS_FILE: str | None = "./data/doctors.json"

    BUSINESS_OPEN_TIME: str = "08:00"
    BUSINESS_CLOSE_TIME: str = "20:00"
    MAX_DAYS_AHEAD: int = 30
    ALLOWED_DURATIONS: list[int] = [60, 120]
    SLOT_MINUTES: int = 60

    NOTIFICATION_WEBHOOK_URL: str | None = None
    NOTIFICATION_TIMEOUT_SECONDS: float = 5.0
    NOTIFICATION_WORKERS: int = 2


settings = Settings()
