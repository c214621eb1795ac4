from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    FACILITY_NAME: str = "Campus Facilities"
    FACILITY_TIMEZONE: str = "Asia/Kolkata"

    SLOT_OPEN_TIME: str = "09:00"
    SLOT_CLOSE_TIME: str = "17:00"
    SLOT_STEP_MINUTES: int = 30
    SLOT_BREAKS: list[str] = ["13:30-14:00"]
    FULL_DURATION_LABEL: str = "Full Day"

    STORE_PROVIDER: str = "memory"
    DATA_DIR: str = "./data/bookings"

    APPROVER_EMAILS: list[str] = []

    NOTIFY_ENABLED: bool = True
    NOTIFY_WEBHOOK_URL: str | None = None
    NOTIFY_TIMEOUT_SECONDS: float = 10.0


settings = Settings()
