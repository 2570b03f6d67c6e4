# salon_booking/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Salon Booking"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite:///./salon.db"
    DB_ECHO: bool = False

    # used until the salon stores its own settings row
    DEFAULT_WORK_START: str = "09:00"
    DEFAULT_WORK_END: str = "18:00"
    DEFAULT_SLOT_MINUTES: int = 30

    BOOKING_HORIZON_MONTHS: int = 3
    SEED_SAMPLE_DATA: bool = False


settings = Settings()
