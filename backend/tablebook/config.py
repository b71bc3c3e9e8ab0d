# backend/tablebook/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/tablebook.db"
    redis_url: str | None = None

    timezone: str = "UTC"
    log_level: str = "INFO"

    # Booking engine
    slot_horizon_days: int = 30
    booking_retry_attempts: int = 3
    late_night_start_hour: int = 22
    late_night_end_hour: int = 6
    closest_slots_count: int = 3
    auto_confirm_bookings: bool = True
    cache_ttl_seconds: int = 86400

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # Relative sqlite paths are resolved against the repo root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            return f"sqlite:///{absolute_path}"
        return url


settings = Settings()
