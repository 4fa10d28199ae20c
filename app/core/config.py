from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TRACKER_", env_file=None, extra="ignore")

    data_dir: str = str(BASE_DIR / "data")
    database_url: str | None = None
    uploads_dir: str | None = None

    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    log_level: str = "INFO"

    # Institutional email domain accepted at registration
    email_domain: str = "esi.ac.ma"
    verification_code_ttl_hours: int = 24
    # DEV ONLY: echo verification codes back in API responses
    expose_verification_codes: bool = True

    max_upload_bytes: int = 25 * 1024 * 1024

    @property
    def db_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.data_dir.rstrip('/')}/database.sqlite"

    @property
    def uploads_path(self) -> Path:
        if self.uploads_dir:
            return Path(self.uploads_dir)
        return Path(self.data_dir) / "uploads"


settings = Settings()

# Submission lifecycle constants
SUBMISSION_STATUSES = ("submitted", "approved", "resubmit")
STUDENT_YEARS = ("freshman", "second year", "third year")
TOP_STUDENTS_LIMIT = 5
TREND_MONTHS = 6
