from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    project_name: str = "Özel Ders Takip"
    database_url: str = "sqlite:///./app.db"
    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    student_token_expire_days: int = 7
    log_level: str = "INFO"

    host: str = "127.0.0.1"
    port: int = 8000

    session_cookie_name: str = "session-token"
    csrf_cookie_name: str = "csrf-token"
    csrf_header_name: str = "x-csrf-token"
    csrf_cookie_max_age: int = 60 * 60 * 24
    cookie_secure: bool = False

    rate_limit_enabled: bool = True

    super_admin_email: str = "superadmin@tutoring.com"
    super_admin_name: str = "Super Admin"
    super_admin_password: str = "change-me-too"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

@lru_cache
def get_settings() -> Settings:
    return Settings()
