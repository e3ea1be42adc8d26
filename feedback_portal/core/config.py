# feedback_portal/core/config.py
from typing import Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class RunConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000


class ApiPrefix(BaseModel):
    prefix: str = "/api"
    feedbacks: str = "/feedbacks"


class StorageConfig(BaseModel):
    # относительно рабочей директории процесса
    data_file: str = "data/feedbacks.json"


class MongoConfig(BaseModel):
    enabled: bool = True
    url: str = "mongodb://127.0.0.1:27017/student_feedback_portal"
    db: str = "student_feedback_portal"
    collection: str = "feedbacks"
    timeout_ms: int = 3000


# Пароли по умолчанию (только для разработки!)
DEFAULT_ADMIN_PASSWORDS: dict[str, str] = {
    "Super Admin": "superadmin123",
    "Facilities": "facilities123",
    "Academic": "academic123",
    "Infrastructure": "infrastructure123",
    "Events": "events123",
    "General": "general123",
}


class AuthConfig(BaseModel):
    secret_key: str = "dev-insecure-secret-change-me"
    algorithm: str = "HS256"
    session_ttl_seconds: int = 60 * 60 * 24
    cookie_name: str = "admin_session"
    cookie_secure: bool = False

    # JSON-блоб {"Facilities": "..."}; если задан — полностью заменяет дефолты
    admin_passwords: dict[str, str] = {}

    # точечные переопределения поверх дефолтов
    password_super_admin: Optional[str] = None
    password_facilities: Optional[str] = None
    password_academic: Optional[str] = None
    password_infrastructure: Optional[str] = None
    password_events: Optional[str] = None
    password_general: Optional[str] = None

    def department_passwords(self) -> dict[str, str]:
        if self.admin_passwords:
            return dict(self.admin_passwords)

        passwords = dict(DEFAULT_ADMIN_PASSWORDS)
        overrides = {
            "Super Admin": self.password_super_admin,
            "Facilities": self.password_facilities,
            "Academic": self.password_academic,
            "Infrastructure": self.password_infrastructure,
            "Events": self.password_events,
            "General": self.password_general,
        }
        for department, password in overrides.items():
            if password:
                passwords[department] = password
        return passwords


class LimitsConfig(BaseModel):
    max_text_len: int = 4000
    max_suggestions_len: int = 2000
    max_name_len: int = 200
    max_short_len: int = 100
    json_body_bytes: int = 100 * 1024


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env.example", ".env"),
        case_sensitive=False,
        env_nested_delimiter="__",
        env_prefix="APP_CONFIG__",
        extra="ignore",
    )
    run: RunConfig = RunConfig()
    api: ApiPrefix = ApiPrefix()

    storage: StorageConfig = StorageConfig()
    mongo: MongoConfig = MongoConfig()

    auth: AuthConfig = AuthConfig()
    limits: LimitsConfig = LimitsConfig()

settings = Settings()
