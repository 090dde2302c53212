"""Application configuration."""

from typing import Annotated, Any, Literal, Self

from pydantic import (
    AnyUrl,
    BeforeValidator,
    HttpUrl,
    computed_field,
    model_validator,
)
from pydantic_core import MultiHostUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Festival Scheduler"
    SERVER_PORT: int = 8000
    ROOTPATH: str = ""
    API_V1_STR: str = "/api/v1"
    FRONTEND_HOST: str = "http://localhost:5173"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []
    CORS_ALLOW_METHODS: list[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    @computed_field
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS] + [
            self.FRONTEND_HOST
        ]

    # Sentry
    SENTRY_DSN: HttpUrl | None = None

    # PostgreSQL
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "festival"

    @computed_field
    @property
    def database_url_object(self) -> MultiHostUrl:
        return MultiHostUrl.build(
            scheme="postgresql+psycopg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_SERVER,
            port=self.POSTGRES_PORT,
            path=self.POSTGRES_DB,
        )

    @computed_field
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        return str(self.database_url_object)

    # Timeline window (wall-clock hours, 24 means midnight at the end of the day)
    TIMELINE_START_HOUR: int = 8
    TIMELINE_END_HOUR: int = 24
    TIMELINE_STEP_MINUTES: int = 15

    # Scheduling
    DEFAULT_DISCUSSION_MINUTES: int = 0

    @model_validator(mode="after")
    def _check_timeline_window(self) -> Self:
        if not 0 <= self.TIMELINE_START_HOUR < self.TIMELINE_END_HOUR <= 24:
            raise ValueError(
                "TIMELINE_START_HOUR must be before TIMELINE_END_HOUR within 0..24"
            )
        window_minutes = (self.TIMELINE_END_HOUR - self.TIMELINE_START_HOUR) * 60
        if (
            self.TIMELINE_STEP_MINUTES <= 0
            or window_minutes % self.TIMELINE_STEP_MINUTES != 0
        ):
            raise ValueError("TIMELINE_STEP_MINUTES must evenly divide the window")
        return self


settings = Settings()
