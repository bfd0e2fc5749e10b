"""Application settings and configuration.

This module defines all configuration options for the P-LikeMe Stage application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="P-LikeMe Stage", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(
        default="p-likeme-secret-key-change-in-production",
        alias="SECRET_KEY",
    )
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Database configuration
    database_url: str = Field(default="sqlite:///./plikeme.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # Password policy
    password_min_length: int = Field(default=8, alias="PASSWORD_MIN_LENGTH")

    # Input length limits
    username_min: int = Field(default=2, alias="USERNAME_MIN")
    username_max: int = Field(default=20, alias="USERNAME_MAX")
    thread_title_max: int = Field(default=200, alias="THREAD_TITLE_MAX")
    thread_content_max: int = Field(default=10_000, alias="THREAD_CONTENT_MAX")
    reply_content_max: int = Field(default=5000, alias="REPLY_CONTENT_MAX")
    profile_field_max: int = Field(default=100, alias="PROFILE_FIELD_MAX")
    disease_tag_max: int = Field(default=50, alias="DISEASE_TAG_MAX")
    hospital_name_max: int = Field(default=100, alias="HOSPITAL_NAME_MAX")
    max_disease_tags: int = Field(default=20, alias="MAX_DISEASE_TAGS")
    max_hospitals: int = Field(default=10, alias="MAX_HOSPITALS")
    guru_intro_max: int = Field(default=2000, alias="GURU_INTRO_MAX")
    guru_question_title_max: int = Field(default=200, alias="GURU_QUESTION_TITLE_MAX")
    guru_question_content_max: int = Field(default=5000, alias="GURU_QUESTION_CONTENT_MAX")
    guru_reply_content_max: int = Field(default=5000, alias="GURU_REPLY_CONTENT_MAX")

    # Pagination defaults
    community_threads_page_size: int = Field(default=10, alias="COMMUNITY_THREADS_PAGE_SIZE")
    user_search_page_size: int = Field(default=50, alias="USER_SEARCH_PAGE_SIZE")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def is_sqlite(self) -> bool:
        """Return True when the active database is SQLite."""
        return self.effective_database_url.startswith("sqlite")


settings = Settings()
