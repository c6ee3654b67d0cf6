"""
Configuration management for the blog API
"""

from pydantic_settings import BaseSettings

ENV_PREFIX = "BLOG_"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str | None = None
    database_pool_size: int = 5
    database_max_overflow: int = 0
    database_pool_timeout: float = 10.0  # seconds waiting for a pooled connection
    database_connect_timeout: float = 5.0
    database_query_timeout: float = 10.0

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = False
    graphql_path: str = "/"
    graphiql: bool = True
    cors_origins: list[str] = ["*"]
    cors_methods: list[str] = ["GET", "POST", "OPTIONS"]

    # Behaviour
    legacy_pagination: bool = False  # saturate `next` at the last page
    expose_error_details: bool = False

    # Environment
    environment: str = "development"  # 'development', 'staging', 'production'
    debug: bool = False
    sql_echo: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = ENV_PREFIX
        case_sensitive = False


# Name of the environment variable holding the connection string
DATABASE_URL_KEY = f"{ENV_PREFIX}DATABASE_URL"

# Global settings instance
settings = Settings()
