from pydantic_settings import BaseSettings, SettingsConfigDict

MIB = 1024 * 1024

PLACEHOLDER_JWT_SECRET = "change-me"


class ConfigurationError(Exception):
    """Raised at startup when the configuration is unsafe to run with."""


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "production"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 5000

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "pdfhub"
    db_username: str = "pdfhub"
    db_password: str = "secret"
    db_pool_max_size: int = 10

    jwt_secret_key: str = PLACEHOLDER_JWT_SECRET
    session_ttl_hours: int = 24
    reset_token_ttl_minutes: int = 10

    storage_backend: str = "local"
    files_root: str = "/app/files"
    minio_endpoint: str = "localhost:9000"
    minio_access_key: str = ""
    minio_secret_key: str = ""
    minio_bucket: str = "pdfs"
    minio_region: str | None = None
    minio_secure: bool = False

    max_upload_bytes: int = 10 * MIB
    max_merge_files: int = 10
    default_storage_limit_bytes: int = 100 * MIB
    document_ttl_days: int = 7

    pdf_engine: str = "pdfplumber"

    sweep_interval_seconds: int = 3600
    sweep_batch_size: int = 100

    identity_providers: str = "google,facebook"
    identity_provider_timeout_seconds: int = 10
    google_client_id: str = ""
    google_tokeninfo_url: str = "https://oauth2.googleapis.com/tokeninfo"
    facebook_graph_url: str = "https://graph.facebook.com/v12.0/me"

    @property
    def is_dev(self) -> bool:
        return self.app_env.lower() in ("dev", "development", "local")

    @property
    def has_placeholder_jwt_secret(self) -> bool:
        return self.jwt_secret_key in ("", PLACEHOLDER_JWT_SECRET)

    def check_startup(self) -> None:
        """Refuse to run outside dev with a guessable signing key.

        Raises:
            ConfigurationError: if JWT_SECRET_KEY is unset or the placeholder.
        """
        if self.has_placeholder_jwt_secret and not self.is_dev:
            raise ConfigurationError(
                "JWT_SECRET_KEY must be set when APP_ENV is not a development environment"
            )

    @property
    def identity_provider_names(self) -> list[str]:
        """IDENTITY_PROVIDERS as a list, e.g. 'google,facebook'."""
        return [
            s.strip().lower() for s in self.identity_providers.split(",") if s.strip()
        ]
