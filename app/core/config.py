"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Backend-specific requirements (Firestore credentials)
are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.shared.enums import StoreBackend


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except the Firestore credentials,
    which validate_backend requires when store_backend is 'firestore'.
    """

    # App
    app_name: str = "docadmin"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Store: firestore (REST API) or memory (process-local, dev and tests)
    store_backend: StoreBackend = StoreBackend.FIRESTORE

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None  # Path to JSON file
    firestore_base_url: str = "https://firestore.googleapis.com/v1"

    # Store layout
    schema_collection_path: str = "config/collections/items"
    audit_collection: str = "changelog"
    roles_collection: str = "roles"
    users_collection: str = "users"
    app_config_document: str = "app_config/global"

    # Engine
    default_role: str = "viewer"
    page_size: int = 20
    changelog_limit: int = 50
    max_import_bytes: int = 5 * 1024 * 1024  # 5MB

    # Identity: the upstream identity provider forwards the signed-in user.
    user_id_header: str = "X-User-Id"
    user_email_header: str = "X-User-Email"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("store_backend", mode="before")
    @classmethod
    def normalize_backend(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @model_validator(mode="after")
    def validate_backend(self) -> "Settings":
        """Validate the store backend and its credentials.

        - Firestore: FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH required.
        - Memory: no credentials.
        """
        if self.store_backend is StoreBackend.FIRESTORE:
            has_key = (
                self.firebase_service_account_key
                and self.firebase_service_account_key.get_secret_value()
            )
            if not has_key and not self.firebase_service_account_path:
                raise ValueError(
                    "When store_backend is 'firestore', set FIREBASE_SERVICE_ACCOUNT_KEY (full JSON string) "
                    "or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
                )
        if self.page_size < 1:
            raise ValueError("PAGE_SIZE must be at least 1")
        return self

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
