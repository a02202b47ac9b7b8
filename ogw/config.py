import logging
import os
import sys
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource
from typing_extensions import Self

# =============================================================================
# Application Configuration
# =============================================================================


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by OGW_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get the value for a field from the YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML file."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load config from YAML file if specified."""
        config_file = os.environ.get("OGW_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


class Server(BaseModel):
    """Server configuration (nested in Config, uses env_nested_delimiter)."""

    name: str = "OIDC Gateway"
    version: str = "0.1.0"
    description: str = "Interaction gateway for an OpenID Connect provider"
    public_url: str = "http://localhost:8000"  # Base URL of the interaction pages
    host: str = "127.0.0.1"
    port: int = 8000


class LoggingConfig(BaseModel):
    """Logging configuration (nested in Config, uses env_nested_delimiter)."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from OGW_LOG_FILE env var."""
        return os.environ.get("OGW_LOG_FILE")


# =============================================================================
# Storage Configuration
# =============================================================================


class KubeConfig(BaseModel):
    """Kubernetes custom-objects API settings.

    Defaults match an in-cluster deployment with a mounted service account.
    """

    api_server: str = "https://kubernetes.default.svc"
    namespace: str = "veebkolm-gab7y"
    group: str = "codemowers.io"
    version: str = "v1alpha1"
    account_plural: str = "oidcgatewayusers"
    account_kind: str = "OIDCGWUser"
    site_session_plural: str = "oidcgatewaysitesessions"
    site_session_kind: str = "OIDCGWSiteSession"
    token_path: str = "/var/run/secrets/kubernetes.io/serviceaccount/token"
    ca_path: str | None = "/var/run/secrets/kubernetes.io/serviceaccount/ca.crt"
    timeout: float = 10.0

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}"


class StorageConfig(BaseModel):
    backend: Literal["kube", "memory"] = "memory"
    kube: KubeConfig = KubeConfig()


class AuditConfig(BaseModel):
    """Where audit events go.

    `database` writes to an SQL table (sqlite+aiosqlite by default).
    """

    backend: Literal["logging", "database", "memory"] = "logging"
    database_url: str = "sqlite+aiosqlite:///ogw-audit.db"
    echo: bool = False


# =============================================================================
# Authentication Configuration
# =============================================================================


class GithubConfig(BaseModel):
    """GitHub OAuth configuration. Disabled while client_id is empty."""

    client_id: str = ""
    client_secret: str = ""
    base_url: str = "https://github.com"
    api_url: str = "https://api.github.com"
    scope: str = "read:user user:email"

    @property
    def enabled(self) -> bool:
        return bool(self.client_id and self.client_secret)


class EmailConfig(BaseModel):
    """E-mail magic link configuration."""

    enabled: bool = False
    from_address: str = "noreply@localhost"
    link_expire_minutes: int = 15


class AuthConfig(BaseModel):
    """Authentication configuration."""

    github: GithubConfig = GithubConfig()
    email: EmailConfig = EmailConfig()
    state_secret: str = ""  # Signs OAuth state and e-mail links; must be set in production


class SiteSessionConfig(BaseModel):
    """Signed site-session cookies issued to middleware clients."""

    secret: str = ""  # Must be set in production
    algorithm: str = "HS256"
    cookie_name: str = "ogw_site_session"
    ttl_hours: int = 24


class OIDCConfig(BaseModel):
    """In-process protocol adapter settings."""

    issuer: str = "http://localhost:8000"
    session_cookie: str = "_session"
    interaction_ttl_seconds: int = 3600


class ClientConfig(BaseModel):
    """A statically registered OIDC client."""

    client_id: str
    kind: str | None = None  # "OIDCGWMiddlewareClient" for middleware clients
    display_name: str | None = None
    allowed_groups: list[str] = []
    redirect_uris: list[str] = []


class TextsConfig(BaseModel):
    """Texts shown to users. A *_file value, when set, wins over the inline text."""

    tos: str = "Terms of Service have not been configured."
    tos_file: str | None = None
    approval: str = "Your account is awaiting approval by an administrator."
    approval_file: str | None = None

    @model_validator(mode="after")
    def load_files(self) -> Self:
        if self.tos_file:
            self.tos = Path(self.tos_file).expanduser().read_text()
            self.tos_file = None
        if self.approval_file:
            self.approval = Path(self.approval_file).expanduser().read_text()
            self.approval_file = None
        return self


class PolicyConfig(BaseModel):
    require_approval: bool = True  # Unapproved non-admin accounts wait at approval_required


class Config(BaseSettings):
    # These are BaseModel, so env_nested_delimiter handles their env vars
    server: Server = Server()
    logging: LoggingConfig = LoggingConfig()
    storage: StorageConfig = StorageConfig()
    audit: AuditConfig = AuditConfig()
    auth: AuthConfig = AuthConfig()
    site_session: SiteSessionConfig = SiteSessionConfig()
    oidc: OIDCConfig = OIDCConfig()
    texts: TextsConfig = TextsConfig()
    policy: PolicyConfig = PolicyConfig()
    clients: list[ClientConfig] = []

    model_config = {
        "env_prefix": "OGW_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # Allows OGW_STORAGE__BACKEND override
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - OGW_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called early in application startup, before other modules
    are imported to ensure all loggers pick up the configuration.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(config.level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(config.level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
