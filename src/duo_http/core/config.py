"""
Configuration management for duo-http.

Handles loading configuration from environment variables, .env files,
and CLI arguments with proper precedence.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from duo_http.constants import DuoAPIConfig
from duo_http.core.exceptions import MissingCredentialsError

# =============================================================================
# Duo API Credentials
# =============================================================================


class DuoCredentials(BaseModel):
    """
    Duo API credentials.

    Attributes:
        host: API hostname (e.g. api-xxxxxxxx.duosecurity.com)
        ikey: Integration key, sent in the clear as the Basic-auth username
        skey: Secret key, used only as the HMAC key
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    host: Annotated[str, Field(min_length=1, description="API hostname")]
    ikey: Annotated[str, Field(min_length=1, description="Integration key")]
    skey: SecretStr = Field(description="Secret key")

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Host is a bare lower-case hostname: no scheme, no trailing slash."""
        v = v.strip().lower()
        for prefix in ("https://", "http://"):
            if v.startswith(prefix):
                v = v[len(prefix) :]
        return v.rstrip("/")

    @property
    def base_url(self) -> str:
        """Generate the base API URL for this host."""
        return f"{DuoAPIConfig.SCHEME}://{self.host}"


# =============================================================================
# Proxy Configuration
# =============================================================================


class ProxyConfig(BaseModel):
    """HTTP proxy used for outgoing requests."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    host: Annotated[str, Field(min_length=1)]
    port: Annotated[int, Field(ge=1, le=65535)]

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def to_proxies(self) -> dict[str, str]:
        """Convert to the proxies mapping understood by requests."""
        return {"http": self.url, "https": self.url}


# =============================================================================
# Duo Client Configuration
# =============================================================================


class DuoClientConfig(BaseModel):
    """
    Full Duo client configuration.

    Attributes:
        credentials: API credentials
        timeout: Connect/read timeout in seconds
        sig_version: Signature version (1 or 2)
        proxy: Optional HTTP proxy
    """

    model_config = ConfigDict(frozen=True)

    credentials: DuoCredentials
    timeout: Annotated[int, Field(default=DuoAPIConfig.DEFAULT_TIMEOUT, ge=1, le=600)]
    sig_version: Literal[1, 2] = 2
    proxy: ProxyConfig | None = None


# =============================================================================
# Main Settings
# =============================================================================


class DuoHttpSettings(BaseSettings):
    """
    Main settings for duo-http, loaded from environment and .env files.

    Environment variables (prefix DUO_):
        DUO_HOST, DUO_IKEY, DUO_SKEY
        DUO_TIMEOUT, DUO_SIG_VERSION
        DUO_PROXY_HOST, DUO_PROXY_PORT
        DUO_DEBUG, DUO_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="DUO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Duo API credentials
    host: str = ""
    ikey: str = ""
    skey: SecretStr = SecretStr("")
    timeout: Annotated[int, Field(default=DuoAPIConfig.DEFAULT_TIMEOUT, ge=1, le=600)]
    sig_version: Annotated[int, Field(default=DuoAPIConfig.DEFAULT_SIG_VERSION, ge=1, le=2)]

    # Proxy
    proxy_host: str = ""
    proxy_port: Annotated[int, Field(default=0, ge=0, le=65535)]

    # Logging
    debug: bool = False
    log_level: Annotated[str, Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")]

    @property
    def credentials(self) -> DuoCredentials | None:
        """Get Duo credentials if all required fields are set."""
        if self.host and self.ikey and self.skey.get_secret_value():
            return DuoCredentials(host=self.host, ikey=self.ikey, skey=self.skey)
        return None

    @property
    def has_credentials(self) -> bool:
        """Check if credentials are configured."""
        return self.credentials is not None

    @property
    def missing_credentials(self) -> list[str]:
        """Names of the credential variables that are not set."""
        missing = []
        if not self.host:
            missing.append("DUO_HOST")
        if not self.ikey:
            missing.append("DUO_IKEY")
        if not self.skey.get_secret_value():
            missing.append("DUO_SKEY")
        return missing

    @property
    def proxy(self) -> ProxyConfig | None:
        if self.proxy_host and self.proxy_port:
            return ProxyConfig(host=self.proxy_host, port=self.proxy_port)
        return None

    def client_config(self) -> DuoClientConfig | None:
        """Build a client configuration, or None without credentials."""
        credentials = self.credentials
        if credentials is None:
            return None
        return DuoClientConfig(
            credentials=credentials,
            timeout=self.timeout,
            sig_version=self.sig_version,  # type: ignore[arg-type]
            proxy=self.proxy,
        )

    def require_client_config(self) -> DuoClientConfig:
        """
        Build a client configuration, failing if credentials are incomplete.

        Raises:
            MissingCredentialsError: If DUO_HOST, DUO_IKEY or DUO_SKEY is unset
        """
        config = self.client_config()
        if config is None:
            raise MissingCredentialsError(self.missing_credentials)
        return config


# =============================================================================
# Singleton Settings Access
# =============================================================================

_settings: DuoHttpSettings | None = None


def get_settings() -> DuoHttpSettings:
    """
    Get the global settings instance.

    Creates a new instance on first call, returns cached instance thereafter.
    """
    global _settings
    if _settings is None:
        _settings = DuoHttpSettings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance (useful for testing)."""
    global _settings
    _settings = None
