"""
Centralized configuration for the FHEVM client
All tunables are environment-based (prefix FHEVM_) with .env support
"""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client configuration with every default externalized"""

    # === NETWORK CONFIGURATION ===
    network: str = "sepolia"
    rpc_url: Optional[str] = None
    private_key: Optional[str] = None

    # === RUNTIME CONFIGURATION ===
    # Import names of the external FHE engine builds
    interactive_runtime_module: str = "fhevm_relayer.web"
    headless_runtime_module: str = "fhevm_relayer.node"

    # === AUTHORIZATION POLICY ===
    authorization_duration_days: int = 10

    # === DISPLAY ===
    token_decimals: int = 6

    # === LOGGING & METRICS ===
    log_level: str = "INFO"
    log_format: str = "json"
    log_file: Optional[str] = None
    metrics_enabled: bool = True

    model_config = SettingsConfigDict(
        env_prefix="FHEVM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Singleton instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create settings singleton"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment"""
    global _settings
    _settings = None
