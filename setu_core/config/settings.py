# =============================================================================
# setu_core/config/settings.py
# Runtime configuration (secrets.toml first, environment second)
# =============================================================================
"""
Settings for the offline core.

Resolution order for every value:
1. ``secrets.toml`` (``[supabase]`` and ``[setu]`` tables)
2. Environment variables (a ``.env`` file is loaded first via python-dotenv)
3. Built-in defaults

Expected secrets.toml format:
    [supabase]
    url = "https://your-project.supabase.co"
    key = "your-anon-key"

    [setu]
    language = "en"
    sync_settle_seconds = 1.0
    log_level = "INFO"
    log_dir = "logs"
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import logging

from dotenv import load_dotenv

try:
    import tomllib
except ImportError:  # Python < 3.11
    import tomli as tomllib

from setu_core.errors import ConfigurationError
from setu_core.logging import resolve_level

logger = logging.getLogger(__name__)

DEFAULT_SECRETS_PATH = Path(".streamlit") / "secrets.toml"
CHAT_FUNCTION_PATH = "/functions/v1/setu-saarthi-chat"

# localStorage-sized budget for the durable cache
DEFAULT_STORAGE_MAX_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    """Immutable configuration for one client session."""
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    chat_url: Optional[str] = None
    storage_path: Path = Path("local_data") / "setu_storage.db"
    storage_max_bytes: int = DEFAULT_STORAGE_MAX_BYTES
    sync_settle_seconds: float = 1.0
    summary_settle_seconds: float = 2.0
    max_sync_attempts: int = 5
    chat_history_limit: int = 50
    chat_timeout_seconds: float = 60.0
    probe_timeout_seconds: float = 5.0
    probe_hosts: Tuple[Tuple[str, int], ...] = (
        ("8.8.8.8", 53),        # Google DNS
        ("1.1.1.1", 53),        # Cloudflare DNS
        ("208.67.222.222", 53),  # OpenDNS
    )
    language: str = "en"
    log_level: str = "INFO"
    log_dir: Optional[Path] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_remote(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @property
    def chat_endpoint(self) -> Optional[str]:
        """Explicit chat URL, or the Supabase edge function derived from the project URL."""
        if self.chat_url:
            return self.chat_url
        if self.supabase_url:
            return self.supabase_url.rstrip("/") + CHAT_FUNCTION_PATH
        return None

    def require_remote(self) -> Settings:
        """Raise ConfigurationError unless Supabase credentials are present."""
        if not self.supabase_url:
            raise ConfigurationError("Missing Supabase URL", config_key="SUPABASE_URL")
        if not self.supabase_key:
            raise ConfigurationError("Missing Supabase key", config_key="SUPABASE_KEY")
        return self

    def with_overrides(self, **changes: Any) -> Settings:
        return replace(self, **changes)


def load_secrets_toml(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load secrets.toml; a missing or unreadable file yields an empty dict."""
    secrets_path = Path(path or os.getenv("SETU_SECRETS_PATH") or DEFAULT_SECRETS_PATH)
    if not secrets_path.exists():
        return {}

    try:
        with open(secrets_path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning(f"Could not read {secrets_path}: {e}")
        return {}


def _coerce(name: str, raw: Any, kind: type) -> Any:
    try:
        return kind(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Invalid value for {name}: {raw!r}",
            config_key=name,
            expected_type=kind.__name__,
        )


def _optional_path(raw: Any) -> Optional[Path]:
    return Path(raw) if raw else None


def load_settings(
    secrets_path: Optional[Path] = None,
    env_file: Optional[Path] = None,
) -> Settings:
    """
    Build Settings from secrets.toml and the environment.

    Args:
        secrets_path: Explicit secrets.toml location
        env_file: Explicit .env location (default: search from the CWD)

    Returns:
        Settings instance
    """
    load_dotenv(dotenv_path=env_file)
    secrets = load_secrets_toml(secrets_path)
    supabase = secrets.get("supabase", {})
    setu = secrets.get("setu", {})

    def pick(section: Dict[str, Any], key: str, env: str, default: Any = None) -> Any:
        if key in section:
            return section[key]
        return os.getenv(env, default)

    defaults = Settings()
    settings = Settings(
        supabase_url=pick(supabase, "url", "SUPABASE_URL"),
        supabase_key=pick(supabase, "key", "SUPABASE_KEY"),
        chat_url=pick(setu, "chat_url", "SETU_CHAT_URL"),
        storage_path=Path(pick(setu, "storage_path", "SETU_STORAGE_PATH", defaults.storage_path)),
        storage_max_bytes=_coerce(
            "storage_max_bytes",
            pick(setu, "storage_max_bytes", "SETU_STORAGE_MAX_BYTES", defaults.storage_max_bytes),
            int,
        ),
        sync_settle_seconds=_coerce(
            "sync_settle_seconds",
            pick(setu, "sync_settle_seconds", "SETU_SYNC_SETTLE_SECONDS", defaults.sync_settle_seconds),
            float,
        ),
        max_sync_attempts=_coerce(
            "max_sync_attempts",
            pick(setu, "max_sync_attempts", "SETU_MAX_SYNC_ATTEMPTS", defaults.max_sync_attempts),
            int,
        ),
        chat_history_limit=_coerce(
            "chat_history_limit",
            pick(setu, "chat_history_limit", "SETU_CHAT_HISTORY_LIMIT", defaults.chat_history_limit),
            int,
        ),
        language=pick(setu, "language", "SETU_LANGUAGE", defaults.language),
        log_level=str(pick(setu, "log_level", "SETU_LOG_LEVEL", defaults.log_level)).upper(),
        log_dir=_optional_path(pick(setu, "log_dir", "SETU_LOG_DIR")),
    )

    if settings.max_sync_attempts < 1:
        raise ConfigurationError(
            "max_sync_attempts must be at least 1",
            config_key="max_sync_attempts",
        )

    try:
        resolve_level(settings.log_level)
    except ValueError:
        raise ConfigurationError(
            f"Unknown log level: {settings.log_level}",
            config_key="log_level",
        )

    logger.debug(
        f"Settings loaded (remote configured: {settings.has_remote}, "
        f"language: {settings.language})"
    )
    return settings
