# =============================================================================
# setu_core/config/__init__.py
# =============================================================================

from .settings import Settings, load_settings, load_secrets_toml

__all__ = ["Settings", "load_settings", "load_secrets_toml"]
