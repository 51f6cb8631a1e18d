"""
sentrywallet/config.py
Application settings for SentryWallet.

Every key is resolved from st.secrets first (Streamlit Cloud), then from
os.environ (local development via .env loaded below).
"""

import os
from dataclasses import dataclass

import streamlit as st
from dotenv import load_dotenv

load_dotenv()

DEFAULT_APP_URL = "http://localhost:8501"
DEFAULT_SPLASH_DELAY_SECONDS = 2.5


class ConfigError(RuntimeError):
    """Raised when a required setting is missing or malformed."""


# ─── Private helpers ─────────────────────────────────────────────────────────

def _get_secret(key: str, default: str | None = None) -> str | None:
    """
    Resolve a setting by name.

    Tries st.secrets first, then falls back to os.environ.  Returns default
    when the key is absent in both sources.
    """
    try:
        return st.secrets[key]
    except Exception:
        return os.environ.get(key, default)


# ─── Settings ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AppConfig:
    """Resolved application settings."""

    supabase_url: str | None
    supabase_anon_key: str | None
    app_url: str = DEFAULT_APP_URL
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    sentry_env: str = "development"
    splash_delay_seconds: float = DEFAULT_SPLASH_DELAY_SECONDS

    @property
    def login_redirect_url(self) -> str:
        """URL the OAuth provider sends the browser back to."""
        return f"{self.app_url.rstrip('/')}/login"

    def require_supabase(self) -> tuple[str, str]:
        """
        Return (url, anon_key), raising ConfigError if either is missing.
        """
        if not self.supabase_url or not self.supabase_anon_key:
            raise ConfigError(
                "SUPABASE_URL and SUPABASE_ANON_KEY must be set in "
                "secrets.toml or the environment."
            )
        return self.supabase_url, self.supabase_anon_key


def load_config() -> AppConfig:
    """Build an AppConfig from secrets and the environment."""
    raw_delay = _get_secret("SPLASH_DELAY_SECONDS", str(DEFAULT_SPLASH_DELAY_SECONDS))
    try:
        splash_delay = float(raw_delay)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"SPLASH_DELAY_SECONDS must be a number, got {raw_delay!r}") from exc

    return AppConfig(
        supabase_url=_get_secret("SUPABASE_URL"),
        supabase_anon_key=_get_secret("SUPABASE_ANON_KEY"),
        app_url=_get_secret("APP_URL", DEFAULT_APP_URL),
        log_level=(_get_secret("LOG_LEVEL", "INFO") or "INFO").upper(),
        sentry_dsn=_get_secret("SENTRY_DSN") or None,
        sentry_env=_get_secret("SENTRY_ENV", "development"),
        splash_delay_seconds=splash_delay,
    )
