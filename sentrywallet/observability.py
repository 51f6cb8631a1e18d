"""
sentrywallet/observability.py
Logging setup and optional Sentry initialisation.
"""

import logging
import re
from typing import Any

import sentry_sdk

from sentrywallet.config import AppConfig

logger = logging.getLogger(__name__)

# Values matching these are masked before an event leaves the process.
SENSITIVE_PATTERNS = [
    re.compile(r"eyJ[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+"),  # JWTs
    re.compile(r"[a-zA-Z0-9_\-]{30,}"),  # long opaque tokens
]
SENSITIVE_KEYS = {"password", "access_token", "refresh_token", "provider_token"}

_configured = False


def _mask_string(value: str) -> str:
    for pattern in SENSITIVE_PATTERNS:
        value = pattern.sub("[REDACTED]", value)
    return value


def _scrub(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {
            k: "[REDACTED]" if str(k).lower() in SENSITIVE_KEYS else _scrub(v)
            for k, v in obj.items()
        }
    if isinstance(obj, list):
        return [_scrub(item) for item in obj]
    if isinstance(obj, str):
        return _mask_string(obj)
    return obj


def scrub_event(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any]:
    """
    Sentry before_send hook.

    Masks passwords and session tokens in stack frame locals and in the
    request payload.
    """
    for exc in event.get("exception", {}).get("values", []):
        for frame in exc.get("stacktrace", {}).get("frames", []):
            if "vars" in frame:
                frame["vars"] = _scrub(frame["vars"])
    if "request" in event:
        event["request"] = _scrub(event["request"])
    return event


def setup_observability(config: AppConfig) -> None:
    """
    Configure root logging and, when a DSN is set, Sentry.

    Safe to call on every Streamlit rerun; only the first call has effect.
    """
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if config.sentry_dsn:
        sentry_sdk.init(
            dsn=config.sentry_dsn,
            environment=config.sentry_env,
            traces_sample_rate=0.2,
            send_default_pii=False,
            before_send=scrub_event,
        )
        logger.info("Sentry SDK initialised (env: %s)", config.sentry_env)
    else:
        logger.info("SENTRY_DSN not provided. Running without Sentry.")

    # httpx logs every request line at INFO, including auth endpoints.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    _configured = True
