"""
sentrywallet/auth.py
Session accessors and page guards for SentryWallet.
Wraps Supabase Auth so pages outside the login view never call it directly.
"""

import logging

import streamlit as st

from sentrywallet.db import drop_supabase_client, get_supabase_client

logger = logging.getLogger(__name__)

LOGIN_PAGE = "pages/login.py"


# ─── Session accessors ────────────────────────────────────────────────────────

def get_current_user():
    """
    Return the supabase-py User of the active session, or None.

    Any error while reading the session (missing configuration, expired
    refresh token, network) is treated as signed out.
    """
    try:
        session = get_supabase_client().auth.get_session()
    except Exception:
        logger.debug("Could not read the current session", exc_info=True)
        return None
    return session.user if session is not None else None


def get_display_name(user) -> str:
    """
    Return the name to greet a user with.

    Prefers the full_name stored at sign-up, then the provider's name claim
    (Google), then the email address.
    """
    metadata = getattr(user, "user_metadata", None) or {}
    return metadata.get("full_name") or metadata.get("name") or getattr(user, "email", "") or ""


def is_authenticated() -> bool:
    """Return True if a user session is currently active."""
    return get_current_user() is not None


# ─── Auth guards ──────────────────────────────────────────────────────────────

def require_auth() -> None:
    """
    Guard for pages that require authentication.

    Call at the top of any page that must not be visible to signed-out
    visitors.  Switches to the login page immediately if no session is
    active; Streamlit stops rendering the rest of the page.
    """
    if not is_authenticated():
        st.switch_page(LOGIN_PAGE)


# ─── Session teardown ─────────────────────────────────────────────────────────

def logout() -> None:
    """
    Sign the current user out and switch to the login page.

    Any error from sign_out is logged and ignored: the local client is
    always discarded, so the browser session no longer holds a token.
    """
    try:
        get_supabase_client().auth.sign_out()
    except Exception:
        logger.warning("Supabase sign_out failed; clearing local session anyway", exc_info=True)
    drop_supabase_client()
    st.session_state.pop("login_form", None)
    st.switch_page(LOGIN_PAGE)
